"""Error taxonomy shared by services and the HTTP layer.

Services raise these; ``subjapi.main`` maps them to status codes. Conflict and
authentication failures are caller-visible and must never be reported as
``StorageError``.
"""


class SubjApiError(Exception):
    """Base class for errors raised by the auth core."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(SubjApiError):
    """Signing configuration is missing or unusable. Fatal at startup."""


class ConflictError(SubjApiError):
    """Username or email is already registered (or a role name already exists)."""


class UnauthenticatedError(SubjApiError):
    """Bad credentials at login, or a missing/invalid/expired/mismatched token."""


class ForbiddenError(SubjApiError):
    """Valid token that lacks the role claim an operation requires."""

    def __init__(self, message: str, required_role: str | None = None) -> None:
        self.required_role = required_role
        super().__init__(message)


class StorageError(SubjApiError):
    """Credential store failure unrelated to uniqueness (connectivity, other constraints)."""
