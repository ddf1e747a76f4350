"""Password hashing and JWT issuance/verification for authentication."""

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from pydantic import BaseModel, Field, ValidationError

from subjapi.core.errors import ConfigurationError, UnauthenticatedError
from subjapi.schemas.auth import TokenClaims

if TYPE_CHECKING:
    from subjapi.core.config import Settings

logger = logging.getLogger(__name__)

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12

DEFAULT_TOKEN_VALIDITY = timedelta(hours=4)
SECRET_MIN_LEN = 32

# Generic message for every token rejection; never say which check failed.
INVALID_TOKEN_MESSAGE = "Invalid or expired token"

_REQUIRED_CLAIMS = ["sub", "jti", "iss", "aud", "iat", "exp"]


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenConfig(BaseModel):
    """Signing secret, issuer, audience and validity window. Read-only after startup."""

    model_config = {"frozen": True}

    secret: str = Field(..., repr=False)
    issuer: str
    audience: str
    validity: timedelta = DEFAULT_TOKEN_VALIDITY
    algorithm: str = "HS256"

    @classmethod
    def create(
        cls,
        secret: str | None,
        issuer: str,
        audience: str,
        validity: timedelta = DEFAULT_TOKEN_VALIDITY,
        algorithm: str = "HS256",
    ) -> "TokenConfig":
        """Build a config, raising ConfigurationError for anything unusable."""
        if not secret or not secret.strip():
            raise ConfigurationError("JWT signing secret is missing or empty")
        if len(secret) < SECRET_MIN_LEN:
            raise ConfigurationError(
                f"JWT signing secret must be at least {SECRET_MIN_LEN} characters"
            )
        if not issuer or not audience:
            raise ConfigurationError("JWT issuer and audience must be configured")
        if validity <= timedelta(0):
            raise ConfigurationError("Token validity window must be positive")
        return cls(
            secret=secret,
            issuer=issuer,
            audience=audience,
            validity=validity,
            algorithm=algorithm,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TokenConfig":
        return cls.create(
            secret=settings.JWT_SECRET.get_secret_value(),
            issuer=settings.JWT_VALID_ISSUER,
            audience=settings.JWT_VALID_AUDIENCE,
            validity=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
            algorithm=settings.JWT_ALGORITHM,
        )


class IssuedToken(BaseModel):
    """Encoded token plus the timestamps embedded in it."""

    token: str
    issued_at: datetime
    expires_at: datetime


def _as_utc(moment: datetime | None) -> datetime:
    if moment is None:
        return datetime.now(UTC)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def issue_token(
    claims: TokenClaims,
    config: TokenConfig,
    now: datetime | None = None,
) -> IssuedToken:
    """
    Sign claims into a compact JWT valid from now until now + config.validity.

    JWT timestamps have one-second resolution, so issuance is truncated to the
    second; the returned expires_at matches the exp claim exactly.
    """
    if not config.secret:
        raise ConfigurationError("JWT signing secret is missing or empty")
    issued_at = _as_utc(now).replace(microsecond=0)
    expires_at = issued_at + config.validity
    payload: dict[str, Any] = {
        **claims.to_payload(),
        "iss": config.issuer,
        "aud": config.audience,
        "iat": issued_at,
        "exp": expires_at,
    }
    token = jwt.encode(payload, config.secret, algorithm=config.algorithm)
    return IssuedToken(token=token, issued_at=issued_at, expires_at=expires_at)


def verify_token(
    raw_token: str,
    config: TokenConfig,
    now: datetime | None = None,
) -> TokenClaims:
    """
    Validate signature, issuer, audience and time window; return the embedded claims.

    A token is accepted only when iat <= now <= exp. Raises UnauthenticatedError
    with a generic message on any failure.
    """
    try:
        # Time checks run below against the caller's `now`.
        payload = jwt.decode(
            raw_token,
            config.secret,
            algorithms=[config.algorithm],
            audience=config.audience,
            issuer=config.issuer,
            options={
                "require": _REQUIRED_CLAIMS,
                "verify_exp": False,
                "verify_iat": False,
                "verify_nbf": False,
            },
        )
    except jwt.PyJWTError as e:
        logger.info("Token rejected", extra={"reason": type(e).__name__})
        raise UnauthenticatedError(INVALID_TOKEN_MESSAGE) from e

    # PyJWT also accepts a list aud that merely contains ours; tokens carry exactly one.
    if payload.get("aud") != config.audience:
        logger.info("Token rejected", extra={"reason": "audience mismatch"})
        raise UnauthenticatedError(INVALID_TOKEN_MESSAGE)

    issued_at = payload.get("iat")
    expires_at = payload.get("exp")
    if not isinstance(issued_at, (int, float)) or not isinstance(expires_at, (int, float)):
        logger.info("Token rejected", extra={"reason": "non-numeric iat/exp"})
        raise UnauthenticatedError(INVALID_TOKEN_MESSAGE)
    now_ts = _as_utc(now).timestamp()
    if now_ts < issued_at or now_ts > expires_at:
        logger.info("Token rejected", extra={"reason": "outside validity window"})
        raise UnauthenticatedError(INVALID_TOKEN_MESSAGE)

    roles = payload.get("roles", [])
    if isinstance(roles, str):
        roles = [roles]
    try:
        return TokenClaims(
            sub=payload["sub"],
            jti=payload["jti"],
            actor=str(payload.get("actor", "False")),
            roles=tuple(roles),
        )
    except (ValidationError, TypeError) as e:
        logger.info("Token rejected", extra={"reason": "malformed claims"})
        raise UnauthenticatedError(INVALID_TOKEN_MESSAGE) from e
