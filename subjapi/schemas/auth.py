"""Request/response schemas for authentication endpoints, plus the token claims set."""

import re
from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

# Claim types embedded in the JWT payload.
CLAIM_NAME = "sub"
CLAIM_TOKEN_ID = "jti"
CLAIM_ACTOR = "actor"
CLAIM_ROLE = "roles"

USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 256
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

# Characters allowed in usernames (letters, digits and -._@+).
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9\-._@+]+$")


def check_password_policy(password: str) -> str:
    """Raise ValueError unless the password meets the account password policy."""
    # Same rules as a default ASP.NET-style identity password policy.
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise ValueError(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters"
        )
    if not any(c.isdigit() for c in password):
        raise ValueError("Password must contain at least one digit")
    if not any(c.islower() for c in password):
        raise ValueError("Password must contain at least one lowercase letter")
    if not any(c.isupper() for c in password):
        raise ValueError("Password must contain at least one uppercase letter")
    if all(c.isalnum() for c in password):
        raise ValueError("Password must contain at least one non-alphanumeric character")
    return password


class TokenClaims(BaseModel):
    """
    Identity assertions embedded in an access token.

    Built once at login from the account state at that moment and never mutated
    afterwards; a later role change does not affect already-issued tokens.
    """

    model_config = {"frozen": True}

    sub: str = Field(..., min_length=1, description="Subject (username)")
    jti: str = Field(..., min_length=1, description="Unique token identifier")
    actor: str = Field(..., description="Account's is_base_user flag as 'True' or 'False'")
    roles: tuple[str, ...] = Field(default=(), description="Role names held at issuance")

    def as_pairs(self) -> list[tuple[str, str]]:
        """Return the claims as ordered (claim-type, value) pairs, one pair per role."""
        pairs = [
            (CLAIM_NAME, self.sub),
            (CLAIM_TOKEN_ID, self.jti),
            (CLAIM_ACTOR, self.actor),
        ]
        pairs.extend((CLAIM_ROLE, role) for role in self.roles)
        return pairs

    def to_payload(self) -> dict[str, str | list[str]]:
        return {
            CLAIM_NAME: self.sub,
            CLAIM_TOKEN_ID: self.jti,
            CLAIM_ACTOR: self.actor,
            CLAIM_ROLE: list(self.roles),
        }

    def has_role(self, role: str) -> bool:
        return role in self.roles


class RegisterRequest(BaseModel):
    """Registration data for a new account."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Unique username (letters, digits and -._@+)",
    )
    email: EmailStr = Field(..., description="Unique email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Plain-text password; hashed before storage",
    )
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    date_of_birth: date = Field(..., description="Date of birth (YYYY-MM-DD)")
    neptun_code: str = Field(default="", max_length=32, description="Institutional code")
    department: str = Field(default="", max_length=255, description="Department or affiliation")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not USERNAME_PATTERN.match(v):
            raise ValueError("Username may only contain letters, digits and -._@+")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_policy(v)


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=USERNAME_MAX_LEN, description="Username")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class TokenResponse(BaseModel):
    """Signed access token returned after successful login."""

    token: str = Field(..., description="Compact JWT; send as 'Authorization: Bearer <token>'")
    expiration: datetime = Field(..., description="Token expiry (UTC)")


class CurrentIdentity(BaseModel):
    """Verified identity of the caller, taken from token claims."""

    username: str
    token_id: str
    is_base_user: bool
    roles: list[str]

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "CurrentIdentity":
        return cls(
            username=claims.sub,
            token_id=claims.jti,
            is_base_user=claims.actor == "True",
            roles=list(claims.roles),
        )


class UserListItem(BaseModel):
    """Account entry for admin list (no password)."""

    id: int
    username: str
    email: str
    name: str
    department: str
    is_base_user: bool
    roles: list[str]


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserListItem]
