"""Pydantic request/response schemas."""

from subjapi.schemas.auth import (
    CurrentIdentity,
    LoginRequest,
    RegisterRequest,
    TokenClaims,
    TokenResponse,
    UserListItem,
    UsersListResponse,
)
from subjapi.schemas.health import HealthResponse

__all__ = [
    "CurrentIdentity",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "TokenClaims",
    "TokenResponse",
    "UserListItem",
    "UsersListResponse",
]
