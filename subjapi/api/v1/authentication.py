"""Registration, login, logout and bootstrap endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from subjapi.api.deps import (
    get_account_store,
    get_app_settings,
    get_current_claims,
    get_token_config,
)
from subjapi.core.config import Settings
from subjapi.core.security import TokenConfig
from subjapi.schemas.auth import (
    CurrentIdentity,
    LoginRequest,
    RegisterRequest,
    TokenClaims,
    TokenResponse,
)
from subjapi.services.accounts import AccountStore
from subjapi.services.authentication import login as login_account
from subjapi.services.bootstrap import init_roles as seed_roles
from subjapi.services.bootstrap import init_users as seed_users
from subjapi.services.registration import register as register_account

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_bootstrap_enabled(settings: Settings) -> None:
    if not settings.BOOTSTRAP_ENABLED:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    store: Annotated[AccountStore, Depends(get_account_store)],
) -> Response:
    """Register a new account. 409 if the username or email is already taken."""
    register_account(store, body)
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    store: Annotated[AccountStore, Depends(get_account_store)],
    config: Annotated[TokenConfig, Depends(get_token_config)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT and its expiry.
    Include the token in the Authorization header as: Bearer <token>
    """
    issued = login_account(store, config, body.username, body.password)
    return TokenResponse(token=issued.token, expiration=issued.expires_at)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
) -> Response:
    """
    End the caller's session. Tokens are stateless, so the presented token
    stays valid until it expires; clients must discard it.
    """
    logger.info("Logout", extra={"username": claims.sub, "jti": claims.jti})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=CurrentIdentity)
def me(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
) -> CurrentIdentity:
    """Return the identity and roles carried by the presented token."""
    return CurrentIdentity.from_claims(claims)


@router.post("/init-roles")
def init_roles(
    store: Annotated[AccountStore, Depends(get_account_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> dict[str, list[str]]:
    """Create the Admin and User roles if missing (bootstrap only)."""
    _require_bootstrap_enabled(settings)
    return {"created": seed_roles(store)}


@router.post("/init-users")
def init_users(
    store: Annotated[AccountStore, Depends(get_account_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> dict[str, list[str]]:
    """Create one sample account per role, each holding that role (bootstrap only)."""
    _require_bootstrap_enabled(settings)
    return {"created": seed_users(store, settings)}
