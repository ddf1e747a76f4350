"""Access gate: bearer token verification and role checks as FastAPI dependencies."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from subjapi.core.config import Settings, get_settings
from subjapi.core.database import get_db
from subjapi.core.errors import ForbiddenError, UnauthenticatedError
from subjapi.core.security import TokenConfig, verify_token
from subjapi.schemas.auth import TokenClaims
from subjapi.services.accounts import AccountStore

security = HTTPBearer(auto_error=False)


def get_token_config(request: Request) -> TokenConfig:
    """Signing config built once at startup (see subjapi.main lifespan)."""
    config = getattr(request.app.state, "token_config", None)
    if config is None:
        config = TokenConfig.from_settings(get_settings())
        request.app.state.token_config = config
    return config


def get_account_store(db: Annotated[Session, Depends(get_db)]) -> AccountStore:
    return AccountStore(db)


def get_app_settings() -> Settings:
    return get_settings()


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    config: Annotated[TokenConfig, Depends(get_token_config)],
) -> TokenClaims:
    """Dependency: require a valid Bearer JWT and return its claims. Raises 401 if missing or invalid."""
    if credentials is None:
        raise UnauthenticatedError("Not authenticated")
    return verify_token(credentials.credentials, config)


def require_role(role: str) -> Callable[[TokenClaims], TokenClaims]:
    """Dependency factory: require a verified token carrying `role`. Raises 403 otherwise."""

    def dependency(
        claims: Annotated[TokenClaims, Depends(get_current_claims)],
    ) -> TokenClaims:
        if not claims.has_role(role):
            raise ForbiddenError(f"{role} access required", required_role=role)
        return claims

    return dependency
