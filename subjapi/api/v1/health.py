"""Health check: database reachability, signing config and bootstrap exposure."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from subjapi.api.deps import get_app_settings
from subjapi.core.config import Settings
from subjapi.core.database import check_db_connected, get_db
from subjapi.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    # Reports the config as loaded by startup; never builds one itself.
    config = getattr(request.app.state, "token_config", None)
    connected = check_db_connected(db)

    return HealthResponse(
        status="ok" if connected and config is not None else "degraded",
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        signing="loaded" if config is not None else "not_loaded",
        token_lifetime_minutes=(
            int(config.validity.total_seconds() // 60) if config is not None else None
        ),
        bootstrap_enabled=settings.BOOTSTRAP_ENABLED,
    )
