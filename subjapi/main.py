"""FastAPI application entrypoint. No business logic; only wiring, middleware and error mapping."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from subjapi.api.v1 import router as v1_router
from subjapi.core.config import settings
from subjapi.core.errors import (
    ConflictError,
    ForbiddenError,
    StorageError,
    UnauthenticatedError,
)
from subjapi.core.security import TokenConfig

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the signing config once; a ConfigurationError here aborts startup."""
    logging.getLogger("subjapi").setLevel(settings.LOG_LEVEL)
    app.state.token_config = TokenConfig.from_settings(settings)
    if settings.BOOTSTRAP_ENABLED and settings.APP_ENV == "prod":
        logger.warning("Bootstrap routes are enabled in prod; set BOOTSTRAP_ENABLED=false")
    yield


app = FastAPI(
    title="Subjects API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_PREFIX)


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": exc.message})


@app.exception_handler(UnauthenticatedError)
async def unauthenticated_handler(request: Request, exc: UnauthenticatedError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(ForbiddenError)
async def forbidden_handler(request: Request, exc: ForbiddenError) -> JSONResponse:
    logger.info(
        "Forbidden: missing role",
        extra={"path": request.url.path, "required_role": exc.required_role},
    )
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": exc.message})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(
        "Storage error while handling request",
        extra={"path": request.url.path, "reason": exc.message},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Subjects API"}
