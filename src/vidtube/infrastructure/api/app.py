"""FastAPI application factory.

``create_app`` wires CORS, the correlation-ID request logger, the error
envelope handlers, the health probes, the user/auth routers and the
static media mount. The module-level ``app`` is what uvicorn serves.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from vidtube.core.config import Settings, get_settings
from vidtube.core.logging import (
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from vidtube.infrastructure.api.errors import (
    register_exception_handlers,
    unexpected_error_response,
)
from vidtube.infrastructure.api.routes import auth_router, health_router, users_router
from vidtube.infrastructure.auth import TokenConfig
from vidtube.infrastructure.persistence.database import close_database, init_database

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup checks and shutdown cleanup.

    Raises:
        ConfigurationError: If a token secret is missing or both are equal.
        RuntimeError: If the database cannot be reached.
    """
    settings = get_settings()
    configure_logging(settings)
    logger.info("Starting VidTube", version=settings.app_version, environment=settings.environment)

    # Both token secrets must be set and distinct
    TokenConfig.from_settings(settings).validate()

    Path(settings.storage_path).mkdir(parents=True, exist_ok=True)
    await init_database()

    yield

    logger.info("Shutting down VidTube")
    await close_database()


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Bind a correlation ID for the request and echo it in the response.

    Uncaught exceptions become 500 envelopes here, inside CORS and with the
    correlation ID attached.
    """
    correlation_id = request.headers.get(CORRELATION_ID_HEADER) or new_correlation_id()
    bind_correlation_id(correlation_id)
    try:
        try:
            response = await call_next(request)
        except Exception as exc:
            response = await unexpected_error_response(request, exc)
        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
    finally:
        clear_context()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the VidTube API application."""
    settings = settings or get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Accounts, sessions and channel profiles for a video-sharing platform",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )

    # CORS is added last so it wraps the request logger
    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    users_prefix = f"{settings.api_prefix}/users"
    app.include_router(health_router)
    app.include_router(auth_router, prefix=users_prefix, tags=["auth"])
    app.include_router(users_router, prefix=users_prefix, tags=["users"])

    app.mount(
        settings.media_mount_path,
        StaticFiles(directory=settings.storage_path, check_dir=False),
        name="media",
    )
    return app


app = create_app()
