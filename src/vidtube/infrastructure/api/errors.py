"""Exception handlers rendering the uniform error envelope.

Every error leaving the API has the shape
``{statusCode, message, success: false, errors: [...]}``.
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidtube.core.config import get_settings
from vidtube.core.logging import get_logger
from vidtube.domain.exceptions import ApiError, UnauthorizedError
from vidtube.infrastructure.api.schemas.common import ErrorResponse

logger = get_logger(__name__)


def error_response(
    status_code: int,
    message: str,
    errors: list[dict] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build a JSON response carrying the error envelope."""
    payload = ErrorResponse(status_code=status_code, message=message, errors=errors or [])
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(payload.model_dump(by_alias=True)),
        headers=headers,
    )


async def unexpected_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an uncaught exception and render it as a 500 envelope.

    The message only carries the exception text when ``settings.debug`` is on.
    """
    logger.error(
        "Unhandled exception",
        path=str(request.url.path),
        method=request.method,
        error=str(exc),
        exc_type=type(exc).__name__,
    )
    message = str(exc) if get_settings().debug else "An unexpected error occurred"
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
        if exc.status_code >= 500:
            logger.error(
                "Server error",
                path=str(request.url.path),
                method=request.method,
                error=exc.message,
                exc_type=type(exc).__name__,
            )
        return error_response(exc.status_code, exc.message, exc.errors, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or None,
                "message": err.get("msg"),
                "code": err.get("type"),
            }
            for err in exc.errors()
        ]
        logger.info("Request validation failed", path=str(request.url.path), error_count=len(errors))
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request data", errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    app.add_exception_handler(Exception, unexpected_error_response)
