"""FastAPI application factory and setup."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from http import HTTPStatus
from logging import DEBUG

from fastapi.applications import FastAPI
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from plexcord import __version__, log
from plexcord.config.settings import get_config
from plexcord.exceptions import PlexCordError
from plexcord.web.middlewares.request_logging import RequestLoggingMiddleware
from plexcord.web.routes import router
from plexcord.web.state import get_app_state

__all__ = ["create_app"]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan context manager.

    Builds the pipeline from configuration unless collaborators were already
    injected into the app state, and closes every connection on shutdown.

    Args:
        app (FastAPI): The FastAPI application instance.

    Returns:
        AsyncGenerator: The application lifespan context manager.
    """
    state = get_app_state()
    if not state.configured:
        state.configure(get_config())
        log.success("Web: Playback pipeline initialized")
    try:
        yield
    finally:
        await state.shutdown()


def _error_payload(request: Request, error: str, detail: str) -> dict[str, str]:
    return {"error": error, "detail": detail, "path": request.url.path}


def create_app() -> FastAPI:
    """Create the FastAPI application.

    Returns:
        FastAPI: The created FastAPI application.
    """
    app = FastAPI(title="PlexCord", lifespan=lifespan, version=__version__)

    # Add request logging middleware if in debug mode
    if log.level <= DEBUG:
        app.add_middleware(RequestLoggingMiddleware)
        log.debug("Web: Request logging enabled (debug mode)")

    app.include_router(router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Render routing errors (unmatched routes, bad methods) as JSON.

        Args:
            request (Request): The incoming HTTP request.
            exc (StarletteHTTPException): The exception instance.

        Returns:
            JSONResponse: Structured JSON response with error details.
        """
        phrase = HTTPStatus(exc.status_code).phrase
        payload = _error_payload(
            request, phrase.replace(" ", ""), str(exc.detail or phrase)
        )
        return JSONResponse(
            status_code=exc.status_code, content=payload, headers=exc.headers
        )

    @app.exception_handler(PlexCordError)
    async def domain_exception_handler(
        request: Request, exc: PlexCordError
    ) -> JSONResponse:
        """Handle PlexCord errors with structured JSON responses.

        Args:
            request (Request): The incoming HTTP request.
            exc (PlexCordError): The exception instance.

        Returns:
            JSONResponse: Structured JSON response with error details.
        """
        cls = exc.__class__
        if cls.status_code >= 500:
            log.error(f"Web: {cls.__name__} on {request.url.path}: {exc}")
        payload = _error_payload(request, cls.__name__, str(exc) or cls.__doc__ or "")
        return JSONResponse(status_code=cls.status_code, content=payload)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Turn any other failure into a generic 500 without leaking details.

        Args:
            request (Request): The incoming HTTP request.
            exc (Exception): The exception instance.

        Returns:
            JSONResponse: Generic internal error response.
        """
        log.error(
            f"Web: Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        payload = _error_payload(
            request, "InternalServerError", "Internal Server Error"
        )
        return JSONResponse(status_code=500, content=payload)

    return app
