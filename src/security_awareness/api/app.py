"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from security_awareness.api.sessions import caller_metadata
from security_awareness.api.sessions import router as session_router
from security_awareness.app_logging import configure_logging
from security_awareness.config import parse_log_level
from security_awareness.containers import AppContainer
from security_awareness.domain.errors import MalformedRequestError, ProgressError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(parse_log_level(container.settings.log_level))
    logger = logging.getLogger(__name__)
    if container.settings.uses_default_secret:
        logger.warning(
            "Using default HMAC_SECRET - set HMAC_SECRET before deploying!"
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.sweeper.start()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(session_router)

    @app.exception_handler(ProgressError)
    async def progress_error_handler(
        request: Request, exc: ProgressError
    ) -> JSONResponse:
        context = {
            "session_id": request.path_params.get("session_id"),
            "path": request.url.path,
            "status_code": exc.status_code,
            **caller_metadata(request),
        }
        if exc.status_code >= 500:  # noqa: PLR2004
            logger.error("Request failed", exc_info=exc, extra=context)
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": "Internal server error"},
            )
        logger.warning(f"Request rejected: {exc.public_message}", extra=context)
        return JSONResponse(
            status_code=exc.status_code, content={"error": exc.public_message}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        if request.url.path.endswith("/complete"):
            error = MalformedRequestError("Missing completion token")
        else:
            error = MalformedRequestError()
        return await progress_error_handler(request, error)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error",
            exc_info=exc,
            extra={"path": request.url.path, **caller_metadata(request)},
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
