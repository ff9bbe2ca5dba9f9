"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from workshop_journal.api.records import collection_routers, related_router
from workshop_journal.api.uploads import router as uploads_router
from workshop_journal.app_logging import configure_logging, truncate_log_line
from workshop_journal.containers import AppContainer
from workshop_journal.domain.errors import (
    ErrorKind,
    JournalError,
    RecordNotFoundError,
    UploadFailedError,
    message_for,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Serving %s with %s storage",
            container.settings.app_name,
            container.settings.storage_backend,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(title=container.settings.app_name, lifespan=lifespan)
    app.state.container = container

    @app.middleware("http")
    async def log_api_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration_ms = (time.perf_counter() - started) * 1000
            logger.info(
                truncate_log_line(
                    f"{request.method} {request.url.path} "
                    f"{response.status_code} in {duration_ms:.0f}ms"
                )
            )
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, ErrorKind.INVALID_DATA)

    @app.exception_handler(ValidationError)
    async def model_validation_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, ErrorKind.INVALID_DATA)

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(
        request: Request, exc: RecordNotFoundError
    ) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, exc.kind)

    @app.exception_handler(UploadFailedError)
    async def upload_failed_handler(
        request: Request, exc: UploadFailedError
    ) -> JSONResponse:
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.kind)

    @app.exception_handler(JournalError)
    async def journal_error_handler(
        request: Request, exc: JournalError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, exc.kind)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "Unhandled error",
            extra={"method": request.method, "path": request.url.path},
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorKind.INTERNAL
        )

    for router in collection_routers():
        app.include_router(router)
    app.include_router(related_router)
    app.include_router(uploads_router)

    upload_dir = Path(container.settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(
        container.settings.uploads_url_path,
        StaticFiles(directory=upload_dir),
        name="uploads",
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _error_response(status_code: int, kind: ErrorKind) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message_for(kind)})
