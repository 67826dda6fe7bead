"""FastAPI application factory."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from grue.errors import GenerationExhaustedError, StoreUnavailableError
from .api import api_router
from .web import web_router
from .web.routes import templates, WEBSITE_TITLE
from .worker import worker_router
from .middleware.logging import LoggingMiddleware


STORE_UNAVAILABLE_MESSAGE = "Link store unavailable, try again later"
GENERATION_EXHAUSTED_MESSAGE = "Could not generate a short link, try again"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def error_response(request: Request, status_code: int, message: str):
    """Error body in the format of the route that failed.

    JSON under /api, plain text under /worker, an HTML page everywhere else.
    """
    path = request.url.path
    if path.startswith("/api/"):
        return JSONResponse(status_code=status_code, content={"error": message})
    if path.startswith("/worker/"):
        return PlainTextResponse(message, status_code=status_code)
    return templates.TemplateResponse(
        request,
        "error.html",
        {"title": WEBSITE_TITLE, "status_code": status_code, "message": message},
        status_code=status_code,
    )


def create_app(
    service_instance,
    sweeper_instance,
    config,
    clock=None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: LinkService instance (None when built in the lifespan)
        sweeper_instance: ExpirySweeper instance (None when built in the lifespan)
        config: Configuration instance
        clock: Callable returning the current UTC datetime (for the sweeper)

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Grue",
        description="Simple URL shortener",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.sweeper = sweeper_instance
    app.state.config = config
    app.state.clock = clock or _utcnow
    app.state.logger = logging.getLogger("grue.web")

    app.add_middleware(LoggingMiddleware)

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
        request.app.state.logger.error(f"{request.method} {request.url.path}: {exc}")
        return error_response(request, status.HTTP_503_SERVICE_UNAVAILABLE, STORE_UNAVAILABLE_MESSAGE)

    @app.exception_handler(GenerationExhaustedError)
    async def generation_exhausted_handler(request: Request, exc: GenerationExhaustedError):
        request.app.state.logger.error(f"{request.method} {request.url.path}: {exc}")
        return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERATION_EXHAUSTED_MESSAGE)

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        # Malformed generate bodies get the same answer as a malformed URL
        if request.url.path == "/api/generate":
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"error": "Invalid URL!"},
            )
        return await request_validation_exception_handler(request, exc)

    # Catch-all /{shortlink} lives in web_router, so it goes last
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(worker_router, prefix="/worker", tags=["Worker"])
    app.include_router(web_router, tags=["Web"])

    return app
