import asyncio
import logging
import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.health import router as health_router
from app.core.config import APP_VERSION, settings
from app.core.exception_pipeline import GlobalExceptionPipeline, global_exception_handler
from app.core.logging import setup_logging
from app.core.middleware import GlobalExceptionMiddleware, SecurityHeadersMiddleware
from app.db.session import dispose_engine
from app.services.alerting import TelegramNotifier
from app.services.exception_log import SqlAlchemyLogSink
from app.services.logger import StructuredLogger

logger = logging.getLogger(__name__)


def build_structured_logger() -> StructuredLogger:
    """Structured logger wired to the database sink and the Telegram notifier."""
    return StructuredLogger(
        "LoggerService",
        log_sink=SqlAlchemyLogSink(),
        notifier=TelegramNotifier.from_settings(),
        fanout_timeout=settings.LOG_FANOUT_TIMEOUT_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    # Setup structured logging first
    setup_logging()

    if not settings.SERVER_API_KEY:
        logger.warning("SERVER_API_KEY is not set; API-key protected routes will reject every request")

    # Fan-out logged from threadpool workers runs on this loop
    app.state.structured_logger.bind_loop(asyncio.get_running_loop())

    logger.info("%s %s started", settings.APP_NAME, APP_VERSION)

    yield

    # Shutdown: let in-flight alerts and log writes finish before the pool goes away
    logger.info("Flushing pending alert and log tasks")
    await app.state.structured_logger.drain()
    await dispose_engine()


def create_app(structured_logger: StructuredLogger | None = None) -> FastAPI:
    structured_logger = structured_logger or build_structured_logger()
    prefix = settings.API_PREFIX

    app = FastAPI(
        title=settings.APP_NAME,
        description="API documentation for the Boilerplate API",
        version=APP_VERSION,
        docs_url=f"{prefix}/docs",
        redoc_url=None,
        openapi_url=f"{prefix}/openapi.json",
        lifespan=lifespan,
    )

    app.state.structured_logger = structured_logger
    app.state.exception_pipeline = GlobalExceptionPipeline(structured_logger)

    # HTTP and validation errors are answered by exception handlers,
    # everything else by GlobalExceptionMiddleware
    app.add_exception_handler(StarletteHTTPException, global_exception_handler)
    app.add_exception_handler(RequestValidationError, global_exception_handler)

    # Middleware added first runs innermost
    app.add_middleware(GlobalExceptionMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, hsts=not settings.DEBUG)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add unique request ID for tracking and debugging."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        # Bind request_id to all log entries during this request
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.clear_contextvars()

        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(health_router, prefix=prefix)

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn (console script entry point)."""
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
