"""
FastAPI application factory and main app configuration.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import logging
import traceback

from .api.errors import APIError, status_for_domain_error
from .api.routers import activity, appointments, doctors, health, queue
from .api.utils.responses import error_response, ok
from .core.config import get_settings
from .core.exceptions import ClinicQueueException
from .core.structured_logger import configure_logging
from .domain.errors import DomainError
from .middleware.handler_middleware import HandlerMiddleware
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware

logger = logging.getLogger("clinicqueue")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.app_env}, debug={settings.debug}")

    if settings.database.backend == "mongo":
        try:
            from .adapters.db.mongo.client import init_database
            await init_database(settings.database)
            logger.info("Database connection established")
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            logger.error(f"Traceback:\n{traceback.format_exc()}")
            raise
    else:
        logger.info("Using in-memory repositories (MONGO_BACKEND=memory)")

    logger.info(
        f"Token scope={settings.queue.token_scope} prefix={settings.queue.token_prefix} "
        f"width={settings.queue.token_width}"
    )
    yield

    logger.info(f"Shutting down {settings.app_name}")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    configure_logging(settings.logging)

    app = FastAPI(
        title=settings.app_name,
        description="Clinic token queue: bookings, live positions, visit and doctor status, activity log",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        max_age=600,
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    # Added last = runs first: request id, then handler binding, then timing
    app.add_middleware(PerformanceMiddleware)
    app.add_middleware(HandlerMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Include routers: Health -> Doctors -> Queue -> Appointments -> Activity
    app.include_router(health.router)
    app.include_router(doctors.router)
    app.include_router(queue.router)
    app.include_router(appointments.router)
    app.include_router(activity.router)

    # Global exception handler for domain errors
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        code = exc.error_code or "DOMAIN_ERROR"
        http_status = status_for_domain_error(code)
        logger.info(f"DomainError: {code} ({http_status}) {exc.message}")
        return error_response(request, http_status, code, exc.message, exc.details)

    # Global exception handler for validation errors
    @app.exception_handler(ValueError)
    async def validation_error_handler(request: Request, exc: ValueError):
        return error_response(request, 422, "VALIDATION_ERROR", str(exc))

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        req_id = getattr(request.state, "request_id", None)
        logger.error(f"APIError: {exc.code} ({exc.http_status}) {exc.message} | request_id={req_id}")
        return error_response(request, exc.http_status, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        error_details = exc.errors()
        first = error_details[0] if error_details else {}
        field = ".".join(str(p) for p in first.get("loc", []) if p != "body")
        message = f"{field}: {first.get('msg', 'Invalid input')}" if field else "Invalid input"
        return error_response(
            request,
            422,
            "INVALID_INPUT",
            message,
            {"errors": [{k: v for k, v in e.items() if k in ("loc", "msg", "type")} for e in error_details]},
        )

    @app.exception_handler(ClinicQueueException)
    async def infrastructure_error_handler(request: Request, exc: ClinicQueueException):
        logger.error(f"{exc.error_code}: {exc.message}", exc_info=True)
        return error_response(request, 503, exc.error_code or "SERVICE_UNAVAILABLE", exc.message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return error_response(request, 500, "INTERNAL_ERROR", "An unexpected error occurred")

    @app.get("/", include_in_schema=False)
    async def root(request: Request):
        return ok(
            request,
            data={
                "service": settings.app_name,
                "version": settings.app_version,
                "docs": "/docs",
                "health": "/health",
            },
            message="OK",
        )

    return app


app = create_app()
