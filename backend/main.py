"""VETORRE AI Directory - Main FastAPI Application."""

import asyncio
import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from adapters.ai.anthropic_adapter import content_ai_service
from adapters.ai.replicate_adapter import image_ai_service
from api.middleware.cors import ScopedCORSMiddleware
from api.middleware.rate_limit import limiter
from api.routes import api_router, checkout_router
from infrastructure.config import get_settings
from infrastructure.database import close_db, connection, init_db
from infrastructure.logging_config import setup_logging
from services.admin_dashboard import AdminDashboard
from services.app_shell import AppShell
from services.directory_store import RemoteDirectoryStore, create_stores
from services.learning_content import LearningContentService

settings = get_settings()
logger = logging.getLogger(__name__)

CACHE_GC_INTERVAL_SECONDS = 60

# Sentry error tracking, initialised at module level so startup errors are captured too
if settings.sentry_dsn:
    _dsn = settings.sentry_dsn
    if not _dsn.startswith("https://"):
        logger.warning("SENTRY_DSN appears malformed: %s. Sentry will not be initialized.", _dsn[:30])
    else:
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=_dsn,
            environment=settings.environment,
            integrations=[
                FastApiIntegration(transaction_style="url"),
                SqlalchemyIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            ],
            traces_sample_rate=0.1 if settings.is_production else 1.0,
            send_default_pii=False,
        )
        logger.info("Sentry error tracking initialised (env=%s)", settings.environment)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging(
        json_output=not settings.debug and settings.is_production,
        level="DEBUG" if settings.debug else "INFO",
    )

    # Startup
    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    logger.info("Environment: %s", settings.environment)
    logger.info("CORS origins list: %r", settings.cors_origins_list)

    settings.validate_production_secrets()

    if settings.is_database_configured:
        await init_db()

    store, profiles = create_stores(settings, connection.async_session_maker)
    shell = AppShell(store, profiles, content_ai_service, image_ai_service)
    await shell.start()

    app.state.shell = shell
    app.state.dashboard = AdminDashboard(shell)
    app.state.learning = LearningContentService(shell)

    # Drop cache entries nobody has asked for within the retention window
    async def _cache_gc_loop(cache):
        while True:
            await asyncio.sleep(CACHE_GC_INTERVAL_SECONDS)
            removed = cache.collect_garbage()
            if removed:
                logger.debug("query cache gc: removed %d entries", removed)

    gc_task = None
    if isinstance(store, RemoteDirectoryStore):
        gc_task = asyncio.create_task(_cache_gc_loop(store.cache), name="cache-gc")

    logger.info("Application started successfully in %s mode", shell.mode)

    yield

    # Shutdown
    logger.info("Shutting down...")

    if gc_task is not None:
        gc_task.cancel()
        try:
            await gc_task
        except asyncio.CancelledError:
            pass

    await shell.stop()
    await close_db()
    logger.info("Application stopped.")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="AI Tools & News Directory",
    version=settings.app_version,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

# Rate limiting: SlowAPIMiddleware applies the default limit to every request,
# per-endpoint @limiter.limit decorators override it.
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    # Production logs only type+message, truncated, to avoid leaking connection strings
    if settings.is_production:
        logger.error("Unhandled exception: %s: %s", type(exc).__name__, str(exc)[:200])
    else:
        logger.error("Unhandled exception: %s", str(exc), exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Response-Time"] = f"{duration_ms:.1f}ms"

    # Skip logging for health check endpoints to avoid log noise
    path = request.url.path
    if not path.startswith("/api/v1/health"):
        logger.info(
            "%s %s %s %.1fms",
            request.method,
            path,
            response.status_code,
            round(duration_ms, 1),
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 1),
            },
        )
    return response


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    incoming = request.headers.get("X-Request-ID")
    # Only accept the caller's ID if it is a valid UUID
    if incoming:
        try:
            uuid.UUID(incoming)
            request_id = incoming
        except ValueError:
            request_id = str(uuid.uuid4())
    else:
        request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if settings.is_production:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


# CORS middleware; the checkout endpoint answers CORS itself
app.add_middleware(
    ScopedCORSMiddleware,
    exclude_paths=("/api/create-checkout",),
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Requested-With"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")
app.include_router(checkout_router, prefix="/api")


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "app": settings.app_name,
        "site": settings.site_name,
        "version": settings.app_version,
        "docs": "/docs" if settings.is_development else "disabled",
        "health": "/api/v1/health",
    }


if __name__ == "__main__":
    import uvicorn

    # Sessions live in process memory, so a single worker
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        workers=1,
    )
