# app/main.py - Task Blaster API application
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from contextlib import asynccontextmanager
from prometheus_fastapi_instrumentator import Instrumentator
import time

# Core imports
from app.core.config import settings
from app.db.database import get_db, init_db, engine, AsyncSessionLocal

# Import tracing
from app.core import tracing
from app.core.token_cache import token_cache
from app.core.translation_cache import translation_cache

# Import API routes
from app.api.v1 import api_router

# Import middleware
from app.middleware.security import SecurityHeadersMiddleware
from app.middleware.cors import setup_cors_middleware
from app.middleware.rate_limiting import setup_rate_limiting

# Import exception handlers
from app.exceptions.handlers import (
    http_exception_handler,
    validation_exception_handler,
    global_exception_handler,
    starlette_http_exception_handler
)

SERVICE_NAME = "Task Blaster API"
SERVICE_VERSION = "1.0.0"

# Global variable to track tracing status
tracing_enabled = False


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create tables and warm the token and translation caches before serving
    """
    tracing.info(f"{SERVICE_NAME} startup initiated")

    try:
        await init_db()
        tracing.info("Database initialized successfully")
    except Exception as e:
        tracing.error(f"Database initialization failed: {e}")
        raise

    async with AsyncSessionLocal() as db:
        await token_cache.initialize(db)
        await translation_cache.initialize(db)

    tracing.info(f"Environment: {settings.ENVIRONMENT}")
    tracing.info(f"Log Level: {settings.LOG_LEVEL}")
    tracing.info(f"Tracing: {'Enabled' if tracing_enabled else 'Disabled'}")
    tracing.info(f"Rate Limiting: {'Enabled' if settings.RATE_LIMIT_ENABLED else 'Disabled'}")
    tracing.info(f"Default workflow: {settings.default_status_workflow_list}")

    tracing.info(f"{SERVICE_NAME} v{SERVICE_VERSION} startup complete")

    yield

    tracing.info(f"{SERVICE_NAME} shutdown initiated")
    token_cache.clear()
    translation_cache.clear()
    await engine.dispose()
    tracing.info(f"{SERVICE_NAME} shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=SERVICE_NAME,
    description="Collaborative kanban task tracking",
    version=SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    openapi_url="/openapi.json" if settings.ENVIRONMENT == "development" else None
)

# =============================================================================
# TRACING SETUP
# =============================================================================

# Local trace ids always; OpenTelemetry when enabled
try:
    tracing_enabled = tracing.setup_tracing(app, engine)
    if tracing_enabled:
        if settings.ENABLE_OTEL_EXPORTER:
            tracing.info("✅ Tracing with OpenTelemetry enabled")
        else:
            tracing.info("✅ Local tracing enabled (OpenTelemetry disabled)")
    else:
        tracing.warning("⚠️ Tracing setup encountered issues")
except Exception as e:
    tracing.error(f"❌ Failed to initialize tracing: {e}")
    tracing_enabled = False

# =============================================================================
# MIDDLEWARE SETUP (Order matters!)
# =============================================================================

tracing.info("Configuring middleware pipeline...")

# 1. Security Headers (protects all responses)
app.add_middleware(SecurityHeadersMiddleware)

# 2. CORS (handles preflight requests)
setup_cors_middleware(app)

# 3. Rate Limiting
setup_rate_limiting(app)

tracing.info("Middleware pipeline configured")

# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(StarletteHTTPException, starlette_http_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# =============================================================================
# PROMETHEUS METRICS
# =============================================================================

instrumentator = Instrumentator(
    should_group_status_codes=True,
    should_ignore_untemplated=True,
    should_group_untemplated=False,
    should_instrument_requests_inprogress=True,
    inprogress_labels=True
)
instrumentator.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

# =============================================================================
# API ROUTES
# =============================================================================

app.include_router(api_router)

tracing.info("API routes configured")


# =============================================================================
# SYSTEM ENDPOINTS
# =============================================================================

@app.get("/health", tags=["System"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check with a database round trip and the token cache state
    """
    try:
        await db.execute(text("SELECT 1"))

        health_data = {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": settings.ENVIRONMENT,
            "timestamp": time.time(),
            "trace_id": tracing.get_current_trace_id(),
            "checks": {
                "database": "connected",
                "token_cache": token_cache.stats(),
                "tracing": "enabled" if tracing_enabled else "disabled",
                "rate_limiting": "enabled" if settings.RATE_LIMIT_ENABLED else "disabled"
            }
        }

        tracing.debug("Health check passed", endpoint="/health", database_status="connected")
        return health_data

    except Exception as e:
        tracing.error(f"Health check failed: {e}",
                      endpoint="/health",
                      error_type=type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy - database connection failed"
        )


@app.get("/", tags=["System"])
async def api_information():
    """API information endpoint"""
    return {
        "message": f"{SERVICE_NAME} - kanban task tracking",
        "version": SERVICE_VERSION,
        "environment": settings.ENVIRONMENT,
        "status": "operational",
        "trace_id": tracing.get_current_trace_id(),
        "authentication": f"Static per-user token in the {settings.AUTH_HEADER_NAME} header",
        "endpoints": {
            "health": "/health",
            "metrics": "/metrics",
            "users": "/users",
            "projects": "/projects",
            "tasks": "/tasks",
            "tags": "/tags",
            "status_definitions": "/status-definitions",
            "translations": "/translations",
            "documentation": "/docs" if settings.ENVIRONMENT == "development" else "Contact administrator"
        },
        "timestamp": time.time()
    }


tracing.info(f"{SERVICE_NAME} fully initialized")
