# app/middleware/rate_limiting.py - Rate limiting setup
from fastapi import FastAPI
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from loguru import logger

from app.core.config import settings
from app.exceptions.handlers import rate_limit_exception_handler

# Shared limiter; routes needing a tighter budget decorate with @limiter.limit
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.DEFAULT_RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED
)


def setup_rate_limiting(app: FastAPI) -> None:
    """Apply the default limit to every route and map overruns to 429"""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_middleware(SlowAPIMiddleware)

    logger.info(
        f"✅ Rate limiting {'enabled' if settings.RATE_LIMIT_ENABLED else 'disabled'} "
        f"(default {settings.DEFAULT_RATE_LIMIT})"
    )
