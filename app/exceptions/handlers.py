# app/exceptions/handlers.py
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from app.core import tracing
from app.core.config import settings
import time


def get_safe_headers(request: Request) -> dict:
    """Extract and mask sensitive headers for logging"""
    headers = request.headers
    token = headers.get(settings.AUTH_HEADER_NAME)
    return {
        "user_agent": headers.get("user-agent", "unknown"),
        "token": (token[:6] + "...") if token else "none",
        "referer": headers.get("referer", "none")
    }


def error_body(request: Request, status_code: int, message: str, **extra) -> dict:
    return {
        "error": message,
        **extra,
        "status_code": status_code,
        "trace_id": tracing.get_current_trace_id(),
        "timestamp": time.time(),
        "path": request.url.path
    }


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    client_ip = get_remote_address(request)
    headers = get_safe_headers(request)

    log = tracing.error if exc.status_code >= 500 else tracing.warning
    log(
        f"🚨 HTTP {exc.status_code}: {exc.detail}",
        url=str(request.url),
        ip=client_ip,
        **headers
    )

    extra = getattr(exc, "extra", None) or {}
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, exc.detail, **extra),
        headers=getattr(exc, 'headers', None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    client_ip = get_remote_address(request)
    headers = get_safe_headers(request)

    errors = [
        {
            "field": " -> ".join(str(x) for x in error["loc"]),
            "message": error["msg"],
            "type": error["type"]
        }
        for error in exc.errors()
    ]

    tracing.warning(
        f"⚠️ Validation error: {len(errors)} errors",
        url=str(request.url),
        ip=client_ip,
        **headers
    )

    return JSONResponse(
        status_code=400,
        content=error_body(request, 400, "Validation error", errors=errors)
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    client_ip = get_remote_address(request)

    tracing.warning(f"🚫 Rate limit exceeded | ip={client_ip} | path={request.url.path}")

    return JSONResponse(
        status_code=429,
        content=error_body(request, 429, f"Rate limit exceeded: {exc.detail}"),
        headers={"X-Trace-ID": tracing.get_current_trace_id()}
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    client_ip = get_remote_address(request)
    headers = get_safe_headers(request)

    tracing.error(
        f"🔥 UNHANDLED EXCEPTION: {str(exc)}",
        url=str(request.url),
        ip=client_ip,
        error_type=type(exc).__name__,
        **headers
    )

    return JSONResponse(
        status_code=500,
        content=error_body(request, 500, "Internal server error")
    )


async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    client_ip = get_remote_address(request)
    headers = get_safe_headers(request)

    tracing.warning(
        f"🔍 HTTP {exc.status_code}: {exc.detail}",
        url=str(request.url),
        ip=client_ip,
        **headers
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, exc.detail),
        headers=getattr(exc, 'headers', None)
    )
