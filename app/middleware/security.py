# app/middleware/security.py - Security response headers
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from typing import Callable, Dict, Optional

from app.core.config import settings

BASE_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}

# Docs pages pull their assets from a CDN
DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Adds security headers to every response. HSTS is sent outside
    development only; the CSP is skipped for the interactive docs.
    """

    def __init__(self, app, enable_hsts: Optional[bool] = None, enable_csp: bool = True):
        super().__init__(app)
        self.enable_hsts = settings.ENVIRONMENT != "development" if enable_hsts is None else enable_hsts
        self.enable_csp = enable_csp

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        for name, value in BASE_HEADERS.items():
            response.headers[name] = value

        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        if self.enable_csp and not request.url.path.startswith(DOCS_PATHS):
            # JSON and stored task images only
            response.headers["Content-Security-Policy"] = "default-src 'none'; img-src 'self'; frame-ancestors 'none'"

        return response
