"""
Security Headers Middleware for the Sora Prompt Genie API

Adds the baseline security headers (helmet-style) to every response. The
strict Content-Security-Policy and HSTS are production only; development
leaves CSP off so the dev server's hot reload keeps working.
"""

from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from config import settings


# The browser only ever talks to us and to OpenRouter
PRODUCTION_CSP = [
    "default-src 'self'",
    "style-src 'self'",
    "script-src 'self'",
    "img-src 'self' data: https:",
    "connect-src 'self' https://openrouter.ai",
    "frame-ancestors 'none'",
    "object-src 'none'",
]


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds security headers to all HTTP responses.

    Headers added:
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: Prevents clickjacking attacks
    - Referrer-Policy: Controls referrer information sent
    - Cross-Origin-Opener-Policy / Cross-Origin-Resource-Policy
    - Strict-Transport-Security: Forces HTTPS (production only)
    - Content-Security-Policy (production only)
    """

    def __init__(self, app, is_production: Optional[bool] = None, enable_hsts: Optional[bool] = None):
        super().__init__(app)
        self.is_production = settings.is_production if is_production is None else is_production
        self.enable_hsts = self.is_production if enable_hsts is None else enable_hsts

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"
        response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
        response.headers["Cross-Origin-Resource-Policy"] = "same-origin"
        response.headers["X-DNS-Prefetch-Control"] = "off"

        # max-age=31536000 = 1 year
        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        if self.is_production:
            response.headers["Content-Security-Policy"] = "; ".join(PRODUCTION_CSP)

        return response
