"""
Sora Prompt Genie API Middleware

Rate limiting, security headers and request logging for the FastAPI application.
"""

from .rate_limit import (
    RateLimitMiddleware,
    RateLimiter,
    rate_limiter,
)
from .security_headers import SecurityHeadersMiddleware
from .request_logging import RequestLoggingMiddleware

__all__ = [
    # Rate limiting
    "RateLimitMiddleware",
    "RateLimiter",
    "rate_limiter",
    # Headers
    "SecurityHeadersMiddleware",
    # Logging
    "RequestLoggingMiddleware",
]
