"""
Rate Limiting Middleware for the Sora Prompt Genie API

Sliding window rate limiting per client IP:
- a general limit shared by every /api route
- a daily limit per AI endpoint, since each call costs an LLM request

Responses carry the standard RateLimit-Limit / RateLimit-Remaining /
RateLimit-Reset headers. State is in-memory, so limits are per process.
"""

import math
import time
from typing import Dict, Optional, Tuple
from collections import defaultdict
from dataclasses import dataclass, field

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from utils.logger import logger


DAY = 24 * 60 * 60


@dataclass
class RateLimitConfig:
    """Configuration for one rate limit window"""
    max_requests: int
    window_seconds: int
    message: str


GENERAL_LIMIT = RateLimitConfig(
    max_requests=100,
    window_seconds=15 * 60,
    message="Too many requests from this IP, please try again later.",
)


def _daily_limit(name: str, max_requests: int) -> RateLimitConfig:
    return RateLimitConfig(
        max_requests=max_requests,
        window_seconds=DAY,
        message=(
            f"Rate limit exceeded for {name}. You have reached your daily limit of "
            f"{max_requests} requests. Please try again tomorrow."
        ),
    )


# Endpoint-specific limits, applied on top of the general limit
ENDPOINT_LIMITS: Dict[str, RateLimitConfig] = {
    "/api/enhance-prompt": _daily_limit("enhance-prompt", 20),
    "/api/generate-suggestions": _daily_limit("generate-suggestions", 10),
    "/api/auto-generate-prompt": _daily_limit("auto-generate-prompt", 10),
    "/api/structure-prompt": _daily_limit("structure-prompt", 10),
}

# Paths to skip rate limiting
SKIP_PATHS = {
    "/api/health",
}


@dataclass
class RateLimitState:
    """Request timestamps for a single key"""
    requests: list = field(default_factory=list)

    def cleanup(self, now: float, window_seconds: int):
        """Remove expired entries"""
        cutoff = now - window_seconds
        self.requests = [t for t in self.requests if t > cutoff]

    def add_request(self, now: float):
        self.requests.append(now)

    def check_limit(self, config: RateLimitConfig, now: float) -> Tuple[bool, int]:
        """
        Check if the window is full.

        Returns: (is_allowed, seconds_until_a_slot_frees)
        """
        if len(self.requests) >= config.max_requests:
            reset_at = self.requests[0] + config.window_seconds
            return False, max(1, math.ceil(reset_at - now))
        return True, 0

    def reset_in(self, config: RateLimitConfig, now: float) -> int:
        if not self.requests:
            return config.window_seconds
        return max(0, math.ceil(self.requests[0] + config.window_seconds - now))


class RateLimiter:
    """
    In-memory rate limiter using sliding window algorithm.

    For multiple server instances this would need a shared store.
    """

    def __init__(self):
        self._state: Dict[str, RateLimitState] = defaultdict(RateLimitState)
        self._last_cleanup = time.time()
        self._cleanup_interval = 300  # Cleanup every 5 minutes

    def _get_key(self, identifier: str, scope: str) -> str:
        return f"{identifier}:{scope}"

    def _periodic_cleanup(self, now: float):
        """Drop keys whose windows have fully expired to prevent memory growth"""
        if now - self._last_cleanup > self._cleanup_interval:
            # The longest window bounds how long any timestamp can matter
            horizon = max([GENERAL_LIMIT.window_seconds] + [c.window_seconds for c in ENDPOINT_LIMITS.values()])
            keys_to_remove = []
            for key, state in self._state.items():
                state.cleanup(now, horizon)
                if not state.requests:
                    keys_to_remove.append(key)

            for key in keys_to_remove:
                del self._state[key]

            self._last_cleanup = now

    def check_rate_limit(
        self,
        identifier: str,
        scope: str,
        config: RateLimitConfig,
    ) -> Tuple[bool, int, Dict[str, int]]:
        """
        Check and record a request.

        Args:
            identifier: Client IP address
            scope: "general" or the endpoint path
            config: Limit to apply

        Returns:
            (is_allowed, retry_after, headers)
        """
        now = time.time()
        self._periodic_cleanup(now)

        state = self._state[self._get_key(identifier, scope)]
        state.cleanup(now, config.window_seconds)

        is_allowed, retry_after = state.check_limit(config, now)
        if is_allowed:
            state.add_request(now)

        headers = {
            "RateLimit-Limit": config.max_requests,
            "RateLimit-Remaining": max(0, config.max_requests - len(state.requests)),
            "RateLimit-Reset": state.reset_in(config, now),
        }
        return is_allowed, retry_after, headers

    def reset(self):
        self._state.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()


def get_client_identifier(request: Request) -> str:
    """Client IP, honouring the first X-Forwarded-For hop behind a proxy"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP", request.client.host if request.client else "unknown")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for rate limiting.

    Applies the general limit to every /api path, then the endpoint-specific
    daily limit where one exists. The most specific limit's headers win.
    """

    def __init__(self, app, limiter: Optional[RateLimiter] = None):
        super().__init__(app)
        self.limiter = limiter or rate_limiter

    async def dispatch(self, request: Request, call_next):
        path = request.url.path.rstrip("/") or "/"

        if not path.startswith("/api") or path in SKIP_PATHS:
            return await call_next(request)

        identifier = get_client_identifier(request)

        checks = [("general", GENERAL_LIMIT)]
        if path in ENDPOINT_LIMITS:
            checks.append((path, ENDPOINT_LIMITS[path]))

        headers: Dict[str, int] = {}
        for scope, config in checks:
            is_allowed, retry_after, headers = self.limiter.check_rate_limit(identifier, scope, config)
            if not is_allowed:
                logger.warning(f"Rate limit exceeded: {identifier} on {path} ({scope} limit)")
                return JSONResponse(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    content={"error": config.message},
                    headers={
                        "Retry-After": str(retry_after),
                        **{k: str(v) for k, v in headers.items()},
                    },
                )

        response = await call_next(request)

        for key, value in headers.items():
            response.headers[key] = str(value)

        return response
