"""Security headers and per-client rate limiting for the chat bridge."""

from __future__ import annotations

import math
import time
from typing import Callable

from fastapi import Request
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."

# The chat page loads Tailwind from its CDN and Font Awesome from cdnjs, and
# renders static map images served by Mapbox.
CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'self'",
        "base-uri 'self'",
        "script-src 'self' 'unsafe-inline' https://cdn.tailwindcss.com",
        "script-src-attr 'none'",
        "style-src 'self' 'unsafe-inline' https://cdnjs.cloudflare.com",
        "font-src 'self' https://cdnjs.cloudflare.com data:",
        "img-src 'self' data: https:",
        "connect-src 'self'",
        "form-action 'self'",
        "frame-ancestors 'self'",
        "object-src 'none'",
    ]
)

SECURITY_HEADERS = {
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds hardening headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed-window request limit per client address.

    Only paths under ``path_prefix`` are counted. Counters live in process
    memory, so each worker enforces its own limit.
    """

    # Expired windows are dropped once this many clients are tracked
    PRUNE_THRESHOLD = 10_000

    def __init__(
        self,
        app,
        max_requests: int = 100,
        window_seconds: float = 15 * 60,
        path_prefix: str = "/api/",
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.path_prefix = path_prefix
        self.clock = clock
        # client address -> (window start, requests seen in window)
        self._windows: dict[str, tuple[float, int]] = {}

    def _prune(self, now: float) -> None:
        self._windows = {
            client: window
            for client, window in self._windows.items()
            if now - window[0] < self.window_seconds
        }

    def _hit(self, client: str) -> tuple[int, float]:
        """Count one request; return (requests in window, seconds until reset)."""
        now = self.clock()
        if len(self._windows) >= self.PRUNE_THRESHOLD:
            self._prune(now)

        started, count = self._windows.get(client, (now, 0))
        if now - started >= self.window_seconds:
            started, count = now, 0
        count += 1
        self._windows[client] = (started, count)
        return count, self.window_seconds - (now - started)

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        count, reset_in = self._hit(client)
        headers = {
            "RateLimit-Limit": str(self.max_requests),
            "RateLimit-Remaining": str(max(self.max_requests - count, 0)),
            "RateLimit-Reset": str(math.ceil(reset_in)),
        }

        if count > self.max_requests:
            headers["Retry-After"] = headers["RateLimit-Reset"]
            return PlainTextResponse(RATE_LIMIT_MESSAGE, status_code=429, headers=headers)

        response = await call_next(request)
        for name, value in headers.items():
            response.headers[name] = value
        return response
