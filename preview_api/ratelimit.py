import math
import time
from typing import Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp


class FixedWindowRateLimiter:
    """Counts hits per key in fixed windows of ``window`` seconds."""

    def __init__(
        self,
        total: int,
        window: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.total = total
        self.window = window
        self.clock = clock
        self._windows: dict[str, tuple[float, int]] = {}

    def hit(self, key: str) -> float:
        """Record a hit for ``key``.

        Returns 0 when the hit is allowed, otherwise the seconds until the
        current window resets.
        """
        now = self.clock()
        started, count = self._windows.get(key, (now, 0))
        if now - started >= self.window:
            started, count = now, 0
            # Drop other stale windows so idle clients do not accumulate.
            self._windows = {
                k: v for k, v in self._windows.items() if now - v[0] < self.window
            }
        if count >= self.total:
            self._windows[key] = (started, count)
            return self.window - (now - started)
        self._windows[key] = (started, count + 1)
        return 0.0


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limiter: FixedWindowRateLimiter,
        path: str = "/v2",
        method: str = "GET",
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.path = path
        self.method = method

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path != self.path or request.method != self.method:
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        retry_after = self.limiter.hit(client)
        if retry_after:
            return JSONResponse(
                status_code=429,
                content={"error": "Too many requests"},
                headers={"Retry-After": str(max(math.ceil(retry_after), 1))},
            )
        return await call_next(request)
