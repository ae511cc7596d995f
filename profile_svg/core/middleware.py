from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from threading import RLock
from time import monotonic

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from profile_svg.services.svg_renderer import render_error_svg


SVG_MEDIA_TYPE = "image/svg+xml"


class SvgRateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory rate limiter for GET requests to the SVG endpoint.

    Clients are keyed by peer address. `X-Forwarded-For` is only honoured
    when `trust_forwarded_for` is set, i.e. when a proxy in front of the
    service overwrites that header.
    """

    def __init__(
        self,
        app,
        requests_per_window: int = 30,
        window_seconds: int = 60,
        path: str = "/api/svg",
        trust_forwarded_for: bool = False,
    ) -> None:
        super().__init__(app)
        # Guard against invalid config values (0 or negatives).
        self.max_requests = max(1, requests_per_window)
        self.window_seconds = max(1, window_seconds)
        self.path = path
        self.trust_forwarded_for = trust_forwarded_for
        # One queue of request timestamps per client key; empty queues are dropped.
        self._ip_buckets: dict[str, deque[float]] = {}
        self._last_sweep = monotonic()
        self._lock = RLock()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method != "GET" or request.url.path != self.path:
            return await call_next(request)

        ip = self._client_ip(request)
        now = monotonic()

        with self._lock:
            cutoff = now - self.window_seconds
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now

            bucket = self._ip_buckets.get(ip, deque())
            while bucket and bucket[0] <= cutoff:
                bucket.popleft()

            if len(bucket) >= self.max_requests:
                self._ip_buckets[ip] = bucket
                retry_after = max(1, int(self.window_seconds - (now - bucket[0])))
                return Response(
                    content=render_error_svg("Too Many Requests"),
                    status_code=429,
                    media_type=SVG_MEDIA_TYPE,
                    headers={"Retry-After": str(retry_after)},
                )

            bucket.append(now)
            self._ip_buckets[ip] = bucket

        return await call_next(request)

    @property
    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._ip_buckets)

    def _sweep(self, cutoff: float) -> None:
        """Drop clients whose newest request fell out of the window."""

        stale = [
            key for key, bucket in self._ip_buckets.items()
            if not bucket or bucket[-1] <= cutoff
        ]
        for key in stale:
            del self._ip_buckets[key]

    def _client_ip(self, request: Request) -> str:
        if self.trust_forwarded_for:
            forwarded_for = request.headers.get("x-forwarded-for")
            if forwarded_for:
                return forwarded_for.split(",")[0].strip() or "unknown"

        if request.client and request.client.host:
            return request.client.host

        return "unknown"
