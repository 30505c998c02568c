"""Per-client rate limiting middleware.

Each client address gets ``requests_per_window`` requests per window; further
requests receive 429 with a Retry-After header until the window frees up.
"""

import json

from starlette.concurrency import run_in_threadpool
from starlette.types import ASGIApp, Receive, Scope, Send

from app.services.rate_limit_store import RateLimitStore, SlidingWindowCounter

TOO_MANY_REQUESTS = "Too many requests, please try again later"


class RateLimitMiddleware:
    """ASGI middleware that enforces per-IP request rate limits.

    Args:
        app: The ASGI application to wrap.
        requests_per_window: Allowed requests per client and window.
        store: Counter backend; defaults to a process-local sliding window.
        exempt_paths: Paths that are never limited (health checks).
        trusted_proxies: Peer addresses whose X-Forwarded-For header is used
            as the client address. Other peers are keyed by socket address.
    """

    def __init__(
        self,
        app: ASGIApp,
        requests_per_window: int = 100,
        store: RateLimitStore | None = None,
        exempt_paths: tuple[str, ...] = ("/", "/health"),
        trusted_proxies: tuple[str, ...] = (),
    ) -> None:
        self.app = app
        self.requests_per_window = requests_per_window
        self.store = store or SlidingWindowCounter(window=60.0)
        self.exempt_paths = set(exempt_paths)
        self.trusted_proxies = set(trusted_proxies)

    def get_client_ip(self, scope: Scope) -> str:
        """Extract client IP; x-forwarded-for is honoured only from trusted proxies."""
        client = scope.get("client")
        peer = client[0] if client else "unknown"
        if peer not in self.trusted_proxies:
            return peer

        headers = dict(scope.get("headers", []))
        forwarded = headers.get(b"x-forwarded-for")
        if forwarded:
            return forwarded.decode("latin-1").split(",")[0].strip() or peer
        return peer

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope.get("path", "/") in self.exempt_paths:
            await self.app(scope, receive, send)
            return

        key = self.get_client_ip(scope)
        if self.store.blocking:
            allowed, retry_after = await run_in_threadpool(self.store.check_and_record, key, self.requests_per_window)
        else:
            allowed, retry_after = self.store.check_and_record(key, self.requests_per_window)
        if allowed:
            await self.app(scope, receive, send)
            return

        body = json.dumps({"detail": TOO_MANY_REQUESTS}).encode()
        await send({
            "type": "http.response.start",
            "status": 429,
            "headers": [
                (b"content-type", b"application/json"),
                (b"content-length", str(len(body)).encode()),
                (b"retry-after", str(retry_after).encode()),
            ],
        })
        await send({"type": "http.response.body", "body": body})
