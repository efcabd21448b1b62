from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response


class NoStoreMiddleware(BaseHTTPMiddleware):
    """Keep API reads out of browser and proxy caches.

    Clients learn about state changes only by polling, so a cached
    ``GET /api/units`` would freeze their view of the registry.
    """

    def __init__(self, app, prefix: str = "/api") -> None:  # type: ignore[override]
        super().__init__(app)
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        if request.url.path.startswith(self.prefix):
            response.headers["Cache-Control"] = "no-store, max-age=0"
            response.headers.setdefault("Pragma", "no-cache")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        return response
