"""Application wiring for the ComRent rental-shop service.

This module brings together configuration, the in-memory store,
middleware, API routers and error handling:

*What:* a FastAPI app exposing the unit registry, chat, pricing,
notifications, audit log, invoices and analytics.
*When:* built once on import, together with ``/health``; ``comrent.main``
adds logging and metrics on top.
*Why:* customers and admins never talk to each other directly. Both poll
these endpoints, so the registry behind them is the only shared truth.
*How:* each router reads the process-wide ``Store`` through the
``get_store`` dependency; domain outcomes are mapped to HTTP errors and
rendered by the handlers registered at the bottom of this file.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import http_exception_handler, unhandled_exception_handler, validation_exception_handler
from .middlewares import NoStoreMiddleware, RequestIdMiddleware

# ---------- App init ----------
app = FastAPI(title=settings.APP_NAME)

# ---------- Middleware ----------
# Added last runs first: the request id must exist before anything logs.
app.add_middleware(NoStoreMiddleware)
app.add_middleware(RequestIdMiddleware)

# ---------- Routers ----------
from .routers import api_units as api_units_router  # noqa: E402

app.include_router(api_units_router.router)

from .routers import api_messages as api_messages_router  # noqa: E402

app.include_router(api_messages_router.router)

from .routers import api_pricing as api_pricing_router  # noqa: E402

app.include_router(api_pricing_router.router)

from .routers import api_activity as api_activity_router  # noqa: E402

app.include_router(api_activity_router.router)

from .routers import api_invoices as api_invoices_router  # noqa: E402

app.include_router(api_invoices_router.router)


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}

# ---------- Exception handling ----------
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["app"]
