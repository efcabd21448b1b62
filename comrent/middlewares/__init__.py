from __future__ import annotations

from .request_id import RequestIdMiddleware, request_id_ctx_var
from .no_store import NoStoreMiddleware

__all__ = [
    "NoStoreMiddleware",
    "RequestIdMiddleware",
    "request_id_ctx_var",
]
