from __future__ import annotations

from fastapi import APIRouter, Depends

from ..db.store import Store, get_store
from ..schemas.activity import AnalyticsSummaryOut, AuditEntryOut, NotificationOut
from ..services.analytics import summarize

router = APIRouter(prefix="/api", tags=["activity"])


@router.get("/notifications")
def api_notifications(store: Store = Depends(get_store)):
    return [NotificationOut.model_validate(n) for n in store.feed.notifications()]


@router.get("/audit-log")
def api_audit_log(store: Store = Depends(get_store)):
    return [
        AuditEntryOut(timestamp=entry.timestamp, message=entry.message, line=str(entry))
        for entry in store.feed.audit_entries()
    ]


@router.get("/analytics/summary")
def api_analytics(store: Store = Depends(get_store)):
    summary = summarize(store.registry.list_units(), store.pricing)
    return AnalyticsSummaryOut.model_validate(summary)
