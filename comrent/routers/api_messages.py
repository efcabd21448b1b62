"""Chat between a customer at a PC and the admin, keyed by PC name."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..core.statuses import SENDER_ADMIN
from ..db.store import Store, get_store
from ..schemas.message import MarkRead, MessageCreate, MessageOut
from ._outcomes import unwrap

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("")
def api_list(pc_name: str = Query(..., alias="pcName", min_length=1), store: Store = Depends(get_store)):
    return [MessageOut.model_validate(m) for m in store.conversations.list_messages(pc_name)]


@router.get("/all")
def api_all(store: Store = Depends(get_store)):
    return {
        name: [MessageOut.model_validate(m) for m in messages]
        for name, messages in store.conversations.all_conversations().items()
    }


@router.get("/unread")
def api_unread(role: str = Query(default=SENDER_ADMIN), store: Store = Depends(get_store)):
    return store.conversations.unread_counts(role)


@router.post("", status_code=status.HTTP_201_CREATED)
def api_post(payload: MessageCreate, store: Store = Depends(get_store)):
    message = unwrap(
        store.conversations.post_message(
            payload.pc_name,
            payload.sender,
            text=payload.text,
            image_url=payload.image_url,
        )
    )
    return MessageOut.model_validate(message)


@router.put("")
def api_mark_read(payload: MarkRead, store: Store = Depends(get_store)):
    store.conversations.mark_all_read(payload.pc_name, payload.role)
    return {"success": True}


@router.delete("")
def api_clear(store: Store = Depends(get_store)):
    if store.config.is_production:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Not allowed")
    store.conversations.clear()
    return {"message": "All messages cleared"}
