"""Conversation API routes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application
from ...logging_config import get_logger
from ...models import state_to_dict
from ...storage import StoreError

logger = get_logger(__name__)


class ReplyResponse(BaseModel):
    """Response model for a reply."""

    text: str
    sent_at: datetime


class StateResponse(BaseModel):
    """Response model for conversation state."""

    conversation_id: str
    state: dict[str, Any]


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_conversations_router(app: Application) -> APIRouter:
    """Create conversations router."""
    router = APIRouter(prefix="/api/conversations", tags=["conversations"])

    @router.get("/{conversation_id}/replies", response_model=list[ReplyResponse])
    async def get_replies(conversation_id: str) -> list[dict]:
        """Get replies sent to a conversation."""
        outbox = app.outbox
        if outbox is None:
            raise HTTPException(status_code=404, detail="Replies are sent to a webhook")

        return [
            {"text": reply.text, "sent_at": reply.sent_at}
            for reply in outbox.get_replies(conversation_id)
        ]

    @router.get("/{conversation_id}/state", response_model=StateResponse)
    async def get_state(conversation_id: str) -> dict:
        """Get current dialogue state of a conversation."""
        try:
            state = await app.storage.get(conversation_id)
        except StoreError:
            logger.error("Failed to read state of %s", conversation_id, exc_info=True)
            raise HTTPException(status_code=500, detail="State unavailable")

        return {"conversation_id": conversation_id, "state": state_to_dict(state)}

    @router.delete("/{conversation_id}/state", response_model=StatusResponse)
    async def reset_state(conversation_id: str) -> dict:
        """Reset a conversation to the initial state."""
        try:
            await app.storage.remove(conversation_id)
        except StoreError:
            logger.error("Failed to reset state of %s", conversation_id, exc_info=True)
            raise HTTPException(status_code=500, detail="State unavailable")

        return {"status": "ok"}

    return router
