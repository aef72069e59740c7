"""Messaging API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application
from ...models import InboundMessage


class MessageRequest(BaseModel):
    """Request model for an inbound message."""

    conversation_id: str
    text: str | None = None


class AcceptedResponse(BaseModel):
    """Response model for a queued message."""

    status: str


def create_messaging_router(app: Application) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages", response_model=AcceptedResponse, status_code=202)
    async def submit_message(request: MessageRequest) -> dict:
        """Queue an inbound message for the dispatcher."""
        if not app.accepting:
            raise HTTPException(status_code=503, detail="Not accepting messages")

        await app.submit(
            InboundMessage(conversation_id=request.conversation_id, text=request.text)
        )
        return {"status": "accepted"}

    return router
