"""Messaging API routes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from ...app import IApplication
from ...models import Message


class MessageRequest(BaseModel):
    """Request model for sending a message."""

    user_id: str
    conversation_id: str
    content: str = Field(min_length=1)
    agent_type: str | None = None
    model: str | None = None


class MessageResponse(BaseModel):
    """Response model for a stored message."""

    id: str
    conversation_id: str
    content: str
    user_id: str | None = None
    agent_type: str | None = None
    token_count: int = 0
    metadata: dict[str, Any] = {}
    created_at: datetime


class ExchangeResponse(BaseModel):
    """Response model for one user/agent exchange."""

    user_message: MessageResponse
    agent_message: MessageResponse
    token_usage: int


class ProgressResponse(BaseModel):
    current: int
    total: int


class CollaborationStatusResponse(BaseModel):
    """Response model for collaboration status."""

    status: str
    current_step: str | None = None
    active_agents: list[str] = []
    progress: ProgressResponse | None = None
    start_time: int | None = None
    error: str | None = None


def message_to_dict(message: Message) -> dict:
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "content": message.content,
        "user_id": message.user_id,
        "agent_type": message.agent_type,
        "token_count": message.token_count,
        "metadata": message.metadata,
        "created_at": message.created_at,
    }


def create_messaging_router(app: IApplication) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages", response_model=ExchangeResponse)
    async def send_message(request: MessageRequest) -> dict:
        """Send a message to an agent; mentions in the text pick the agents."""
        try:
            result = await app.conversations.send_message(
                user_id=request.user_id,
                conversation_id=request.conversation_id,
                content=request.content,
                agent_type=request.agent_type,
                model=request.model,
            )
            return {
                "user_message": message_to_dict(result.user_message),
                "agent_message": message_to_dict(result.agent_message),
                "token_usage": result.token_usage,
            }
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.get(
        "/collaboration-status/{conversation_id}",
        response_model=CollaborationStatusResponse,
    )
    async def get_collaboration_status(conversation_id: str) -> dict:
        """Progress of the request in flight; idle when nothing is running."""
        status = app.orchestrator.get_collaboration_status(conversation_id)
        if status is None:
            return {"status": "idle"}
        return status.to_dict()

    return router
