"""Conversation and agent roster API routes."""

from datetime import datetime

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException, Query

from ...app import IApplication
from .messaging import MessageResponse, message_to_dict


class ConversationRequest(BaseModel):
    """Request model for creating a conversation."""

    user_id: str
    title: str = "New Conversation"


class ConversationResponse(BaseModel):
    """Response model for conversation."""

    id: str
    user_id: str
    title: str
    created_at: datetime
    updated_at: datetime


class TokenCountResponse(BaseModel):
    conversation_id: str
    total_tokens: int


class AgentConfigResponse(BaseModel):
    """Response model for an agent config."""

    id: str | None = None
    name: str
    description: str | None = None
    system_prompt: str
    is_active: bool
    capabilities: list[str]


def create_conversations_router(app: IApplication) -> APIRouter:
    """Create conversations router."""
    router = APIRouter(prefix="/api", tags=["conversations"])

    @router.post("/conversations", response_model=ConversationResponse)
    async def create_conversation(request: ConversationRequest) -> dict:
        try:
            conversation = await app.conversations.create_conversation(
                request.user_id, request.title
            )
            return vars(conversation)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/conversations", response_model=list[ConversationResponse])
    async def list_conversations(user_id: str = Query(..., min_length=1)) -> list[dict]:
        try:
            return [vars(c) for c in await app.conversations.list_conversations(user_id)]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.get(
        "/conversations/{conversation_id}/messages",
        response_model=list[MessageResponse],
    )
    async def get_messages(
        conversation_id: str,
        limit: int = Query(50, ge=1, le=500),
    ) -> list[dict]:
        """Recent messages in chronological order."""
        try:
            messages = await app.conversations.get_messages(conversation_id, limit)
            return [message_to_dict(m) for m in messages]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.get(
        "/conversations/{conversation_id}/tokens",
        response_model=TokenCountResponse,
    )
    async def get_token_count(conversation_id: str) -> dict:
        try:
            total = await app.conversations.get_token_count(conversation_id)
            return {"conversation_id": conversation_id, "total_tokens": total}
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/agents", response_model=list[AgentConfigResponse])
    async def list_agents() -> list[dict]:
        """Agent roster, seeded with the built-in agents on first use."""
        return [vars(config) for config in await app.conversations.list_agents()]

    return router
