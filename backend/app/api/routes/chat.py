"""Chat - classifier endpoint for the public chat page.

Invariants:
    - Always 200 for a valid body: classifier failures become the apology reply
    - Simulated latency (Settings.chat_latency_ms) is applied here, not in the classifier
"""

import asyncio

from fastapi import APIRouter, Depends

from app.api.dependencies import get_chat_service
from app.config import get_settings
from app.schemas.chat import ChatRequest, ChatResponse
from app.services.chat_service import ChatService

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    service: ChatService = Depends(get_chat_service),
):
    latency_ms = get_settings().chat_latency_ms
    if latency_ms:
        await asyncio.sleep(latency_ms / 1000)
    reply = await service.classify(body.message, body.is_authenticated)
    return ChatResponse(
        response=reply.response,
        word_count=reply.word_count,
        word_limit_reached=reply.word_limit_reached,
    )
