"""System Config - read, patch, and natural-language config commands.

Invariants:
    - PATCH shallow-merges only the fields present in the body; explicit nulls
      leave the stored value unchanged
    - POST /command always answers 200 with the reply text and the resulting config
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_chat_service
from app.schemas.chat import (
    ConfigCommandRequest, ConfigCommandResponse, ConfigResponse, ConfigUpdate,
)
from app.services.chat_service import ChatService

router = APIRouter(prefix="/api/v1/config", tags=["config"])


@router.get("", response_model=ConfigResponse)
async def get_config(service: ChatService = Depends(get_chat_service)):
    return ConfigResponse.model_validate(await service.get_config())


@router.patch("", response_model=ConfigResponse)
async def update_config(
    body: ConfigUpdate, service: ChatService = Depends(get_chat_service),
):
    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    updated = await service.update_config(updates)
    return ConfigResponse.model_validate(updated)


@router.post("/command", response_model=ConfigCommandResponse)
async def apply_config_command(
    body: ConfigCommandRequest, service: ChatService = Depends(get_chat_service),
):
    outcome = await service.apply_config_command(body.command)
    return ConfigCommandResponse(
        message=outcome.message,
        config=ConfigResponse.model_validate(outcome.config),
    )
