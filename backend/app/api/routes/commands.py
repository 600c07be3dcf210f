"""Strategic Commands - submit, poll, and cancel core upgrade pipelines.

Invariants:
    - POST returns 202 with the pending record; the pipeline runs in the background
    - Unknown command id -> 404 (ResourceNotFoundError)
    - Cancel of a command without a pipeline in flight, or one already in
      the promote phase -> 409
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_controller
from app.core.errors import PipelineNotRunningError, ResourceNotFoundError
from app.schemas.lifecycle import CommandCancel, CommandCreate, CommandResponse
from app.services.lifecycle_controller import DEFAULT_CANCEL_REASON, LifecycleController

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/commands", tags=["commands"])


@router.post(
    "", response_model=CommandResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_command(
    body: CommandCreate,
    controller: LifecycleController = Depends(get_controller),
):
    """Accept a strategic command and start its upgrade pipeline."""
    command = await controller.submit_command(body.command, body.issued_by)
    return CommandResponse.model_validate(command)


@router.get("", response_model=list[CommandResponse])
async def list_commands(
    controller: LifecycleController = Depends(get_controller),
):
    return [
        CommandResponse.model_validate(c)
        for c in await controller.list_commands()
    ]


@router.get("/{command_id}", response_model=CommandResponse)
async def get_command(
    command_id: str,
    controller: LifecycleController = Depends(get_controller),
):
    command = await controller.get_command(command_id)
    if command is None:
        raise ResourceNotFoundError("StrategicCommand", command_id)
    return CommandResponse.model_validate(command)


@router.post("/{command_id}/cancel", status_code=status.HTTP_202_ACCEPTED)
async def cancel_command(
    command_id: str,
    body: CommandCancel | None = None,
    controller: LifecycleController = Depends(get_controller),
):
    """Request cancellation; the pipeline fails before its next phase fires."""
    reason = (body.reason if body else None) or DEFAULT_CANCEL_REASON
    if controller.cancel_command(command_id, reason):
        return {"message": "Cancellation requested", "command_id": command_id}

    if await controller.get_command(command_id) is None:
        raise ResourceNotFoundError("StrategicCommand", command_id)
    raise PipelineNotRunningError(command_id)
