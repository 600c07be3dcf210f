"""Core Instances - read-only view of the simulated cores (admin console polling)."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_controller
from app.core.core_lifecycle import find_live_prime
from app.core.errors import NoLiveCoreError
from app.schemas.lifecycle import CoreResponse
from app.services.lifecycle_controller import LifecycleController

router = APIRouter(prefix="/api/v1/cores", tags=["cores"])


@router.get("", response_model=list[CoreResponse])
async def list_cores(
    controller: LifecycleController = Depends(get_controller),
):
    return [CoreResponse.model_validate(c) for c in await controller.list_cores()]


@router.get("/live", response_model=CoreResponse)
async def get_live_core(
    controller: LifecycleController = Depends(get_controller),
):
    """The (prime, active) core. 409 while no core is live."""
    live = find_live_prime(await controller.list_cores())
    if live is None:
        raise NoLiveCoreError()
    return CoreResponse.model_validate(live)
