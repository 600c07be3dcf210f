"""Route Dependencies - hand the app-scoped services to route handlers.

Invariants:
    - Services live on app.state, created once in the lifespan
    - Missing services mean startup did not run: RuntimeError, surfaced as 500
"""

from fastapi import Request

from app.services.chat_service import ChatService
from app.services.lifecycle_controller import LifecycleController


def get_controller(request: Request) -> LifecycleController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise RuntimeError("Lifecycle controller not initialized")
    return controller


def get_chat_service(request: Request) -> ChatService:
    service = getattr(request.app.state, "chat_service", None)
    if service is None:
        raise RuntimeError("Chat service not initialized")
    return service
