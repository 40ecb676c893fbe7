from fastapi import APIRouter, Depends

from collabhub.api.deps import get_hub
from collabhub.core.hub import Hub

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(hub: Hub = Depends(get_hub)):
    return {
        "status": "ok",
        "connections": len(hub.registry),
        "pending_events": hub.dispatcher.pending
    }
