from fastapi import APIRouter, Depends

from app.infrastructure.notifications import ConnectionRegistry
from app.interfaces.api.dependencies import get_connection_registry

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/notifications")
async def notifications_health(
    registry: ConnectionRegistry = Depends(get_connection_registry),
) -> dict[str, int]:
    return {"live_connections": len(registry)}
