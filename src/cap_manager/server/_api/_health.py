from fastapi import APIRouter

from cap_manager.server._schemas import MessageResponse

router = APIRouter(prefix="", tags=["health"])


@router.get("/health")
async def get_health() -> MessageResponse:
    return MessageResponse(message="Server is healthy")
