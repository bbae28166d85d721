from fastapi import APIRouter, Request

from cap_manager.server._schemas import MessageResponse

router = APIRouter(prefix="", tags=["session"])


@router.post("/ping")
async def post_ping(request: Request) -> MessageResponse:
    """Keep the server alive; the web UI calls this periodically."""
    session = request.app.state.session
    if session is not None:
        session.ping()
    return MessageResponse(message="pong")
