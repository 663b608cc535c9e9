from fastapi import APIRouter

from taskhub.schemas import MessageResponse

router = APIRouter(prefix="/api/v1", tags=["Health"])


@router.get("/", response_model=MessageResponse)
async def read_root():
    """API health check endpoint."""
    return MessageResponse(msg="Task manager API is running")
