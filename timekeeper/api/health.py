"""Health check endpoints"""

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/")
async def health_check(request: Request):
    """Basic health check endpoint"""
    controller = request.app.state.controller
    return {
        "status": "healthy",
        "service": "timekeeper",
        "state_file": str(controller.store.path),
    }
