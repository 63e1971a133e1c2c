import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from typing import List, Optional

from timekeeper.errors import InputError, TimerNotFoundError
from timekeeper.models import CreateTimerResult, Preset, SequencePreview, TimerActionResult, TimerListResult, TimerView
from timekeeper.services.timer import TimerController
from timekeeper.services.timer.timer_controller import NOT_FOUND

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["timers"])


def get_controller(request: Request) -> TimerController:
    """Controller created by the app lifespan"""
    return request.app.state.controller


# Request/Response models
class CreateTimerRequest(BaseModel):
    pattern: str
    message: Optional[str] = ""
    repeat: int = Field(1, description="Runs for a simple timer; values below 1 count as 1")


class PreviewRequest(BaseModel):
    pattern: str


class PresetListResponse(BaseModel):
    presets: List[Preset]
    count: int


def _raise_for_action(result: TimerActionResult) -> TimerActionResult:
    if result.success:
        return result
    if result.error == NOT_FOUND:
        raise HTTPException(status_code=404, detail=result.message)
    raise HTTPException(status_code=409, detail=result.message)


@router.get("/timers", response_model=TimerListResult)
async def list_timers(include_all: bool = False, controller: TimerController = Depends(get_controller)):
    """List timers (completed ones only with include_all), reconciling first"""
    return controller.list_timers(include_all=include_all)


@router.get("/timers/{timer_id}", response_model=TimerView)
async def get_timer(timer_id: str, controller: TimerController = Depends(get_controller)):
    """Get a single timer with its progress"""
    try:
        return controller.get_timer(timer_id)
    except TimerNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/timers", response_model=CreateTimerResult)
async def create_timer(request: CreateTimerRequest, controller: TimerController = Depends(get_controller)):
    """Start a timer from a duration, sequence pattern or preset name"""
    result = controller.create(request.pattern, message=request.message or "", repeat=request.repeat)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)
    return result


@router.post("/timers/{target}/pause", response_model=TimerActionResult)
async def pause_timer(target: str, controller: TimerController = Depends(get_controller)):
    """Pause a timer by id, or every running timer with "all" """
    return _raise_for_action(controller.pause(target))


@router.post("/timers/{target}/resume", response_model=TimerActionResult)
async def resume_timer(target: str, controller: TimerController = Depends(get_controller)):
    """Resume a paused or lost timer by id, or all of them with "all" """
    return _raise_for_action(controller.resume(target))


@router.delete("/timers/{target}", response_model=TimerActionResult)
async def remove_timer(target: str, controller: TimerController = Depends(get_controller)):
    """Remove a timer by id, "all" timers, or the completed ones with "done" """
    return _raise_for_action(controller.remove(target))


@router.get("/presets", response_model=PresetListResponse)
async def list_presets(controller: TimerController = Depends(get_controller)):
    presets = controller.list_presets()
    return {"presets": presets, "count": len(presets)}


@router.post("/sequences/preview", response_model=SequencePreview)
async def preview_sequence(request: PreviewRequest, controller: TimerController = Depends(get_controller)):
    """Expand a pattern or preset without starting a timer"""
    try:
        return controller.preview(request.pattern)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
