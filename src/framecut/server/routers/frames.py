"""Frame sampling endpoints: uniform spread over the video and a nearby window."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from framecut.core import DecodeFailure, Frame, SourceUnavailable, get_logger
from framecut.sampling import FrameSampler, LocalWindow, SamplingPolicy, UniformSpread

from ..state import get_sampler
from ..uploads import load_source_video

router = APIRouter(prefix="/api", tags=["frames"])
logger = get_logger(__name__)


class UniformRequest(BaseModel):
    videoId: str = Field(..., min_length=1)
    count: int | None = Field(default=None, ge=1, le=500)


class NearbyRequest(BaseModel):
    videoId: str = Field(..., min_length=1)
    center: float = Field(..., ge=0)
    count: int | None = Field(default=None, ge=1, le=100)
    step: float | None = Field(default=None, gt=0)


def _sample(video_id: str, sampler: FrameSampler, policy: SamplingPolicy) -> Any:
    try:
        source = load_source_video(video_id)
    except SourceUnavailable as exc:
        return JSONResponse(status_code=404, content={"error": "Video file not found", "details": str(exc)})
    try:
        frames: List[Frame] = sampler.sample(source, policy)
    except DecodeFailure as exc:
        logger.error("Frame sampling failed for %s: %s", video_id, exc)
        return JSONResponse(
            status_code=422,
            content={"error": "Failed to extract frames", "details": str(exc), "timestamp": exc.timestamp},
        )
    payload: Dict[str, Any] = {
        "videoId": video_id,
        "duration": source.duration,
        "frames": [frame.to_dict() for frame in frames],
    }
    return payload


@router.post("/frames", response_model=None)
def uniform_frames(request: UniformRequest, sampler: FrameSampler = Depends(get_sampler)) -> Any:
    count = request.count or sampler.config.uniform_count
    return _sample(request.videoId, sampler, UniformSpread(count=count))


@router.post("/frames/nearby", response_model=None)
def nearby_frames(request: NearbyRequest, sampler: FrameSampler = Depends(get_sampler)) -> Any:
    policy = LocalWindow(
        center=request.center,
        count=request.count or sampler.config.window_count,
        step=request.step or sampler.config.window_step_seconds,
    )
    return _sample(request.videoId, sampler, policy)
