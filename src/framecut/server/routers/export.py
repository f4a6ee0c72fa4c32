"""Batch clip export endpoint."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from framecut.core import BatchExportError, InvalidRange, SourceUnavailable, get_logger, ranges_from_payload
from framecut.export import ExportBatchOrchestrator

from ..state import get_orchestrator
from ..uploads import load_source_video

router = APIRouter(prefix="/api", tags=["export"])
logger = get_logger(__name__)


class ClipRange(BaseModel):
    start: float
    end: float


class ExportRequest(BaseModel):
    videoId: str = ""
    clips: List[ClipRange] = Field(default_factory=list)
    format: str = "mp4"


def _error(status_code: int, error: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


@router.post("/export", response_model=None)
def export_clips(
    request: ExportRequest,
    orchestrator: ExportBatchOrchestrator = Depends(get_orchestrator),
) -> Any:
    if not request.videoId or not request.clips:
        return _error(400, "Invalid request parameters")
    if not request.format.isalnum():
        return _error(400, "Invalid output format")

    try:
        source = load_source_video(request.videoId)
    except SourceUnavailable as exc:
        return _error(404, "Video file not found", details=str(exc))

    ranges = ranges_from_payload([clip.model_dump() for clip in request.clips])
    try:
        artifacts = orchestrator.export_batch(source, ranges, request.format)
    except InvalidRange as exc:
        return _error(400, "Invalid clip range", details=str(exc), failedIndex=exc.index)
    except BatchExportError as exc:
        logger.error("Export error for %s: %s", request.videoId, exc)
        if isinstance(exc.cause, SourceUnavailable):
            return _error(404, "Video file not found", details=str(exc.cause), failedIndex=exc.index)
        return _error(500, "Failed to export clips", details=str(exc.cause), failedIndex=exc.index)

    payload: Dict[str, Any] = {
        "success": True,
        "videoId": request.videoId,
        "clips": [artifact.to_dict(request.videoId) for artifact in artifacts],
    }
    return payload
