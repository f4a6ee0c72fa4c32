"""Video upload endpoint."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, File, HTTPException, UploadFile

from ..uploads import save_upload

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload")
def upload_video(video: UploadFile = File(...)) -> Dict[str, Any]:
    """Receive one uploaded video and store it under a fresh id."""

    if not video.filename:
        raise HTTPException(status_code=400, detail="No video file provided")
    try:
        return save_upload(video.file, video.filename)
    finally:
        video.file.close()


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}
