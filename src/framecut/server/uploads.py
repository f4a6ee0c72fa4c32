"""Upload storage: persist raw video bytes under a unique id and reopen them."""

from __future__ import annotations

import secrets
import shutil
import string
import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional

from framecut.core import SourceVideo, SourceUnavailable, open_source_video

from . import workspace

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_video_id() -> str:
    """Return an id of the form ``video-{epoch_ms}-{random}``."""

    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"video-{int(time.time() * 1000)}-{suffix}"


def _safe_suffix(filename: str | None) -> str:
    suffix = Path(filename or "").suffix.lower()
    if not suffix or len(suffix) > 6 or not suffix[1:].isalnum():
        return ".mp4"
    return suffix


def save_upload(source: BinaryIO, filename: str | None) -> Dict[str, Any]:
    """Copy an uploaded stream into the uploads directory."""

    workspace.ensure_workspace_layout()
    video_id = new_video_id()
    destination = workspace.uploads_dir() / f"{video_id}{_safe_suffix(filename)}"
    with destination.open("wb") as handle:
        shutil.copyfileobj(source, handle)
    return {
        "videoId": video_id,
        "filename": Path(filename or destination.name).name,
        "size": destination.stat().st_size,
        "message": "Video uploaded successfully",
    }


def resolve_upload_path(video_id: str) -> Optional[Path]:
    directory = workspace.uploads_dir()
    if not directory.exists():
        return None
    for path in directory.iterdir():
        if path.is_file() and path.stem == video_id:
            return path
    return None


def load_source_video(video_id: str) -> SourceVideo:
    """Open a stored upload; raises SourceUnavailable when it is missing or unreadable."""

    path = resolve_upload_path(video_id)
    if path is None:
        raise SourceUnavailable(f"video not found: {video_id}")
    return open_source_video(path, video_id=video_id)
