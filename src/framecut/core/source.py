"""打开源视频：用 OpenCV 读取时长与尺寸，构造 SourceVideo。"""

from __future__ import annotations

from pathlib import Path

import cv2

from .datamodels import SourceVideo
from .errors import SourceUnavailable


def open_source_video(video_path: str | Path, video_id: str | None = None) -> SourceVideo:
    """探测视频元数据；无法打开时抛出 SourceUnavailable。"""

    path = Path(video_path)
    if not path.is_file():
        raise SourceUnavailable(f"源视频文件不存在: {path}")

    capture = cv2.VideoCapture(str(path))
    if not capture.isOpened():
        raise SourceUnavailable(f"无法打开视频: {path}")
    try:
        fps = capture.get(cv2.CAP_PROP_FPS) or 0.0
        frame_count = capture.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0
        width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)
    finally:
        capture.release()

    duration = float(frame_count / fps) if fps > 0 else 0.0
    if duration <= 0:
        raise SourceUnavailable(f"无法确定视频时长: {path}")
    return SourceVideo(
        video_id=video_id or path.stem,
        path=path,
        duration=duration,
        width=width,
        height=height,
    )
