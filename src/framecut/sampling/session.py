"""解码会话：包装 OpenCV VideoCapture，只有一个游标，不可跨调用方共享。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np
from numpy.typing import NDArray

from framecut.core.errors import DecodeFailure

# 帧数元数据可能多报几帧，读到流尾时最多回退这么多帧重试
EOF_BACKOFF_FRAMES = 3


class DecodeSession:
    """一次抽帧调用独占的解码会话。

    `seek` 与 `capture` 必须成对、串行调用：先定位，再读出当前位置的画面。
    定位目标会被夹到最后一帧的时间，`duration` 本身没有可解码的画面。
    """

    def __init__(self, video_path: str | Path) -> None:
        self.video_path = Path(video_path)
        self._capture: Optional[cv2.VideoCapture] = None
        self._fps: float = 0.0
        self._frame_count: int = 0

    def open(self) -> "DecodeSession":
        capture = cv2.VideoCapture(str(self.video_path))
        if not capture.isOpened():
            capture.release()
            raise DecodeFailure(f"无法打开视频: {self.video_path}")
        self._capture = capture
        self._fps = float(capture.get(cv2.CAP_PROP_FPS) or 0.0)
        self._frame_count = int(capture.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        return self

    def close(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None

    def __enter__(self) -> "DecodeSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def last_frame_time(self) -> Optional[float]:
        """最后一帧的起始时间（秒）；元数据缺失时为 None。"""

        if self._fps <= 0 or self._frame_count <= 0:
            return None
        return (self._frame_count - 1) / self._fps

    def _require_capture(self) -> cv2.VideoCapture:
        if self._capture is None:
            raise DecodeFailure("解码会话未打开")
        return self._capture

    def seek(self, timestamp: float) -> None:
        capture = self._require_capture()
        target = max(0.0, float(timestamp))
        last = self.last_frame_time
        if last is not None:
            target = min(target, last)
        if not capture.set(cv2.CAP_PROP_POS_MSEC, target * 1000.0):
            raise DecodeFailure(f"定位失败: t={timestamp:.3f}s", timestamp=timestamp)

    def _read_near_end(self, capture: cv2.VideoCapture) -> Tuple[bool, Optional[NDArray[np.uint8]]]:
        for back in range(1, EOF_BACKOFF_FRAMES + 1):
            index = self._frame_count - back
            if index < 0:
                break
            capture.set(cv2.CAP_PROP_POS_FRAMES, index)
            success, frame = capture.read()
            if success and frame is not None:
                return success, frame
        return False, None

    def read_frame(self, timestamp: float) -> Tuple[float, NDArray[np.uint8]]:
        """读出当前位置的画面，返回 (实际解码时间, 像素)。"""

        capture = self._require_capture()
        success, frame = capture.read()
        if (not success or frame is None) and self._frame_count > 0:
            success, frame = self._read_near_end(capture)
        if not success or frame is None:
            raise DecodeFailure(f"解码失败: t={timestamp:.3f}s", timestamp=timestamp)
        # 读出后 POS_MSEC 即为刚解码画面的时间戳
        actual_ms = capture.get(cv2.CAP_PROP_POS_MSEC)
        actual = float(actual_ms) / 1000.0 if actual_ms and actual_ms > 0 else float(timestamp)
        return actual, frame

    def capture_jpeg(self, timestamp: float, quality: int) -> Tuple[float, bytes]:
        """seek 完成后抓取当前画面并编码为 JPEG。"""

        actual, frame = self.read_frame(timestamp)
        ok, buffer = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
        if not ok:
            raise DecodeFailure(f"JPEG 编码失败: t={timestamp:.3f}s", timestamp=timestamp)
        return actual, buffer.tobytes()
