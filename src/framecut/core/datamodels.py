"""核心数据结构定义，覆盖源视频、时间区间、导出片段与抽帧结果。"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .errors import InvalidRange


@dataclass(frozen=True, slots=True)
class SourceVideo:
    """可解码的源视频句柄：本地路径加时长与像素尺寸，创建后不可变。"""

    video_id: str
    path: Path
    duration: float
    width: int = 0
    height: int = 0

    def clamp(self, timestamp: float) -> float:
        """将时间戳夹到 [0, duration] 内。"""

        return max(0.0, min(float(timestamp), self.duration))


@dataclass(frozen=True, slots=True)
class TimeRange:
    """裁剪区间（秒），不持有源视频所有权。"""

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def validate(self, duration: float, *, index: int | None = None) -> "TimeRange":
        """校验 0 <= start < end <= duration，失败抛出 InvalidRange。"""

        if self.start < 0 or self.start >= self.end or self.end > duration:
            raise InvalidRange(
                f"非法区间 [{self.start}, {self.end}]，视频时长 {duration:.3f}s",
                index=index,
            )
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeRange":
        return cls(start=float(data["start"]), end=float(data["end"]))


@dataclass(frozen=True, slots=True)
class Packet:
    """ffprobe 报告中的一条压缩包记录。"""

    pts_time: float
    is_keyframe: bool


class ExportMethod(str, Enum):
    """片段的导出方式。"""

    STREAM_COPY = "stream-copy"
    RE_ENCODE = "re-encoded"


@dataclass(slots=True)
class ExportJob:
    """一次批量导出请求：同一源视频上的有序区间列表。"""

    source: SourceVideo
    ranges: List[TimeRange] = field(default_factory=list)
    output_format: str = "mp4"


@dataclass(frozen=True, slots=True)
class ClipArtifact:
    """单个已完成片段，payload 为完整文件内容。"""

    index: int
    range: TimeRange
    method: ExportMethod
    byte_size: int
    payload: bytes = field(repr=False)

    @property
    def clip_name(self) -> str:
        return f"clip-{self.index + 1}"

    def to_dict(self, video_id: str) -> Dict[str, Any]:
        """转为 HTTP 响应结构，payload 使用 base64 编码。"""

        return {
            "clipId": f"{video_id}-{self.clip_name}",
            "clipNumber": self.index + 1,
            "startTime": self.range.start,
            "endTime": self.range.end,
            "duration": self.range.duration,
            "size": self.byte_size,
            "data": base64.b64encode(self.payload).decode("ascii"),
            "method": self.method.value,
        }


@dataclass(frozen=True, slots=True)
class Frame:
    """抽帧结果；ordinal_index 反映抓取顺序，同时也是时间顺序。"""

    id: str
    timestamp: float
    ordinal_index: int
    image: bytes = field(repr=False)

    @property
    def data_url(self) -> str:
        return "data:image/jpeg;base64," + base64.b64encode(self.image).decode("ascii")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "index": self.ordinal_index,
            "dataUrl": self.data_url,
        }


def ranges_from_payload(entries: Sequence[Dict[str, Any]]) -> List[TimeRange]:
    """从 `[{start, end}, ...]` 构建区间列表，保持输入顺序。"""

    return [TimeRange.from_dict(entry) for entry in entries]
