"""MediaProbe：调用 ffprobe 列出时间窗口内的视频压缩包（时间戳 + 关键帧标记）。"""

from __future__ import annotations

from typing import Callable, Iterable, List, Sequence

from framecut.core.config import ProbeConfig
from framecut.core.datamodels import Packet, SourceVideo
from framecut.core.errors import ProbeUnavailable
from framecut.core.logging_utils import get_logger

from .process import ExitResult, ProcessHandle

logger = get_logger(__name__)

KEYFRAME_FLAG = "K"

Runner = Callable[[Sequence[str]], ExitResult]


def _default_runner(args: Sequence[str]) -> ExitResult:
    return ProcessHandle(args).run()


def parse_packet_report(lines: Iterable[str]) -> List[Packet]:
    """解析 `pts_time,flags` 行格式；缺字段或时间戳非法的行直接跳过。"""

    packets: List[Packet] = []
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        parts = line.split(",")
        if len(parts) < 2:
            continue
        try:
            pts_time = float(parts[0])
        except ValueError:
            continue
        if pts_time != pts_time:  # NaN
            continue
        packets.append(Packet(pts_time=pts_time, is_keyframe=KEYFRAME_FLAG in parts[1]))
    return packets


class MediaProbe:
    """ffprobe 封装；任何失败都只返回空列表，绝不抛出。"""

    def __init__(self, config: ProbeConfig | None = None, *, runner: Runner | None = None) -> None:
        self.config = config or ProbeConfig()
        self._runner = runner or _default_runner

    def build_args(self, video: SourceVideo, timestamp: float, window: float) -> List[str]:
        lower = max(0.0, timestamp - window)
        upper = timestamp + window
        return [
            self.config.ffprobe_binary,
            "-v",
            "error",
            "-select_streams",
            "v:0",
            "-show_entries",
            "packet=pts_time,flags",
            "-of",
            "csv=print_section=0",
            "-read_intervals",
            f"{lower}%{upper}",
            str(video.path),
        ]

    def packets_near(self, video: SourceVideo, timestamp: float, window: float | None = None) -> List[Packet]:
        """返回 [max(0, t-window), t+window] 内的压缩包，按报告顺序。"""

        span = self.config.window_seconds if window is None else window
        result = self._runner(self.build_args(video, timestamp, span))
        if not result.ok:
            error = ProbeUnavailable(
                f"ffprobe 探测失败 (video={video.video_id}, t={timestamp:.3f}, code={result.returncode}): "
                f"{result.diagnostics().strip()}"
            )
            logger.warning("%s", error)
            return []
        return parse_packet_report(result.stdout.splitlines())
