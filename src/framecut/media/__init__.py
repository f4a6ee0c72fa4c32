"""外部媒体能力封装：进程句柄、ffprobe 探测、关键帧判定与 ffmpeg 转码。"""

from .keyframes import KeyframeAligner
from .probe import MediaProbe, parse_packet_report
from .process import ExitResult, ProcessHandle
from .transcoder import FfmpegTranscoder, Transcoder

__all__ = [
    "KeyframeAligner",
    "MediaProbe",
    "parse_packet_report",
    "ExitResult",
    "ProcessHandle",
    "FfmpegTranscoder",
    "Transcoder",
]
