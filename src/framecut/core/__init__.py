"""核心模块入口，聚合数据模型、异常与配置加载工具供各模块复用。"""

from .datamodels import (
    ClipArtifact,
    ExportJob,
    ExportMethod,
    Frame,
    Packet,
    SourceVideo,
    TimeRange,
    ranges_from_payload,
)
from .config import FramecutConfig, load_config
from .errors import (
    BatchExportError,
    DecodeFailure,
    FramecutError,
    InvalidRange,
    ProbeUnavailable,
    SourceUnavailable,
    TranscodeFailure,
)
from .logging_utils import get_logger, setup_logging, uvicorn_log_level
from .paths import resolve_workspace_root
from .source import open_source_video

__all__ = [
    "ClipArtifact",
    "ExportJob",
    "ExportMethod",
    "Frame",
    "Packet",
    "SourceVideo",
    "TimeRange",
    "ranges_from_payload",
    "FramecutConfig",
    "load_config",
    "BatchExportError",
    "DecodeFailure",
    "FramecutError",
    "InvalidRange",
    "ProbeUnavailable",
    "SourceUnavailable",
    "TranscodeFailure",
    "get_logger",
    "setup_logging",
    "uvicorn_log_level",
    "resolve_workspace_root",
    "open_source_video",
]
