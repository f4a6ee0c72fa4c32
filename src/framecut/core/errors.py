"""异常分类：区分可降级的探测失败与需上抛的转码/解码失败。"""

from __future__ import annotations

from typing import Optional


class FramecutError(RuntimeError):
    """所有领域异常的基类。"""


class SourceUnavailable(FramecutError):
    """源视频无法打开，整个任务随之失败。"""


class ProbeUnavailable(FramecutError):
    """ffprobe 无法运行；调用方降级为“未对齐”，不会抛给用户。"""


class InvalidRange(FramecutError, ValueError):
    """时间区间不满足 0 <= start < end <= duration。"""

    def __init__(self, message: str, *, index: Optional[int] = None) -> None:
        super().__init__(message)
        self.index = index


class TranscodeFailure(FramecutError):
    """ffmpeg 非零退出或无法启动，附带诊断输出。"""

    def __init__(
        self,
        message: str,
        *,
        exit_code: Optional[int] = None,
        stderr: str = "",
        index: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr
        self.index = index

    def __str__(self) -> str:
        text = super().__str__()
        if self.stderr:
            text += f"\nffmpeg stderr 输出:\n{self.stderr.strip()}"
        return text


class DecodeFailure(FramecutError):
    """解码会话无法打开或某次 seek/抓帧失败，整次抽帧作废。"""

    def __init__(self, message: str, *, timestamp: Optional[float] = None) -> None:
        super().__init__(message)
        self.timestamp = timestamp


class BatchExportError(FramecutError):
    """批量导出在某个片段失败后中止，记录失败片段下标。"""

    def __init__(self, index: int, cause: Exception) -> None:
        super().__init__(f"片段 {index + 1} 导出失败: {cause}")
        self.index = index
        self.cause = cause
