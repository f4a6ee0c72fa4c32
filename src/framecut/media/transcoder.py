from __future__ import annotations

# 本模块负责用 ffmpeg-python 构建裁剪命令并执行：
# 1) stream-copy：两端均落在关键帧上，直接拷贝音视频流，不重编码；
# 2) re-encode：任一端未对齐，按固定高画质参数重编码以保证帧精确；
# 两种模式均统一负时间戳（make_zero），执行交给 ProcessHandle 以获得退出码与 stderr。

from pathlib import Path
from typing import Callable, List, Protocol, Sequence

import ffmpeg

from framecut.core.config import ExportConfig
from framecut.core.datamodels import ExportMethod, TimeRange
from framecut.core.errors import TranscodeFailure
from framecut.core.logging_utils import get_logger

from .process import ExitResult, ProcessHandle

logger = get_logger(__name__)

Runner = Callable[[Sequence[str]], ExitResult]


def _default_runner(args: Sequence[str]) -> ExitResult:
    return ProcessHandle(args).run()


class Transcoder(Protocol):
    """转码接口，测试中可注入记录模式的桩实现。"""

    def transcode(
        self,
        source_path: Path,
        time_range: TimeRange,
        method: ExportMethod,
        output_path: Path,
    ) -> None:
        """生成 [start, end] 片段到 output_path，失败抛出 TranscodeFailure。"""


class FfmpegTranscoder:
    """基于 ffmpeg 命令行的转码实现。"""

    def __init__(self, config: ExportConfig | None = None, *, runner: Runner | None = None) -> None:
        self.config = config or ExportConfig()
        self._runner = runner or _default_runner

    def build_args(
        self,
        source_path: Path,
        time_range: TimeRange,
        method: ExportMethod,
        output_path: Path,
    ) -> List[str]:
        """编译 ffmpeg 参数列表；-ss/-to 作用在输出侧，与输入时间轴对齐。"""

        stream = ffmpeg.input(str(source_path))
        if method is ExportMethod.STREAM_COPY:
            stream = stream.output(
                str(output_path),
                ss=time_range.start,
                to=time_range.end,
                c="copy",
                avoid_negative_ts="make_zero",
            )
        else:
            cfg = self.config
            stream = stream.output(
                str(output_path),
                ss=time_range.start,
                to=time_range.end,
                vcodec=cfg.video_codec,
                preset=cfg.preset,
                crf=cfg.crf,
                acodec=cfg.audio_codec,
                audio_bitrate=cfg.audio_bitrate,
                movflags="+faststart",
                avoid_negative_ts="make_zero",
            )
        return ffmpeg.compile(stream, cmd=self.config.ffmpeg_binary, overwrite_output=True)

    def transcode(
        self,
        source_path: Path,
        time_range: TimeRange,
        method: ExportMethod,
        output_path: Path,
    ) -> None:
        args = self.build_args(source_path, time_range, method, output_path)
        result = self._runner(args)
        if result.ok:
            return
        if result.spawn_error:
            raise TranscodeFailure(
                f"ffmpeg 无法启动 ({time_range.start}-{time_range.end})",
                stderr=result.spawn_error,
            )
        raise TranscodeFailure(
            f"ffmpeg 退出码 {result.returncode} ({time_range.start}-{time_range.end}, {method.value})",
            exit_code=result.returncode,
            stderr=result.stderr,
        )
