"""单片段导出：按两端关键帧对齐情况选择 stream-copy 或重编码。"""

from __future__ import annotations

from pathlib import Path
import tempfile
from typing import Optional

from framecut.core.datamodels import ClipArtifact, ExportMethod, SourceVideo, TimeRange
from framecut.core.errors import SourceUnavailable, TranscodeFailure
from framecut.core.logging_utils import get_logger
from framecut.media.keyframes import KeyframeAligner
from framecut.media.transcoder import FfmpegTranscoder, Transcoder

logger = get_logger(__name__)


class ClipExporter:
    """导出器：负责把一个 (start, end) 区间物化为完整片段字节。

    临时输出文件的生命周期严格限定在一次 `export` 调用内，成功与失败路径都会删除。
    """

    def __init__(
        self,
        aligner: KeyframeAligner | None = None,
        transcoder: Transcoder | None = None,
        *,
        temp_root: Optional[Path] = None,
    ) -> None:
        self.aligner = aligner or KeyframeAligner()
        self.transcoder = transcoder or FfmpegTranscoder()
        self.temp_root = temp_root

    def choose_method(self, video: SourceVideo, time_range: TimeRange) -> ExportMethod:
        """两端都对齐关键帧才允许拷贝流，否则必须重编码。"""

        start_aligned = self.aligner.is_aligned(video, time_range.start)
        end_aligned = self.aligner.is_aligned(video, time_range.end)
        if start_aligned and end_aligned:
            return ExportMethod.STREAM_COPY
        return ExportMethod.RE_ENCODE

    def export(
        self,
        video: SourceVideo,
        time_range: TimeRange,
        output_format: str = "mp4",
        *,
        index: int = 0,
    ) -> ClipArtifact:
        if not video.path.is_file():
            raise SourceUnavailable(f"源视频文件不存在: {video.path}")

        method = self.choose_method(video, time_range)
        logger.info(
            "导出片段 %d: %.3fs - %.3fs (%s)",
            index + 1,
            time_range.start,
            time_range.end,
            "stream copy" if method is ExportMethod.STREAM_COPY else "re-encoding",
        )

        if self.temp_root is not None:
            self.temp_root.mkdir(parents=True, exist_ok=True)
        suffix = output_format.lstrip(".") or "mp4"
        with tempfile.TemporaryDirectory(
            prefix=f"framecut_{video.video_id}_", dir=str(self.temp_root) if self.temp_root else None
        ) as tmpdir:
            output_path = Path(tmpdir) / f"{video.video_id}-clip-{index + 1}.{suffix}"
            try:
                self.transcoder.transcode(video.path, time_range, method, output_path)
            except TranscodeFailure as exc:
                exc.index = index
                raise
            if not output_path.is_file():
                raise TranscodeFailure(f"ffmpeg 未生成输出文件: {output_path.name}", index=index)
            payload = output_path.read_bytes()

        return ClipArtifact(
            index=index,
            range=time_range,
            method=method,
            byte_size=len(payload),
            payload=payload,
        )
