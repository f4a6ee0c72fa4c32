from __future__ import annotations

# 本模块负责按输入顺序逐个导出同一源视频上的多个区间：
# 1) 先整体校验所有区间，避免导出到一半才发现非法输入；
# 2) 严格串行调用 ClipExporter，转码本身已吃满 CPU/IO；
# 3) 首个失败立即中止，不返回部分结果，并记录失败下标。

from typing import List, Sequence

from framecut.core.datamodels import ClipArtifact, ExportJob, SourceVideo, TimeRange
from framecut.core.errors import BatchExportError, SourceUnavailable, TranscodeFailure
from framecut.core.logging_utils import get_logger

from .clip_exporter import ClipExporter

logger = get_logger(__name__)


class ExportBatchOrchestrator:
    """批量导出编排器，单个任务内不做并发。"""

    def __init__(self, exporter: ClipExporter | None = None) -> None:
        self.exporter = exporter or ClipExporter()

    def export_batch(
        self,
        video: SourceVideo,
        ranges: Sequence[TimeRange],
        output_format: str = "mp4",
    ) -> List[ClipArtifact]:
        """返回与输入同序的片段列表；任一片段转码失败或源文件中途消失，抛出 BatchExportError。"""

        for idx, time_range in enumerate(ranges):
            time_range.validate(video.duration, index=idx)

        artifacts: List[ClipArtifact] = []
        for idx, time_range in enumerate(ranges):
            try:
                artifact = self.exporter.export(video, time_range, output_format, index=idx)
            except (TranscodeFailure, SourceUnavailable) as exc:
                logger.error("片段 %d 导出失败，中止剩余 %d 个片段", idx + 1, len(ranges) - idx - 1)
                raise BatchExportError(idx, exc) from exc
            artifacts.append(artifact)
        logger.info("视频 %s 导出完成，共 %d 个片段", video.video_id, len(artifacts))
        return artifacts

    def run(self, job: ExportJob) -> List[ClipArtifact]:
        return self.export_batch(job.source, job.ranges, job.output_format)
