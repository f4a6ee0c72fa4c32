"""FrameSampler：按策略生成时间戳，并在独占的解码会话中逐个定位抓帧。"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List

from framecut.core.config import SamplingConfig
from framecut.core.datamodels import Frame, SourceVideo
from framecut.core.logging_utils import get_logger

from .policies import SamplingPolicy
from .session import DecodeSession

logger = get_logger(__name__)

SessionFactory = Callable[[Path], DecodeSession]


class FrameSampler:
    """抽帧器：同一视频 + 同一策略 + 同一参数，输出序列完全一致。"""

    def __init__(
        self,
        config: SamplingConfig | None = None,
        *,
        session_factory: SessionFactory | None = None,
    ) -> None:
        self.config = config or SamplingConfig()
        self._session_factory = session_factory or DecodeSession

    def plan(self, video: SourceVideo, policy: SamplingPolicy) -> List[float]:
        """只计算目标时间戳，不触发解码，所有值已夹到 [0, duration]。"""

        return [video.clamp(ts) for ts in policy.timestamps(video.duration)]

    def sample(self, video: SourceVideo, policy: SamplingPolicy) -> List[Frame]:
        """按顺序定位并抓帧；任一步失败抛出 DecodeFailure，不返回部分结果。"""

        targets = self.plan(video, policy)
        frames: List[Frame] = []
        with self._session_factory(video.path) as session:
            for ordinal, target in enumerate(targets):
                session.seek(target)
                actual, image = session.capture_jpeg(target, self.config.jpeg_quality)
                frames.append(
                    Frame(
                        id=f"{policy.id_prefix}-{ordinal}",
                        timestamp=video.clamp(actual),
                        ordinal_index=ordinal,
                        image=image,
                    )
                )
        logger.debug("视频 %s 抽帧 %d 张", video.video_id, len(frames))
        return frames

    def capture_at(self, video: SourceVideo, timestamp: float) -> Frame:
        """抓取单个时间点的画面，用作片段缩略图。"""

        target = video.clamp(timestamp)
        with self._session_factory(video.path) as session:
            session.seek(target)
            actual, image = session.capture_jpeg(target, self.config.jpeg_quality)
        return Frame(id="thumb-0", timestamp=video.clamp(actual), ordinal_index=0, image=image)
