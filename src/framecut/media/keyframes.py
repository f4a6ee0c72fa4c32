"""KeyframeAligner：判断某个时间点附近是否存在关键帧。"""

from __future__ import annotations

from framecut.core.config import ProbeConfig
from framecut.core.datamodels import SourceVideo

from .probe import MediaProbe


class KeyframeAligner:
    """无状态判定，完全依赖 MediaProbe 的输出。

    探测无数据时视为“无法确认对齐”，调用方会退回重编码。
    """

    def __init__(self, probe: MediaProbe | None = None, config: ProbeConfig | None = None) -> None:
        self.config = config or ProbeConfig()
        self.probe = probe or MediaProbe(self.config)

    def is_aligned(self, video: SourceVideo, timestamp: float) -> bool:
        packets = self.probe.packets_near(video, timestamp, self.config.window_seconds)
        tolerance = self.config.tolerance_seconds
        # 容差内任意一个关键帧即可，不区分先后
        return any(
            packet.is_keyframe and abs(packet.pts_time - timestamp) < tolerance
            for packet in packets
        )
