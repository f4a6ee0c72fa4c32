"""抽帧策略：把 (视频时长, 参数) 映射为有序的目标时间戳序列。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol


class SamplingPolicy(Protocol):
    """策略接口：纯函数，同样输入永远得到同样输出。"""

    id_prefix: str

    def timestamps(self, duration: float) -> List[float]:
        """返回按抓取顺序排列的目标时间戳。"""


def _check_count(count: int) -> None:
    if count < 1:
        raise ValueError("count must be >= 1")


@dataclass(frozen=True, slots=True)
class UniformSpread:
    """在整段时长上等距取 count 个点，从 0 开始，不会取到 duration 本身。"""

    count: int = 20
    id_prefix: str = "frame"

    def timestamps(self, duration: float) -> List[float]:
        _check_count(self.count)
        interval = max(0.0, duration) / self.count
        return [idx * interval for idx in range(self.count)]


@dataclass(frozen=True, slots=True)
class LocalWindow:
    """以 center 为中心、step 为间隔取 count 个点，逐个夹到 [0, duration]。

    边界处夹取可能产生重复时间戳，保留不去重。
    """

    center: float
    count: int = 5
    step: float = 0.5
    id_prefix: str = "nearby"

    def timestamps(self, duration: float) -> List[float]:
        _check_count(self.count)
        if self.step <= 0:
            raise ValueError("step must be positive")
        offset = self.count // 2
        upper = max(0.0, duration)
        return [
            max(0.0, min(self.center + (idx - offset) * self.step, upper))
            for idx in range(self.count)
        ]
