"""抽帧模块：策略、解码会话与抽帧器。"""

from .policies import LocalWindow, SamplingPolicy, UniformSpread
from .sampler import FrameSampler
from .session import DecodeSession

__all__ = [
    "LocalWindow",
    "SamplingPolicy",
    "UniformSpread",
    "FrameSampler",
    "DecodeSession",
]
