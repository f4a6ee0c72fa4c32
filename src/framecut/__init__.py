"""framecut：关键帧抽取与关键帧感知的片段导出。"""

__version__ = "0.1.0"
