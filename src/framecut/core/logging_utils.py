"""日志工具：CLI 与服务入口共用同一格式，并压低第三方库的噪声。"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# python-multipart 在 DEBUG 下逐块打印表单解析过程
NOISY_LOGGERS = ("multipart", "python_multipart")


def _level_of(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logging(level: str = "INFO", *, quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    """设置全局日志级别，默认 INFO；`quiet` 中的 logger 不低于 WARNING。"""

    resolved = _level_of(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("framecut").setLevel(resolved)
    for name in quiet:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))


def uvicorn_log_level(level: str) -> str:
    """将 CLI 的日志级别转换为 uvicorn 接受的小写名称。"""

    name = logging.getLevelName(_level_of(level))
    return name.lower() if isinstance(name, str) else "info"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """获取模块专属 logger。"""

    return logging.getLogger(name or "framecut")
