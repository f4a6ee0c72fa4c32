"""路径工具：集中处理工作目录，上传文件与临时产物都落在这里。"""

from __future__ import annotations

import os
from pathlib import Path


WORKSPACE_ENV_KEY = "FRAMECUT_WORKSPACE_ROOT"


def resolve_workspace_root(default: Path | None = None) -> Path:
    """根据环境变量或默认值确定工作目录根路径。"""

    env_value = os.getenv(WORKSPACE_ENV_KEY)
    if env_value:
        return Path(env_value).expanduser().resolve()
    if default is not None:
        return default.expanduser().resolve()
    # 默认回退到仓库内的 workspace 目录
    return Path(__file__).resolve().parents[3] / "workspace"
