"""Workspace paths and initialization helpers.

The root comes from the loaded config (``workspace_root`` in YAML or
``FRAMECUT_WORKSPACE_ROOT``), so every path here is resolved per call.
"""

from __future__ import annotations

import threading
from pathlib import Path

from framecut.core import FramecutConfig, load_config

UPLOADS_DIRNAME = "uploads"
TMP_DIRNAME = "tmp"

_config_lock = threading.Lock()
_config: FramecutConfig | None = None


def get_config() -> FramecutConfig:
    global _config
    with _config_lock:
        if _config is None:
            _config = load_config()
        return _config


def workspace_root() -> Path:
    return get_config().workspace_root


def uploads_dir() -> Path:
    return workspace_root() / UPLOADS_DIRNAME


def tmp_dir() -> Path:
    return workspace_root() / TMP_DIRNAME


def ensure_workspace_layout() -> None:
    """Ensure workspace directories exist."""

    for path in (workspace_root(), uploads_dir(), tmp_dir()):
        path.mkdir(parents=True, exist_ok=True)
