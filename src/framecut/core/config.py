"""配置加载工具，集中管理探测、导出与抽帧参数。"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, MutableMapping, Sequence, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .paths import WORKSPACE_ENV_KEY, resolve_workspace_root

CONFIG_ENV_KEY = "FRAMECUT_CONFIG_PATH"


class ProbeConfig(BaseModel):
    """关键帧探测参数：扫描窗口与对齐容差（秒）。"""

    ffprobe_binary: str = "ffprobe"
    window_seconds: float = Field(default=2.0, gt=0)
    tolerance_seconds: float = Field(default=0.1, gt=0)


class ExportConfig(BaseModel):
    """导出阶段参数，重编码模式使用近无损画质。"""

    ffmpeg_binary: str = "ffmpeg"
    video_codec: str = "libx264"
    preset: str = "slow"
    crf: int = 18
    audio_codec: str = "aac"
    audio_bitrate: str = "192k"
    default_format: str = "mp4"


class SamplingConfig(BaseModel):
    """抽帧参数，默认值与前端交互保持一致。"""

    uniform_count: int = Field(default=20, ge=1)
    window_count: int = Field(default=5, ge=1)
    window_step_seconds: float = Field(default=0.5, gt=0)
    jpeg_quality: int = Field(default=80, ge=1, le=100)


class FramecutConfig(BaseModel):
    """聚合各阶段配置，并包含共享路径。"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    workspace_root: Path = Field(default_factory=resolve_workspace_root)
    raw: Dict[str, Any] = Field(default_factory=dict, description="原始配置字典，便于调试。")

    def model_post_init(self, __context: Any) -> None:  # type: ignore[override]
        if not self.raw:
            self.raw = self.to_raw_dict()

    def to_raw_dict(self) -> Dict[str, Any]:
        """导出基础 dict，供日志输出使用。"""

        return {
            "probe": self.probe.model_dump(),
            "export": self.export.model_dump(),
            "sampling": self.sampling.model_dump(),
            "workspace_root": str(self.workspace_root),
        }


def _default_config_path() -> Path:
    return Path(__file__).resolve().parents[3] / "configs" / "baseline.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError(f"配置文件 {path} 内容需为字典")
        return data


ENV_OVERRIDE_MAP: Dict[str, Tuple[Sequence[str], Callable[[str], Any]]] = {
    "FRAMECUT_FFMPEG": (("export", "ffmpeg_binary"), str),
    "FRAMECUT_FFPROBE": (("probe", "ffprobe_binary"), str),
    "FRAMECUT_KEYFRAME_TOLERANCE": (("probe", "tolerance_seconds"), float),
    "FRAMECUT_JPEG_QUALITY": (("sampling", "jpeg_quality"), int),
}


def _apply_env_overrides(data: MutableMapping[str, Any], env: Mapping[str, str]) -> None:
    for env_key, (path, caster) in ENV_OVERRIDE_MAP.items():
        if env_key in env:
            _set_nested_value(data, path, caster(env[env_key]))


def _set_nested_value(target: MutableMapping[str, Any], path: Sequence[str], value: Any) -> None:
    cursor: MutableMapping[str, Any] = target
    *parents, last = path
    for key in parents:
        if key not in cursor or not isinstance(cursor[key], MutableMapping):
            cursor[key] = {}
        cursor = cursor[key]  # type: ignore[assignment]
    cursor[last] = value


def load_config(path: str | Path | None = None, *, env: Mapping[str, str] | None = None) -> FramecutConfig:
    """加载配置：优先显式路径，其次环境变量，最后回退默认 baseline。"""

    env_map = env if env is not None else os.environ
    config_path = path or env_map.get(CONFIG_ENV_KEY)
    target_path = Path(config_path).expanduser() if config_path else _default_config_path()
    data = _load_yaml(target_path)
    _apply_env_overrides(data, env_map)

    workspace_override = env_map.get(WORKSPACE_ENV_KEY)
    if workspace_override:
        data["workspace_root"] = str(Path(workspace_override).expanduser().resolve())

    return FramecutConfig.model_validate({**data, "raw": data})
