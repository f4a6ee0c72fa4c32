"""Shared runtime state for the server."""

from __future__ import annotations

from framecut.export import ClipExporter, ExportBatchOrchestrator
from framecut.media import FfmpegTranscoder, KeyframeAligner, MediaProbe
from framecut.sampling import FrameSampler

from .workspace import get_config, tmp_dir

__all__ = ["get_config", "get_orchestrator", "get_sampler"]


def get_orchestrator() -> ExportBatchOrchestrator:
    """Build a fresh orchestrator per request; jobs share no mutable state."""

    config = get_config()
    aligner = KeyframeAligner(MediaProbe(config.probe), config.probe)
    exporter = ClipExporter(aligner, FfmpegTranscoder(config.export), temp_root=tmp_dir())
    return ExportBatchOrchestrator(exporter)


def get_sampler() -> FrameSampler:
    return FrameSampler(get_config().sampling)
