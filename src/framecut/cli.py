"""framecut Typer CLI，便于在命令行触发关键帧探测、抽帧与片段导出。"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List, Optional

import typer
import uvicorn

from framecut.core import (
    BatchExportError,
    DecodeFailure,
    FramecutConfig,
    InvalidRange,
    SourceUnavailable,
    TimeRange,
    load_config,
    open_source_video,
    setup_logging,
    uvicorn_log_level,
)
from framecut.core.config import CONFIG_ENV_KEY
from framecut.export import ClipExporter, ExportBatchOrchestrator
from framecut.media import FfmpegTranscoder, KeyframeAligner, MediaProbe
from framecut.sampling import FrameSampler, LocalWindow, UniformSpread

app = typer.Typer(help="framecut 开发 CLI")


@app.callback()
def main() -> None:
    """framecut 顶层 CLI，占位以展示子命令列表。"""

    return None


def _resolve_config(config_path: Optional[Path]) -> FramecutConfig:
    return load_config(config_path) if config_path else load_config()


def _parse_range(text: str) -> TimeRange:
    start, sep, end = text.partition(":")
    if not sep:
        raise typer.BadParameter(f"区间格式应为 START:END，收到 {text!r}", param_name="range")
    try:
        return TimeRange(start=float(start), end=float(end))
    except ValueError as exc:
        raise typer.BadParameter(f"无法解析区间 {text!r}", param_name="range") from exc


def _open_or_exit(video: Path):
    try:
        return open_source_video(video)
    except SourceUnavailable as exc:
        typer.echo(f"无法打开视频：{exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command("probe-keyframes")
def probe_keyframes_cmd(
    video: Path = typer.Argument(..., exists=True, resolve_path=True, help="源视频路径"),
    timestamp: float = typer.Argument(..., min=0, help="待检查的时间点（秒）"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="自定义配置文件"),
    log_level: str = typer.Option("INFO", "--log-level", help="日志级别"),
) -> None:
    """列出时间点附近的压缩包，并判断是否对齐关键帧。"""

    setup_logging(log_level)
    cfg = _resolve_config(config_path)
    source = _open_or_exit(video)
    probe = MediaProbe(cfg.probe)
    packets = probe.packets_near(source, timestamp)
    for packet in packets:
        marker = "K" if packet.is_keyframe else "_"
        typer.echo(f"{packet.pts_time:.3f} {marker}")
    aligned = KeyframeAligner(probe, cfg.probe).is_aligned(source, timestamp)
    typer.echo(f"aligned={str(aligned).lower()} packets={len(packets)}")


@app.command("sample-frames")
def sample_frames_cmd(
    video: Path = typer.Argument(..., exists=True, resolve_path=True, help="源视频路径"),
    output_dir: Path = typer.Option(Path("output/frames"), "--output-dir", "-o", help="JPEG 与清单输出目录"),
    count: Optional[int] = typer.Option(None, "--count", "-n", min=1, help="抽帧数量"),
    center: Optional[float] = typer.Option(None, "--center", min=0, help="指定后改为中心窗口抽帧"),
    step: Optional[float] = typer.Option(None, "--step", help="中心窗口的帧间隔（秒）"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="自定义配置文件"),
    log_level: str = typer.Option("INFO", "--log-level", help="日志级别"),
) -> None:
    """按等距或中心窗口策略抽帧，输出 JPEG 与 frames.json。"""

    setup_logging(log_level)
    cfg = _resolve_config(config_path)
    source = _open_or_exit(video)
    sampling = cfg.sampling
    if center is None:
        policy = UniformSpread(count=count or sampling.uniform_count)
    else:
        policy = LocalWindow(
            center=center,
            count=count or sampling.window_count,
            step=step or sampling.window_step_seconds,
        )

    try:
        frames = FrameSampler(sampling).sample(source, policy)
    except DecodeFailure as exc:
        typer.echo(f"抽帧失败：{exc}", err=True)
        raise typer.Exit(code=1) from exc

    output_dir.mkdir(parents=True, exist_ok=True)
    manifest = []
    for frame in frames:
        image_path = output_dir / f"{frame.id}.jpg"
        image_path.write_bytes(frame.image)
        manifest.append({"id": frame.id, "index": frame.ordinal_index, "timestamp": frame.timestamp, "file": image_path.name})
    (output_dir / "frames.json").write_text(json.dumps(manifest, ensure_ascii=False, indent=2), encoding="utf-8")
    typer.echo(f"抽取 {len(frames)} 帧，输出到 {output_dir}")


@app.command("export-clips")
def export_clips_cmd(
    video: Path = typer.Argument(..., exists=True, resolve_path=True, help="源视频路径"),
    ranges: List[str] = typer.Option(..., "--range", "-r", help="裁剪区间 START:END（秒），可重复"),
    output_format: Optional[str] = typer.Option(None, "--format", help="输出容器格式，默认读取配置"),
    output_dir: Path = typer.Option(Path("output/clips"), "--output-dir", "-o", help="片段输出目录"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="自定义配置文件"),
    log_level: str = typer.Option("INFO", "--log-level", help="日志级别"),
) -> None:
    """按顺序导出多个区间；任一片段失败即中止并返回非零退出码。"""

    setup_logging(log_level)
    cfg = _resolve_config(config_path)
    time_ranges = [_parse_range(text) for text in ranges]
    source = _open_or_exit(video)
    fmt = (output_format or cfg.export.default_format).lstrip(".")

    aligner = KeyframeAligner(MediaProbe(cfg.probe), cfg.probe)
    exporter = ClipExporter(aligner, FfmpegTranscoder(cfg.export))
    orchestrator = ExportBatchOrchestrator(exporter)
    try:
        artifacts = orchestrator.export_batch(source, time_ranges, fmt)
    except InvalidRange as exc:
        typer.echo(f"区间非法：{exc}", err=True)
        raise typer.Exit(code=2) from exc
    except BatchExportError as exc:
        typer.echo(f"导出失败（片段 {exc.index + 1}）：{exc.cause}", err=True)
        raise typer.Exit(code=1) from exc

    output_dir.mkdir(parents=True, exist_ok=True)
    for artifact in artifacts:
        target = output_dir / f"{source.video_id}-{artifact.clip_name}.{fmt}"
        target.write_bytes(artifact.payload)
        typer.echo(
            f" - {target.name}: {artifact.range.start:.3f}-{artifact.range.end:.3f}s "
            f"{artifact.method.value} {artifact.byte_size} bytes"
        )
    typer.echo(f"导出完成：{len(artifacts)} 个片段 -> {output_dir}")


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", "--host", help="监听地址"),
    port: int = typer.Option(8000, "--port", min=1, max=65535, help="监听端口"),
    reload: bool = typer.Option(False, "--reload", help="开发模式下自动重载"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="自定义配置文件"),
    log_level: str = typer.Option("INFO", "--log-level", help="日志级别"),
) -> None:
    """启动 HTTP 服务（上传、抽帧、导出接口）。"""

    setup_logging(log_level)
    if config_path:
        # 服务端按需加载配置，经环境变量传递给 worker 进程
        os.environ[CONFIG_ENV_KEY] = str(config_path.expanduser().resolve())
    uvicorn.run(
        "framecut.server.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=uvicorn_log_level(log_level),
    )


if __name__ == "__main__":  # pragma: no cover
    app()
