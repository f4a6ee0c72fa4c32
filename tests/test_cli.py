"""CLI 行为测试。"""

import json
import os
from pathlib import Path

from typer.testing import CliRunner

from framecut.cli import app
from framecut.core import (
    BatchExportError,
    ClipArtifact,
    ExportMethod,
    Frame,
    FramecutConfig,
    SourceUnavailable,
    SourceVideo,
    TranscodeFailure,
)

runner = CliRunner()


def _fake_open(path, video_id=None):
    return SourceVideo(video_id=video_id or Path(path).stem, path=Path(path), duration=10.0)


def test_sample_frames_cli(monkeypatch, tmp_path):
    video = tmp_path / "demo.mp4"
    video.write_bytes(b"fake")
    output_dir = tmp_path / "frames"
    seen = {}

    class DummySampler:
        def __init__(self, *args, **kwargs):
            pass

        def sample(self, source, policy):
            seen["policy"] = policy
            return [
                Frame(id=f"frame-{idx}", timestamp=ts, ordinal_index=idx, image=b"\xff\xd8jpeg")
                for idx, ts in enumerate(policy.timestamps(source.duration))
            ]

    monkeypatch.setattr("framecut.cli.load_config", lambda *_, **__: FramecutConfig())
    monkeypatch.setattr("framecut.cli.open_source_video", _fake_open)
    monkeypatch.setattr("framecut.cli.FrameSampler", DummySampler)

    result = runner.invoke(app, ["sample-frames", str(video), "--output-dir", str(output_dir), "--count", "5"])

    assert result.exit_code == 0, result.output
    manifest = json.loads((output_dir / "frames.json").read_text())
    assert [item["timestamp"] for item in manifest] == [0.0, 2.0, 4.0, 6.0, 8.0]
    assert (output_dir / "frame-4.jpg").read_bytes() == b"\xff\xd8jpeg"


def test_export_clips_cli(monkeypatch, tmp_path):
    video = tmp_path / "demo.mp4"
    video.write_bytes(b"fake")
    output_dir = tmp_path / "clips"

    class DummyOrchestrator:
        def __init__(self, *args, **kwargs):
            pass

        def export_batch(self, source, ranges, output_format):
            return [
                ClipArtifact(index=idx, range=r, method=ExportMethod.RE_ENCODE, byte_size=4, payload=b"clip")
                for idx, r in enumerate(ranges)
            ]

    monkeypatch.setattr("framecut.cli.load_config", lambda *_, **__: FramecutConfig())
    monkeypatch.setattr("framecut.cli.open_source_video", _fake_open)
    monkeypatch.setattr("framecut.cli.ExportBatchOrchestrator", DummyOrchestrator)

    result = runner.invoke(
        app,
        ["export-clips", str(video), "--range", "0:3", "--range", "5:5.2", "--output-dir", str(output_dir)],
    )

    assert result.exit_code == 0, result.output
    assert (output_dir / "demo-clip-1.mp4").read_bytes() == b"clip"
    assert (output_dir / "demo-clip-2.mp4").exists()


def test_export_clips_cli_reports_failed_index(monkeypatch, tmp_path):
    video = tmp_path / "demo.mp4"
    video.write_bytes(b"fake")

    class FailingOrchestrator:
        def __init__(self, *args, **kwargs):
            pass

        def export_batch(self, source, ranges, output_format):
            raise BatchExportError(1, TranscodeFailure("ffmpeg 退出码 1", exit_code=1))

    monkeypatch.setattr("framecut.cli.load_config", lambda *_, **__: FramecutConfig())
    monkeypatch.setattr("framecut.cli.open_source_video", _fake_open)
    monkeypatch.setattr("framecut.cli.ExportBatchOrchestrator", FailingOrchestrator)

    result = runner.invoke(app, ["export-clips", str(video), "--range", "0:1", "--range", "2:3"])

    assert result.exit_code == 1


def test_export_clips_cli_rejects_bad_range(monkeypatch, tmp_path):
    video = tmp_path / "demo.mp4"
    video.write_bytes(b"fake")
    monkeypatch.setattr("framecut.cli.load_config", lambda *_, **__: FramecutConfig())

    result = runner.invoke(app, ["export-clips", str(video), "--range", "three-seconds"])

    assert result.exit_code != 0


def test_unopenable_video_exits_with_error(monkeypatch, tmp_path):
    video = tmp_path / "demo.mp4"
    video.write_bytes(b"fake")

    def _raise(path, video_id=None):
        raise SourceUnavailable(f"无法打开视频: {path}")

    monkeypatch.setattr("framecut.cli.load_config", lambda *_, **__: FramecutConfig())
    monkeypatch.setattr("framecut.cli.open_source_video", _raise)

    result = runner.invoke(app, ["probe-keyframes", str(video), "1.0"])

    assert result.exit_code == 1


def test_serve_runs_uvicorn_with_config(monkeypatch, tmp_path):
    cfg = tmp_path / "server.yaml"
    cfg.write_text("sampling:\n  uniform_count: 8\n")
    calls = []
    monkeypatch.delenv("FRAMECUT_CONFIG_PATH", raising=False)
    monkeypatch.setattr("framecut.cli.uvicorn.run", lambda target, **kwargs: calls.append((target, kwargs)))

    result = runner.invoke(app, ["serve", "--port", "9001", "--config", str(cfg), "--log-level", "debug"])

    assert result.exit_code == 0, result.output
    target, kwargs = calls[0]
    assert target == "framecut.server.app:app"
    assert kwargs == {"host": "127.0.0.1", "port": 9001, "reload": False, "log_level": "debug"}
    assert os.environ["FRAMECUT_CONFIG_PATH"] == str(cfg.resolve())
