"""FrameSampler 测试：使用假解码会话验证顺序、确定性与失败语义。"""

from pathlib import Path
from typing import List

import pytest

from framecut.core import DecodeFailure, SourceVideo
from framecut.sampling import DecodeSession, FrameSampler, LocalWindow, UniformSpread

VIDEO = SourceVideo(video_id="demo", path=Path("demo.mp4"), duration=10.0, width=4, height=4)


class FakeSession:
    """单游标会话：seek 后 capture 读出当前位置；可按时间点注入失败。"""

    instances: List["FakeSession"] = []

    def __init__(self, path: Path, *, fail_at: float | None = None, drift: float = 0.0) -> None:
        self.path = path
        self.fail_at = fail_at
        self.drift = drift
        self.cursor: float | None = None
        self.events: List[str] = []
        self.closed = False
        FakeSession.instances.append(self)

    def __enter__(self):
        self.events.append("open")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def seek(self, timestamp: float) -> None:
        assert self.cursor is None, "seek issued before previous capture"
        if self.fail_at is not None and timestamp == self.fail_at:
            raise DecodeFailure("定位失败", timestamp=timestamp)
        self.cursor = timestamp
        self.events.append(f"seek:{timestamp}")

    def capture_jpeg(self, timestamp: float, quality: int):
        assert self.cursor == timestamp
        self.events.append(f"capture:{timestamp}")
        actual = self.cursor + self.drift
        self.cursor = None
        return actual, f"jpeg@{timestamp}q{quality}".encode()


@pytest.fixture(autouse=True)
def _reset_instances():
    FakeSession.instances.clear()
    yield


def test_uniform_spread_end_to_end() -> None:
    sampler = FrameSampler(session_factory=FakeSession)  # type: ignore[arg-type]

    frames = sampler.sample(VIDEO, UniformSpread(count=5))

    assert [f.timestamp for f in frames] == [0.0, 2.0, 4.0, 6.0, 8.0]
    assert [f.ordinal_index for f in frames] == [0, 1, 2, 3, 4]
    assert [f.id for f in frames] == ["frame-0", "frame-1", "frame-2", "frame-3", "frame-4"]
    assert frames[0].image == b"jpeg@0.0q80"
    assert FakeSession.instances[0].closed


def test_sampling_is_deterministic() -> None:
    sampler = FrameSampler(session_factory=FakeSession)  # type: ignore[arg-type]
    policy = LocalWindow(center=3.3, count=7, step=0.25)

    first = sampler.sample(VIDEO, policy)
    second = sampler.sample(VIDEO, policy)

    assert [(f.timestamp, f.ordinal_index) for f in first] == [(f.timestamp, f.ordinal_index) for f in second]
    assert len(FakeSession.instances) == 2


def test_seek_and_capture_strictly_alternate() -> None:
    sampler = FrameSampler(session_factory=FakeSession)  # type: ignore[arg-type]

    sampler.sample(VIDEO, LocalWindow(center=0.0, count=3, step=0.5))

    assert FakeSession.instances[0].events == [
        "open",
        "seek:0.0",
        "capture:0.0",
        "seek:0.0",
        "capture:0.0",
        "seek:0.5",
        "capture:0.5",
    ]


def test_recorded_timestamp_is_actual_decode_position() -> None:
    sampler = FrameSampler(session_factory=lambda path: FakeSession(path, drift=0.04))  # type: ignore[arg-type]

    frames = sampler.sample(VIDEO, UniformSpread(count=2))

    assert frames[0].timestamp == pytest.approx(0.04)
    assert frames[1].timestamp == pytest.approx(5.04)


def test_local_window_ids_and_clamping() -> None:
    sampler = FrameSampler(session_factory=FakeSession)  # type: ignore[arg-type]

    frames = sampler.sample(VIDEO, LocalWindow(center=10.0, count=5, step=0.5))

    assert [f.id for f in frames][0] == "nearby-0"
    assert all(0.0 <= f.timestamp <= VIDEO.duration for f in frames)


def test_decode_failure_discards_everything() -> None:
    sampler = FrameSampler(session_factory=lambda path: FakeSession(path, fail_at=4.0))  # type: ignore[arg-type]

    with pytest.raises(DecodeFailure) as excinfo:
        sampler.sample(VIDEO, UniformSpread(count=5))

    assert excinfo.value.timestamp == 4.0
    assert FakeSession.instances[0].closed


def test_capture_at_clamps_timestamp() -> None:
    sampler = FrameSampler(session_factory=FakeSession)  # type: ignore[arg-type]

    frame = sampler.capture_at(VIDEO, 42.0)

    assert frame.id == "thumb-0"
    assert frame.timestamp == 10.0


def test_decode_session_reports_unopenable_file(tmp_path: Path) -> None:
    bogus = tmp_path / "not-a-video.mp4"
    bogus.write_bytes(b"definitely not a video")

    with pytest.raises(DecodeFailure):
        with DecodeSession(bogus):
            pass
