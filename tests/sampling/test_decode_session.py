"""真实解码测试：用 cv2.VideoWriter 在临时目录写一段 4 秒 10fps 的视频。"""

from pathlib import Path

import cv2
import numpy as np
import pytest

from framecut.core import SourceVideo, open_source_video
from framecut.sampling import DecodeSession, FrameSampler, LocalWindow, UniformSpread

FPS = 10
FRAME_TOTAL = 40


@pytest.fixture()
def clip(tmp_path: Path) -> SourceVideo:
    path = tmp_path / "countdown.mp4"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"mp4v"), FPS, (64, 48))
    if not writer.isOpened():
        pytest.skip("OpenCV 构建不支持 mp4v 写入")
    try:
        for idx in range(FRAME_TOTAL):
            frame = np.full((48, 64, 3), idx * 6, dtype=np.uint8)
            writer.write(frame)
    finally:
        writer.release()
    return open_source_video(path, video_id="countdown")


def test_source_duration_matches_written_frames(clip: SourceVideo) -> None:
    assert clip.duration == pytest.approx(FRAME_TOTAL / FPS)
    with DecodeSession(clip.path) as session:
        assert session.last_frame_time == pytest.approx((FRAME_TOTAL - 1) / FPS)


def test_uniform_spread_on_real_video(clip: SourceVideo) -> None:
    frames = FrameSampler().sample(clip, UniformSpread(count=4))

    assert [f.ordinal_index for f in frames] == [0, 1, 2, 3]
    assert [f.id for f in frames] == ["frame-0", "frame-1", "frame-2", "frame-3"]
    timestamps = [f.timestamp for f in frames]
    assert timestamps == sorted(timestamps)
    assert timestamps == pytest.approx([0.0, 1.0, 2.0, 3.0], abs=0.15)
    assert all(f.image.startswith(b"\xff\xd8") for f in frames)


def test_local_window_at_end_of_stream(clip: SourceVideo) -> None:
    frames = FrameSampler().sample(clip, LocalWindow(center=clip.duration, count=5, step=0.5))

    assert len(frames) == 5
    assert [f.ordinal_index for f in frames] == [0, 1, 2, 3, 4]
    assert all(0.0 <= f.timestamp <= clip.duration for f in frames)
    assert frames[-1].timestamp >= clip.duration - 0.5
    assert all(f.image.startswith(b"\xff\xd8") for f in frames)


def test_capture_at_duration_returns_last_frame(clip: SourceVideo) -> None:
    frame = FrameSampler().capture_at(clip, clip.duration)

    assert frame.id == "thumb-0"
    assert clip.duration - 0.5 <= frame.timestamp <= clip.duration
    assert frame.image.startswith(b"\xff\xd8")


def test_read_past_end_steps_back_to_last_frame(clip: SourceVideo) -> None:
    with DecodeSession(clip.path) as session:
        session.seek(clip.duration + 5.0)
        first, _ = session.read_frame(clip.duration)
        # 游标已越过最后一帧，再读会碰到流尾
        again, pixels = session.read_frame(clip.duration)

    assert pixels.shape == (48, 64, 3)
    assert first <= clip.duration
    assert clip.duration - 0.5 <= again <= clip.duration
