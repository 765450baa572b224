
import cv2
import numpy as np
import pytest

from arview.errors import PlaybackError
from arview.media import VideoOverlay


def _tiny_video(path, n=3, h=16, w=16):
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), 5, (w, h))
    assert writer.isOpened()
    for i in range(n):
        writer.write(np.full((h, w, 3), 60 * (i + 1), dtype=np.uint8))
    writer.release()
    return str(path)


def test_play_missing_video_raises():
    ov = VideoOverlay("does_not_exist.avi")
    with pytest.raises(PlaybackError):
        ov.play()
    assert ov.playing is False

def test_playback_loops_and_pauses(tmp_path):
    ov = VideoOverlay(_tiny_video(tmp_path / "v.avi"), loop=True)
    assert ov.read_frame() is None  # nothing before play
    ov.play()
    frames = [ov.read_frame() for _ in range(7)]
    assert all(f is not None for f in frames)

    ov.pause()
    last = frames[-1]
    assert ov.read_frame() is last
    ov.release()
    assert ov.playing is False
