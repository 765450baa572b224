import numpy as np

from arview.config import Settings
from arview.tracking import DetectionHysteresis, ImageTargetTracker
from conftest import textured_bgr


def test_hysteresis_latches_and_preserves_across_none():
    h = DetectionHysteresis(needed_found=2, needed_lost=2)

    # First detection does not latch yet
    assert h.step(True) is None
    # Gaps (None) should NOT reset counters
    assert h.step(None) is None
    assert h.step(True) == "found"
    # Already found: no repeated edge
    assert h.step(True) is None

    assert h.step(False) is None
    assert h.step(True) is None   # resets the lost counter
    assert h.step(False) is None
    assert h.step(False) == "lost"
    assert h.found is False


def _tracker(**kw):
    s = Settings(FOUND_HYSTERESIS=1, LOST_HYSTERESIS=2, **kw)
    return ImageTargetTracker(textured_bgr(seed=7), s)


def test_tracker_emits_edges_to_subscribers(monkeypatch):
    tr = _tracker()
    events = []
    token = tr.subscribe(lambda: events.append("found"), lambda: events.append("lost"))

    H = np.eye(3)
    seq = iter([H, H, None, None, None])
    monkeypatch.setattr(tr, "locate", lambda frame: next(seq))
    frame = np.zeros((10, 10, 3), dtype=np.uint8)

    corners = tr.process(frame)
    assert events == ["found"]
    assert corners is not None and corners.shape == (4, 1, 2)
    tr.process(frame)
    tr.process(frame)
    # still within lost hysteresis: last pose kept
    assert tr.found and tr.corners is not None
    assert tr.process(frame) is None
    assert events == ["found", "lost"]

    tr.unsubscribe(token)
    tr.process(frame)
    assert events == ["found", "lost"]


def test_tracker_listener_failure_is_isolated(monkeypatch):
    tr = _tracker()
    got = []
    def bad():
        raise ValueError("boom")
    tr.subscribe(bad, lambda: None)
    tr.subscribe(lambda: got.append("ok"), lambda: None)
    monkeypatch.setattr(tr, "locate", lambda frame: np.eye(3))
    tr.process(np.zeros((4, 4, 3), dtype=np.uint8))
    assert got == ["ok"]


def test_tracker_finds_marker_in_frame():
    marker = textured_bgr(seed=7)
    tr = ImageTargetTracker(marker, Settings(FOUND_HYSTERESIS=1, MIN_GOOD_MATCHES=10))
    frame = np.zeros((480, 640, 3), dtype=np.uint8)
    frame[100:100 + marker.shape[0], 150:150 + marker.shape[1]] = marker

    corners = tr.process(frame)
    assert tr.found
    tl = corners.reshape(4, 2)[0]
    assert abs(tl[0] - 150) < 5 and abs(tl[1] - 100) < 5

    blank = np.zeros_like(frame)
    assert tr.locate(blank) is None
