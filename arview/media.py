"""
Looping video overlay backed by cv2.VideoCapture.
"""
from __future__ import annotations
import logging
from typing import Optional

import cv2
import numpy as np

from arview.errors import PlaybackError

logger = logging.getLogger(__name__)


class VideoOverlay:
    """
    Media handle for the overlay video: play(), pause() and a muted flag.

    The capture is opened on the first play(). OpenCV has no audio path, so
    `muted` is tracked for the controller but has no audible effect here.
    """
    def __init__(self, video_url: str, loop: bool = True):
        self.video_url = video_url
        self.loop = loop
        self.muted = True
        self.playing = False
        self._cap: Optional[cv2.VideoCapture] = None
        self._last_frame: Optional[np.ndarray] = None

    def play(self) -> None:
        if self._cap is None:
            cap = cv2.VideoCapture(self.video_url)
            if not cap.isOpened():
                cap.release()
                raise PlaybackError(f"Could not open overlay video: {self.video_url}")
            self._cap = cap
            logger.debug(f"[media] opened {self.video_url}")
        self.playing = True

    def pause(self) -> None:
        self.playing = False

    def read_frame(self) -> Optional[np.ndarray]:
        """Next frame while playing (rewinding at end when looping); last frame while paused."""
        if not self.playing or self._cap is None:
            return self._last_frame

        ok, frame = self._cap.read()
        if not ok and self.loop:
            self._cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
            ok, frame = self._cap.read()
        if not ok:
            self.playing = False
            return self._last_frame

        self._last_frame = frame
        return frame

    def release(self) -> None:
        self.playing = False
        if self._cap is not None:
            self._cap.release()
            self._cap = None
