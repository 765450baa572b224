# arview/tracking.py
"""
Marker tracking adapter.

OpenCV does the recognition (ORB keypoints + RANSAC homography); this module
debounces per-frame detections and turns them into found/lost edges for
subscribers such as MarkerMediaController.
"""
from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, Optional, Tuple

import cv2
import numpy as np

from arview.config import Settings

logger = logging.getLogger(__name__)

RATIO_TEST = 0.75              # Lowe ratio for knn matches
RANSAC_REPROJ_THRESHOLD = 5.0


class DetectionHysteresis:
    """Debounce per-frame marker detections with consecutive confirmations."""
    def __init__(self, needed_found: int = 2, needed_lost: int = 5):
        self.need_found = int(needed_found)
        self.need_lost = int(needed_lost)
        self.found_cnt = 0
        self.lost_cnt = 0
        self.found = False

    def step(self, detected: Optional[bool]) -> Optional[str]:
        """
        Update debounced state.
        - True / False: increment respective counter, latch when met
        - None: no observation; keep counters and state
        Returns "found" or "lost" on an edge, else None.
        """
        if detected is None:
            return None
        if detected:
            self.found_cnt += 1
            self.lost_cnt = 0
            if not self.found and self.found_cnt >= self.need_found:
                self.found = True
                return "found"
        else:
            self.lost_cnt += 1
            self.found_cnt = 0
            if self.found and self.lost_cnt >= self.need_lost:
                self.found = False
                return "lost"
        return None


Listener = Tuple[Callable[[], None], Callable[[], None]]


class ImageTargetTracker:
    """Locate a marker image in camera frames and publish found/lost edges."""

    def __init__(self, marker_bgr: np.ndarray, settings: Settings):
        if marker_bgr is None or marker_bgr.size == 0:
            raise ValueError("Marker image is empty")
        self.s = settings
        self.marker_size = (int(marker_bgr.shape[1]), int(marker_bgr.shape[0]))
        self._orb = cv2.ORB_create(nfeatures=settings.ORB_FEATURES)
        self._matcher = cv2.BFMatcher(cv2.NORM_HAMMING)
        gray = cv2.cvtColor(marker_bgr, cv2.COLOR_BGR2GRAY) if marker_bgr.ndim == 3 else marker_bgr
        self._kp_marker, self._des_marker = self._orb.detectAndCompute(gray, None)
        if self._des_marker is None:
            logger.warning("[tracker] marker image has no features; it will never be found")

        self._hysteresis = DetectionHysteresis(settings.FOUND_HYSTERESIS, settings.LOST_HYSTERESIS)
        self._listeners: Dict[int, Listener] = {}
        self._ids = itertools.count(1)

        # Pose of the latest detection
        self.homography: Optional[np.ndarray] = None
        self.corners: Optional[np.ndarray] = None

    @property
    def found(self) -> bool:
        return self._hysteresis.found

    # ---- subscriptions ----
    def subscribe(self, on_found: Callable[[], None], on_lost: Callable[[], None]) -> int:
        token = next(self._ids)
        self._listeners[token] = (on_found, on_lost)
        return token

    def unsubscribe(self, token: int) -> None:
        self._listeners.pop(token, None)

    def _emit(self, edge: str) -> None:
        logger.debug(f"[tracker] edge={edge} listeners={len(self._listeners)}")
        for on_found, on_lost in list(self._listeners.values()):
            try:
                (on_found if edge == "found" else on_lost)()
            except Exception:
                logger.exception(f"[tracker] listener failed on {edge}")

    # ---- detection ----
    def locate(self, frame: np.ndarray) -> Optional[np.ndarray]:
        """Return the marker->frame homography, or None when the marker is not visible."""
        if self._des_marker is None or frame is None or frame.size == 0:
            return None
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY) if frame.ndim == 3 else frame
        kp_frame, des_frame = self._orb.detectAndCompute(gray, None)
        if des_frame is None or len(kp_frame) < 2:
            return None

        pairs = self._matcher.knnMatch(self._des_marker, des_frame, k=2)
        good = [p[0] for p in pairs if len(p) == 2 and p[0].distance < RATIO_TEST * p[1].distance]
        if len(good) < self.s.MIN_GOOD_MATCHES:
            return None

        src = np.float32([self._kp_marker[m.queryIdx].pt for m in good]).reshape(-1, 1, 2)
        dst = np.float32([kp_frame[m.trainIdx].pt for m in good]).reshape(-1, 1, 2)
        H, _mask = cv2.findHomography(src, dst, cv2.RANSAC, RANSAC_REPROJ_THRESHOLD)
        return H

    def marker_corners(self, H: np.ndarray) -> np.ndarray:
        w, h = self.marker_size
        pts = np.float32([[0, 0], [w, 0], [w, h], [0, h]]).reshape(-1, 1, 2)
        return cv2.perspectiveTransform(pts, H)

    def process(self, frame: np.ndarray) -> Optional[np.ndarray]:
        """
        Run detection on one frame, update pose and notify subscribers on edges.

        Returns the current corners (4x1x2, frame coords) while found, else None.
        """
        H = self.locate(frame)
        if H is not None:
            self.homography = H
            self.corners = self.marker_corners(H)

        edge = self._hysteresis.step(H is not None)
        if edge is not None:
            self._emit(edge)
        if not self.found:
            self.homography = None
            self.corners = None
        return self.corners
