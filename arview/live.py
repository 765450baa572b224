# arview/live.py
"""
Live AR viewer.

Camera frames go through ImageTargetTracker; its found/lost edges drive a
MarkerMediaController which plays/pauses the overlay video and toggles the
instruction hint. While the marker is found, the current overlay frame is
warped onto the marker quad.
"""

from __future__ import annotations

import logging
from typing import Optional

import cv2

from arview.config import Settings
from arview.imaging import decode_image
from arview.marker import MarkerMediaController
from arview.media import VideoOverlay
from arview.models import Experience, MarkerState
from arview.tracking import ImageTargetTracker
from arview.visual import HintOverlay, composite_overlay

logger = logging.getLogger(__name__)

WINDOW_TITLE = "AR Viewer (q to quit)"


def run_ar_viewer(settings: Settings, experience: Experience, camera_index: Optional[int] = None) -> None:
    """
    Open webcam, track the experience marker, overlay its video while found.

    Press 'q' to quit. The controller is always closed on exit, so late
    tracker edges are dropped.
    """
    cam_idx = settings.CAMERA_INDEX if camera_index is None else camera_index
    cap = cv2.VideoCapture(cam_idx)
    if not cap.isOpened():
        raise RuntimeError(f"Could not open camera index {cam_idx}")

    try:
        marker = decode_image(experience.marker_url, timeout=settings.HTTP_TIMEOUT).to_bgr()
    except Exception:
        cap.release()
        raise

    tracker = ImageTargetTracker(marker, settings)
    overlay = VideoOverlay(experience.video_url, loop=True)
    hint = HintOverlay(settings.HINT_TEXT)
    controller = MarkerMediaController(overlay, hint)
    controller.attach(tracker)
    logger.debug(f"[live] viewer started experience={experience.id} camera={cam_idx}")

    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break

            corners = tracker.process(frame)
            annotated = frame
            if controller.session.state is MarkerState.FOUND:
                annotated = composite_overlay(annotated, overlay.read_frame(), corners)
            annotated = hint.draw(annotated)

            cv2.imshow(WINDOW_TITLE, annotated)
            if (cv2.waitKey(1) & 0xFF) == ord("q"):
                break
    finally:
        controller.close()
        overlay.release()
        cap.release()
        cv2.destroyAllWindows()
        logger.debug("[live] viewer stopped")
