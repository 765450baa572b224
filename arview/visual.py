
"""Visualization helpers for the AR view.

- HintOverlay: instructional banner toggled by the marker controller
- composite_overlay: warp an overlay video frame into the detected marker quad
- draw_match_label: stamp a MatchResult onto an image
"""
from __future__ import annotations
import cv2
import numpy as np
from typing import Optional, Tuple

from arview.models import MatchResult


class HintOverlay:
    """On-screen instruction shown while no marker is in view."""
    def __init__(self, text: str, visible: bool = True):
        self.text = text
        self.visible = visible

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def draw(self, frame: np.ndarray) -> np.ndarray:
        if not self.visible:
            return frame
        out = frame.copy()
        h, w = out.shape[:2]
        font, scale, thick = cv2.FONT_HERSHEY_SIMPLEX, 0.6, 1
        (tw, th), base = cv2.getTextSize(self.text, font, scale, thick)
        x = max(0, (w - tw) // 2)
        y = max(th + 10, h - 30)
        # translucent pill behind the text
        box = out.copy()
        cv2.rectangle(box, (x - 12, y - th - 12), (x + tw + 12, y + base + 8), (0, 0, 0), -1)
        out = cv2.addWeighted(box, 0.7, out, 0.3, 0)
        cv2.putText(out, self.text, (x, y), font, scale, (255, 255, 255), thick, cv2.LINE_AA)
        return out


def composite_overlay(frame: np.ndarray,
                      overlay: Optional[np.ndarray],
                      corners: Optional[np.ndarray]) -> np.ndarray:
    """Warp `overlay` onto the quad `corners` (4 points, TL TR BR BL) in `frame`.

    Returns the frame unchanged when there is nothing to draw.
    """
    if overlay is None or corners is None:
        return frame
    h, w = frame.shape[:2]
    oh, ow = overlay.shape[:2]
    src = np.float32([[0, 0], [ow, 0], [ow, oh], [0, oh]])
    dst = np.float32(corners).reshape(4, 2)
    M = cv2.getPerspectiveTransform(src, dst)
    warped = cv2.warpPerspective(overlay, M, (w, h))

    mask = np.zeros((h, w), dtype=np.uint8)
    cv2.fillConvexPoly(mask, np.int32(dst), 255)
    out = frame.copy()
    out[mask > 0] = warped[mask > 0]
    return out


def draw_match_label(img: np.ndarray,
                     result: MatchResult,
                     color: Tuple[int, int, int] = (0, 255, 0)) -> np.ndarray:
    """Write "<label> (<score>%)" in the top-left corner; red when not matched."""
    out = img.copy()
    if not result.matched:
        color = (0, 0, 255)
    text = f"{result.label} ({result.score:.1f}%)"
    cv2.putText(out, text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.8, color, 2, cv2.LINE_AA)
    return out
