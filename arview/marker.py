"""
Marker-triggered media lifecycle.

The controller turns found/lost signals from a tracking engine into overlay
playback (play/pause, mute/unmute) and instructional-hint visibility. Handlers
run one at a time on the caller's event loop or frame loop.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Optional, Protocol

from arview.models import MarkerSession, MarkerState

logger = logging.getLogger(__name__)


class MediaElement(Protocol):
    muted: bool

    def play(self) -> None: ...
    def pause(self) -> None: ...


class HintElement(Protocol):
    def show(self) -> None: ...
    def hide(self) -> None: ...


class MarkerTracker(Protocol):
    def subscribe(self, on_found: Callable[[], None], on_lost: Callable[[], None]) -> Any: ...
    def unsubscribe(self, token: Any) -> None: ...


class MarkerMediaController:
    """Owns the MarkerSession for one marker for the lifetime of one AR view."""

    def __init__(self, media: MediaElement, hint: Optional[HintElement] = None):
        self.session = MarkerSession()
        self._media: Optional[MediaElement] = media
        self._hint: Optional[HintElement] = hint
        self._tracker: Optional[MarkerTracker] = None
        self._token: Any = None
        self._closed = False

        media.muted = True
        if hint is not None:
            hint.show()

    @property
    def closed(self) -> bool:
        return self._closed

    # ---- lifecycle ----
    def attach(self, tracker: MarkerTracker) -> None:
        if self._closed:
            raise RuntimeError("Controller is closed")
        if self._tracker is not None:
            self._tracker.unsubscribe(self._token)
        self._tracker = tracker
        self._token = tracker.subscribe(self.on_marker_found, self.on_marker_lost)
        logger.debug("[marker] attached to tracker")

    def close(self) -> None:
        """Detach from the tracker and release media/hint. Later events are dropped."""
        if self._closed:
            return
        if self._tracker is not None:
            self._tracker.unsubscribe(self._token)
        if self.session.overlay_playing and self._media is not None:
            self._media.pause()
            self.session.overlay_playing = False
        self._tracker = None
        self._token = None
        self._media = None
        self._hint = None
        self._closed = True
        logger.debug("[marker] closed")

    # ---- events ----
    def on_marker_found(self) -> None:
        if self._closed:
            logger.debug("[marker] found after close; dropped")
            return
        if self.session.state is MarkerState.FOUND:
            return

        self.session.state = MarkerState.FOUND
        self._media.muted = False
        self.session.overlay_muted = False
        try:
            self._media.play()
        except Exception:
            # Marker stays found even though nothing plays
            logger.exception("[marker] overlay playback failed")
        else:
            self.session.overlay_playing = True
        if self._hint is not None:
            self._hint.hide()
        logger.debug(f"[marker] FOUND playing={self.session.overlay_playing}")

    def on_marker_lost(self) -> None:
        if self._closed:
            logger.debug("[marker] lost after close; dropped")
            return
        if self.session.state is MarkerState.LOST:
            return

        self.session.state = MarkerState.LOST
        self._media.pause()
        self.session.overlay_playing = False
        self._media.muted = True
        self.session.overlay_muted = True
        if self._hint is not None:
            self._hint.show()
        logger.debug("[marker] LOST")
