"""
Pydantic data models for scoring results, marker sessions and API IO.
"""
from __future__ import annotations
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

MatchLabel = Literal["Excellent Match", "Good Match", "Partial Match", "Poor Match"]


class ImageSample(BaseModel):
    """Decoded raster; `pixels` is an H x W x 4 uint8 RGBA array."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    width: int
    height: int
    pixels: np.ndarray

    @property
    def size(self) -> int:
        return self.width * self.height

    def to_bgr(self) -> np.ndarray:
        import cv2
        return cv2.cvtColor(self.pixels, cv2.COLOR_RGBA2BGR)


class MatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float = Field(ge=0.0, le=100.0)
    matched: bool
    label: MatchLabel
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# marker model


class MarkerState(str, Enum):
    FOUND = "FOUND"
    LOST = "LOST"


class MarkerSession(BaseModel):
    state: MarkerState = MarkerState.LOST
    overlay_muted: bool = True
    overlay_playing: bool = False


# experiences


class Experience(BaseModel):
    id: str
    marker_url: str
    video_url: str
    title: Optional[str] = None


class CatalogMatch(BaseModel):
    experience_id: str
    title: Optional[str] = None
    result: MatchResult


class CatalogMatchResponse(BaseModel):
    matches: List[CatalogMatch] = Field(default_factory=list)
    best: Optional[CatalogMatch] = None
