"""
Pixel-similarity scoring between a target image and a candidate image.

Both images are stretched to the same 224x224 grid (aspect ratio is not kept,
so non-square sources are distorted) and compared pixel by pixel in RGB space.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Iterable, List

import cv2
import numpy as np

from arview.errors import DecodeError, EmptyInputError
from arview.imaging import ImageSource, decode_image_async
from arview.models import CatalogMatch, Experience, ImageSample, MatchLabel, MatchResult

logger = logging.getLogger(__name__)

GRID_WIDTH = 224
GRID_HEIGHT = 224
MATCH_DISTANCE = 30.0          # RGB euclidean distance; max is ~441
MATCH_THRESHOLD = 75.0         # score above this counts as matched
RESAMPLE_FILTER = cv2.INTER_LINEAR

# (lower bound, label), evaluated high-to-low with strict ">"
BANDS: tuple[tuple[float, MatchLabel], ...] = (
    (90.0, "Excellent Match"),
    (75.0, "Good Match"),
    (50.0, "Partial Match"),
)


def rasterize(sample: ImageSample, width: int = GRID_WIDTH, height: int = GRID_HEIGHT) -> np.ndarray:
    """Resample to the comparison grid and drop alpha. Returns H x W x 3 uint8 RGB."""
    if sample.size == 0:
        raise EmptyInputError("Image has zero pixels")
    rgb = np.ascontiguousarray(sample.pixels[:, :, :3])
    return cv2.resize(rgb, (width, height), interpolation=RESAMPLE_FILTER)


def matching_pixel_count(a_rgb: np.ndarray, b_rgb: np.ndarray, distance: float = MATCH_DISTANCE) -> int:
    """Count positions whose RGB distance is strictly below `distance`."""
    diff = a_rgb.astype(np.int32) - b_rgb.astype(np.int32)
    dist_sq = np.sum(diff * diff, axis=2)
    return int(np.count_nonzero(dist_sq < distance * distance))


def classify_score(score: float) -> MatchLabel:
    for lower, label in BANDS:
        if score > lower:
            return label
    return "Poor Match"


def is_match(score: float) -> bool:
    return score > MATCH_THRESHOLD


def score_images(target: ImageSample, candidate: ImageSample) -> MatchResult:
    """
    Score two decoded images.

    Returns:
        MatchResult with score = 100 * matching / total over the 224x224 grid.
    """
    a = rasterize(target)
    b = rasterize(candidate)
    total = a.shape[0] * a.shape[1]
    matching = matching_pixel_count(a, b)
    score = 100.0 * matching / total
    logger.debug(f"[score] matching={matching} total={total} score={score:.2f}")
    return MatchResult(score=score, matched=is_match(score), label=classify_score(score))


async def score(target_source: ImageSource, candidate_source: ImageSource, timeout: float = 10.0) -> MatchResult:
    """
    Decode both sources concurrently, then score them.

    Raises:
        DecodeError: either source could not be decoded.
        EmptyInputError: either source yielded zero pixels.
    """
    target, candidate = await asyncio.gather(
        decode_image_async(target_source, timeout),
        decode_image_async(candidate_source, timeout),
    )
    return score_images(target, candidate)


async def rank_catalog(
    candidate_source: ImageSource,
    experiences: Iterable[Experience],
    timeout: float = 10.0,
) -> List[CatalogMatch]:
    """
    Score a candidate against every experience marker, best first.

    The candidate failing to decode fails the call; a catalog marker failing to
    decode is logged and skipped.
    """
    candidate = await decode_image_async(candidate_source, timeout)
    experiences = list(experiences)
    decoded = await asyncio.gather(
        *(decode_image_async(exp.marker_url, timeout) for exp in experiences),
        return_exceptions=True,
    )

    matches: List[CatalogMatch] = []
    for exp, target in zip(experiences, decoded):
        if isinstance(target, (DecodeError, EmptyInputError)):
            logger.warning(f"[score] skipping experience={exp.id}: {target}")
            continue
        if isinstance(target, BaseException):
            raise target
        matches.append(CatalogMatch(experience_id=exp.id, title=exp.title, result=score_images(target, candidate)))

    matches.sort(key=lambda m: m.result.score, reverse=True)
    return matches
