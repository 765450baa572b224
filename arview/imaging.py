"""
Image source decoding: bytes, paths, http(s) URLs and arrays -> RGBA ImageSample.
"""
from __future__ import annotations
import asyncio
import logging
import os
from typing import Union

import cv2
import numpy as np
import requests

from arview.errors import DecodeError, EmptyInputError
from arview.models import ImageSample

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, os.PathLike, np.ndarray, ImageSample]


def is_url(source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def from_array(img: np.ndarray) -> ImageSample:
    """
    Wrap an OpenCV-style array (gray, BGR or BGRA, uint8) as an RGBA ImageSample.

    Raises:
        EmptyInputError: zero-sized array.
        DecodeError: unsupported dtype or channel layout.
    """
    if img is None:
        raise DecodeError("No image data")
    if img.size == 0 or img.shape[0] == 0 or img.shape[1] == 0:
        raise EmptyInputError("Image has zero pixels")
    if img.dtype != np.uint8:
        raise DecodeError(f"Unsupported pixel dtype: {img.dtype}")

    if img.ndim == 2:
        rgba = cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    elif img.ndim == 3 and img.shape[2] == 3:
        rgba = cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    elif img.ndim == 3 and img.shape[2] == 4:
        rgba = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    else:
        raise DecodeError(f"Unsupported image shape: {img.shape}")

    h, w = rgba.shape[:2]
    return ImageSample(width=int(w), height=int(h), pixels=rgba)


def decode_bytes(data: bytes) -> ImageSample:
    """Decode an encoded image (PNG, JPEG, ...) held in memory."""
    if not data:
        raise EmptyInputError("Image source is empty")
    buf = np.frombuffer(bytes(data), dtype=np.uint8)
    try:
        img = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise DecodeError(f"Could not decode image: {e}") from e
    if img is None:
        raise DecodeError("Could not decode image bytes")
    return from_array(img)


def fetch_bytes(url: str, timeout: float = 10.0) -> bytes:
    """Download an image; any transport or HTTP failure is a DecodeError."""
    logger.debug(f"[imaging] GET {url}")
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"[imaging] download failed url={url} err={e}")
        raise DecodeError(f"Could not fetch image: {url}") from e
    return resp.content


def read_bytes(path: Union[str, os.PathLike]) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise DecodeError(f"Could not read image: {path}") from e


def decode_image(source: ImageSource, timeout: float = 10.0) -> ImageSample:
    """
    Decode any supported image source into an RGBA raster.

    Args:
        source: encoded bytes, a file path, an http(s) URL, an OpenCV array
            or an already decoded ImageSample.
        timeout: seconds allowed for a URL download.

    Returns:
        ImageSample

    Raises:
        DecodeError: the source could not be rasterized.
        EmptyInputError: the source yielded zero pixels.
    """
    if isinstance(source, ImageSample):
        if source.size == 0:
            raise EmptyInputError("Image has zero pixels")
        return source
    if isinstance(source, np.ndarray):
        return from_array(source)
    if isinstance(source, (bytes, bytearray)):
        return decode_bytes(source)
    if is_url(source):
        return decode_bytes(fetch_bytes(source, timeout=timeout))
    if isinstance(source, (str, os.PathLike)):
        return decode_bytes(read_bytes(source))
    raise DecodeError(f"Unsupported image source type: {type(source).__name__}")


async def decode_image_async(source: ImageSource, timeout: float = 10.0) -> ImageSample:
    """Decode in a worker thread so several decodes can proceed at once."""
    return await asyncio.to_thread(decode_image, source, timeout)
