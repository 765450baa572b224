import cv2
import numpy as np
import pytest


def solid_bgr(color_rgb, size=(32, 32)):
    """Solid image in OpenCV BGR order; `size` is (w, h)."""
    r, g, b = color_rgb
    img = np.zeros((size[1], size[0], 3), dtype=np.uint8)
    img[:, :] = (b, g, r)
    return img


def png_bytes(img):
    ok, buf = cv2.imencode(".png", img)
    assert ok
    return buf.tobytes()


def textured_bgr(seed=0, size=(320, 240)):
    """Random blocky pattern with plenty of ORB corners."""
    rng = np.random.default_rng(seed)
    small = rng.integers(0, 256, size=(size[1] // 16, size[0] // 16, 3), dtype=np.uint8)
    return cv2.resize(small, size, interpolation=cv2.INTER_NEAREST)


@pytest.fixture
def red_png():
    return png_bytes(solid_bgr((255, 0, 0)))


@pytest.fixture
def blue_png():
    return png_bytes(solid_bgr((0, 0, 255)))


@pytest.fixture
def pattern_png():
    return png_bytes(textured_bgr(seed=1))
