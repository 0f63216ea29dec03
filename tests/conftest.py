"""
Pytest fixtures for photo_enhancer tests.
"""
import numpy as np
import pytest
import cv2

from photo_enhancer import PixelBuffer


@pytest.fixture
def checkerboard_4x4():
    """4x4 black/white checkerboard, fully opaque."""
    arr = np.zeros((4, 4, 4), dtype=np.uint8)
    for y in range(4):
        for x in range(4):
            if (x + y) % 2 == 0:
                arr[y, x, :3] = 255
    arr[:, :, 3] = 255
    return PixelBuffer(arr)


@pytest.fixture
def white_5x5():
    return PixelBuffer.filled(5, 5, (255, 255, 255, 255))


@pytest.fixture
def noisy_buffer():
    """Random 12x9 RGBA buffer with a varying alpha channel."""
    rng = np.random.default_rng(1234)
    arr = rng.integers(0, 256, size=(9, 12, 4), dtype=np.uint8)
    return PixelBuffer(arr)


@pytest.fixture
def png_file(tmp_path):
    """16x9 opaque gradient written as a BGR PNG."""
    bgr = np.zeros((9, 16, 3), dtype=np.uint8)
    bgr[:, :, 0] = np.arange(16, dtype=np.uint8)[None, :] * 16
    bgr[:, :, 1] = 80
    bgr[:, :, 2] = np.arange(9, dtype=np.uint8)[:, None] * 28
    path = tmp_path / "photo.png"
    assert cv2.imwrite(str(path), bgr)
    return path
