from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from .errors import InvalidDimensionsError


CHANNELS = 4


class Dimensions(NamedTuple):
    width: int
    height: int


class BoundingBox(NamedTuple):
    max_width: int
    max_height: int


UHD_4K = BoundingBox(3840, 2160)


def check_positive(**dims: int) -> None:
    for name, value in dims.items():
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
            raise InvalidDimensionsError(f"{name} doit être un entier positif, reçu: {value!r}")


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """RGBA8 image, row-major, held as a ``(height, width, 4)`` uint8 array.

    Pipeline stages never write into ``pixels``; each one returns a new buffer.
    """

    pixels: np.ndarray

    def __post_init__(self) -> None:
        arr = self.pixels
        if not isinstance(arr, np.ndarray) or arr.ndim != 3 or arr.shape[2] != CHANNELS:
            shape = getattr(arr, "shape", None)
            raise InvalidDimensionsError(f"Tableau RGBA (H, W, 4) attendu, reçu: {shape}")
        if arr.dtype != np.uint8:
            raise InvalidDimensionsError(f"dtype uint8 attendu, reçu: {arr.dtype}")
        check_positive(width=arr.shape[1], height=arr.shape[0])

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview, width: int, height: int) -> "PixelBuffer":
        check_positive(width=width, height=height)
        expected = width * height * CHANNELS
        if len(data) != expected:
            raise InvalidDimensionsError(
                f"Longueur incohérente: {len(data)} octets pour {width}x{height} (attendu {expected})"
            )
        arr = np.frombuffer(bytes(data), dtype=np.uint8).reshape(height, width, CHANNELS).copy()
        return cls(arr)

    @classmethod
    def filled(cls, width: int, height: int, rgba: tuple[int, int, int, int]) -> "PixelBuffer":
        check_positive(width=width, height=height)
        arr = np.empty((height, width, CHANNELS), dtype=np.uint8)
        arr[...] = np.asarray(rgba, dtype=np.uint8)
        return cls(arr)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[:, :, 3]

    def to_bytes(self) -> bytes:
        return np.ascontiguousarray(self.pixels).tobytes()

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy())

    def __len__(self) -> int:
        return self.pixels.size
