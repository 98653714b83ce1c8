from __future__ import annotations
from dataclasses import dataclass
import numpy as np
from ..exceptions import InvalidArgumentError

# Channel positions inside the last axis, matching on-disk byte order.
BLUE, GREEN, RED = 0, 1, 2


@dataclass
class PixelBuffer:
    """
    Rectangular grid of 24-bit pixels.
    No file-format logic in here: rows are always top row first,
    whatever order they had on disk.
    """
    pixels: np.ndarray  # Shape (H, W, 3), dtype uint8, BGR order.

    def __post_init__(self):
        try:
            arr = np.asarray(self.pixels)
        except (TypeError, ValueError) as e:
            raise InvalidArgumentError(f"Pixels must be an (H, W, 3) array: {e}") from e
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise InvalidArgumentError(f"Expected an (H, W, 3) array, got shape {arr.shape}")
        if arr.dtype != np.uint8:
            if not (np.issubdtype(arr.dtype, np.integer) or np.issubdtype(arr.dtype, np.floating)):
                raise InvalidArgumentError(f"Pixels must be numeric, got dtype {arr.dtype}")
            if arr.size and (arr.min() < 0 or arr.max() > 255):
                raise InvalidArgumentError(
                    f"Pixel values must lie in 0..255, got {arr.min()}..{arr.max()}"
                )
            arr = arr.astype(np.uint8)
        self.pixels = arr

    @classmethod
    def blank(cls, width: int, height: int) -> "PixelBuffer":
        return cls(np.zeros((height, width, 3), dtype=np.uint8))

    @classmethod
    def from_rgb(cls, rgb: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an (H, W, 3) array in RGB order."""
        return cls(np.ascontiguousarray(np.asarray(rgb, dtype=np.uint8)[:, :, ::-1]))

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy())

    def to_rgb(self) -> np.ndarray:
        return self.pixels[:, :, ::-1].copy()

    def red_plane(self) -> np.ndarray:
        """
        Snapshot of the red channel as an (H, W) array.
        Independent of the buffer: later writes to the buffer do not show up here.
        """
        return self.pixels[:, :, RED].copy()

    def fill_achromatic(self, plane: np.ndarray) -> None:
        """Write a single-channel (H, W) plane into all three channels in place."""
        if plane.shape != self.pixels.shape[:2]:
            raise InvalidArgumentError(f"Plane shape {plane.shape} does not match buffer {self.pixels.shape[:2]}")
        self.pixels[:, :, :] = plane[:, :, np.newaxis]
