"""
BMP Filter Test Configuration
=============================

Shared fixtures. BMP byte streams are assembled here by hand so codec
tests never depend on the codec to produce their inputs.
"""

import struct

import numpy as np
import pytest

from bmpfilter.models.pixel_buffer import PixelBuffer


# =============================================================================
# Helper Functions
# =============================================================================

def build_bmp(
    pixels: np.ndarray,
    *,
    magic: bytes = b"BM",
    header_size: int = 40,
    width: int = None,
    height: int = None,
    planes: int = 1,
    bpp: int = 24,
    compression: int = 0,
    x_ppm: int = 2835,
    y_ppm: int = 2835,
    colors_used: int = 0,
    colors_important: int = 0,
    gap: bytes = b"",
    pad_byte: int = 0,
) -> bytes:
    """
    Assemble a BMP from a top-down (H, W, 3) BGR array.
    Header fields can be overridden to produce invalid files.
    """
    h, w = pixels.shape[:2]
    width = w if width is None else width
    height = h if height is None else height

    row_bytes = w * 3
    padding = (4 - row_bytes % 4) % 4
    body = bytearray()
    for row in pixels[::-1]:
        body += row.astype(np.uint8).tobytes()
        body += bytes([pad_byte]) * padding

    offset = 14 + 40 + len(gap)
    file_header = struct.pack("<2sIHHI", magic, offset + len(body), 0, 0, offset)
    info_header = struct.pack(
        "<IiiHHIIiiII",
        header_size, width, height, planes, bpp, compression,
        len(body), x_ppm, y_ppm, colors_used, colors_important,
    )
    return file_header + info_header + gap + bytes(body)


def random_pixels(rng, width: int, height: int) -> np.ndarray:
    return rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def rng():
    """Reproducible random number generator."""
    return np.random.default_rng(42)


@pytest.fixture
def color_pixels(rng):
    """5x4 colour image, BGR, top row first."""
    return random_pixels(rng, width=5, height=4)


@pytest.fixture
def color_bmp(color_pixels):
    return build_bmp(color_pixels)


@pytest.fixture
def color_buffer(color_pixels):
    return PixelBuffer(color_pixels.copy())


@pytest.fixture
def bmp_file(tmp_path, color_bmp):
    path = tmp_path / "photo.bmp"
    path.write_bytes(color_bmp)
    return path
