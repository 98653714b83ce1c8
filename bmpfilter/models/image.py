from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from .bmp_headers import FileHeader, InfoHeader
from .pixel_buffer import PixelBuffer


@dataclass
class Image:
    """
    Simple data object: decoded headers + top-down pixels
    (+ optional source path for bookkeeping).
    No codec logic outside repositories/bmp_codec.py.
    """
    info_header: InfoHeader # Dimensions and pass-through fields reused on save.
    pixels: PixelBuffer
    file_header: FileHeader | None = None # As read from disk, None for images built in memory.
    path: Path | None = None # Source or destination of the image.
    original_pixels: PixelBuffer | None = None # Unmodified pixels for before/after comparison

    @property
    def width(self) -> int:
        return self.pixels.width

    @property
    def height(self) -> int:
        return self.pixels.height
