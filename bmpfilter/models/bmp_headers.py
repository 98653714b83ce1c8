from __future__ import annotations
from dataclasses import dataclass

FILE_HEADER_SIZE = 14
INFO_HEADER_SIZE = 40
BMP_MAGIC = b"BM"

# 2835 px/m ~ 72 DPI, what most writers put in a fresh header
DEFAULT_PIXELS_PER_METER = 2835


@dataclass
class FileHeader:
    """
    BITMAPFILEHEADER: the 14 bytes at the start of every BMP.
    Reserved fields are carried but never interpreted.
    """
    signature: bytes     # b"BM"
    file_size: int       # total size of the file in bytes
    reserved1: int
    reserved2: int
    data_offset: int     # where the pixel rows start, may leave a gap after the headers


@dataclass
class InfoHeader:
    """
    BITMAPINFOHEADER (40 bytes). Only uncompressed 24-bit, bottom-up images
    get past the codec; resolution and palette counts are passed through.
    """
    header_size: int
    width: int
    height: int                  # positive = rows stored bottom-to-top
    planes: int
    bits_per_pixel: int
    compression: int
    image_size: int              # advisory on read, recomputed on write
    x_pixels_per_meter: int
    y_pixels_per_meter: int
    colors_used: int
    colors_important: int

    @classmethod
    def for_dimensions(cls, width: int, height: int) -> "InfoHeader":
        """Fresh header for a newly created image of the given size."""
        return cls(
            header_size=INFO_HEADER_SIZE,
            width=width,
            height=height,
            planes=1,
            bits_per_pixel=24,
            compression=0,
            image_size=0,
            x_pixels_per_meter=DEFAULT_PIXELS_PER_METER,
            y_pixels_per_meter=DEFAULT_PIXELS_PER_METER,
            colors_used=0,
            colors_important=0,
        )
