from __future__ import annotations
from pathlib import Path
from typing import Union
import logging
import os
import tempfile

from ..models.bmp_headers import InfoHeader
from ..models.image import Image
from ..models.pixel_buffer import PixelBuffer
from .bmp_codec import BmpCodec

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file I/O and pixel updates for Image entities.
    """

    @staticmethod
    def create_image(pixels: PixelBuffer, path: Union[str, Path] = None) -> Image:
        info = InfoHeader.for_dimensions(pixels.width, pixels.height)
        if path is None:
            return Image(info_header=info, pixels=pixels)
        return Image(info_header=info, pixels=pixels, path=Path(path))

    @staticmethod
    def retrieve_image_dimensions(img: Image):
        return img.width, img.height

    @staticmethod
    def load(path: Union[str, Path]) -> Image:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        with path.open("rb") as fh:
            file_header, info, pixels = BmpCodec.decode(fh)

        logger.debug(f"Loaded {path} ({info.width}x{info.height})")
        return Image(info_header=info, pixels=pixels, file_header=file_header, path=path)

    @staticmethod
    def load_bytes(data: bytes, path: Union[str, Path] = None) -> Image:
        file_header, info, pixels = BmpCodec.decode_bytes(data)
        return Image(
            info_header=info,
            pixels=pixels,
            file_header=file_header,
            path=Path(path) if path is not None else None,
        )

    @staticmethod
    def to_bytes(image: Image) -> bytes:
        return BmpCodec.encode_bytes(image.info_header, image.pixels)

    @classmethod
    def save(cls, image: Image) -> None:
        """
        Encode fully in memory, then swap the file into place.
        A failed encode or write leaves any existing file at image.path untouched.
        """
        if image.path is None:
            raise ValueError("Image has no destination path")
        path = Path(image.path)
        data = cls.to_bytes(image)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            # mkstemp creates 0600; give the output the usual umask-based mode
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(tmp_name, 0o666 & ~umask)
            os.replace(tmp_name, path)
        except BaseException:
            # always remove the temp file
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Saved {path} ({len(data)} bytes)")

    @staticmethod
    def save_original_pixels(image: Image) -> None:
        """Save current pixels as original for before/after comparison"""
        if image.original_pixels is None:
            image.original_pixels = image.pixels.copy()
