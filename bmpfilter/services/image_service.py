from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Union
import dataclasses
import logging

from ..models.image import Image
from ..models.operation import Operation, OperationKind
from ..models.pixel_buffer import PixelBuffer
from ..repositories.image_repository import ImageRepository
from .grayscale_service import GrayscaleService
from .convolution_service import ConvolutionService

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers and operation dispatch. No codec or pixel math here."""

    def __init__(self):
        self.image_repository = ImageRepository()
        self.grayscale_service = GrayscaleService()
        self.convolution_service = ConvolutionService()

    def create_image(self, pixels: PixelBuffer, path: Union[str, Path] = None) -> Image:
        return self.image_repository.create_image(pixels, path)

    def load(self, path: str | Path) -> Image:
        """Load a single BMP from disk into an Image object."""
        return self.image_repository.load(path)

    def load_bytes(self, data: bytes) -> Image:
        return self.image_repository.load_bytes(data)

    def to_bytes(self, image: Image) -> bytes:
        return self.image_repository.to_bytes(image)

    def save(self, image: Image, path: Union[str, Path] = None) -> None:
        """
        Business-level method to save the image, optionally to a new path.
        """
        if path is not None:
            image.path = Path(path)
        self.image_repository.save(image)
        logger.info(f"Saved {image.path} ({image.width}x{image.height})")

    def get_image_dimensions(self, img: Image):
        return self.image_repository.retrieve_image_dimensions(img)

    def preserve_original_state(self, image: Image) -> None:
        """
        Preserve the current image state before any operation mutates it.
        """
        self.image_repository.save_original_pixels(image)

    def to_grayscale(self, image: Image) -> None:
        self.grayscale_service.apply(image.pixels)

    def apply(self, image: Image, operation: Operation) -> Image:
        """
        Run *operation* on the image in place and return it.
        Convolution always grayscales first so the red channel holds the luminance.
        """
        self.preserve_original_state(image)
        self.to_grayscale(image)
        if operation.kind is OperationKind.CONVOLVE:
            self.convolution_service.apply(image.pixels, operation.kernel)
        logger.info(f"Applied {operation.describe()} to {image.width}x{image.height} image")
        return image

    @staticmethod
    def metadata(image: Image) -> Dict[str, Any]:
        """Header fields as a flat dict, for display."""
        meta: Dict[str, Any] = {}
        if image.file_header is not None:
            meta.update(dataclasses.asdict(image.file_header))
            meta["signature"] = image.file_header.signature.decode("ascii", errors="replace")
        meta.update(dataclasses.asdict(image.info_header))
        return meta
