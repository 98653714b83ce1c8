# pipeline/process_image.py
from pathlib import Path
from typing import Union
import logging

from ..config import CONV_SUFFIX, GRAY_SUFFIX
from ..models.image import Image
from ..models.operation import Operation, OperationKind
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def default_output_path(
    input_path: Union[str, Path],
    operation: Operation,
    gray_suffix: str = GRAY_SUFFIX,
    conv_suffix: str = CONV_SUFFIX,
) -> Path:
    """photo.bmp -> photo_gray.bmp / photo_conv.bmp next to the input."""
    input_path = Path(input_path)
    suffix = gray_suffix if operation.kind is OperationKind.GRAYSCALE else conv_suffix
    return input_path.with_name(f"{input_path.stem}{suffix}.bmp")


def process_bmp(
    data: bytes,
    operation: Operation,
    *,
    image_service: ImageService = ImageService(),
) -> bytes:
    """
    Decode -> transform -> encode, entirely in memory.
    Raises instead of returning anything partial.
    """
    image = image_service.load_bytes(data)
    image_service.apply(image, operation)
    return image_service.to_bytes(image)


def process_file(
    input_path: Union[str, Path],
    operation: Operation,
    output_path: Union[str, Path, None] = None,
    *,
    image_service: ImageService = ImageService(),
) -> Image:
    """
    Load a BMP, apply *operation* and write the result.
    Returns the processed Image (with original_pixels preserved).
    """
    image = image_service.load(input_path)
    logger.info(f"Loaded {input_path}: {image.width}x{image.height}")

    image_service.apply(image, operation)

    if output_path is None:
        output_path = default_output_path(input_path, operation)
    image_service.save(image, output_path)
    return image
