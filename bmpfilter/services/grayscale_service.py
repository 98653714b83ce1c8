# services/grayscale_service.py
import logging
import numpy as np

from ..models.pixel_buffer import PixelBuffer, BLUE, GREEN, RED

logger = logging.getLogger(__name__)


def round_clamp_u8(values: np.ndarray) -> np.ndarray:
    """Round half up (add 0.5, then truncate) and clamp into [0, 255]."""
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


class GrayscaleService:
    """
    Luminance reduction with the standard luma weights.
    Works in place; afterwards every pixel has R == G == B.
    """
    R_WEIGHT = 0.299
    G_WEIGHT = 0.587
    B_WEIGHT = 0.114

    @classmethod
    def luminance(cls, pixels: np.ndarray) -> np.ndarray:
        """
        Args:
            pixels (np.ndarray): (H, W, 3) uint8 array in BGR order.

        Returns:
            (np.ndarray): (H, W) uint8 gray values.
        """
        r = pixels[:, :, RED].astype(np.float64)
        g = pixels[:, :, GREEN].astype(np.float64)
        b = pixels[:, :, BLUE].astype(np.float64)
        return round_clamp_u8(cls.R_WEIGHT * r + cls.G_WEIGHT * g + cls.B_WEIGHT * b)

    def apply(self, buffer: PixelBuffer) -> None:
        buffer.fill_achromatic(self.luminance(buffer.pixels))
        logger.debug(f"Grayscale applied to {buffer.width}x{buffer.height} pixels")
