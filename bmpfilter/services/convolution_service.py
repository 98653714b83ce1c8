# services/convolution_service.py
import logging
import numpy as np

from ..models.kernel import Kernel
from ..models.pixel_buffer import PixelBuffer
from .grayscale_service import round_clamp_u8

logger = logging.getLogger(__name__)


class ConvolutionService:
    """
    3x3 spatial filter over the luminance of an achromatic image.

    • Reads the red channel as the gray value (callers grayscale first).
    • Border rows/columns are copied through unchanged.
    • Result = weighted sum / kernel.normalizer, rounded half up, clamped.
    """

    @staticmethod
    def convolve_plane(plane: np.ndarray, kernel: Kernel) -> np.ndarray:
        """
        Args
        ----
        plane  : np.ndarray  (H, W)  uint8, left untouched
        kernel : Kernel

        Returns
        -------
        out : np.ndarray  (H, W)  uint8
        """
        height, width = plane.shape
        out = plane.copy()
        if height < 3 or width < 3:
            # no interior pixels, everything is border
            return out

        src = plane.astype(np.float64)
        acc = np.zeros((height - 2, width - 2), dtype=np.float64)
        for ky in range(3):
            for kx in range(3):
                # tap (ky, kx) reads neighbour offset (ky-1, kx-1)
                acc += kernel.weights[ky, kx] * src[ky:ky + height - 2, kx:kx + width - 2]

        out[1:-1, 1:-1] = round_clamp_u8(acc / kernel.normalizer)
        return out

    def apply(self, buffer: PixelBuffer, kernel: Kernel) -> None:
        # snapshot first: neighbours must be read before anything is overwritten
        plane = buffer.red_plane()
        buffer.fill_achromatic(self.convolve_plane(plane, kernel))
        logger.debug(
            f"Kernel {kernel.name} (normalizer {kernel.normalizer:g}) applied to "
            f"{buffer.width}x{buffer.height} pixels"
        )
