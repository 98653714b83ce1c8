"""Decode a 24-bit BMP, grayscale or 3x3-convolve it, encode it again."""

from .exceptions import BmpError, FormatError, TruncatedDataError, InvalidArgumentError
from .models import Image, InfoHeader, FileHeader, PixelBuffer, Kernel, Operation
from .pipeline import process_bmp, process_file

__version__ = "1.0.0"
