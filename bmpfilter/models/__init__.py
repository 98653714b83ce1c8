from .bmp_headers import FileHeader, InfoHeader
from .pixel_buffer import PixelBuffer
from .kernel import Kernel, SOBEL_X, SOBEL_Y, LAPLACIAN, PRESETS, get_preset
from .operation import Operation, OperationKind
from .image import Image
