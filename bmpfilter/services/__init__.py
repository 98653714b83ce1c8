from .grayscale_service import GrayscaleService
from .convolution_service import ConvolutionService
from .image_service import ImageService
