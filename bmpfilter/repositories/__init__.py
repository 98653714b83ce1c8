from .bmp_codec import BmpCodec, row_layout
from .image_repository import ImageRepository
