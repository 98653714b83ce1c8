# repositories/bmp_codec.py
"""
Uncompressed 24-bit BMP reader / writer.

• Headers are (de)serialised field by field with explicit little-endian
  struct formats, never by relying on an in-memory struct layout.
• Disk rows are bottom-to-top and padded to 4 bytes; in memory the
  PixelBuffer is always top row first with no padding.
• Never looks at pixel values.
"""
from __future__ import annotations

import dataclasses
import io
import logging
import struct
from typing import BinaryIO, Tuple

import numpy as np

from ..exceptions import FormatError, InvalidArgumentError, TruncatedDataError
from ..models.bmp_headers import (
    BMP_MAGIC,
    FILE_HEADER_SIZE,
    INFO_HEADER_SIZE,
    FileHeader,
    InfoHeader,
)
from ..models.pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# magic, file size, reserved1, reserved2, pixel data offset
_FILE_HEADER = struct.Struct("<2sIHHI")
# header size, width, height, planes, bpp, compression, image size,
# x res, y res, colors used, colors important
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")

assert _FILE_HEADER.size == FILE_HEADER_SIZE
assert _INFO_HEADER.size == INFO_HEADER_SIZE

BYTES_PER_PIXEL = 3


def row_layout(width: int) -> Tuple[int, int]:
    """Return (row_bytes, padding) for a 24-bit row of *width* pixels."""
    row_bytes = width * BYTES_PER_PIXEL
    padding = (4 - row_bytes % 4) % 4
    return row_bytes, padding


class BmpCodec:
    """
    Stateless codec. Decode yields validated headers plus a fully
    populated buffer, or raises; there is no partial result.
    """

    # ---------- private helpers ----------
    @staticmethod
    def _read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
        data = stream.read(size)
        if data is None or len(data) < size:
            got = 0 if data is None else len(data)
            raise TruncatedDataError(f"Truncated {what}: expected {size} bytes, got {got}")
        return data

    @staticmethod
    def _write_all(sink: BinaryIO, data: bytes, what: str) -> None:
        if getattr(sink, "closed", False):
            raise TruncatedDataError(f"Cannot write {what}: destination is closed")
        try:
            written = sink.write(data)
        except ValueError as e:  # closed/detached file objects
            raise TruncatedDataError(f"Cannot write {what}: {e}") from e
        if written is not None and written < len(data):
            raise TruncatedDataError(f"Short write of {what}: {written} of {len(data)} bytes")

    @staticmethod
    def _validate_info(info: InfoHeader) -> None:
        if info.header_size != INFO_HEADER_SIZE:
            raise FormatError(
                f"Unsupported info header size {info.header_size} (expected {INFO_HEADER_SIZE})"
            )
        if info.bits_per_pixel != 24 or info.compression != 0:
            raise FormatError(
                f"Unsupported encoding: {info.bits_per_pixel} bpp, compression {info.compression} "
                "(only uncompressed 24 bpp is supported)"
            )
        if info.width <= 0 or info.height <= 0:
            raise FormatError(
                f"Unsupported dimensions {info.width}x{info.height} (both must be positive)"
            )
        if info.planes != 1:
            raise FormatError(f"Unsupported plane count {info.planes} (expected 1)")

    # ---------- public API ----------
    @classmethod
    def read_headers(cls, stream: BinaryIO) -> Tuple[FileHeader, InfoHeader]:
        """Read and validate both headers from the current position."""
        raw_file = cls._read_exact(stream, FILE_HEADER_SIZE, "file header")
        file_header = FileHeader(*_FILE_HEADER.unpack(raw_file))
        if file_header.signature != BMP_MAGIC:
            raise FormatError(f"Not a BMP file (signature {file_header.signature!r}, expected b'BM')")

        raw_info = cls._read_exact(stream, INFO_HEADER_SIZE, "info header")
        info = InfoHeader(*_INFO_HEADER.unpack(raw_info))
        cls._validate_info(info)
        return file_header, info

    @classmethod
    def decode(cls, stream: BinaryIO) -> Tuple[FileHeader, InfoHeader, PixelBuffer]:
        """
        Args
        ----
        stream : seekable binary stream positioned at the start of the BMP

        Returns
        -------
        (file_header, info_header, pixels) with pixels stored top row first
        """
        file_header, info = cls.read_headers(stream)
        width, height = info.width, info.height
        row_bytes, padding = row_layout(width)

        # the stream must hold every row (trailing padding of the last row may be missing)
        # before anything is allocated
        required = file_header.data_offset + (row_bytes + padding) * (height - 1) + row_bytes
        available = stream.seek(0, io.SEEK_END)
        if available < required:
            raise TruncatedDataError(
                f"Truncated row data: {width}x{height} image needs {required} bytes, stream has {available}"
            )

        # pixel data may start after a gap (e.g. an unused palette)
        stream.seek(file_header.data_offset, io.SEEK_SET)

        pixels = np.empty((height, width, BYTES_PER_PIXEL), dtype=np.uint8)
        for y in range(height):
            row = stream.read(row_bytes)
            if row is None or len(row) < row_bytes:
                got = 0 if row is None else len(row)
                raise TruncatedDataError(
                    f"Truncated row {y} of {height}: expected {row_bytes} bytes, got {got}"
                )
            # disk row y is logical row height-1-y
            pixels[height - 1 - y] = np.frombuffer(row, dtype=np.uint8).reshape(width, BYTES_PER_PIXEL)
            if padding:
                stream.seek(padding, io.SEEK_CUR)

        logger.debug(f"Decoded {width}x{height} BMP (data offset {file_header.data_offset}, padding {padding})")
        return file_header, info, PixelBuffer(pixels)

    @classmethod
    def encode(cls, info: InfoHeader, buffer: PixelBuffer, sink: BinaryIO) -> Tuple[FileHeader, InfoHeader]:
        """
        Write a complete BMP for *buffer* to *sink*.
        Size fields are recomputed; resolution and palette counts come from *info*.
        Returns the headers that were actually written.
        """
        if info.width <= 0 or info.height <= 0:
            raise InvalidArgumentError(f"Cannot encode {info.width}x{info.height} image")
        if (buffer.width, buffer.height) != (info.width, info.height):
            raise InvalidArgumentError(
                f"Header says {info.width}x{info.height} but pixels are {buffer.width}x{buffer.height}"
            )

        width, height = info.width, info.height
        row_bytes, padding = row_layout(width)
        image_size = (row_bytes + padding) * height

        out_info = dataclasses.replace(
            info,
            header_size=INFO_HEADER_SIZE,
            planes=1,
            bits_per_pixel=24,
            compression=0,
            image_size=image_size,
        )
        data_offset = FILE_HEADER_SIZE + INFO_HEADER_SIZE
        file_header = FileHeader(
            signature=BMP_MAGIC,
            file_size=data_offset + image_size,
            reserved1=0,
            reserved2=0,
            data_offset=data_offset,
        )

        cls._write_all(sink, _FILE_HEADER.pack(*dataclasses.astuple(file_header)), "file header")
        cls._write_all(sink, _INFO_HEADER.pack(*dataclasses.astuple(out_info)), "info header")

        # bottom row first, each row zero-padded to a 4-byte boundary
        rows = np.zeros((height, row_bytes + padding), dtype=np.uint8)
        rows[:, :row_bytes] = buffer.pixels[::-1].reshape(height, row_bytes)
        cls._write_all(sink, rows.tobytes(), "pixel data")

        logger.debug(f"Encoded {width}x{height} BMP ({file_header.file_size} bytes)")
        return file_header, out_info

    # ---------- in-memory helpers ----------
    @classmethod
    def decode_bytes(cls, data: bytes) -> Tuple[FileHeader, InfoHeader, PixelBuffer]:
        return cls.decode(io.BytesIO(data))

    @classmethod
    def encode_bytes(cls, info: InfoHeader, buffer: PixelBuffer) -> bytes:
        sink = io.BytesIO()
        cls.encode(info, buffer, sink)
        return sink.getvalue()
