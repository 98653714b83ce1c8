"""
BMP Codec Tests
===============

Header validation, row padding, bottom-up row order and the exact byte
layout written by the encoder.
"""

import io
import struct

import numpy as np
import pytest

from bmpfilter.exceptions import FormatError, InvalidArgumentError, TruncatedDataError
from bmpfilter.models.bmp_headers import InfoHeader
from bmpfilter.models.pixel_buffer import PixelBuffer
from bmpfilter.repositories.bmp_codec import BmpCodec, row_layout

from conftest import build_bmp, random_pixels


RED_BGR = (0, 0, 255)


# =============================================================================
# Tests: Row Layout
# =============================================================================

class TestRowLayout:

    @pytest.mark.parametrize("width,expected", [
        (1, (3, 1)),
        (2, (6, 2)),
        (3, (9, 3)),
        (4, (12, 0)),
        (5, (15, 1)),
    ])
    def test_rows_padded_to_four_bytes(self, width, expected):
        assert row_layout(width) == expected


# =============================================================================
# Tests: Decode
# =============================================================================

class TestDecode:

    def test_pixels_are_top_down(self, color_pixels, color_bmp):
        _, info, buffer = BmpCodec.decode_bytes(color_bmp)

        assert (info.width, info.height) == (5, 4)
        np.testing.assert_array_equal(buffer.pixels, color_pixels)

    def test_first_disk_row_is_bottom_row(self):
        pixels = np.zeros((3, 2, 3), dtype=np.uint8)
        pixels[2] = (10, 20, 30)   # bottom row
        data = build_bmp(pixels)

        # first row on disk starts right after the headers
        assert data[54:57] == bytes((10, 20, 30))
        _, _, buffer = BmpCodec.decode_bytes(data)
        assert tuple(buffer.pixels[2, 0]) == (10, 20, 30)
        assert not buffer.pixels[:2].any()

    def test_headers_are_returned(self, color_bmp):
        file_header, info, _ = BmpCodec.decode_bytes(color_bmp)

        assert file_header.signature == b"BM"
        assert file_header.data_offset == 54
        assert file_header.file_size == len(color_bmp)
        assert info.header_size == 40
        assert info.bits_per_pixel == 24
        assert info.x_pixels_per_meter == 2835

    def test_gap_before_pixel_data_is_skipped(self, color_pixels):
        data = build_bmp(color_pixels, gap=b"\xee" * 16)
        file_header, _, buffer = BmpCodec.decode_bytes(data)

        assert file_header.data_offset == 70
        np.testing.assert_array_equal(buffer.pixels, color_pixels)

    def test_padding_bytes_are_discarded(self, rng):
        pixels = random_pixels(rng, width=3, height=3)   # 3 padding bytes per row
        _, _, buffer = BmpCodec.decode_bytes(build_bmp(pixels, pad_byte=0xAB))

        np.testing.assert_array_equal(buffer.pixels, pixels)

    def test_missing_padding_after_last_row_is_tolerated(self, rng):
        pixels = random_pixels(rng, width=1, height=2)
        data = build_bmp(pixels)[:-1]

        _, _, buffer = BmpCodec.decode_bytes(data)
        np.testing.assert_array_equal(buffer.pixels, pixels)

    def test_decode_from_file_object(self, bmp_file, color_pixels):
        with bmp_file.open("rb") as fh:
            _, _, buffer = BmpCodec.decode(fh)
        np.testing.assert_array_equal(buffer.pixels, color_pixels)


# =============================================================================
# Tests: Rejection
# =============================================================================

class TestRejection:

    def test_bad_magic(self, color_pixels):
        with pytest.raises(FormatError, match="Not a BMP"):
            BmpCodec.decode_bytes(build_bmp(color_pixels, magic=b"XX"))

    def test_eight_bits_per_pixel(self, color_pixels):
        with pytest.raises(FormatError, match="Unsupported encoding"):
            BmpCodec.decode_bytes(build_bmp(color_pixels, bpp=8))

    def test_compressed(self, color_pixels):
        with pytest.raises(FormatError, match="Unsupported encoding"):
            BmpCodec.decode_bytes(build_bmp(color_pixels, compression=1))

    def test_negative_height(self, color_pixels):
        with pytest.raises(FormatError, match="Unsupported dimensions"):
            BmpCodec.decode_bytes(build_bmp(color_pixels, height=-10))

    def test_zero_width(self, color_pixels):
        with pytest.raises(FormatError, match="Unsupported dimensions"):
            BmpCodec.decode_bytes(build_bmp(color_pixels, width=0))

    def test_wrong_info_header_size(self, color_pixels):
        with pytest.raises(FormatError, match="header size"):
            BmpCodec.decode_bytes(build_bmp(color_pixels, header_size=108))

    def test_wrong_plane_count(self, color_pixels):
        with pytest.raises(FormatError, match="plane"):
            BmpCodec.decode_bytes(build_bmp(color_pixels, planes=2))

    def test_format_error_is_a_value_error(self, color_pixels):
        with pytest.raises(ValueError):
            BmpCodec.decode_bytes(build_bmp(color_pixels, magic=b"XX"))

    def test_truncated_row(self, color_bmp):
        with pytest.raises(TruncatedDataError, match="Truncated row"):
            BmpCodec.decode_bytes(color_bmp[:-20])

    def test_truncated_row_is_an_io_error(self, color_bmp):
        with pytest.raises(IOError):
            BmpCodec.decode_bytes(color_bmp[:-20])

    @pytest.mark.parametrize("width,height", [(2**31 - 1, 2**31 - 1), (100_000, 100_000)])
    def test_huge_declared_size_fails_before_allocating(self, width, height):
        data = build_bmp(np.zeros((1, 1, 3), dtype=np.uint8), width=width, height=height)
        with pytest.raises(TruncatedDataError, match="Truncated row data"):
            BmpCodec.decode_bytes(data)

    def test_data_offset_past_end(self, color_pixels):
        data = bytearray(build_bmp(color_pixels))
        struct.pack_into("<I", data, 10, 10_000)
        with pytest.raises(TruncatedDataError):
            BmpCodec.decode_bytes(bytes(data))

    def test_truncated_header(self, color_bmp):
        with pytest.raises(TruncatedDataError, match="info header"):
            BmpCodec.decode_bytes(color_bmp[:30])

    def test_empty_input(self):
        with pytest.raises(TruncatedDataError, match="file header"):
            BmpCodec.decode_bytes(b"")


# =============================================================================
# Tests: Encode
# =============================================================================

class TestEncode:

    @pytest.mark.parametrize("width,height,expected_size", [
        (1, 3, 54 + 3 * 4),     # 3 data bytes + 1 padding per row
        (4, 3, 54 + 3 * 12),    # no padding
        (2, 5, 54 + 5 * 8),
    ])
    def test_file_size_includes_padding(self, width, height, expected_size):
        buffer = PixelBuffer.blank(width, height)
        data = BmpCodec.encode_bytes(InfoHeader.for_dimensions(width, height), buffer)

        assert len(data) == expected_size
        assert struct.unpack_from("<I", data, 2)[0] == expected_size
        assert struct.unpack_from("<I", data, 34)[0] == expected_size - 54

    def test_header_layout(self, color_buffer):
        data = BmpCodec.encode_bytes(InfoHeader.for_dimensions(5, 4), color_buffer)

        magic, size, r1, r2, offset = struct.unpack_from("<2sIHHI", data, 0)
        assert (magic, r1, r2, offset) == (b"BM", 0, 0, 54)
        assert size == len(data)
        fields = struct.unpack_from("<IiiHHIIiiII", data, 14)
        assert fields[:6] == (40, 5, 4, 1, 24, 0)

    def test_pass_through_fields_and_fixed_fields(self, color_pixels):
        data = build_bmp(color_pixels, x_ppm=1234, y_ppm=4321, colors_used=7, colors_important=3)
        _, info, buffer = BmpCodec.decode_bytes(data)
        info.image_size = 999999  # advisory, must be recomputed

        _, written = BmpCodec.encode(info, buffer, io.BytesIO())

        assert (written.x_pixels_per_meter, written.y_pixels_per_meter) == (1234, 4321)
        assert (written.colors_used, written.colors_important) == (7, 3)
        assert written.image_size == 4 * 16
        assert (written.header_size, written.planes, written.bits_per_pixel, written.compression) == (40, 1, 24, 0)

    def test_padding_written_as_zero(self):
        buffer = PixelBuffer(np.full((2, 1, 3), 255, dtype=np.uint8))
        data = BmpCodec.encode_bytes(InfoHeader.for_dimensions(1, 2), buffer)

        assert data[54:] == b"\xff\xff\xff\x00" * 2

    def test_red_top_row_written_last(self):
        pixels = np.zeros((3, 2, 3), dtype=np.uint8)
        pixels[0] = RED_BGR
        data = BmpCodec.encode_bytes(InfoHeader.for_dimensions(2, 3), PixelBuffer(pixels))

        # 2 px * 3 bytes + 2 padding per row; top row is the last one on disk
        assert data[-8:] == bytes(RED_BGR * 2) + b"\x00\x00"
        assert data[54:62] == b"\x00" * 8

    def test_dimension_mismatch(self, color_buffer):
        with pytest.raises(InvalidArgumentError):
            BmpCodec.encode_bytes(InfoHeader.for_dimensions(4, 5), color_buffer)

    def test_closed_destination(self, color_buffer):
        sink = io.BytesIO()
        sink.close()
        with pytest.raises(TruncatedDataError, match="closed"):
            BmpCodec.encode(InfoHeader.for_dimensions(5, 4), color_buffer, sink)

    def test_short_write(self, color_buffer):
        class ShortSink(io.RawIOBase):
            def writable(self):
                return True

            def write(self, b):
                return max(0, len(b) - 1)

        with pytest.raises(TruncatedDataError, match="Short write"):
            BmpCodec.encode(InfoHeader.for_dimensions(5, 4), color_buffer, ShortSink())


# =============================================================================
# Tests: Round Trip
# =============================================================================

class TestRoundTrip:

    @pytest.mark.parametrize("width,height", [(1, 1), (3, 2), (4, 4), (7, 3)])
    def test_decode_encode_preserves_pixels(self, rng, width, height):
        buffer = PixelBuffer(random_pixels(rng, width, height))
        data = BmpCodec.encode_bytes(InfoHeader.for_dimensions(width, height), buffer)

        _, info, decoded = BmpCodec.decode_bytes(data)
        assert (info.width, info.height) == (width, height)
        np.testing.assert_array_equal(decoded.pixels, buffer.pixels)

    def test_red_row_returns_to_top(self):
        pixels = np.zeros((4, 3, 3), dtype=np.uint8)
        pixels[0] = RED_BGR
        data = BmpCodec.encode_bytes(InfoHeader.for_dimensions(3, 4), PixelBuffer(pixels))

        _, _, decoded = BmpCodec.decode_bytes(data)
        assert (decoded.pixels[0] == RED_BGR).all()
        assert not decoded.pixels[1:].any()

    def test_reencoding_decoded_file_is_byte_identical(self, color_bmp):
        _, info, buffer = BmpCodec.decode_bytes(color_bmp)
        assert BmpCodec.encode_bytes(info, buffer) == color_bmp


# =============================================================================
# Tests: Interop with Pillow
# =============================================================================

class TestPillowInterop:

    def test_reads_pillow_output(self, rng):
        PILImage = pytest.importorskip("PIL.Image")
        rgb = rng.integers(0, 256, size=(6, 7, 3), dtype=np.uint8)
        out = io.BytesIO()
        PILImage.fromarray(rgb).save(out, format="BMP")

        _, _, buffer = BmpCodec.decode_bytes(out.getvalue())
        np.testing.assert_array_equal(buffer.to_rgb(), rgb)

    def test_pillow_reads_our_output(self, rng):
        PILImage = pytest.importorskip("PIL.Image")
        rgb = rng.integers(0, 256, size=(5, 6, 3), dtype=np.uint8)
        buffer = PixelBuffer.from_rgb(rgb)
        data = BmpCodec.encode_bytes(InfoHeader.for_dimensions(6, 5), buffer)

        decoded = np.asarray(PILImage.open(io.BytesIO(data)).convert("RGB"))
        np.testing.assert_array_equal(decoded, rgb)
