"""
Error types raised by the codec and the transforms.

Every failure is final for the operation that raised it: nothing is retried
or repaired, and no partially decoded image is ever returned.
"""


class BmpError(Exception):
    """Base class for everything this package raises on purpose."""


class FormatError(BmpError, ValueError):
    """Malformed or unsupported BMP input (magic, bit depth, compression, dimensions)."""


class TruncatedDataError(BmpError, IOError):
    """The source or destination delivered fewer bytes than required."""


class InvalidArgumentError(BmpError, ValueError):
    """A caller broke a contract: mismatched dimensions, malformed kernel, unknown preset."""
