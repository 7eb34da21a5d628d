"""Exception types raised by tinymedia."""

from __future__ import annotations

__all__ = [
    "TinyMediaError",
    "UnsupportedFileTypeError",
    "VendorNotSupportedError",
    "MarkerNotFoundError",
    "DataSizeTooLargeError",
    "CorruptedSegmentError",
    "CodecEncodeError",
    "CodecDecodeError",
    "InvalidPayloadError",
    "CompressedStreamError",
    "FileUpdateError",
]


class TinyMediaError(Exception):
    """Base class for every error raised by this package."""


class UnsupportedFileTypeError(TinyMediaError):
    """Magic bytes do not belong to a supported format."""


class VendorNotSupportedError(TinyMediaError):
    def __init__(self, vendor: str) -> None:
        super().__init__(f"vendor not supported: {vendor!r}")
        self.vendor = vendor


class MarkerNotFoundError(TinyMediaError):
    """No segment for the requested marker + vendor magic before start of scan."""

    def __init__(self, marker: int, vendor_magic: bytes) -> None:
        super().__init__(
            f"marker not found: 0x{marker:04X} with vendor magic {vendor_magic!r}"
        )
        self.marker = marker
        self.vendor_magic = vendor_magic


class DataSizeTooLargeError(TinyMediaError):
    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(f"data size too large: {size} bytes (max {max_size})")
        self.size = size
        self.max_size = max_size


class CorruptedSegmentError(TinyMediaError):
    """Stream ended before a segment header or its claimed length was satisfied."""


class CodecEncodeError(TinyMediaError):
    """Fields cannot be represented by the codec."""


class CodecDecodeError(TinyMediaError):
    """Segment payload cannot be decoded."""


class InvalidPayloadError(CodecDecodeError):
    """Payload is not a JSON object of string values."""


class CompressedStreamError(CodecDecodeError):
    """Payload is not a valid gzip stream."""


class FileUpdateError(TinyMediaError):
    """Atomic replacement of a file failed."""
