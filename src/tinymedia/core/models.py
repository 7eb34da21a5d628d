"""
JPEG segment data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from tinymedia.codec.base import MetaCodec
from tinymedia.core.constants import (
    APP_MARKER_MAX,
    APP_MARKER_MIN,
    DATA_MAX_SIZE,
    HEADER_SIZE,
    UINT16_STRUCT,
    SEGMENT_HEADER_SIZE,
    SEGMENT_HEADER_STRUCT,
)
from tinymedia.errors import DataSizeTooLargeError


@dataclass(frozen=True)
class CodecVendor:
    """
    Codec binding for one vendor identifier.

    Attributes:
        codec: Codec used for the segment payload
        marker: Application marker carrying the segment (0xFFE0-0xFFEF)
        vendor_magic: Null-terminated bytes opening the segment payload
    """

    codec: MetaCodec
    marker: int
    vendor_magic: bytes

    def __post_init__(self) -> None:
        if not APP_MARKER_MIN <= self.marker <= APP_MARKER_MAX:
            raise ValueError(
                f"Invalid vendor marker: 0x{self.marker:04X} "
                f"(expected 0x{APP_MARKER_MIN:04X}-0x{APP_MARKER_MAX:04X})"
            )
        if not self.vendor_magic.endswith(b"\0"):
            raise ValueError(
                f"Vendor magic must be null-terminated: {self.vendor_magic!r}"
            )

    @property
    def data_offset(self) -> int:
        """Offset of the encoded payload within a raw segment."""
        return SEGMENT_HEADER_SIZE + len(self.vendor_magic)


@dataclass
class Segment:
    """
    One raw marker segment: marker(2) + length(2) + payload.

    The bytes are kept exactly as read so that unrelated segments are written
    back untouched.
    """

    raw: bytes

    @classmethod
    def create(cls, marker: int, vendor_magic: bytes, data: bytes) -> "Segment":
        """
        Build a metadata segment.

        Raises:
            DataSizeTooLargeError: If the length field cannot hold the data
        """
        data_size = HEADER_SIZE + len(vendor_magic) + len(data)
        if data_size > DATA_MAX_SIZE:
            raise DataSizeTooLargeError(data_size, DATA_MAX_SIZE)
        header = SEGMENT_HEADER_STRUCT.pack(marker, data_size)
        return cls(header + vendor_magic + data)

    @property
    def marker(self) -> int:
        (marker,) = UINT16_STRUCT.unpack_from(self.raw, 0)
        return marker

    @property
    def length(self) -> int:
        """Value of the length field (counts itself and the payload)."""
        (length,) = UINT16_STRUCT.unpack_from(self.raw, HEADER_SIZE)
        return length

    @property
    def payload(self) -> bytes:
        return self.raw[SEGMENT_HEADER_SIZE:]

    def matches(self, marker: int, vendor_magic: bytes) -> bool:
        """Check marker and vendor magic; too-short segments never match."""
        if len(self.raw) < SEGMENT_HEADER_SIZE + len(vendor_magic):
            return False
        if self.marker != marker:
            return False
        end = SEGMENT_HEADER_SIZE + len(vendor_magic)
        return self.raw[SEGMENT_HEADER_SIZE:end] == vendor_magic

    def with_data(self, data_offset: int, data: bytes) -> "Segment":
        """
        Return a copy with everything after data_offset replaced by data.

        Raises:
            DataSizeTooLargeError: If the length field cannot hold the data
        """
        head = self.raw[:data_offset]
        data_size = len(head) - HEADER_SIZE + len(data)
        if data_size > DATA_MAX_SIZE:
            raise DataSizeTooLargeError(data_size, DATA_MAX_SIZE)
        length = UINT16_STRUCT.pack(data_size)
        return Segment(head[:HEADER_SIZE] + length + head[SEGMENT_HEADER_SIZE:] + data)

    def __len__(self) -> int:
        return len(self.raw)

    def __repr__(self) -> str:
        return f"Segment(marker=0x{self.marker:04X}, length={self.length})"
