"""Incremental JPEG marker segment scanner."""

from __future__ import annotations

from enum import Enum
from typing import BinaryIO, List, Optional

from tinymedia.core.constants import (
    HEADER_SIZE,
    SEGMENT_HEADER_SIZE,
    SEGMENT_HEADER_STRUCT,
    SOS_MARKER,
)
from tinymedia.core.models import Segment
from tinymedia.errors import CorruptedSegmentError, MarkerNotFoundError
from tinymedia.utils.logging import get_logger

__all__ = ["ScanState", "SegmentScanner", "read_exact"]

logger = get_logger(__name__)


class ScanState(str, Enum):
    """NOT_FOUND (start of scan read) and CORRUPTED are terminal."""

    INITIAL = "initial"
    SCANNING = "scanning"
    FOUND = "found"
    NOT_FOUND = "not_found"
    CORRUPTED = "corrupted"


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """
    Read exactly size bytes, looping over short reads.

    Returns fewer bytes only when the stream is exhausted.
    """
    chunks: List[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


class SegmentScanner:
    """
    Walks marker segments of a JPEG stream on demand.

    The stream must be positioned at the start of a marker (right after the
    SOI magic). Every segment read is appended to ``segments`` as raw bytes;
    the stream is never rewound, so a segment is read at most once.
    """

    def __init__(self, stream: BinaryIO, segments: Optional[List[Segment]] = None) -> None:
        self.stream = stream
        self.segments: List[Segment] = segments if segments is not None else []
        self.state = ScanState.INITIAL

    def find_segment(self, marker: int, vendor_magic: bytes) -> int:
        """
        Return the cache index of the segment for marker + vendor magic.

        Cached segments are checked first; on a miss the stream is scanned
        further until the segment is found or start of scan is reached.

        Raises:
            MarkerNotFoundError: If start of scan is reached first
            CorruptedSegmentError: If the stream ends inside a segment
        """
        index = self.find_parsed(marker, vendor_magic)
        if index is not None:
            if not self.done:
                self.state = ScanState.FOUND
            return index

        if self.state == ScanState.CORRUPTED:
            raise CorruptedSegmentError("corrupted segment: stream already failed")
        if self.state == ScanState.NOT_FOUND:
            # only image data remains
            raise MarkerNotFoundError(marker, vendor_magic)

        self.state = ScanState.SCANNING
        while True:
            segment = self.next_segment()
            self.segments.append(segment)
            logger.debug(
                "segment_scanned",
                marker=f"0x{segment.marker:04X}",
                length=segment.length,
                index=len(self.segments) - 1,
            )

            if segment.matches(marker, vendor_magic):
                self.state = ScanState.FOUND
                return len(self.segments) - 1

            if segment.marker == SOS_MARKER:
                self.state = ScanState.NOT_FOUND
                raise MarkerNotFoundError(marker, vendor_magic)

    def find_parsed(self, marker: int, vendor_magic: bytes) -> Optional[int]:
        """Index of a matching cached segment, or None."""
        for i, segment in enumerate(self.segments):
            if segment.matches(marker, vendor_magic):
                return i
        return None

    def next_segment(self) -> Segment:
        """
        Read one segment from the stream.

        Raises:
            CorruptedSegmentError: On a short header or payload read
        """
        header = read_exact(self.stream, SEGMENT_HEADER_SIZE)
        if len(header) < SEGMENT_HEADER_SIZE:
            self._mark_corrupted()
            raise CorruptedSegmentError(
                f"corrupted segment: expected {SEGMENT_HEADER_SIZE} header bytes, "
                f"got {len(header)}"
            )

        marker, length = SEGMENT_HEADER_STRUCT.unpack(header)
        payload_size = length - HEADER_SIZE
        if payload_size < 0:
            self._mark_corrupted()
            raise CorruptedSegmentError(
                f"corrupted segment: marker 0x{marker:04X} has invalid length {length}"
            )

        payload = read_exact(self.stream, payload_size)
        if len(payload) < payload_size:
            self._mark_corrupted()
            raise CorruptedSegmentError(
                f"corrupted segment: marker 0x{marker:04X} claims {payload_size} "
                f"payload bytes, got {len(payload)}"
            )
        return Segment(header + payload)

    def _mark_corrupted(self) -> None:
        self.state = ScanState.CORRUPTED

    @property
    def done(self) -> bool:
        """True once the stream cannot yield more segments."""
        return self.state in (ScanState.NOT_FOUND, ScanState.CORRUPTED)
