"""JpegMetaManager for reading and editing vendor metadata segments."""

from __future__ import annotations

from typing import BinaryIO, Dict, Iterator, List, Optional

from tinymedia.core.constants import DEFAULT_CHUNK_SIZE, JPEG_MAGIC
from tinymedia.core.models import CodecVendor, Segment
from tinymedia.core.registry import VendorRegistry, default_registry
from tinymedia.core.segment_scanner import SegmentScanner, read_exact
from tinymedia.errors import MarkerNotFoundError, UnsupportedFileTypeError
from tinymedia.utils.logging import get_logger

logger = get_logger(__name__)


class JpegMetaManager:
    """
    Metadata manager for one JPEG stream.

    Reads the SOI magic eagerly, then scans marker segments only as far as a
    lookup needs. Edits are kept in the segment cache; the edited file is
    produced by ``compose_output()``.

    Not safe for concurrent use; one instance per file.
    """

    def __init__(
        self,
        stream: BinaryIO,
        registry: Optional[VendorRegistry] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """
        Args:
            stream: Binary stream positioned at the start of the file
            registry: Vendor registry (default: built-in TinyMeta vendors)
            chunk_size: Size of tail chunks yielded by compose_output()

        Raises:
            UnsupportedFileTypeError: If the stream does not start with SOI
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        prefix = read_exact(stream, len(JPEG_MAGIC))
        if len(prefix) < len(JPEG_MAGIC):
            raise UnsupportedFileTypeError("failed to read the magic bytes")
        if prefix != JPEG_MAGIC:
            raise UnsupportedFileTypeError(f"not a JPEG stream: magic {prefix!r}")

        self.prefix = prefix
        self.registry = registry or default_registry()
        self.chunk_size = chunk_size
        self._scanner = SegmentScanner(stream)

    @property
    def segments(self) -> List[Segment]:
        """Segment cache in output order."""
        return self._scanner.segments

    @property
    def scanner(self) -> SegmentScanner:
        return self._scanner

    def insert(self, vendor: str, fields: Dict[str, str]) -> None:
        """
        Add a new metadata segment right after the SOI magic.

        Raises:
            VendorNotSupportedError: If vendor is unknown
            DataSizeTooLargeError: If the segment does not fit the length field
            CodecEncodeError: If fields cannot be encoded
        """
        codec_vendor = self.registry.resolve(vendor)
        encoded = codec_vendor.codec.encode(fields)
        segment = Segment.create(codec_vendor.marker, codec_vendor.vendor_magic, encoded)
        self.segments.insert(0, segment)
        logger.debug(
            "segment_inserted",
            vendor=vendor,
            marker=f"0x{codec_vendor.marker:04X}",
            length=segment.length,
            fields=len(fields),
        )

    def upsert(self, vendor: str, fields: Dict[str, str]) -> None:
        """
        Merge fields into the vendor segment, inserting it if absent.

        Existing keys not named in fields are kept; named keys are overwritten.

        Raises:
            VendorNotSupportedError: If vendor is unknown
            DataSizeTooLargeError: If the merged segment does not fit
            CorruptedSegmentError: If the stream ends inside a segment
            CodecDecodeError: If the existing payload cannot be decoded
        """
        codec_vendor = self.registry.resolve(vendor)
        try:
            index = self._scanner.find_segment(
                codec_vendor.marker, codec_vendor.vendor_magic
            )
        except MarkerNotFoundError:
            self.insert(vendor, fields)
            return

        segment = self.segments[index]
        decoded = self._decode(codec_vendor, segment)
        decoded.update(fields)

        encoded = codec_vendor.codec.encode(decoded)
        updated = segment.with_data(codec_vendor.data_offset, encoded)
        self.segments[index] = updated
        logger.debug(
            "segment_updated",
            vendor=vendor,
            index=index,
            length=updated.length,
            fields=len(fields),
        )

    def extract(self, vendor: str, *fields: str) -> Dict[str, str]:
        """
        Read the requested fields from the vendor segment.

        Names missing from the segment are left out of the result; no names
        yields an empty dict.

        Raises:
            VendorNotSupportedError: If vendor is unknown
            MarkerNotFoundError: If the file has no segment for vendor
            CorruptedSegmentError: If the stream ends inside a segment
            CodecDecodeError: If the payload cannot be decoded
        """
        codec_vendor = self.registry.resolve(vendor)
        index = self._scanner.find_segment(codec_vendor.marker, codec_vendor.vendor_magic)
        decoded = self._decode(codec_vendor, self.segments[index])

        result = {name: decoded[name] for name in fields if name in decoded}
        logger.debug(
            "metadata_extracted",
            vendor=vendor,
            requested=len(fields),
            found=len(result),
        )
        return result

    def _decode(self, codec_vendor: CodecVendor, segment: Segment) -> Dict[str, str]:
        data = segment.raw[codec_vendor.data_offset :]
        if not data:
            return {}
        return dict(codec_vendor.codec.decode(data))

    def compose_output(self) -> Iterator[bytes]:
        """
        Yield the edited file: prefix, cached segments, then the unread tail.

        Shares the underlying stream, so it must be consumed fully, once and
        in order, before the manager is used again.
        """
        yield self.prefix
        for segment in list(self.segments):
            yield segment.raw
        stream = self._scanner.stream
        while True:
            chunk = stream.read(self.chunk_size)
            if not chunk:
                break
            yield chunk
