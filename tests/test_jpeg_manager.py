"""Tests for JpegMetaManager insert / upsert / extract / compose_output."""
import io
import json

import pytest

from tinymedia.codec import TINYMETA, TINYMETA_GZIP
from tinymedia.core.constants import DATA_MAX_SIZE
from tinymedia.core.jpeg_manager import JpegMetaManager
from tinymedia.core.manager import new_meta_manager
from tinymedia.core.models import Segment
from tinymedia.errors import (
    CompressedStreamError,
    CorruptedSegmentError,
    DataSizeTooLargeError,
    InvalidPayloadError,
    MarkerNotFoundError,
    UnsupportedFileTypeError,
    VendorNotSupportedError,
)
from tinymedia.file.filetype import FileType


def output_bytes(manager: JpegMetaManager) -> bytes:
    return b"".join(manager.compose_output())


def tinymeta_segment(segment_bytes, fields, magic=b"tinymeta\0"):
    return segment_bytes(0xFFE0, magic + TINYMETA.encode(fields))


@pytest.mark.unit
def test_bare_jpeg_insert_scenario(fake_registry):
    manager = JpegMetaManager(io.BytesIO(b"\xFF\xD8"), registry=fake_registry)

    manager.insert("v1", {"artist": "A"})

    payload = b'v1\0{"artist":"A"}'
    expected = b"\xFF\xD8" + b"\xFF\xE0" + (len(payload) + 2).to_bytes(2, "big") + payload
    assert output_bytes(manager) == expected


@pytest.mark.unit
def test_constructor_reads_prefix_only(jpeg_stream):
    stream = jpeg_stream()
    manager = JpegMetaManager(stream)

    assert manager.prefix == b"\xFF\xD8"
    assert manager.segments == []
    assert stream.tell() == 2


@pytest.mark.unit
@pytest.mark.parametrize("data", [b"", b"\xFF", b"\x89PNG\r\n\x1a\n"])
def test_constructor_rejects_non_jpeg(data):
    with pytest.raises(UnsupportedFileTypeError):
        JpegMetaManager(io.BytesIO(data))


@pytest.mark.unit
def test_constructor_rejects_bad_chunk_size():
    with pytest.raises(ValueError, match="chunk_size"):
        JpegMetaManager(io.BytesIO(b"\xFF\xD8"), chunk_size=0)


@pytest.mark.unit
def test_unmodified_output_matches_input(jpeg_bytes, segment_bytes):
    data = jpeg_bytes([segment_bytes(0xFFDB, b"\x01" * 65), segment_bytes(0xFFC0, b"\x02" * 15)])
    manager = JpegMetaManager(io.BytesIO(data))

    with pytest.raises(MarkerNotFoundError):
        manager.extract("tinymeta", "artist")

    assert output_bytes(manager) == data


@pytest.mark.unit
def test_insert_vendor_not_supported():
    manager = JpegMetaManager(io.BytesIO(b"\xFF\xD8"))
    with pytest.raises(VendorNotSupportedError):
        manager.insert("unsupported", {"test": "test"})


@pytest.mark.unit
def test_insert_data_size_too_large():
    manager = JpegMetaManager(io.BytesIO(b"\xFF\xD8"))
    with pytest.raises(DataSizeTooLargeError):
        manager.insert("tinymeta", {"key": "a" * DATA_MAX_SIZE})
    assert manager.segments == []


@pytest.mark.unit
def test_insert_size_boundary():
    # data size = length field(2) + b"tinymeta\0"(9) + {"key":"..."}(10 + n)
    fits = DATA_MAX_SIZE - 2 - 9 - 10
    manager = JpegMetaManager(io.BytesIO(b"\xFF\xD8"))

    manager.insert("tinymeta", {"key": "a" * fits})
    assert manager.segments[0].length == DATA_MAX_SIZE

    with pytest.raises(DataSizeTooLargeError):
        manager.insert("tinymeta", {"key": "a" * (fits + 1)})
    assert len(manager.segments) == 1


@pytest.mark.unit
def test_insert_places_segment_first(jpeg_stream):
    manager = JpegMetaManager(jpeg_stream())
    manager.segments.append(Segment(b"test"))
    fields = {"k": "v"}

    manager.insert("tinymeta", fields)

    expected = Segment.create(0xFFE0, b"tinymeta\0", TINYMETA.encode(fields))
    assert len(manager.segments) == 2
    assert manager.segments[0] == expected
    assert manager.segments[1].raw == b"test"


@pytest.mark.unit
@pytest.mark.parametrize("vendor", ["tinymeta", "tinymeta-gzip"])
def test_insert_extract_round_trip(vendor, jpeg_stream):
    fields = {"artist": "Test Artist", "title": "Test Title", "year": ""}
    manager = JpegMetaManager(jpeg_stream())

    manager.insert(vendor, fields)

    assert manager.extract(vendor, *fields) == fields


@pytest.mark.unit
def test_extract_subset_and_missing_names(jpeg_stream, segment_bytes):
    stream = jpeg_stream([tinymeta_segment(segment_bytes, {"a": "1", "b": "2"})])
    manager = JpegMetaManager(stream)

    assert manager.extract("tinymeta", "a", "missing") == {"a": "1"}


@pytest.mark.unit
def test_extract_no_names_returns_empty(jpeg_stream, segment_bytes):
    stream = jpeg_stream([tinymeta_segment(segment_bytes, {"a": "1"})])
    manager = JpegMetaManager(stream)

    assert manager.extract("tinymeta") == {}


@pytest.mark.unit
def test_extract_missing_vendor_segment(jpeg_stream, segment_bytes):
    stream = jpeg_stream([tinymeta_segment(segment_bytes, {"a": "1"})])
    manager = JpegMetaManager(stream)

    with pytest.raises(MarkerNotFoundError):
        manager.extract("tinymeta-gzip", "a")


@pytest.mark.unit
def test_extract_skips_other_vendor_on_same_marker(jpeg_stream, segment_bytes):
    """JFIF uses APP0 too; only the vendor magic tells them apart."""
    jfif = segment_bytes(0xFFE0, b"JFIF\0\x01\x01\x00\x00\x01\x00\x01\x00\x00")
    stream = jpeg_stream([jfif, tinymeta_segment(segment_bytes, {"a": "1"})])
    manager = JpegMetaManager(stream)

    assert manager.extract("tinymeta", "a") == {"a": "1"}
    assert manager.segments[0].raw == jfif


@pytest.mark.unit
def test_extract_truncated_stream(jpeg_bytes):
    data = jpeg_bytes(with_sos=False) + b"\xFF\xE0\x01\x00" + b"short"
    manager = JpegMetaManager(io.BytesIO(data))

    with pytest.raises(CorruptedSegmentError):
        manager.extract("tinymeta", "a")


@pytest.mark.unit
def test_extract_vendor_not_supported(jpeg_stream):
    manager = JpegMetaManager(jpeg_stream())
    with pytest.raises(VendorNotSupportedError):
        manager.extract("nope", "a")


@pytest.mark.unit
def test_extract_bad_payload(jpeg_stream, segment_bytes):
    stream = jpeg_stream([segment_bytes(0xFFE0, b"tinymeta\0{broken")])
    manager = JpegMetaManager(stream)

    with pytest.raises(InvalidPayloadError):
        manager.extract("tinymeta", "a")


@pytest.mark.unit
def test_extract_bad_gzip_payload(jpeg_stream, segment_bytes):
    stream = jpeg_stream([segment_bytes(0xFFE1, b"tinymeta-gzip\0not gzip")])
    manager = JpegMetaManager(stream)

    with pytest.raises(CompressedStreamError):
        manager.extract("tinymeta-gzip", "a")


@pytest.mark.unit
def test_upsert_merge_preserves_untouched_keys(jpeg_stream, segment_bytes):
    stream = jpeg_stream([tinymeta_segment(segment_bytes, {"a": "1", "b": "2"})])
    manager = JpegMetaManager(stream)

    manager.upsert("tinymeta", {"b": "3"})

    assert manager.extract("tinymeta", "a", "b") == {"a": "1", "b": "3"}


@pytest.mark.unit
def test_upsert_replaces_segment_in_place(jpeg_stream, segment_bytes):
    dqt = segment_bytes(0xFFDB, b"\x00" * 65)
    stream = jpeg_stream([dqt, tinymeta_segment(segment_bytes, {"a": "1"})])
    manager = JpegMetaManager(stream)

    manager.upsert("tinymeta", {"title": "long enough to grow the segment"})

    assert len(manager.segments) == 2
    assert manager.segments[0].raw == dqt
    updated = manager.segments[1]
    assert updated.length == len(updated.raw) - 2
    payload = updated.raw[4 + len(b"tinymeta\0") :]
    assert json.loads(payload) == {"a": "1", "title": "long enough to grow the segment"}


@pytest.mark.unit
def test_upsert_inserts_when_missing(jpeg_bytes, segment_bytes):
    dqt = segment_bytes(0xFFDB, b"\x00" * 65)
    data = jpeg_bytes([dqt])
    manager = JpegMetaManager(io.BytesIO(data))

    manager.upsert("tinymeta", {"artist": "A"})

    # new segment goes before everything scanned so far
    assert manager.segments[0].matches(0xFFE0, b"tinymeta\0")
    assert manager.segments[1].raw == dqt
    out = output_bytes(manager)
    inserted = manager.segments[0].raw
    assert out == b"\xFF\xD8" + inserted + data[2:]


@pytest.mark.unit
@pytest.mark.parametrize("vendor", ["tinymeta", "tinymeta-gzip"])
def test_upsert_twice_equals_single_merged_upsert(vendor, jpeg_bytes):
    data = jpeg_bytes()
    f1 = {"a": "1", "b": "2"}
    f2 = {"b": "20", "c": "30"}

    twice = JpegMetaManager(io.BytesIO(data))
    twice.upsert(vendor, f1)
    twice.upsert(vendor, f2)

    once = JpegMetaManager(io.BytesIO(data))
    once.upsert(vendor, {**f1, **f2})

    names = ("a", "b", "c")
    assert twice.extract(vendor, *names) == once.extract(vendor, *names)
    assert output_bytes(twice) == output_bytes(once)


@pytest.mark.unit
def test_upsert_existing_empty_payload(jpeg_stream, segment_bytes):
    stream = jpeg_stream([segment_bytes(0xFFE0, b"tinymeta\0")])
    manager = JpegMetaManager(stream)

    manager.upsert("tinymeta", {"a": "1"})

    assert len(manager.segments) == 1
    assert manager.extract("tinymeta", "a") == {"a": "1"}


@pytest.mark.unit
def test_upsert_too_large_leaves_segment_untouched(jpeg_stream, segment_bytes):
    stream = jpeg_stream([tinymeta_segment(segment_bytes, {"a": "1"})])
    manager = JpegMetaManager(stream)
    manager.extract("tinymeta", "a")
    before = manager.segments[0]

    with pytest.raises(DataSizeTooLargeError):
        manager.upsert("tinymeta", {"b": "x" * DATA_MAX_SIZE})

    assert manager.segments[0] == before


@pytest.mark.unit
def test_upsert_propagates_decode_error(jpeg_stream, segment_bytes):
    stream = jpeg_stream([segment_bytes(0xFFE0, b"tinymeta\0[]")])
    manager = JpegMetaManager(stream)

    with pytest.raises(InvalidPayloadError):
        manager.upsert("tinymeta", {"a": "1"})


@pytest.mark.unit
def test_upsert_propagates_corruption(jpeg_bytes):
    data = jpeg_bytes(with_sos=False) + b"\xFF\xE0\x00\x20"
    manager = JpegMetaManager(io.BytesIO(data))

    with pytest.raises(CorruptedSegmentError):
        manager.upsert("tinymeta", {"a": "1"})
    assert manager.segments == []


@pytest.mark.unit
def test_vendors_are_independent(jpeg_stream):
    manager = JpegMetaManager(jpeg_stream())

    manager.upsert("tinymeta", {"a": "plain"})
    manager.upsert("tinymeta-gzip", {"a": "gzip"})

    assert manager.extract("tinymeta", "a") == {"a": "plain"}
    assert manager.extract("tinymeta-gzip", "a") == {"a": "gzip"}
    assert manager.segments[0].marker == 0xFFE1
    assert manager.segments[1].marker == 0xFFE0


@pytest.mark.unit
def test_compose_output_streams_tail_in_chunks(jpeg_bytes):
    tail = bytes(range(256)) * 4
    data = jpeg_bytes(tail=tail)
    manager = JpegMetaManager(io.BytesIO(data), chunk_size=100)
    manager.insert("tinymeta", {"a": "1"})

    chunks = list(manager.compose_output())

    assert chunks[0] == b"\xFF\xD8"
    assert chunks[1] == manager.segments[0].raw
    assert all(len(c) <= 100 for c in chunks[2:])
    assert b"".join(chunks[2:]) == data[2:]


@pytest.mark.unit
def test_compose_output_after_extract_keeps_scanned_segments(jpeg_bytes, segment_bytes):
    meta = tinymeta_segment(segment_bytes, {"a": "1"})
    data = jpeg_bytes([meta])
    manager = JpegMetaManager(io.BytesIO(data))

    manager.upsert("tinymeta", {"b": "2"})

    out = output_bytes(manager)
    updated = Segment.create(0xFFE0, b"tinymeta\0", TINYMETA.encode({"a": "1", "b": "2"}))
    assert out == b"\xFF\xD8" + updated.raw + data[2 + len(meta) :]


@pytest.mark.unit
def test_custom_registry_vendor(fake_registry):
    manager = JpegMetaManager(io.BytesIO(b"\xFF\xD8"), registry=fake_registry)
    manager.insert("v1-gzip", {"a": "1"})

    segment = manager.segments[0]
    assert segment.marker == 0xFFE1
    assert segment.payload.startswith(b"v1-gzip\0")
    assert TINYMETA_GZIP.decode(segment.payload[len(b"v1-gzip\0") :]) == {"a": "1"}

    with pytest.raises(VendorNotSupportedError):
        manager.insert("tinymeta", {"a": "1"})


@pytest.mark.unit
def test_new_meta_manager_jpeg(jpeg_stream, fake_registry):
    manager = new_meta_manager(jpeg_stream(), FileType.JPEG, registry=fake_registry)

    assert isinstance(manager, JpegMetaManager)
    assert manager.registry is fake_registry


@pytest.mark.unit
def test_new_meta_manager_unsupported(jpeg_stream):
    with pytest.raises(UnsupportedFileTypeError):
        new_meta_manager(jpeg_stream(), "png")
