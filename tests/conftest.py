import io
import struct
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

import pytest

from tinymedia.codec import TINYMETA, TINYMETA_GZIP
from tinymedia.core.registry import VendorRegistry

SOS_SEGMENT = b"\xFF\xDA\x00\x02"
IMAGE_DATA = b"\x12\x34\x56\x78" * 8 + b"\xFF\xD9"


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast unit tests")
    config.addinivalue_line(
        "markers",
        "integration: tests that touch the filesystem or run the CLI end to end",
    )


def raw_segment(marker: int, payload: bytes) -> bytes:
    """marker(2) + length(2) + payload, length counting itself."""
    return struct.pack(">HH", marker, len(payload) + 2) + payload


@pytest.fixture
def segment_bytes() -> Callable[[int, bytes], bytes]:
    return raw_segment


@pytest.fixture
def jpeg_bytes() -> Callable[..., bytes]:
    """Build a minimal JPEG: SOI, segments, SOS, image data."""

    def _build(
        segments: Iterable[bytes] = (),
        with_sos: bool = True,
        tail: bytes = IMAGE_DATA,
    ) -> bytes:
        body = b"".join(segments)
        if with_sos:
            body += SOS_SEGMENT + tail
        return b"\xFF\xD8" + body

    return _build


@pytest.fixture
def jpeg_stream(jpeg_bytes) -> Callable[..., io.BytesIO]:
    def _stream(*args, **kwargs) -> io.BytesIO:
        return io.BytesIO(jpeg_bytes(*args, **kwargs))

    return _stream


@pytest.fixture
def fake_registry() -> VendorRegistry:
    """Registry with short fake vendors, one per codec."""
    registry = VendorRegistry()
    registry.register("v1", TINYMETA, 0xFFE0)
    registry.register("v1-gzip", TINYMETA_GZIP, 0xFFE1)
    return registry


@pytest.fixture
def write_jpeg(tmp_path, jpeg_bytes, segment_bytes) -> Callable[..., Path]:
    """Write a JPEG file, optionally carrying a tinymeta segment."""

    def _write(
        name: str = "test.jpg",
        fields: Optional[Dict[str, str]] = None,
    ) -> Path:
        segments = [segment_bytes(0xFFDB, b"\x00" * 65)]
        if fields is not None:
            payload = b"tinymeta\0" + TINYMETA.encode(fields)
            segments.insert(0, segment_bytes(0xFFE0, payload))
        path = tmp_path / name
        path.write_bytes(jpeg_bytes(segments))
        return path

    return _write
