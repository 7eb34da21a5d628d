"""TinyMeta codecs: compact JSON and gzip-compressed JSON."""

from __future__ import annotations

import gzip
import json
import zlib
from typing import Any, Dict

from tinymedia.codec.base import MetaCodec
from tinymedia.errors import (
    CodecEncodeError,
    CompressedStreamError,
    InvalidPayloadError,
)

__all__ = ["TinyMetaCodec", "TinyMetaGzipCodec", "TINYMETA", "TINYMETA_GZIP"]


class TinyMetaCodec(MetaCodec):
    """Flat string map serialized as a compact JSON object."""

    def encode(self, fields: Dict[str, str]) -> bytes:
        if not isinstance(fields, dict):
            raise CodecEncodeError(
                f"fields must be a dict, got {type(fields).__name__}"
            )
        for key, value in fields.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise CodecEncodeError(
                    f"field {key!r} must map a string to a string, "
                    f"got {type(value).__name__}"
                )
        try:
            text = json.dumps(fields, separators=(",", ":"), ensure_ascii=False)
            return text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise CodecEncodeError(f"field cannot be encoded as UTF-8: {e}") from e

    def decode(self, data: bytes) -> Dict[str, str]:
        try:
            decoded: Any = json.loads(bytes(data).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidPayloadError(f"malformed metadata payload: {e}") from e

        # JSON null carries no fields
        if decoded is None:
            return {}
        if not isinstance(decoded, dict):
            raise InvalidPayloadError(
                f"metadata payload must be a JSON object, got {type(decoded).__name__}"
            )
        for key, value in decoded.items():
            if not isinstance(value, str):
                raise InvalidPayloadError(
                    f"metadata field {key!r} is not a string: {value!r}"
                )
        return decoded


class TinyMetaGzipCodec(MetaCodec):
    """TinyMeta JSON wrapped in a gzip stream."""

    def __init__(self, inner: MetaCodec | None = None) -> None:
        self.inner = inner or TinyMetaCodec()

    def encode(self, fields: Dict[str, str]) -> bytes:
        # mtime=0 keeps the gzip header stable across runs
        return gzip.compress(self.inner.encode(fields), mtime=0)

    def decode(self, data: bytes) -> Dict[str, str]:
        try:
            raw = gzip.decompress(bytes(data))
        except (OSError, EOFError, zlib.error) as e:
            raise CompressedStreamError(f"invalid gzip metadata payload: {e}") from e
        return self.inner.decode(raw)


TINYMETA = TinyMetaCodec()
TINYMETA_GZIP = TinyMetaGzipCodec(TINYMETA)
