"""Metadata payload codecs."""

from .base import MetaCodec
from .tinymeta import TINYMETA, TINYMETA_GZIP, TinyMetaCodec, TinyMetaGzipCodec

__all__ = [
    "MetaCodec",
    "TinyMetaCodec",
    "TinyMetaGzipCodec",
    "TINYMETA",
    "TINYMETA_GZIP",
]
