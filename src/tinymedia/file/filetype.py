"""File type detection from magic bytes."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import BinaryIO, Union

from tinymedia.core.constants import JPEG_MAGIC, MAGIC_PREFIX_MAX_LENGTH
from tinymedia.errors import UnsupportedFileTypeError

__all__ = ["FileType", "read_file_type", "detect_file_type"]


class FileType(str, Enum):
    JPEG = "jpeg"


def read_file_type(stream: BinaryIO) -> FileType:
    """
    Identify the file type from the first bytes of stream.

    Consumes up to MAGIC_PREFIX_MAX_LENGTH bytes.

    Raises:
        UnsupportedFileTypeError: If the magic is unknown or the stream is short
    """
    prefix = stream.read(MAGIC_PREFIX_MAX_LENGTH)
    if prefix.startswith(JPEG_MAGIC):
        return FileType.JPEG
    raise UnsupportedFileTypeError(f"unsupported file type: magic {prefix!r}")


def detect_file_type(path: Union[str, Path]) -> FileType:
    with open(path, "rb") as f:
        return read_file_type(f)
