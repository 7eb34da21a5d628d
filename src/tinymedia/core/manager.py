"""Metadata manager factory."""

from __future__ import annotations

from typing import BinaryIO, Optional

from tinymedia.core.constants import DEFAULT_CHUNK_SIZE
from tinymedia.core.jpeg_manager import JpegMetaManager
from tinymedia.core.registry import VendorRegistry
from tinymedia.errors import UnsupportedFileTypeError
from tinymedia.file.filetype import FileType

__all__ = ["new_meta_manager"]


def new_meta_manager(
    stream: BinaryIO,
    file_type: FileType,
    registry: Optional[VendorRegistry] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> JpegMetaManager:
    """
    Build the metadata manager for a detected file type.

    The stream must be positioned at the start of the file.

    Raises:
        UnsupportedFileTypeError: If no manager exists for file_type
    """
    if file_type == FileType.JPEG:
        return JpegMetaManager(stream, registry=registry, chunk_size=chunk_size)
    raise UnsupportedFileTypeError(f"unsupported file type: {file_type!r}")
