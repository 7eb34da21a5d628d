"""File-level helpers: type detection and atomic replacement."""

from .filetype import FileType, detect_file_type, read_file_type
from .update import update_file

__all__ = ["FileType", "detect_file_type", "read_file_type", "update_file"]
