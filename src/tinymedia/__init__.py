"""tinymedia - vendor metadata in JPEG marker segments."""

__version__ = "0.1.0"

from .codec import TINYMETA, TINYMETA_GZIP, MetaCodec  # noqa: E402
from .core import (  # noqa: E402
    JpegMetaManager,
    VendorRegistry,
    default_registry,
    new_meta_manager,
)
from .errors import (  # noqa: E402
    CorruptedSegmentError,
    DataSizeTooLargeError,
    MarkerNotFoundError,
    TinyMediaError,
    UnsupportedFileTypeError,
    VendorNotSupportedError,
)
from .file import FileType, detect_file_type, update_file  # noqa: E402

__all__ = [
    "JpegMetaManager",
    "new_meta_manager",
    "VendorRegistry",
    "default_registry",
    "MetaCodec",
    "TINYMETA",
    "TINYMETA_GZIP",
    "FileType",
    "detect_file_type",
    "update_file",
    "TinyMediaError",
    "UnsupportedFileTypeError",
    "VendorNotSupportedError",
    "MarkerNotFoundError",
    "DataSizeTooLargeError",
    "CorruptedSegmentError",
]
