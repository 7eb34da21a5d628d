"""Core JPEG metadata segment handling."""

from .jpeg_manager import JpegMetaManager
from .manager import new_meta_manager
from .models import CodecVendor, Segment
from .registry import VendorRegistry, default_registry
from .segment_scanner import ScanState, SegmentScanner

__all__ = [
    "JpegMetaManager",
    "new_meta_manager",
    "CodecVendor",
    "Segment",
    "VendorRegistry",
    "default_registry",
    "ScanState",
    "SegmentScanner",
]
