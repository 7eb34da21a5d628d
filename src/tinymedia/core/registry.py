"""Vendor codec registry."""

from __future__ import annotations

from typing import Dict, Iterator, Mapping, Optional

from tinymedia.codec import TINYMETA, TINYMETA_GZIP, MetaCodec
from tinymedia.core.constants import TINYMETA_GZIP_VENDOR, TINYMETA_VENDOR
from tinymedia.core.models import CodecVendor
from tinymedia.errors import VendorNotSupportedError

__all__ = ["VendorRegistry", "default_registry"]


class VendorRegistry:
    """
    Maps vendor identifiers to their codec, marker and vendor magic.

    Built once and handed to every JpegMetaManager; entries are never changed
    after registration.
    """

    def __init__(self, vendors: Optional[Mapping[str, CodecVendor]] = None) -> None:
        self._vendors: Dict[str, CodecVendor] = {}
        for vendor, codec_vendor in (vendors or {}).items():
            self._add(vendor, codec_vendor)

    def register(
        self,
        vendor: str,
        codec: MetaCodec,
        marker: int,
        vendor_magic: Optional[bytes] = None,
    ) -> CodecVendor:
        """
        Register a vendor.

        Args:
            vendor: Vendor identifier (e.g. "tinymeta")
            codec: Codec for the segment payload
            marker: Application marker (0xFFE0-0xFFEF)
            vendor_magic: Null-terminated magic (default: vendor name + NUL)

        Raises:
            ValueError: If vendor is already registered or entry is invalid
        """
        if vendor_magic is None:
            vendor_magic = vendor.encode("utf-8") + b"\0"
        codec_vendor = CodecVendor(codec=codec, marker=marker, vendor_magic=vendor_magic)
        self._add(vendor, codec_vendor)
        return codec_vendor

    def _add(self, vendor: str, codec_vendor: CodecVendor) -> None:
        if not vendor:
            raise ValueError("Vendor identifier cannot be empty")
        if vendor in self._vendors:
            raise ValueError(f"Vendor already registered: {vendor!r}")
        self._vendors[vendor] = codec_vendor

    def resolve(self, vendor: str) -> CodecVendor:
        """
        Look up a vendor.

        Raises:
            VendorNotSupportedError: If vendor is unknown
        """
        codec_vendor = self._vendors.get(vendor)
        if codec_vendor is None:
            raise VendorNotSupportedError(vendor)
        return codec_vendor

    def __contains__(self, vendor: object) -> bool:
        return vendor in self._vendors

    def __iter__(self) -> Iterator[str]:
        return iter(self._vendors)

    def __len__(self) -> int:
        return len(self._vendors)


def default_registry() -> VendorRegistry:
    """Registry with the built-in TinyMeta vendors."""
    registry = VendorRegistry()
    registry.register(TINYMETA_VENDOR, TINYMETA, 0xFFE0)
    registry.register(TINYMETA_GZIP_VENDOR, TINYMETA_GZIP, 0xFFE1)
    return registry
