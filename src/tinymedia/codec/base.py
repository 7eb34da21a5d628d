"""Codec interface for metadata payloads."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict

__all__ = ["MetaCodec"]


class MetaCodec(ABC):
    """
    Abstract base class for metadata codecs.

    A codec turns a flat mapping of string keys to string values into the
    bytes stored after the vendor magic of a metadata segment, and back.
    """

    @abstractmethod
    def encode(self, fields: Dict[str, str]) -> bytes:
        """
        Serialize fields.

        Args:
            fields: Flat mapping of field name to value

        Returns:
            Encoded payload bytes

        Raises:
            CodecEncodeError: If fields cannot be represented
        """
        pass

    @abstractmethod
    def decode(self, data: bytes) -> Dict[str, str]:
        """
        Deserialize payload bytes.

        Args:
            data: Payload bytes (without vendor magic)

        Returns:
            Decoded mapping

        Raises:
            CodecDecodeError: If payload is malformed
        """
        pass
