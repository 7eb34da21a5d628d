"""Configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass

from tinymedia.core.constants import DEFAULT_CHUNK_SIZE


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class TinyMediaConfig:
    log_level: str = "WARNING"
    json_logs: bool = False
    # Number of files processed in parallel by the CLI.
    max_workers: int = 4
    # Vendor used when the CLI gets no --vendor flag.
    vendor: str = ""
    # Size of unread-tail chunks streamed when rewriting a file.
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @classmethod
    def from_env(cls) -> "TinyMediaConfig":
        return cls(
            log_level=os.getenv("TINYMEDIA_LOG_LEVEL", "WARNING"),
            json_logs=_env_bool("TINYMEDIA_LOG_JSON", False),
            max_workers=_env_int("TINYMEDIA_MAX_WORKERS", 4),
            vendor=os.getenv("TINYMEDIA_VENDOR", ""),
            chunk_size=_env_int("TINYMEDIA_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
        )
