"""Atomic file replacement."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Union

from tinymedia.errors import FileUpdateError
from tinymedia.utils.logging import get_logger

__all__ = ["update_file"]

logger = get_logger(__name__)


def update_file(chunks: Iterable[bytes], path: Union[str, Path]) -> int:
    """
    Replace path with the concatenation of chunks.

    Data is written to a temp file in the same directory and renamed over the
    original, so readers see either the old or the new file. The original
    permission bits are kept.

    Args:
        chunks: Byte chunks of the new content
        path: File to replace

    Returns:
        Number of bytes written

    Raises:
        FileUpdateError: If writing or renaming fails (temp file is removed)
    """
    target = os.fspath(path)
    dir_path = os.path.dirname(os.path.abspath(target))
    base = os.path.basename(target)

    try:
        fd, tmp_path = tempfile.mkstemp(prefix=f".{base}.", suffix=".tmp", dir=dir_path)
    except OSError as e:
        raise FileUpdateError(f"failed to create temp file for {target}: {e}") from e

    written = 0
    try:
        with os.fdopen(fd, "wb") as tmp:
            for chunk in chunks:
                tmp.write(chunk)
                written += len(chunk)
            tmp.flush()
            os.fsync(tmp.fileno())

        try:
            mode = stat.S_IMODE(os.stat(target).st_mode)
            os.chmod(tmp_path, mode)
        except FileNotFoundError:
            pass

        os.replace(tmp_path, target)
    except BaseException as e:
        try:
            os.remove(tmp_path)
        except OSError:
            logger.warning("temp_file_cleanup_failed", tmp_path=tmp_path)
        if isinstance(e, OSError):
            raise FileUpdateError(f"failed to update {target}: {e}") from e
        raise

    logger.debug("file_updated", path=target, bytes_written=written)
    return written
