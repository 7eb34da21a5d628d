"""Per-file metadata read/update used by the ``tinymedia meta`` command."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import structlog

from tinymedia.core.constants import DEFAULT_CHUNK_SIZE
from tinymedia.core.manager import new_meta_manager
from tinymedia.core.registry import VendorRegistry
from tinymedia.file.filetype import read_file_type
from tinymedia.file.update import update_file
from tinymedia.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class FileResult:
    path: str
    output: str = ""
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class MetaReport:
    results: List[FileResult] = field(default_factory=list)

    @property
    def failed(self) -> List[FileResult]:
        return [r for r in self.results if not r.ok]


def parse_fields(fields: Iterable[str]) -> Tuple[List[str], Dict[str, str]]:
    """
    Split field entries into reads and updates.

    ``name`` is a read, ``name=value`` an update (split on the first ``=``).
    Empty entries are skipped; a repeated update keeps the last value.
    """
    read_fields: List[str] = []
    update_fields: Dict[str, str] = {}
    for entry in fields:
        if entry == "":
            continue
        name, sep, value = entry.partition("=")
        if sep:
            update_fields[name] = value
        else:
            read_fields.append(name)
    return read_fields, update_fields


def format_fields(path: str, extracted: Dict[str, str]) -> str:
    lines = [f"File={path}"]
    for key in sorted(extracted):
        key_q = json.dumps(key, ensure_ascii=False)
        value_q = json.dumps(extracted[key], ensure_ascii=False)
        lines.append(f"{key_q}={value_q}")
    return "\n".join(lines) + "\n"


def process_file(
    path: str,
    vendor: str,
    read_fields: Sequence[str],
    update_fields: Dict[str, str],
    registry: Optional[VendorRegistry] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """
    Apply updates to one file and return the formatted reads.

    Updates are merged into the vendor segment and the file is atomically
    replaced; reads see the updated values.
    """
    output = ""
    with open(path, "rb") as f:
        file_type = read_file_type(f)
        f.seek(0)
        manager = new_meta_manager(f, file_type, registry=registry, chunk_size=chunk_size)

        if update_fields:
            manager.upsert(vendor, update_fields)

        if read_fields:
            extracted = manager.extract(vendor, *read_fields)
            output = format_fields(path, extracted)

        if update_fields:
            written = update_file(manager.compose_output(), path)
            logger.info("metadata_updated", fields=sorted(update_fields), bytes_written=written)
    return output


def _run_one(
    path: str,
    vendor: str,
    read_fields: Sequence[str],
    update_fields: Dict[str, str],
    registry: Optional[VendorRegistry],
    chunk_size: int,
) -> FileResult:
    with structlog.contextvars.bound_contextvars(path=path, vendor=vendor):
        try:
            output = process_file(
                path, vendor, read_fields, update_fields, registry, chunk_size
            )
        except Exception as exc:
            logger.error("file_failed", error=str(exc), error_type=type(exc).__name__)
            return FileResult(path=path, error=exc)
        return FileResult(path=path, output=output)


def handle_meta(
    paths: Sequence[str],
    fields: Iterable[str],
    vendor: str,
    registry: Optional[VendorRegistry] = None,
    max_workers: int = 4,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> MetaReport:
    """
    Process every file in parallel, one manager per file.

    Failures are collected per file instead of stopping the batch. Results
    keep the order of paths.
    """
    read_fields, update_fields = parse_fields(fields)
    report = MetaReport()
    if not paths:
        return report

    workers = max(1, min(max_workers, len(paths)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(
                _run_one, path, vendor, read_fields, update_fields, registry, chunk_size
            )
            for path in paths
        ]
        for future in futures:
            report.results.append(future.result())

    logger.info(
        "meta_finished",
        files=len(report.results),
        failed=len(report.failed),
    )
    return report
