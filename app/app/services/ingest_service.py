"""Ingest service: destination resolution and delegation to storage.

Resolution priority for the filename, highest first:

1. the request path, when it is not exactly ``/``;
2. the ``X-file-name`` header;
3. a generated ``<epoch-milliseconds>.data`` name.

The ``X-file-path`` header, when supplied, is always prepended as a
directory prefix, regardless of which branch produced the filename.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Mapping

from app.infra.observability.metrics import STORED_BYTES, STORED_FILES
from app.infra.storage.provider import StorageProvider, StorageWriteError

FILENAME_HEADER = "X-file-name"
FILEPATH_HEADER = "X-file-path"
GENERATED_SUFFIX = ".data"

logger = logging.getLogger("app.ingest")


@dataclass(frozen=True, slots=True)
class ResolvedDestination:
    """Where an upload is stored."""

    directory_prefix: str | None
    filename: str

    @property
    def key(self) -> str:
        if self.directory_prefix is None:
            return self.filename
        return f"{self.directory_prefix}/{self.filename}"


def _current_millis() -> int:
    return time.time_ns() // 1_000_000


def _non_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def generate_filename(clock: Callable[[], int] = _current_millis) -> str:
    return f"{clock()}{GENERATED_SUFFIX}"


def resolve_filename(
    request_path: str | None,
    headers: Mapping[str, str],
    *,
    clock: Callable[[], int] = _current_millis,
) -> str:
    if request_path and request_path != "/":
        filename = request_path[1:] if request_path.startswith("/") else request_path
        if filename.strip():
            logger.debug("Using filename from request path: %s", filename)
            return filename

    header_filename = _non_blank(headers.get(FILENAME_HEADER))
    if header_filename is not None:
        logger.debug("Using filename from header: %s", header_filename)
        return header_filename

    generated = generate_filename(clock)
    logger.debug("Using generated filename: %s", generated)
    return generated


def resolve_directory_prefix(headers: Mapping[str, str]) -> str | None:
    prefix = _non_blank(headers.get(FILEPATH_HEADER))
    if prefix is not None:
        logger.debug("Using filepath from header: %s", prefix)
    return prefix


def resolve_destination(
    request_path: str | None,
    headers: Mapping[str, str],
    *,
    clock: Callable[[], int] = _current_millis,
) -> ResolvedDestination:
    """Derive the storage destination of an upload.

    ``headers`` must be a case-insensitive mapping returning the first value
    of a repeated header (Starlette's ``Headers`` behaves this way).
    """
    return ResolvedDestination(
        directory_prefix=resolve_directory_prefix(headers),
        filename=resolve_filename(request_path, headers, clock=clock),
    )


class IngestService:
    """Stores uploaded bodies through the process-wide storage provider."""

    def __init__(self, provider: StorageProvider):
        self._provider = provider

    @property
    def provider(self) -> StorageProvider:
        return self._provider

    def store(self, destination: ResolvedDestination, data: bytes) -> str:
        key = destination.key
        backend = type(self._provider).__name__
        logger.info("Storing file with filename: %s (%d bytes)", key, len(data))
        try:
            self._provider.store(key, data)
        except StorageWriteError:
            STORED_FILES.labels(backend, "failure").inc()
            raise
        STORED_FILES.labels(backend, "success").inc()
        STORED_BYTES.labels(backend).inc(len(data))
        return key

    def describe(self) -> str:
        return self._provider.describe()
