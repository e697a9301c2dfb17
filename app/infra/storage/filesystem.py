from __future__ import annotations

import logging
from pathlib import Path

from app.infra.storage.provider import InitializationError, StorageWriteError

logger = logging.getLogger("storage")


class FileSystemStorageProvider:
    """Stores each key as a file at ``<root>/<key>``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = str(directory)
        self.root = Path(directory)
        self.resolved_root = self.root.resolve()

    def initialize(self) -> None:
        if not self.root.exists():
            logger.info("Creating storage directory: %s", self.directory)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise InitializationError(
                f"Failed to create storage directory '{self.directory}': {exc}"
            ) from exc
        # root may be a symlink that only exists now
        self.resolved_root = self.root.resolve()
        logger.info("FileSystem storage initialized at: %s", self.directory)

    def _resolve(self, key: str) -> Path:
        # "<root>/<key>" semantics: a leading slash in the key stays under root
        target = self.root / key.lstrip("/")
        try:
            resolved = target.resolve()
        except (OSError, ValueError) as exc:
            raise StorageWriteError(f"Invalid key '{key}': {exc}", key=key) from exc
        root = self.resolved_root
        if resolved != root and root not in resolved.parents:
            raise StorageWriteError(
                f"Key '{key}' resolves outside the storage directory", key=key
            )
        return target

    def store(self, key: str, data: bytes) -> None:
        path = self._resolve(key)
        logger.info("Storing file to filesystem: %s", path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except (OSError, ValueError) as exc:
            raise StorageWriteError(
                f"Failed to write '{key}' to filesystem: {exc}", key=key
            ) from exc
        logger.info("Successfully stored file: %s (%d bytes)", key, len(data))

    def describe(self) -> str:
        return f"FileSystem [{self.directory}]"


__all__ = ["FileSystemStorageProvider"]
