"""Storage provider protocol and error types.

A storage provider persists uploaded bytes under a backend-agnostic key.
Keys are path-like strings that may contain ``/`` segments; providers create
any intermediate structure they need.
"""

from __future__ import annotations

from typing import Protocol


class StorageError(RuntimeError):
    """Base class for storage backend failures."""


class InitializationError(StorageError):
    """Raised when a backend cannot be prepared for use."""


class StorageWriteError(StorageError):
    """Raised when a backend rejects or fails a write.

    Attributes:
        key: The key the write was attempted under.
    """

    def __init__(self, message: str, *, key: str) -> None:
        super().__init__(message)
        self.key = key


class StorageProvider(Protocol):
    """Protocol implemented by every storage backend.

    One provider instance is created per process, initialized once at
    startup and then shared by all requests.
    """

    def initialize(self) -> None:
        """Prepare the backend (create the root directory or bucket).

        Safe to call more than once.

        Raises:
            InitializationError: If the backend is unreachable or misconfigured.
        """
        ...

    def store(self, key: str, data: bytes) -> None:
        """Write ``data`` under ``key``, replacing any existing content.

        Raises:
            StorageWriteError: If the write fails.
        """
        ...

    def describe(self) -> str:
        """Return a human-readable identity used by the health report."""
        ...
