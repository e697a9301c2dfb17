"""Storage provider abstraction layer.

Uploaded bytes are persisted through a ``StorageProvider``: either the local
filesystem or an S3-compatible object store such as MinIO.
"""

from .factory import build_storage_provider
from .filesystem import FileSystemStorageProvider
from .provider import (
    InitializationError,
    StorageError,
    StorageProvider,
    StorageWriteError,
)
from .s3_provider import S3StorageProvider

__all__ = [
    "FileSystemStorageProvider",
    "InitializationError",
    "S3StorageProvider",
    "StorageError",
    "StorageProvider",
    "StorageWriteError",
    "build_storage_provider",
]
