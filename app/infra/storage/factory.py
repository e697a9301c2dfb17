from __future__ import annotations

import logging

from app.common.config import (
    STORAGE_TYPE_FILESYSTEM,
    STORAGE_TYPE_S3,
    ConfigurationError,
    Settings,
)
from app.infra.storage.filesystem import FileSystemStorageProvider
from app.infra.storage.provider import StorageProvider
from app.infra.storage.s3_provider import S3StorageProvider

logger = logging.getLogger("app.startup")


def _require(value: str | None, name: str) -> None:
    if value is None or not value.strip():
        raise ConfigurationError(f"{name} is required when STORAGE_TYPE=s3")


def build_storage_provider(settings: Settings) -> StorageProvider:
    """Construct the provider selected by ``STORAGE_TYPE``.

    The provider is not initialized here; the caller runs ``initialize()``
    once before accepting traffic.

    Raises:
        ConfigurationError: If backend-specific settings are missing.
    """
    logger.info("Creating storage provider of type: %s", settings.STORAGE_TYPE)

    if settings.STORAGE_TYPE == STORAGE_TYPE_FILESYSTEM:
        if not settings.STORAGE_DIRECTORY or not settings.STORAGE_DIRECTORY.strip():
            raise ConfigurationError(
                "STORAGE_DIRECTORY is required when STORAGE_TYPE=filesystem"
            )
        logger.info(
            "Creating FileSystem storage provider with directory: %s",
            settings.STORAGE_DIRECTORY,
        )
        return FileSystemStorageProvider(settings.STORAGE_DIRECTORY)

    if settings.STORAGE_TYPE == STORAGE_TYPE_S3:
        _require(settings.S3_ENDPOINT_URL, "S3_ENDPOINT_URL")
        _require(settings.S3_ACCESS_KEY_ID, "S3_ACCESS_KEY_ID")
        _require(settings.S3_SECRET_ACCESS_KEY, "S3_SECRET_ACCESS_KEY")
        _require(settings.S3_BUCKET, "S3_BUCKET")
        logger.info(
            "Creating S3 storage provider - Endpoint: %s, Bucket: %s",
            settings.S3_ENDPOINT_URL,
            settings.S3_BUCKET,
        )
        return S3StorageProvider(settings=settings)

    raise ConfigurationError(f"Unsupported storage type: {settings.STORAGE_TYPE}")
