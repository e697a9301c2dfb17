from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

STORAGE_TYPE_FILESYSTEM = "filesystem"
STORAGE_TYPE_S3 = "s3"
# MinIO is the S3-compatible store most deployments point at
STORAGE_TYPE_ALIASES: dict[str, str] = {
    "filesystem": STORAGE_TYPE_FILESYSTEM,
    "fs": STORAGE_TYPE_FILESYSTEM,
    "s3": STORAGE_TYPE_S3,
    "minio": STORAGE_TYPE_S3,
}


class ConfigurationError(ValueError):
    """Raised when required settings are missing or invalid."""


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _as_optional(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass
class Settings:
    STORAGE_TYPE: str = STORAGE_TYPE_FILESYSTEM
    STORAGE_DIRECTORY: str = "files"
    S3_ENDPOINT_URL: str | None = None
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = None
    S3_BUCKET: str = "data-lake"
    S3_REGION: str = "us-east-1"
    S3_USE_SSL: bool = True
    S3_ADDRESSING_STYLE: str = "path"
    AUTH_ENABLED: bool = True
    AUTH_ACCESS_TOKEN: str | None = None
    EXPOSE_ERROR_DETAILS: bool = True
    ENABLE_METRICS: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ENABLED: bool = False
    CORS_ORIGINS: list[str] = field(default_factory=list)
    HOST: str = "0.0.0.0"
    PORT: int = 4000

    def __post_init__(self) -> None:
        storage_type = (self.STORAGE_TYPE or "").strip().lower()
        if storage_type not in STORAGE_TYPE_ALIASES:
            raise ConfigurationError(
                f"Unknown STORAGE_TYPE '{self.STORAGE_TYPE}'. "
                "Expected 'filesystem' or 's3'."
            )
        self.STORAGE_TYPE = STORAGE_TYPE_ALIASES[storage_type]

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            STORAGE_TYPE=os.environ.get("STORAGE_TYPE", cls.STORAGE_TYPE),
            STORAGE_DIRECTORY=os.environ.get(
                "STORAGE_DIRECTORY", cls.STORAGE_DIRECTORY
            ),
            S3_ENDPOINT_URL=_as_optional(os.environ.get("S3_ENDPOINT_URL")),
            S3_ACCESS_KEY_ID=_as_optional(os.environ.get("S3_ACCESS_KEY_ID")),
            S3_SECRET_ACCESS_KEY=_as_optional(os.environ.get("S3_SECRET_ACCESS_KEY")),
            S3_BUCKET=os.environ.get("S3_BUCKET", cls.S3_BUCKET),
            S3_REGION=os.environ.get("S3_REGION", cls.S3_REGION),
            S3_USE_SSL=_as_bool(os.environ.get("S3_USE_SSL"), cls.S3_USE_SSL),
            S3_ADDRESSING_STYLE=os.environ.get(
                "S3_ADDRESSING_STYLE", cls.S3_ADDRESSING_STYLE
            ),
            AUTH_ENABLED=_as_bool(os.environ.get("AUTH_ENABLED"), cls.AUTH_ENABLED),
            AUTH_ACCESS_TOKEN=os.environ.get("AUTH_ACCESS_TOKEN"),
            EXPOSE_ERROR_DETAILS=_as_bool(
                os.environ.get("EXPOSE_ERROR_DETAILS"), cls.EXPOSE_ERROR_DETAILS
            ),
            ENABLE_METRICS=_as_bool(
                os.environ.get("ENABLE_METRICS"), cls.ENABLE_METRICS
            ),
            LOG_LEVEL=os.environ.get("LOG_LEVEL", cls.LOG_LEVEL),
            CORS_ENABLED=_as_bool(os.environ.get("CORS_ENABLED"), cls.CORS_ENABLED),
            CORS_ORIGINS=_as_list(os.environ.get("CORS_ORIGINS")),
            HOST=os.environ.get("HOST", cls.HOST),
            PORT=int(os.environ.get("PORT", cls.PORT)),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
