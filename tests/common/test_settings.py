from __future__ import annotations

import pytest

import app.common.config as config_mod
from app.common.config import ConfigurationError, Settings, get_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setattr(config_mod, "ENV_FILE", tmp_path / ".env")
    for name in (
        "STORAGE_TYPE",
        "STORAGE_DIRECTORY",
        "S3_ENDPOINT_URL",
        "S3_ACCESS_KEY_ID",
        "S3_SECRET_ACCESS_KEY",
        "S3_BUCKET",
        "AUTH_ENABLED",
        "AUTH_ACCESS_TOKEN",
        "EXPOSE_ERROR_DETAILS",
        "PORT",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_environment()
    assert settings.STORAGE_TYPE == "filesystem"
    assert settings.STORAGE_DIRECTORY == "files"
    assert settings.S3_BUCKET == "data-lake"
    assert settings.AUTH_ENABLED is True
    assert settings.AUTH_ACCESS_TOKEN is None
    assert settings.EXPOSE_ERROR_DETAILS is True
    assert settings.PORT == 4000


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("STORAGE_TYPE", "MinIO")
    monkeypatch.setenv("S3_ENDPOINT_URL", "http://minio:9000")
    monkeypatch.setenv("S3_ACCESS_KEY_ID", "key")
    monkeypatch.setenv("S3_SECRET_ACCESS_KEY", "secret")
    monkeypatch.setenv("AUTH_ENABLED", "false")
    monkeypatch.setenv("PORT", "8080")

    settings = Settings.from_environment()

    assert settings.STORAGE_TYPE == "s3"
    assert settings.S3_ENDPOINT_URL == "http://minio:9000"
    assert settings.S3_ACCESS_KEY_ID == "key"
    assert settings.AUTH_ENABLED is False
    assert settings.PORT == 8080


def test_blank_s3_values_become_none(monkeypatch):
    monkeypatch.setenv("S3_ENDPOINT_URL", "  ")
    assert Settings.from_environment().S3_ENDPOINT_URL is None


def test_env_file_does_not_override_environment(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text(
        "# comment\nSTORAGE_DIRECTORY=\"from-file\"\nAUTH_ACCESS_TOKEN=file-token\n",
        encoding="utf-8",
    )
    # registers STORAGE_DIRECTORY with monkeypatch so the value loaded from
    # the file is removed again on teardown
    monkeypatch.setenv("STORAGE_DIRECTORY", "placeholder")
    monkeypatch.delenv("STORAGE_DIRECTORY")
    monkeypatch.setenv("AUTH_ACCESS_TOKEN", "env-token")

    settings = Settings.from_environment()

    assert settings.STORAGE_DIRECTORY == "from-file"
    assert settings.AUTH_ACCESS_TOKEN == "env-token"


def test_unknown_storage_type_is_rejected():
    with pytest.raises(ConfigurationError, match="Unknown STORAGE_TYPE"):
        Settings(STORAGE_TYPE="ftp")


def test_get_settings_is_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("STORAGE_DIRECTORY", "elsewhere")
    assert get_settings() is first
    get_settings.cache_clear()  # type: ignore[attr-defined]
    assert get_settings().STORAGE_DIRECTORY == "elsewhere"
