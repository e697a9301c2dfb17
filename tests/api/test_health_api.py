from __future__ import annotations

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from app.infra.storage.s3_provider import S3StorageProvider
from app.main import create_app


def test_health_reports_filesystem_backend(make_settings):
    app = create_app(settings=make_settings(STORAGE_DIRECTORY="data"))
    # avoid creating ./data: health never needs the provider to be initialized
    client = TestClient(app)

    r = client.get("/health")

    assert r.status_code == 200
    assert r.text == "OK - Storage: FileSystem [data]"


def test_health_reports_s3_backend(s3_settings):
    with patch.object(S3StorageProvider, "_build_client", return_value=MagicMock()):
        app = create_app(settings=s3_settings)

    with TestClient(app) as client:
        r = client.get("/health")

    assert r.status_code == 200
    assert r.text == "OK - Storage: S3 [bucket: test-bucket]"


def test_health_needs_no_token(make_settings):
    app = create_app(settings=make_settings())
    with TestClient(app) as client:
        r = client.get("/health")

    assert r.status_code == 200
