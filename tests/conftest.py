from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from botocore.exceptions import ClientError

from app.common.config import Settings, get_settings


def client_error(code: str, operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@dataclass
class InMemoryS3Client:
    """Minimal stand-in for the boto3 S3 client used by the provider."""

    buckets: set[str] = field(default_factory=set)
    objects: dict[tuple[str, str], dict[str, Any]] = field(default_factory=dict)
    create_calls: int = 0

    def head_bucket(self, *, Bucket: str) -> dict[str, Any]:
        if Bucket not in self.buckets:
            raise client_error("404", "HeadBucket")
        return {}

    def create_bucket(self, *, Bucket: str, **kwargs: Any) -> dict[str, Any]:
        self.create_calls += 1
        if Bucket in self.buckets:
            raise client_error("BucketAlreadyOwnedByYou", "CreateBucket")
        self.buckets.add(Bucket)
        return {}

    def put_object(
        self, *, Bucket: str, Key: str, Body: bytes, ContentType: str
    ) -> dict[str, Any]:
        if Bucket not in self.buckets:
            raise client_error("NoSuchBucket", "PutObject")
        self.objects[(Bucket, Key)] = {"body": bytes(Body), "content_type": ContentType}
        return {"ETag": '"mock-etag"'}

    def read(self, bucket: str, key: str) -> bytes:
        return self.objects[(bucket, key)]["body"]


@pytest.fixture(autouse=True)
def reset_settings_cache():
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture
def storage_dir(tmp_path):
    return tmp_path / "files"


@pytest.fixture
def make_settings(storage_dir):
    def factory(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "STORAGE_DIRECTORY": str(storage_dir),
            "AUTH_ENABLED": True,
            "AUTH_ACCESS_TOKEN": "secret-token",
            "ENABLE_METRICS": False,
        }
        values.update(overrides)
        return Settings(**values)

    return factory


@pytest.fixture
def s3_settings(make_settings):
    return make_settings(
        STORAGE_TYPE="s3",
        S3_ENDPOINT_URL="http://localhost:9000",
        S3_ACCESS_KEY_ID="test-key",
        S3_SECRET_ACCESS_KEY="test-secret",
        S3_BUCKET="test-bucket",
        S3_USE_SSL=False,
    )


@pytest.fixture
def in_memory_s3():
    return InMemoryS3Client()


@pytest.fixture
def make_client_error():
    return client_error
