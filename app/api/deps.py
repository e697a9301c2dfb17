from __future__ import annotations

import logging

from fastapi import Depends, Header, Request

from app.app.services.ingest_service import IngestService
from app.common.auth import BearerTokenAuthenticator
from app.infra.storage.provider import StorageProvider

logger = logging.getLogger("app.ingest")

SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "x-api-key", "cookie"}


def mask_header_value(name: str, value: str) -> str:
    if name.lower() in SENSITIVE_HEADERS:
        return "***"
    return value


def get_storage_provider(request: Request) -> StorageProvider:
    return request.app.state.storage_provider


def get_authenticator(request: Request) -> BearerTokenAuthenticator:
    return request.app.state.authenticator


def get_ingest_service(
    provider: StorageProvider = Depends(get_storage_provider),
) -> IngestService:
    return IngestService(provider)


def log_request_headers(request: Request) -> None:
    for name, value in request.headers.items():
        logger.info("header[%s]=%s", name, mask_header_value(name, value))


def require_bearer_token(
    authorization: str | None = Header(default=None),
    authenticator: BearerTokenAuthenticator = Depends(get_authenticator),
) -> None:
    authenticator.authorize(authorization)
