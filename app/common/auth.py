from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass

from app.common.config import Settings

logger = logging.getLogger("auth")

BEARER_PREFIX = "Bearer "


class AuthorizationError(Exception):
    """Raised when a request lacks a valid bearer token."""


@dataclass(frozen=True)
class AuthConfig:
    enabled: bool
    token: str | None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        return cls(enabled=settings.AUTH_ENABLED, token=settings.AUTH_ACCESS_TOKEN)


class BearerTokenAuthenticator:
    """Checks the ``Authorization`` header against a single shared token."""

    def __init__(self, config: AuthConfig):
        self._config = config

    def is_authorized(self, authorization_header: str | None) -> bool:
        if not self._config.enabled:
            logger.debug("auth_disabled")
            return True

        expected = self._config.token
        if expected is None or not expected.strip():
            logger.warning(
                "Access token is not configured while AUTH_ENABLED is true; "
                "rejecting request [event=auth_token_unconfigured]"
            )
            return False

        if authorization_header is None or not authorization_header.strip():
            logger.debug("auth_header_missing")
            return False

        if not authorization_header.startswith(BEARER_PREFIX):
            logger.debug("auth_header_not_bearer")
            return False

        supplied = authorization_header[len(BEARER_PREFIX) :].strip()
        valid = hmac.compare_digest(
            supplied.encode("utf-8"), expected.encode("utf-8")
        )
        if not valid:
            logger.debug("auth_token_mismatch")
        return valid

    def authorize(self, authorization_header: str | None) -> None:
        if not self.is_authorized(authorization_header):
            raise AuthorizationError("Invalid or missing access token")
