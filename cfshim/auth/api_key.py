"""Static API key authentication for the chat endpoint."""

from __future__ import annotations

import hmac
import logging
from typing import Iterable

from fastapi import Request

from ..core.exceptions import AuthenticationError

logger = logging.getLogger("cfshim")

# Exact, case-sensitive scheme prefix
BEARER_PREFIX = "Bearer "


class ApiKeyValidator:
    """Checks ``Authorization: Bearer <key>`` against a fixed key list.

    An empty key list rejects every request.
    """

    def __init__(self, api_keys: Iterable[str]) -> None:
        self._keys = tuple(key for key in api_keys if key)

    @property
    def key_count(self) -> int:
        return len(self._keys)

    def validate_request(self, request: Request) -> str:
        """Return the caller's key or raise :class:`AuthenticationError`."""
        auth_header = request.headers.get("Authorization", "")
        if not auth_header.startswith(BEARER_PREFIX):
            logger.warning("Request rejected: missing API key")
            raise AuthenticationError("API key required")

        provided_key = auth_header[len(BEARER_PREFIX):]
        if not provided_key or not self.is_valid(provided_key):
            logger.warning("Request rejected: invalid API key")
            raise AuthenticationError("Invalid API key")
        return provided_key

    def is_valid(self, provided_key: str) -> bool:
        """Constant-time membership test against the configured keys."""
        provided = provided_key.encode("utf-8")
        # No early exit: every configured key is compared
        matched = False
        for key in self._keys:
            if hmac.compare_digest(provided, key.encode("utf-8")):
                matched = True
        return matched


# Singleton instance, replaced by create_app
_validator: ApiKeyValidator | None = None


def set_api_key_validator(validator: ApiKeyValidator | None) -> None:
    global _validator
    _validator = validator


def get_api_key_validator() -> ApiKeyValidator:
    """Get the active validator (rejecting everything if none was set)."""
    global _validator
    if _validator is None:
        _validator = ApiKeyValidator(())
    return _validator
