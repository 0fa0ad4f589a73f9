"""Authentication module for the shim."""

from .api_key import ApiKeyValidator, get_api_key_validator, set_api_key_validator

__all__ = ["ApiKeyValidator", "get_api_key_validator", "set_api_key_validator"]
