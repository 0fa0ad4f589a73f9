"""HTTP surface of the shim."""

from .errors import register_exception_handlers
from .routes import chat_completions, health, list_models

__all__ = [
    "chat_completions",
    "health",
    "list_models",
    "register_exception_handlers",
]
