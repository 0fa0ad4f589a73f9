"""Service registry for breaking circular imports.

This module holds the chat service instance so that routes can import it
without causing circular imports with the main module.
"""

from typing import Optional

from .service import ChatService

# Global service instance - set by create_app during initialization
service: Optional[ChatService] = None


def set_service(service_instance: Optional[ChatService]) -> None:
    """Set the global service instance."""
    global service
    service = service_instance


def get_service() -> ChatService:
    """Get the global service instance."""
    if service is None:
        raise RuntimeError("Chat service not initialized. Did you call set_service?")
    return service
