"""Main FastAPI application for the Workers AI shim."""

import logging
import os
from typing import Any, Mapping, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import chat_completions, health, list_models, register_exception_handlers
from .auth import ApiKeyValidator, set_api_key_validator
from .config_loader import load_config
from .core import ChatService, InferenceBackend, ShimSettings
from .core.registry import set_service
from .logging import setup_logging

logger = logging.getLogger("cfshim")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def resolve_server_address(config: Mapping[str, Any]) -> tuple[str, int]:
    """Bind address: CFSHIM_HOST / CFSHIM_PORT win over proxy_settings.server."""
    proxy_settings = config.get("proxy_settings") or {}
    server_cfg = proxy_settings.get("server") or {}

    host = os.getenv("CFSHIM_HOST") or str(server_cfg.get("host", DEFAULT_HOST))

    port_raw = os.getenv("CFSHIM_PORT") or server_cfg.get("port", DEFAULT_PORT)
    try:
        port = int(port_raw)
    except (TypeError, ValueError):
        logger.warning("Invalid port %r, using %s", port_raw, DEFAULT_PORT)
        port = DEFAULT_PORT
    return host, port


def create_app(
    config: Optional[Mapping[str, Any]] = None,
    *,
    backend: Optional[InferenceBackend] = None,
) -> FastAPI:
    """Build the application from a config dict.

    Args:
        config: Parsed configuration. Loaded from disk when omitted.
        backend: Inference backend override; defaults to the Workers AI REST
            backend described by the ``cloudflare`` config section.

    Returns:
        The configured FastAPI application instance.
    """
    if config is None:
        config = load_config()
    settings = ShimSettings.from_config(config)

    service = ChatService(settings, backend=backend)
    set_service(service)
    set_api_key_validator(ApiKeyValidator(settings.api_keys))

    app = FastAPI(title="cfshim")
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=settings.cors_max_age,
    )
    register_exception_handlers(app)

    app.post("/v1/chat/completions")(chat_completions)
    app.get("/v1/models")(list_models)
    app.get("/health")(health)

    logger.info(
        "Shim initialized with %d models (default %s), %d API keys",
        len(service.registry),
        settings.default_model,
        len(settings.api_keys),
    )
    if not settings.api_keys:
        logger.warning("No API keys configured; every chat request will be rejected")
    return app


def build_default_app() -> FastAPI:
    """Load config from disk, set up logging and build the app."""
    setup_logging()
    return create_app(load_config())


__all__ = ["build_default_app", "create_app", "resolve_server_address"]
