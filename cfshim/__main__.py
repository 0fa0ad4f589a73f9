"""Run the shim with uvicorn: ``python -m cfshim [--config PATH]``."""

from __future__ import annotations

import argparse

import uvicorn

from .config_loader import load_config
from .logging import setup_logging
from .main import create_app, resolve_server_address


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="OpenAI-compatible shim for Workers AI")
    parser.add_argument(
        "--config",
        help="Path to config file (default: CFSHIM_CONFIG or configs/config_default.yaml)",
    )
    parser.add_argument("--host", help="Bind host (overrides config and CFSHIM_HOST)")
    parser.add_argument("--port", type=int, help="Bind port (overrides config and CFSHIM_PORT)")
    args = parser.parse_args(argv)

    logger = setup_logging()
    config = load_config(args.config)
    host, port = resolve_server_address(config)
    host = args.host or host
    port = args.port or port

    app = create_app(config)
    logger.info("Starting cfshim on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port, log_level="info")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
