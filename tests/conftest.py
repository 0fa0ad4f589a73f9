"""Pytest configuration and fixtures for testing."""

from __future__ import annotations

from typing import Any, Generator

import httpx
import pytest

# =============================================================================
# Transport Registry Fixtures
# =============================================================================


@pytest.fixture
def clear_transport_registry() -> Generator[None, None, None]:
    """Clear upstream transport registry after test.

    Use this fixture in tests that register fake transports.
    """
    from cfshim.core.upstream_transport import clear_upstream_transports

    yield
    clear_upstream_transports()


# =============================================================================
# Harness Configuration Builders
# =============================================================================

FAKE_API_HOST = "workers-ai.local"
FAKE_API_BASE = f"http://{FAKE_API_HOST}/client/v4"
FAKE_ACCOUNT_ID = "acct-123"
FAKE_API_TOKEN = "cf-token"


def build_shim_config(
    base_url: str = FAKE_API_BASE,
    *,
    api_keys: list[str] | None = None,
    model_map: dict[str, str] | None = None,
    max_request_size: int | None = None,
    stream_chunk_size: int | None = None,
) -> dict[str, Any]:
    """Build a config for shim testing.

    Args:
        base_url: Workers AI API base the backend calls
        api_keys: Accepted client keys (default ``["test-key"]``)
        model_map: Optional model map replacing the built-in one
        max_request_size: Optional body size cap
        stream_chunk_size: Optional SSE slice length

    Returns:
        Config dict for ProxyHarness
    """
    proxy_settings: dict[str, Any] = {}
    if max_request_size is not None:
        proxy_settings["max_request_size"] = max_request_size
    if stream_chunk_size is not None:
        proxy_settings["stream_chunk_size"] = stream_chunk_size

    config: dict[str, Any] = {
        "cloudflare": {
            "account_id": FAKE_ACCOUNT_ID,
            "api_token": FAKE_API_TOKEN,
            "api_base": base_url,
            "request_timeout": 5,
        },
        # An empty env name keeps VALID_API_KEYS from leaking into tests
        "auth": {
            "api_keys": ["test-key"] if api_keys is None else api_keys,
            "api_keys_env": "",
        },
        "proxy_settings": proxy_settings,
    }
    if model_map is not None:
        config["model_map"] = model_map
    return config


# =============================================================================
# Harness Fixtures
# =============================================================================


@pytest.fixture
def shim_harness(
    clear_transport_registry: None,
) -> Generator[tuple[Any, Any], None, None]:
    """Create a harness whose backend calls reach a fake Workers AI.

    Returns:
        Tuple of (FakeWorkersAI, ProxyHarness)

    Usage:
        async def test_chat(shim_harness):
            upstream, harness = shim_harness
            upstream.enqueue_text("Hello")
            # ... test code ...
    """
    from cfshim.core.upstream_transport import register_upstream_transport
    from cfshim.testing import FakeWorkersAI, ProxyHarness

    upstream = FakeWorkersAI()
    register_upstream_transport(FAKE_API_HOST, httpx.ASGITransport(app=upstream.app))

    harness = ProxyHarness(build_shim_config())

    try:
        yield upstream, harness
    finally:
        harness.close()
