"""Testing utilities for in-process shim simulations."""

from .assertions import (
    assert_chunk_sequence_valid,
    assert_error_response,
    assert_openai_chat_valid,
    collect_stream_content,
    parse_sse_events,
)
from .fake_upstream import FakeWorkersAI, UpstreamResponse, error_envelope, run_envelope
from .proxy_harness import ProxyHarness
from .response_builders import (
    build_chat_choices_result,
    build_chat_request,
    build_legacy_result,
    build_structured_result,
)

__all__ = [
    # Core simulation classes
    "FakeWorkersAI",
    "UpstreamResponse",
    "ProxyHarness",
    "error_envelope",
    "run_envelope",
    # Builders
    "build_chat_choices_result",
    "build_chat_request",
    "build_legacy_result",
    "build_structured_result",
    # Assertions
    "assert_chunk_sequence_valid",
    "assert_error_response",
    "assert_openai_chat_valid",
    "collect_stream_content",
    "parse_sse_events",
]
