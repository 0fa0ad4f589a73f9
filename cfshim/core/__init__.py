"""Core module initialization."""

from .exceptions import (
    AuthenticationError,
    BackendError,
    ConfigurationError,
    InternalError,
    InvalidParameterError,
    ModelNotSupportedError,
    NotFoundError,
    PayloadTooLargeError,
    ProxyError,
)
from .settings import CloudflareSettings, GenerationDefaults, ShimSettings
from .tokens import estimate_tokens
from .models import Dialect, ModelRegistry, ModelRoute, classify_dialect
from .request_builder import (
    build_backend_request,
    build_fallback_prompt,
    build_fallback_request,
)
from .backend import BackendResult, InferenceBackend, WorkersAIBackend
from .invoker import InferenceInvoker
from .extractor import ResponseShape, classify_response, extract_content, strip_echoed_prompt
from .completion import build_completion, new_completion_id, validate_messages
from .sse import encode_sse_frame, iter_stream_frames
from .service import ChatOutcome, ChatService
from .registry import get_service, set_service

__all__ = [
    "AuthenticationError",
    "BackendError",
    "BackendResult",
    "ChatOutcome",
    "ChatService",
    "CloudflareSettings",
    "ConfigurationError",
    "Dialect",
    "GenerationDefaults",
    "InferenceBackend",
    "InferenceInvoker",
    "InternalError",
    "InvalidParameterError",
    "ModelNotSupportedError",
    "ModelRegistry",
    "ModelRoute",
    "NotFoundError",
    "PayloadTooLargeError",
    "ProxyError",
    "ResponseShape",
    "ShimSettings",
    "WorkersAIBackend",
    "build_backend_request",
    "build_completion",
    "build_fallback_prompt",
    "build_fallback_request",
    "classify_dialect",
    "classify_response",
    "encode_sse_frame",
    "estimate_tokens",
    "extract_content",
    "get_service",
    "iter_stream_frames",
    "new_completion_id",
    "set_service",
    "strip_echoed_prompt",
    "validate_messages",
]
