"""Type definitions for the shim."""

from .backend import (
    LegacyMessagesRequest,
    LegacyPromptRequest,
    OutputItem,
    RunEnvelope,
    StructuredRequest,
    StructuredResponse,
)
from .chat import (
    ChatCompletionChunk,
    ChatCompletionResponse,
    ChatMessage,
    ChatRequest,
    Choice,
    Delta,
    ErrorResponse,
    StreamChoice,
    Usage,
)

__all__ = [
    "ChatCompletionChunk",
    "ChatCompletionResponse",
    "ChatMessage",
    "ChatRequest",
    "Choice",
    "Delta",
    "ErrorResponse",
    "LegacyMessagesRequest",
    "LegacyPromptRequest",
    "OutputItem",
    "RunEnvelope",
    "StreamChoice",
    "StructuredRequest",
    "StructuredResponse",
    "Usage",
]
