"""Types for the OpenAI-compatible chat surface.

These follow the OpenAI Chat Completions wire format. They describe what the
shim receives from clients and what it sends back, either as a single
completion object or as a sequence of streamed chunks.
"""

from typing import Any, Literal
from typing_extensions import TypedDict


Role = Literal["system", "user", "assistant"]


class ChatMessage(TypedDict, total=False):
    """A message in a chat conversation (OpenAI format).

    Attributes:
        role: Role of the message sender: "system", "user" or "assistant".
        content: Text content of the message. Clients may also send a list
            of content parts; only their text parts are used.
    """
    role: str
    content: str | list[dict[str, Any]] | None


class ChatRequest(TypedDict, total=False):
    """Body of ``POST /v1/chat/completions``.

    Attributes:
        model: Public model id. Defaults to the configured default model.
        messages: Conversation in order. Must be a non-empty list.
        temperature: Sampling temperature override.
        top_p: Nucleus sampling override.
        max_tokens: Generation budget override.
        stream: Emit Server-Sent Events instead of a single JSON object.
        reasoning: Opaque effort hint forwarded to responses-style models.
    """
    model: str
    messages: list[ChatMessage]
    temperature: float | None
    top_p: float | None
    max_tokens: int | None
    stream: bool
    reasoning: Any


class AssistantMessage(TypedDict):
    role: Literal["assistant"]
    content: str


class Choice(TypedDict):
    """A completion choice in a non-streaming response."""
    index: int
    message: AssistantMessage
    finish_reason: str


class Usage(TypedDict):
    """Estimated token usage of a completion.

    Attributes:
        prompt_tokens: Estimate over the serialized message list.
        completion_tokens: Estimate over the generated text.
        total_tokens: Sum of the two.
    """
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class ChatCompletionResponse(TypedDict):
    """A complete chat completion response (OpenAI format)."""
    id: str
    object: Literal["chat.completion"]
    created: int
    model: str
    choices: list[Choice]
    usage: Usage


class Delta(TypedDict, total=False):
    """Incremental update carried by a streamed chunk.

    The first chunk carries the role, content chunks carry text, and the
    terminal chunk carries an empty delta.
    """
    role: str
    content: str


class StreamChoice(TypedDict):
    index: int
    delta: Delta
    finish_reason: str | None


class ChatCompletionChunk(TypedDict):
    """A streamed chat completion chunk (OpenAI format)."""
    id: str
    object: Literal["chat.completion.chunk"]
    created: int
    model: str
    choices: list[StreamChoice]


class ErrorBody(TypedDict):
    message: str
    type: str
    code: str


class ErrorResponse(TypedDict):
    """Uniform error envelope for every failed request."""
    error: ErrorBody
