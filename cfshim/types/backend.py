"""Types for Workers AI request and response bodies.

Workers AI models speak one of two dialects:

- Legacy text-generation models take ``messages`` (or a flattened
  ``prompt``) and usually answer with ``{"response": "..."}``.
- Responses-style models (``@cf/openai/gpt-oss-*``) take ``input`` and
  ``instructions`` and answer with an ``output`` list of message items.

Responses are never validated against these types; they only document the
shapes the extractor knows how to read.
"""

from typing import Any, Literal
from typing_extensions import TypedDict


class BackendMessage(TypedDict):
    role: str
    content: Any


class LegacyMessagesRequest(TypedDict):
    """Chat-style request for legacy text-generation models."""
    messages: list[BackendMessage]
    temperature: float
    top_p: float
    max_tokens: int


class LegacyPromptRequest(TypedDict):
    """Flattened-transcript request used as the fallback shape."""
    prompt: str
    temperature: float
    top_p: float
    max_tokens: int


class ReasoningOptions(TypedDict, total=False):
    effort: str


class StructuredRequest(TypedDict):
    """Request for responses-style models."""
    input: str
    instructions: str
    temperature: float
    top_p: float
    max_tokens: int
    reasoning: ReasoningOptions | Any


class OutputText(TypedDict):
    type: Literal["output_text"]
    text: str


class OutputItem(TypedDict, total=False):
    """One item of a responses-style ``output`` list.

    Reasoning items carry other content types; only ``output_text`` parts
    become part of the answer.
    """
    type: str
    role: str
    content: list[OutputText | dict[str, Any]]


class StructuredResponse(TypedDict, total=False):
    output: list[OutputItem]


class LegacyResponse(TypedDict, total=False):
    response: str
    generated_text: str


class RunEnvelope(TypedDict, total=False):
    """Envelope of ``POST /accounts/{account}/ai/run/{model}``."""
    result: Any
    success: bool
    errors: list[dict[str, Any]]
    messages: list[Any]
