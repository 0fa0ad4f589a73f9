"""Assemble OpenAI chat completion objects from extracted text."""

import json
import time
import uuid
from typing import Any, Mapping, Sequence

from ..types import ChatCompletionResponse
from .exceptions import InvalidParameterError
from .tokens import estimate_tokens

COMPLETION_ID_PREFIX = "chatcmpl-"


def validate_messages(payload: Any) -> list[Any]:
    """Return ``payload["messages"]`` or raise if it is not a non-empty list."""
    messages = payload.get("messages") if isinstance(payload, Mapping) else None
    if not isinstance(messages, list) or not messages:
        raise InvalidParameterError("Messages must be a non-empty array")
    return messages


def new_completion_id() -> str:
    """Random opaque id, e.g. ``chatcmpl-1f0c2b...`` (24 hex chars)."""
    return COMPLETION_ID_PREFIX + uuid.uuid4().hex[:24]


def current_timestamp() -> int:
    return int(time.time())


def serialize_messages(messages: Sequence[Any]) -> str:
    """Compact JSON of the message list, the basis of the prompt estimate."""
    return json.dumps(list(messages), ensure_ascii=False, separators=(",", ":"), default=str)


def build_completion(
    content: str,
    model: str,
    messages: Sequence[Any],
    completion_id: str,
    created: int,
) -> ChatCompletionResponse:
    """Wrap ``content`` into a non-streaming chat completion."""
    prompt_tokens = estimate_tokens(serialize_messages(messages))
    completion_tokens = estimate_tokens(content)
    return {
        "id": completion_id,
        "object": "chat.completion",
        "created": created,
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {
            "prompt_tokens": prompt_tokens,
            "completion_tokens": completion_tokens,
            "total_tokens": prompt_tokens + completion_tokens,
        },
    }
