"""Translate an OpenAI chat request into a Workers AI request body."""

import logging
from typing import Any, Mapping, Sequence, Union

from ..types import LegacyMessagesRequest, LegacyPromptRequest, StructuredRequest
from .models import Dialect
from .settings import GenerationDefaults

logger = logging.getLogger("cfshim")

ROLE_LABELS = {"system": "System", "user": "User", "assistant": "Assistant"}
ASSISTANT_CUE = "Assistant: "


def message_text(content: Any) -> str:
    """Return the text of a message ``content`` value.

    Plain strings pass through, ``None`` becomes ``""`` and OpenAI content
    part lists contribute their ``text`` parts joined by newlines.
    """
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [
            part.get("text") or ""
            for part in content
            if isinstance(part, Mapping) and part.get("type") in (None, "text")
        ]
        return "\n".join(parts)
    return str(content)


def _pick(value: Any, default: Any) -> Any:
    # Only absent values are defaulted; an explicit 0 is kept
    return default if value is None else value


def build_backend_request(
    chat_request: Mapping[str, Any],
    dialect: Dialect,
    defaults: GenerationDefaults = GenerationDefaults(),
) -> Union[LegacyMessagesRequest, StructuredRequest]:
    """Build the dialect-specific backend body.

    ``chat_request["messages"]`` must already be validated as a non-empty
    list; the builder itself never fails.
    """
    messages: Sequence[Mapping[str, Any]] = [
        msg for msg in chat_request["messages"] if isinstance(msg, Mapping)
    ]
    temperature = _pick(chat_request.get("temperature"), defaults.temperature)
    top_p = _pick(chat_request.get("top_p"), defaults.top_p)

    if dialect is Dialect.STRUCTURED:
        # Assistant turns have no slot in this shape and are dropped
        system_content = next(
            (msg.get("content") for msg in messages if msg.get("role") == "system"),
            None,
        )
        instructions = message_text(system_content) or defaults.instructions
        user_input = "\n".join(
            message_text(msg.get("content"))
            for msg in messages
            if msg.get("role") == "user"
        )
        return {
            "input": user_input,
            "instructions": instructions,
            "temperature": temperature,
            "top_p": top_p,
            "max_tokens": _pick(chat_request.get("max_tokens"), defaults.structured_max_tokens),
            "reasoning": _pick(
                chat_request.get("reasoning"), {"effort": defaults.reasoning_effort}
            ),
        }

    return {
        "messages": [
            {"role": msg.get("role"), "content": msg.get("content") or ""}
            for msg in messages
        ],
        "temperature": temperature,
        "top_p": top_p,
        "max_tokens": _pick(chat_request.get("max_tokens"), defaults.max_tokens),
    }


def build_fallback_prompt(messages: Sequence[Mapping[str, Any]]) -> str:
    """Flatten a conversation into a single ``Role: content`` transcript."""
    lines = []
    for msg in messages:
        if not isinstance(msg, Mapping):
            continue
        role = msg.get("role")
        label = ROLE_LABELS.get(role, str(role).capitalize() if role else "User")
        lines.append(f"{label}: {message_text(msg.get('content'))}")
    return "\n\n".join(lines) + "\n\n" + ASSISTANT_CUE


def build_fallback_request(
    messages: Sequence[Mapping[str, Any]], backend_request: Mapping[str, Any]
) -> LegacyPromptRequest:
    """Reshape a failed legacy request into the prompt form.

    Sampling values are reused from the already-resolved request.
    """
    return {
        "prompt": build_fallback_prompt(messages),
        "temperature": backend_request.get("temperature"),
        "top_p": backend_request.get("top_p"),
        "max_tokens": backend_request.get("max_tokens"),
    }
