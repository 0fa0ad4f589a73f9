"""Builders for Workers AI results and chat requests used in tests.

These help construct correctly shaped payloads without needing to remember
every field of each backend dialect.
"""

from __future__ import annotations

from typing import Any


def build_legacy_result(text: str) -> dict[str, Any]:
    """Result of a legacy text-generation model."""
    return {"response": text}


def build_structured_result(*texts: str, with_reasoning: bool = False) -> dict[str, Any]:
    """Result of a responses-style model, one message item per text.

    Args:
        texts: Answer fragments, one ``output_text`` part each
        with_reasoning: Prepend a reasoning item, which carries no answer text
    """
    output: list[dict[str, Any]] = []
    if with_reasoning:
        output.append(
            {
                "type": "reasoning",
                "content": [{"type": "reasoning_text", "text": "thinking..."}],
            }
        )
    for text in texts:
        output.append(
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": text}],
            }
        )
    return {"object": "response", "output": output}


def build_chat_choices_result(text: str) -> dict[str, Any]:
    """Result of a model that answers in OpenAI chat format."""
    return {
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": text}}
        ]
    }


def build_chat_request(
    *user_messages: str,
    model: str | None = None,
    system: str | None = None,
    stream: bool = False,
    **overrides: Any,
) -> dict[str, Any]:
    """Build a chat completions request body.

    Args:
        user_messages: User turns, in order
        model: Public model id (omitted to use the default model)
        system: Optional system prompt placed first
        stream: Request SSE streaming
        overrides: Extra top-level fields (temperature, max_tokens, ...)
    """
    messages: list[dict[str, Any]] = []
    if system is not None:
        messages.append({"role": "system", "content": system})
    messages.extend({"role": "user", "content": text} for text in user_messages)
    body: dict[str, Any] = {"messages": messages, "stream": stream}
    if model is not None:
        body["model"] = model
    body.update(overrides)
    return body
