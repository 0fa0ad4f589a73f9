"""Normalize the many shapes of Workers AI responses into plain text.

Responses are untrusted and never schema-validated. Instead they are matched
against an ordered table of matchers; the first matcher whose predicate accepts
the response extracts the answer. Anything no matcher recognizes falls through
to a diagnostic dump of the whole response.
"""

import json
import logging
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from .models import Dialect
from .request_builder import ASSISTANT_CUE

logger = logging.getLogger("cfshim")

LOG_DUMP_MAX_CHARS = 2000


class ResponseShape(str, Enum):
    """Which known shape a backend response matched."""

    OUTPUT_LIST = "output_list"
    RESPONSE_FIELD = "response"
    GENERATED_TEXT = "generated_text"
    CHAT_CHOICES = "choices"
    PLAIN_TEXT = "plain_text"
    UNKNOWN = "unknown"


def _text_field(response: Any, key: str) -> Optional[str]:
    if not isinstance(response, Mapping):
        return None
    value = response.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def _choice_content(response: Any) -> Optional[str]:
    if not isinstance(response, Mapping):
        return None
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, Mapping):
        return None
    return _text_field(first.get("message"), "content")


def _has_output_list(response: Any) -> bool:
    return isinstance(response, Mapping) and isinstance(response.get("output"), list)


def _output_text(response: Mapping[str, Any]) -> str:
    fragments = []
    for item in response["output"]:
        content = item.get("content") if isinstance(item, Mapping) else None
        if not isinstance(content, list):
            continue
        for part in content:
            if isinstance(part, Mapping) and part.get("type") == "output_text":
                text = part.get("text")
                fragments.append(text if isinstance(text, str) else "")
    return "\n".join(fragments)


Matcher = tuple[ResponseShape, Callable[[Any], bool], Callable[[Any], str]]

STRUCTURED_MATCHERS: tuple[Matcher, ...] = (
    (ResponseShape.OUTPUT_LIST, _has_output_list, _output_text),
)

TEXT_MATCHERS: tuple[Matcher, ...] = (
    (
        ResponseShape.RESPONSE_FIELD,
        lambda r: _text_field(r, "response") is not None,
        lambda r: r["response"],
    ),
    (
        ResponseShape.GENERATED_TEXT,
        lambda r: _text_field(r, "generated_text") is not None,
        lambda r: r["generated_text"],
    ),
    (
        ResponseShape.CHAT_CHOICES,
        lambda r: _choice_content(r) is not None,
        _choice_content,
    ),
    (
        ResponseShape.PLAIN_TEXT,
        lambda r: isinstance(r, str) and bool(r),
        lambda r: r,
    ),
)


def _matchers_for(dialect: Dialect) -> tuple[Matcher, ...]:
    if dialect is Dialect.STRUCTURED:
        return STRUCTURED_MATCHERS + TEXT_MATCHERS
    return TEXT_MATCHERS


def _match(response: Any, dialect: Dialect) -> tuple[ResponseShape, Optional[Callable[[Any], str]]]:
    for shape, applies, extract in _matchers_for(dialect):
        if applies(response):
            return shape, extract
    return ResponseShape.UNKNOWN, None


def classify_response(response: Any, dialect: Dialect) -> ResponseShape:
    """Name the first known shape ``response`` matches."""
    return _match(response, dialect)[0]


def strip_echoed_prompt(text: str) -> str:
    """Drop everything up to the last ``Assistant: `` cue.

    Some models echo the flattened transcript back before answering.
    """
    if ASSISTANT_CUE in text:
        return text.rsplit(ASSISTANT_CUE, 1)[1]
    return text


def _dump(response: Any) -> str:
    try:
        return json.dumps(response, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(response)


def extract_content(response: Any, dialect: Dialect) -> str:
    """Return the answer text carried by a backend ``response``."""
    shape, extract = _match(response, dialect)
    if extract is None:
        # TODO: stop exposing raw backend payloads to clients once every
        # supported model's response shape has a matcher
        dump = _dump(response)
        logger.warning(
            "Unexpected %s response format from backend: %s",
            dialect.value,
            dump if len(dump) <= LOG_DUMP_MAX_CHARS else f"{dump[:LOG_DUMP_MAX_CHARS]}...<truncated>",
        )
        return dump

    logger.debug("Backend response matched shape %s", shape.value)
    return strip_echoed_prompt(extract(response))
