"""Emulated SSE streaming: re-chunk a finished answer into OpenAI chunks.

The backend returns the whole answer at once. The frames produced here only
exist so that streaming clients receive what they expect: a role-opening
chunk, the text in fixed-size slices, a terminal chunk and ``[DONE]``.
"""

import json
from typing import Iterator, Union

from ..types import ChatCompletionChunk, Delta

DEFAULT_CHUNK_SIZE = 100
DONE_SENTINEL = "[DONE]"

StreamFrame = Union[ChatCompletionChunk, str]


def chunk_text(text: str, size: int = DEFAULT_CHUNK_SIZE) -> Iterator[str]:
    """Slice ``text`` into ``size``-character pieces.

    ``str`` indexing counts code points, so no piece ever ends inside a
    multi-byte character.
    """
    if size <= 0:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(text), size):
        yield text[start:start + size]


def _chunk(
    completion_id: str,
    created: int,
    model: str,
    delta: Delta,
    finish_reason: str | None = None,
) -> ChatCompletionChunk:
    return {
        "id": completion_id,
        "object": "chat.completion.chunk",
        "created": created,
        "model": model,
        "choices": [{"index": 0, "delta": delta, "finish_reason": finish_reason}],
    }


def iter_stream_frames(
    text: str,
    model: str,
    completion_id: str,
    created: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[StreamFrame]:
    """Yield the frames of one emulated stream, ending with the sentinel."""
    yield _chunk(completion_id, created, model, {"role": "assistant", "content": ""})
    for piece in chunk_text(text, chunk_size):
        yield _chunk(completion_id, created, model, {"content": piece})
    yield _chunk(completion_id, created, model, {}, finish_reason="stop")
    yield DONE_SENTINEL


def encode_sse_frame(frame: StreamFrame) -> bytes:
    """Render one frame as a ``data:`` event."""
    if isinstance(frame, str):
        data = frame
    else:
        data = json.dumps(frame, ensure_ascii=False)
    return f"data: {data}\n\n".encode("utf-8")


def iter_sse_bytes(
    text: str,
    model: str,
    completion_id: str,
    created: int,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Iterator[bytes]:
    """Encoded body of an emulated stream."""
    for frame in iter_stream_frames(text, model, completion_id, created, chunk_size):
        yield encode_sse_frame(frame)
