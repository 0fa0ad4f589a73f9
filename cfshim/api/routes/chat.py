"""OpenAI-compatible chat completions endpoint."""

import json
import logging
from typing import Optional

from fastapi import Request, Response

from ...auth import get_api_key_validator
from ...core.exceptions import InternalError, PayloadTooLargeError, ProxyError
from ...core.registry import get_service

logger = logging.getLogger("cfshim")


def _declared_length(request: Request) -> Optional[int]:
    raw = request.headers.get("content-length")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


async def _read_body(request: Request, max_size: int) -> bytes:
    """Read the body chunk by chunk, stopping once it passes ``max_size``."""
    chunks: list[bytes] = []
    total = 0
    async for chunk in request.stream():
        total += len(chunk)
        if total > max_size:
            raise PayloadTooLargeError("Request body too large")
        chunks.append(chunk)
    return b"".join(chunks)


async def chat_completions(request: Request) -> Response:
    """Chat completions endpoint - OpenAI compatible.

    POST /v1/chat/completions

    The caller is authenticated first, then the body size is checked, then
    the body is parsed and handed to the chat service. Malformed JSON is an
    internal error, matching the upstream Worker this shim replaces.
    """
    logger.info("Received chat completions request")
    get_api_key_validator().validate_request(request)

    service = get_service()
    max_size = service.settings.max_request_size
    declared = _declared_length(request)
    if declared is not None and declared > max_size:
        raise PayloadTooLargeError("Request body too large")

    body = await _read_body(request, max_size)

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.error("Invalid JSON payload: %s", exc)
        raise InternalError("Internal server error") from exc

    try:
        return await service.chat_completion(payload)
    except ProxyError:
        raise
    except Exception as exc:
        logger.exception("Unexpected error while handling chat completion")
        raise InternalError("Internal server error") from exc
