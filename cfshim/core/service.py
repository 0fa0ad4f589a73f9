"""Chat service: one inbound chat request to one backend inference call."""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from fastapi import Response
from fastapi.responses import JSONResponse, StreamingResponse

from .backend import InferenceBackend, WorkersAIBackend
from .completion import (
    build_completion,
    current_timestamp,
    new_completion_id,
    validate_messages,
)
from .extractor import extract_content
from .invoker import InferenceInvoker
from .models import ModelRegistry
from .request_builder import build_backend_request
from .settings import ShimSettings
from .sse import iter_sse_bytes

logger = logging.getLogger("cfshim")

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@dataclass(frozen=True)
class ChatOutcome:
    """Everything needed to answer a chat request, resolved up front."""

    completion_id: str
    created: int
    model: str
    content: str
    messages: Sequence[Any]
    stream: bool


class ChatService:
    """Wires the model registry, request builder, invoker and extractor.

    Settings are fixed for the lifetime of the service; each call only reads
    them, so one instance serves any number of concurrent requests.
    """

    def __init__(
        self,
        settings: ShimSettings,
        backend: Optional[InferenceBackend] = None,
    ) -> None:
        self.settings = settings
        self.registry = ModelRegistry.from_settings(settings)
        self.backend = backend or WorkersAIBackend.from_settings(settings.cloudflare)
        self.invoker = InferenceInvoker(self.backend)

    async def complete(self, payload: Mapping[str, Any]) -> ChatOutcome:
        """Validate, call the backend and extract the answer.

        Raises:
            InvalidParameterError: ``messages`` is missing, not a list or empty.
            ModelNotSupportedError: the model is not in the model map.
            BackendError: the backend failed (after the fallback, if any).
        """
        messages = validate_messages(payload)
        route = self.registry.require(payload.get("model"))
        is_stream = bool(payload.get("stream"))
        logger.info(
            "Processing request for model %s -> %s, stream=%s",
            route.public_id,
            route.backend_id,
            is_stream,
        )

        backend_request = build_backend_request(payload, route.dialect, self.settings.defaults)
        response = await self.invoker.invoke(route, backend_request, messages)
        content = extract_content(response, route.dialect)

        return ChatOutcome(
            completion_id=new_completion_id(),
            created=current_timestamp(),
            model=route.public_id,
            content=content,
            messages=messages,
            stream=is_stream,
        )

    async def chat_completion(self, payload: Mapping[str, Any]) -> Response:
        """Answer a chat request as JSON or as an emulated SSE stream.

        The answer is complete before the response object exists, so a
        failure can never interrupt a stream that has already started.
        """
        outcome = await self.complete(payload)

        if outcome.stream:
            logger.info(
                "Streaming %d characters for %s as %s",
                len(outcome.content),
                outcome.model,
                outcome.completion_id,
            )
            return StreamingResponse(
                iter_sse_bytes(
                    outcome.content,
                    outcome.model,
                    outcome.completion_id,
                    outcome.created,
                    self.settings.stream_chunk_size,
                ),
                media_type="text/event-stream",
                headers=STREAM_HEADERS,
            )

        completion = build_completion(
            outcome.content,
            outcome.model,
            outcome.messages,
            outcome.completion_id,
            outcome.created,
        )
        logger.info(
            "Completed %s for %s (usage=%s)",
            outcome.completion_id,
            outcome.model,
            completion["usage"],
        )
        return JSONResponse(completion)
