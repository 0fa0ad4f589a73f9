"""Call the backend once, with a single prompt-shaped retry for legacy models."""

import logging
from typing import Any, Mapping, Sequence

from .backend import BackendResult, InferenceBackend
from .exceptions import BackendError
from .models import Dialect, ModelRoute
from .request_builder import build_fallback_request

logger = logging.getLogger("cfshim")


class InferenceInvoker:
    """Two-attempt policy around an :class:`InferenceBackend`.

    Legacy models that reject the ``messages`` shape get one more try with a
    flattened ``prompt``. Responses-style models do not accept that shape, so
    their failures surface immediately.
    """

    def __init__(self, backend: InferenceBackend) -> None:
        self.backend = backend

    async def invoke(
        self,
        route: ModelRoute,
        backend_request: Mapping[str, Any],
        messages: Sequence[Mapping[str, Any]],
    ) -> Any:
        """Return the backend response or raise :class:`BackendError`."""
        logger.info(
            "Calling backend model %s (%s dialect) for %s",
            route.backend_id,
            route.dialect.value,
            route.public_id,
        )
        result = await self.backend.run(route.backend_id, backend_request)
        if result.ok:
            return result.response

        if route.dialect is Dialect.STRUCTURED:
            logger.error(
                "Backend model %s failed, no fallback for structured models: %s",
                route.backend_id,
                result.error,
            )
            raise self._backend_error(route, result)

        logger.warning("Falling back to prompt format: %s", result.error)
        fallback_request = build_fallback_request(messages, backend_request)
        fallback = await self.backend.run(route.backend_id, fallback_request)
        if fallback.ok:
            logger.info("Prompt fallback succeeded for %s", route.backend_id)
            return fallback.response

        logger.error(
            "Prompt fallback for %s failed as well: %s", route.backend_id, fallback.error
        )
        raise self._backend_error(route, fallback)

    @staticmethod
    def _backend_error(route: ModelRoute, result: BackendResult) -> BackendError:
        return BackendError(
            f"Inference failed for model '{route.public_id}'",
            detail=result.error,
        )
