"""Models listing endpoint - OpenAI compatible."""

import logging
import time

from ...core.registry import get_service

logger = logging.getLogger("cfshim")


async def list_models() -> dict:
    """List available models in OpenAI API format.

    GET /v1/models

    Returns:
        A dictionary containing every entry of the model map.
    """
    logger.info("Received models list request")

    service = get_service()
    created = int(time.time())
    models = [
        {
            "id": model_id,
            "object": "model",
            "created": created,
            "owned_by": service.settings.owned_by,
        }
        for model_id in service.registry.model_ids()
    ]

    return {
        "object": "list",
        "data": models,
    }
