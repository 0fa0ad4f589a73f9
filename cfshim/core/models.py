"""Model map: public model ids to Workers AI model ids and request dialects."""

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .exceptions import ModelNotSupportedError
from .settings import DEFAULT_MODEL, DEFAULT_STRUCTURED_PREFIXES, ShimSettings

logger = logging.getLogger("cfshim")


class Dialect(str, Enum):
    """Request/response shape a backend model speaks."""

    LEGACY = "legacy"
    STRUCTURED = "structured"


@dataclass(frozen=True)
class ModelRoute:
    """A resolved model: what the client asked for and where it goes."""

    public_id: str
    backend_id: str
    dialect: Dialect


def classify_dialect(
    backend_id: str, structured_prefixes: Iterable[str] = DEFAULT_STRUCTURED_PREFIXES
) -> Dialect:
    """Return STRUCTURED for responses-style backend families, LEGACY otherwise."""
    if any(backend_id.startswith(prefix) for prefix in structured_prefixes):
        return Dialect.STRUCTURED
    return Dialect.LEGACY


class ModelRegistry:
    """Read-only lookup table built once at startup."""

    def __init__(
        self,
        model_map: Mapping[str, str],
        *,
        default_model: str = DEFAULT_MODEL,
        structured_prefixes: Iterable[str] = DEFAULT_STRUCTURED_PREFIXES,
    ) -> None:
        prefixes = tuple(structured_prefixes)
        self.default_model = default_model
        self._routes: Mapping[str, ModelRoute] = MappingProxyType({
            public_id: ModelRoute(
                public_id=public_id,
                backend_id=backend_id,
                dialect=classify_dialect(backend_id, prefixes),
            )
            for public_id, backend_id in model_map.items()
        })

    @classmethod
    def from_settings(cls, settings: ShimSettings) -> "ModelRegistry":
        return cls(
            settings.model_map,
            default_model=settings.default_model,
            structured_prefixes=settings.structured_prefixes,
        )

    def resolve(self, public_id: Optional[str]) -> Optional[ModelRoute]:
        """Look up a public model id; a missing id means the default model."""
        if not public_id:
            return self._routes.get(self.default_model)
        if not isinstance(public_id, str):
            return None
        return self._routes.get(public_id)

    def require(self, public_id: Optional[str]) -> ModelRoute:
        """Like :meth:`resolve` but raise for unknown models."""
        route = self.resolve(public_id)
        if route is None:
            model = public_id or self.default_model
            logger.warning("Rejected request for unsupported model '%s'", model)
            raise ModelNotSupportedError(f"Model '{model}' not supported")
        return route

    def model_ids(self) -> list[str]:
        return list(self._routes.keys())

    def __contains__(self, public_id: object) -> bool:
        return public_id in self._routes

    def __len__(self) -> int:
        return len(self._routes)
