"""Immutable runtime settings built once from the loaded configuration."""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger("cfshim")

DEFAULT_MODEL = "deepseek-r1"
DEFAULT_MAX_REQUEST_SIZE = 1024 * 1024
DEFAULT_STREAM_CHUNK_SIZE = 100
DEFAULT_OWNED_BY = "cloudflare"
DEFAULT_API_BASE = "https://api.cloudflare.com/client/v4"
DEFAULT_REQUEST_TIMEOUT = 120.0
DEFAULT_API_KEYS_ENV = "VALID_API_KEYS"

# ${NAME} or $NAME, as written in config files
ENV_PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

DEFAULT_STRUCTURED_PREFIXES = ("@cf/openai/gpt-oss",)

DEFAULT_MODEL_MAP = {
    "deepseek-r1": "@cf/deepseek-ai/deepseek-r1-distill-qwen-32b",
    "gpt-oss-120b": "@cf/openai/gpt-oss-120b",
    "gpt-oss-20b": "@cf/openai/gpt-oss-20b",
    "llama-4-scout": "@cf/meta/llama-4-scout-17b-16e-instruct",
    "qwen2.5-coder": "@cf/qwen/qwen2.5-coder-32b-instruct",
    "gemma-3": "@cf/google/gemma-3-12b-it",
}


@dataclass(frozen=True)
class GenerationDefaults:
    """Sampling defaults applied when a chat request leaves a field out."""

    temperature: float = 0.7
    top_p: float = 0.9
    max_tokens: int = 4096
    structured_max_tokens: int = 2048
    reasoning_effort: str = "medium"
    instructions: str = "You are a helpful assistant."


@dataclass(frozen=True)
class CloudflareSettings:
    """Where and how to reach the Workers AI REST API."""

    account_id: str = ""
    api_token: str = ""
    api_base: str = DEFAULT_API_BASE
    timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT


@dataclass(frozen=True)
class ShimSettings:
    """Process-wide configuration value, injected into each component."""

    model_map: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_MODEL_MAP))
    default_model: str = DEFAULT_MODEL
    structured_prefixes: tuple[str, ...] = DEFAULT_STRUCTURED_PREFIXES
    owned_by: str = DEFAULT_OWNED_BY
    max_request_size: int = DEFAULT_MAX_REQUEST_SIZE
    stream_chunk_size: int = DEFAULT_STREAM_CHUNK_SIZE
    cors_allow_origins: tuple[str, ...] = ("*",)
    cors_max_age: int = 86400
    api_keys: tuple[str, ...] = ()
    defaults: GenerationDefaults = field(default_factory=GenerationDefaults)
    cloudflare: CloudflareSettings = field(default_factory=CloudflareSettings)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ShimSettings":
        """Build settings from a parsed config dictionary.

        Raises:
            ConfigurationError: If a section has the wrong type or a numeric
                value cannot be parsed.
        """
        proxy_settings = _section(config, "proxy_settings")
        defaults_cfg = _section(proxy_settings, "defaults")
        cors_cfg = _section(proxy_settings, "cors")
        cloudflare_cfg = _section(config, "cloudflare")
        auth_cfg = _section(config, "auth")

        model_map = config.get("model_map")
        if model_map is None:
            model_map = dict(DEFAULT_MODEL_MAP)
        elif not isinstance(model_map, Mapping) or not model_map:
            raise ConfigurationError("model_map must be a non-empty mapping")
        else:
            model_map = {str(k): str(v) for k, v in model_map.items()}

        base = GenerationDefaults()
        defaults = GenerationDefaults(
            temperature=_number(defaults_cfg, "temperature", base.temperature, float),
            top_p=_number(defaults_cfg, "top_p", base.top_p, float),
            max_tokens=_number(defaults_cfg, "max_tokens", base.max_tokens, int),
            structured_max_tokens=_number(
                defaults_cfg, "structured_max_tokens", base.structured_max_tokens, int
            ),
            reasoning_effort=str(defaults_cfg.get("reasoning_effort") or base.reasoning_effort),
            instructions=str(defaults_cfg.get("instructions") or base.instructions),
        )

        timeout_raw = cloudflare_cfg.get("request_timeout", DEFAULT_REQUEST_TIMEOUT)
        cloudflare = CloudflareSettings(
            account_id=str(cloudflare_cfg.get("account_id") or ""),
            api_token=str(cloudflare_cfg.get("api_token") or ""),
            api_base=str(cloudflare_cfg.get("api_base") or DEFAULT_API_BASE).rstrip("/"),
            timeout=None if timeout_raw is None else _to_number(
                timeout_raw, float, "cloudflare.request_timeout"
            ),
        )

        default_model = str(proxy_settings.get("default_model") or DEFAULT_MODEL)
        if default_model not in model_map:
            logger.warning(
                "Default model '%s' is not in model_map; requests without a model will be rejected",
                default_model,
            )

        return cls(
            model_map=model_map,
            default_model=default_model,
            structured_prefixes=_string_tuple(
                proxy_settings.get("structured_prefixes"), DEFAULT_STRUCTURED_PREFIXES
            ),
            owned_by=str(proxy_settings.get("owned_by") or DEFAULT_OWNED_BY),
            max_request_size=_number(
                proxy_settings, "max_request_size", DEFAULT_MAX_REQUEST_SIZE, int
            ),
            stream_chunk_size=_positive(
                _number(proxy_settings, "stream_chunk_size", DEFAULT_STREAM_CHUNK_SIZE, int),
                "stream_chunk_size",
            ),
            cors_allow_origins=_string_tuple(cors_cfg.get("allow_origins"), ("*",)),
            cors_max_age=_number(cors_cfg, "max_age", 86400, int),
            api_keys=_load_api_keys(auth_cfg),
            defaults=defaults,
            cloudflare=cloudflare,
        )


def _section(config: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = config.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{name}' must be a mapping")
    return value


def _to_number(value: Any, kind: type, name: str):
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}") from exc


def _number(section: Mapping[str, Any], key: str, default, kind: type):
    value = section.get(key)
    if value is None:
        return default
    return _to_number(value, kind, key)


def _positive(value: int, name: str) -> int:
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def _string_tuple(value: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None:
        return default
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(item).strip() for item in value if str(item).strip())


def _load_api_keys(auth_cfg: Mapping[str, Any]) -> tuple[str, ...]:
    """Collect keys from the config list and the comma-separated env var."""
    keys = list(_string_tuple(auth_cfg.get("api_keys"), ()))
    env_name = auth_cfg.get("api_keys_env", DEFAULT_API_KEYS_ENV)
    if env_name:
        keys.extend(_string_tuple(os.getenv(str(env_name), ""), ()))
    # Unresolved placeholders must never become usable keys
    return tuple(
        dict.fromkeys(key for key in keys if not ENV_PLACEHOLDER_PATTERN.fullmatch(key))
    )
