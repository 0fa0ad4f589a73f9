"""Configuration loading from YAML files with environment variable support."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Callable, Optional

import yaml
from dotenv import dotenv_values

from .core.settings import DEFAULT_API_KEYS_ENV, ENV_PLACEHOLDER_PATTERN, ShimSettings

logger = logging.getLogger("cfshim")

PROJECT_ROOT = Path(__file__).parent.parent

# Shipped config, relative to the project root
DEFAULT_CONFIG_PATH = "configs/config_default.yaml"

# Environment variable naming another config file
CONFIG_PATH_ENV = "CFSHIM_CONFIG"

EnvLookup = Callable[[str], Optional[str]]


def resolve_config_path(path: str) -> Path:
    """Absolute paths are kept, relative ones hang off the project root."""
    candidate = Path(path)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def resolve_env_path(config_path: Path, env_path: str | None = None) -> Path:
    """Pick the dotenv file that belongs to ``config_path``.

    ``configs/config_default.yaml`` pairs with ``configs/.env_default``; any
    other file name pairs with a plain ``.env`` next to it.
    """
    if env_path:
        return resolve_config_path(env_path)
    name = config_path.stem
    if name.startswith("config_"):
        return config_path.with_name(".env_" + name[len("config_"):])
    return config_path.with_name(".env")


def load_env_values(env_path: Path) -> dict[str, str]:
    """Read a dotenv file without touching ``os.environ``."""
    if not env_path.exists():
        return {}
    return {
        key: value
        for key, value in dotenv_values(env_path).items()
        if value is not None
    }


def make_env_lookup(env_values: dict[str, str]) -> EnvLookup:
    """Dotenv values first, then the process environment."""

    def lookup(name: str) -> Optional[str]:
        if name in env_values:
            return env_values[name]
        return os.getenv(name)

    return lookup


def load_config(
    path: str | None = None,
    env_path: str | None = None,
    substitute_env: bool = True,
) -> dict:
    """Load the shim configuration from a YAML file.

    Args:
        path: Config file. Defaults to CFSHIM_CONFIG, then
              configs/config_default.yaml in the project root.
        env_path: Dotenv file override used for placeholder substitution.
        substitute_env: Replace ``${VAR}`` / ``$VAR`` placeholders.

    Returns:
        Parsed configuration dictionary.

    Raises:
        RuntimeError: If the config file does not exist.
    """
    config_path = resolve_config_path(path or os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)
    logger.info(f"Loading configuration from {config_path}")

    if not config_path.exists():
        logger.error(f"Config file not found: {config_path}")
        raise RuntimeError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    if substitute_env:
        env_file = resolve_env_path(config_path, env_path)
        env_values = load_env_values(env_file)
        if env_values:
            logger.info(f"Loaded {len(env_values)} values from {env_file}")
        lookup = make_env_lookup(env_values)
        missing: set[str] = set()
        data = _substitute_env_vars(data, lookup, missing)
        _resolve_api_keys_env(data, lookup)
        if missing:
            logger.warning(
                f"Unset environment variables in config: {', '.join(sorted(missing))}. "
                f"Their placeholders are kept as-is; Workers AI calls will likely fail."
            )

    return data


def load_settings(
    path: str | None = None,
    env_path: str | None = None,
) -> ShimSettings:
    """Load a config file straight into :class:`ShimSettings`."""
    return ShimSettings.from_config(load_config(path, env_path))


def _substitute_env_vars(
    obj: Any,
    lookup: EnvLookup | None = None,
    missing: set[str] | None = None,
) -> Any:
    """Replace placeholders in every string of a parsed config tree.

    Names that ``lookup`` cannot resolve keep their literal placeholder and
    are added to ``missing``.
    """
    if lookup is None:
        lookup = os.getenv
    if missing is None:
        missing = set()

    if isinstance(obj, dict):
        return {key: _substitute_env_vars(value, lookup, missing) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_substitute_env_vars(item, lookup, missing) for item in obj]
    if not isinstance(obj, str):
        return obj

    def replace(match: re.Match) -> str:
        name = match.group(1) or match.group(2)
        value = lookup(name)
        if value is None:
            missing.add(name)
            return match.group(0)
        return value

    return ENV_PLACEHOLDER_PATTERN.sub(replace, obj)


def _resolve_api_keys_env(data: Any, lookup: EnvLookup) -> None:
    """Fold the variable named by ``auth.api_keys_env`` into ``auth.api_keys``.

    The variable is read through ``lookup``, so a key list kept in the paired
    dotenv file counts the same as one exported in the shell. The env name is
    cleared afterwards and settings do not read it a second time.
    """
    if not isinstance(data, dict):
        return
    auth = data.get("auth")
    if auth is None:
        auth = {}
    if not isinstance(auth, dict):
        return
    env_name = auth.get("api_keys_env", DEFAULT_API_KEYS_ENV)
    if not env_name:
        return
    value = lookup(str(env_name))
    if value is None:
        return

    keys = auth.get("api_keys") or []
    if isinstance(keys, str):
        keys = [keys]
    if not isinstance(keys, list):
        return
    auth["api_keys"] = keys + [key.strip() for key in value.split(",") if key.strip()]
    auth["api_keys_env"] = ""
    data["auth"] = auth
