"""Configuration loading and validation."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from tabletalk.config.schema import TabletalkConfig

DEFAULT_CONFIG_PATH = Path.home() / ".tabletalk" / "tabletalk.yaml"

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "OPENAI_API_KEY": ("llm", "api_key"),
    "OPENAI_BASE_URL": ("llm", "base_url"),
    "TABLETALK_MODEL": ("llm", "model"),
    "TRINO_HOST": ("trino", "host"),
    "TRINO_PORT": ("trino", "port"),
    "TRINO_SCHEME": ("trino", "scheme"),
    "TRINO_USER": ("trino", "user"),
}


class ConfigError(Exception):
    """Configuration loading or validation error."""


def _apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    for var, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value is None or value.strip() == "":
            continue
        section_data = data.setdefault(section, {})
        if not isinstance(section_data, dict):
            raise ConfigError(f"Section '{section}' must be a mapping")
        section_data[key] = value.strip()
    return data


def load_config(
    path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None
) -> TabletalkConfig:
    """Load and validate tabletalk configuration.

    Values come from the YAML file (if any), then environment variables such
    as ``OPENAI_API_KEY`` and ``TRINO_HOST`` override them.

    Args:
        path: Path to config file. If None, tries default location.
              If file doesn't exist, defaults are used.
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        Validated configuration object

    Raises:
        ConfigError: If config file exists but is invalid
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if environ is None:
        environ = os.environ

    config_data: Any = None
    if path.exists():
        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e

    if config_data is None:
        config_data = {}
    if not isinstance(config_data, dict):
        raise ConfigError(f"Top level of {path} must be a mapping")

    config_data = _apply_env_overrides(config_data, environ)

    try:
        return TabletalkConfig(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e


def save_config(config: TabletalkConfig, path: Optional[Union[str, Path]] = None) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration object to save
        path: Destination path (string or Path object). If None, uses default location.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    elif isinstance(path, str):
        path = Path(path)

    path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(by_alias=True)

    with open(path, "w") as f:
        yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)
