"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
"""

from pathlib import Path
from typing import Any

import yaml

from . import (
    AssistantConfig,
    AudioConfig,
    LLMConfig,
    LoggingConfig,
    MiraConfig,
    SearchConfig,
    StorageConfig,
    STTConfig,
    TestingConfig,
    TTSConfig,
    TurnConfig,
)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    if "extends" in config:
        base_name = config.pop("extends")
        base_config = load_yaml_with_inheritance(path.parent / base_name)
        config = deep_merge(base_config, config)

    return config


def dict_to_config(data: dict[str, Any]) -> MiraConfig:
    """Convert raw dict to typed MiraConfig dataclass."""
    mira_data = data.get("mira", {}) or {}

    # YAML sections left empty load as None
    def safe_get(key: str) -> dict[str, Any]:
        value = mira_data.get(key, {})
        return value if value is not None else {}

    return MiraConfig(
        assistant=AssistantConfig(**safe_get("assistant")),
        audio=AudioConfig(**safe_get("audio")),
        stt=STTConfig(**safe_get("stt")),
        llm=LLMConfig(**safe_get("llm")),
        tts=TTSConfig(**safe_get("tts")),
        search=SearchConfig(**safe_get("search")),
        storage=StorageConfig(**safe_get("storage")),
        turn=TurnConfig(**safe_get("turn")),
        logging=LoggingConfig(**safe_get("logging")),
        testing=TestingConfig(**safe_get("testing")),
    )


def get_config_dir() -> Path:
    """Return the default config/ directory at the project root."""
    return Path(__file__).parent.parent.parent.parent / "config"


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        self._config_dir = config_dir or get_config_dir()

    def load(self, path: Path) -> MiraConfig:
        """Load configuration from file path."""
        return dict_to_config(load_yaml_with_inheritance(path))

    def load_profile(self, profile: str) -> MiraConfig:
        """Load configuration by profile name (e.g. 'dev', 'prod')."""
        return self.load(self._config_dir / f"{profile}.yaml")

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(path: str | Path | None = None, profile: str | None = None) -> MiraConfig:
    """Load Mira configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('dev', 'prod', 'test') if path not given

    Returns:
        Parsed MiraConfig

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader()

    if path is not None:
        return loader.load(Path(path))
    elif profile is not None:
        return loader.load_profile(profile)
    else:
        return loader.load_profile("dev")


__all__ = [
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "get_config_dir",
    "load_config",
    "load_yaml_with_inheritance",
]
