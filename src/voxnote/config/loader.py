"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
- Environment variable overrides (VOXNOTE_*)
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from . import (
    BackendConfig,
    CacheConfig,
    LoggingConfig,
    RemoteConfig,
    StorageConfig,
    SyncConfig,
    VoxnoteConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "dev"


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


def dict_to_config(data: dict[str, Any]) -> VoxnoteConfig:
    """Convert raw dict to typed VoxnoteConfig dataclass."""
    root = data.get("voxnote", {}) or {}

    # YAML sections may be present but empty (None)
    def safe_get(key: str) -> dict[str, Any]:
        value = root.get(key, {})
        return value if value is not None else {}

    return VoxnoteConfig(
        owner=root.get("owner"),
        remote=RemoteConfig(**safe_get("remote")),
        cache=CacheConfig(**safe_get("cache")),
        storage=StorageConfig(**safe_get("storage")),
        backend=BackendConfig(**safe_get("backend")),
        sync=SyncConfig(**safe_get("sync")),
        logging=LoggingConfig(**safe_get("logging")),
    )


def apply_env_overrides(
    config: VoxnoteConfig, environ: Mapping[str, str] | None = None
) -> VoxnoteConfig:
    """Override config values from VOXNOTE_* environment variables.

    Args:
        config: Config to update in place.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        The same config object.
    """
    env = os.environ if environ is None else environ

    if env.get("VOXNOTE_BASE_URL"):
        config.remote.base_url = env["VOXNOTE_BASE_URL"]
    if env.get("VOXNOTE_OWNER"):
        config.owner = env["VOXNOTE_OWNER"]
    if env.get("VOXNOTE_MONGO_URI"):
        config.backend.mongo_uri = env["VOXNOTE_MONGO_URI"]
    if env.get("VOXNOTE_LOG_LEVEL"):
        config.logging.level = env["VOXNOTE_LOG_LEVEL"]
    if env.get("VOXNOTE_LOCAL_DIR"):
        config.storage.local_dir = env["VOXNOTE_LOCAL_DIR"]

    return config


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent.parent / "config"
        self._config_dir = config_dir

    def load(self, path: Path) -> VoxnoteConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed VoxnoteConfig
        """
        return dict_to_config(load_yaml_with_inheritance(path))

    def load_profile(self, profile: str) -> VoxnoteConfig:
        """Load configuration by profile name.

        Args:
            profile: Profile name (e.g., 'dev', 'prod')

        Returns:
            Parsed VoxnoteConfig for the profile
        """
        return self.load(self._config_dir / f"{profile}.yaml")

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(
    path: str | Path | None = None,
    profile: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> VoxnoteConfig:
    """Load voxnote configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('dev', 'prod') if path not given
        environ: Environment used for overrides

    Returns:
        Parsed VoxnoteConfig. Without a path or profile, the default
        profile is used if its file exists, built-in defaults otherwise.

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader()

    if path is not None:
        config = loader.load(Path(path))
    elif profile is not None:
        config = loader.load_profile(profile)
    else:
        default_path = loader.get_config_dir() / f"{DEFAULT_PROFILE}.yaml"
        if default_path.exists():
            config = loader.load(default_path)
        else:
            logger.debug("No config file at %s, using defaults", default_path)
            config = VoxnoteConfig()

    return apply_env_overrides(config, environ)


__all__ = [
    "YAMLConfigLoader",
    "apply_env_overrides",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]
