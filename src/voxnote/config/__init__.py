"""Configuration module for voxnote.

This module provides the typed configuration tree; see loader.py for
YAML loading and environment overrides.
"""

from dataclasses import dataclass, field


@dataclass
class RemoteConfig:
    """Notes API client configuration."""

    base_url: str = "http://localhost:3000"
    timeout_seconds: float = 10.0
    probe_timeout_seconds: float = 2.0
    list_limit: int = 50


@dataclass
class CacheConfig:
    """Listing cache configuration."""

    freshness_seconds: float = 300.0


@dataclass
class StorageConfig:
    """Local fallback store configuration."""

    local_dir: str = "~/.voxnote/notes"
    key_prefix: str = "audio-notes-"


@dataclass
class BackendConfig:
    """In-process notes API backend configuration."""

    mongo_uri: str = "mongodb://localhost:27017"
    database: str = "voxnote"
    server_selection_timeout_ms: int = 5000


@dataclass
class SyncConfig:
    """Background sync configuration."""

    on_startup: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class VoxnoteConfig:
    """Main voxnote configuration."""

    owner: str | None = None
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Public API
__all__ = [
    "BackendConfig",
    "CacheConfig",
    "LoggingConfig",
    "RemoteConfig",
    "StorageConfig",
    "SyncConfig",
    "VoxnoteConfig",
]
