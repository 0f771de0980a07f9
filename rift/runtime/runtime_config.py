"""
Runtime Configuration Module

Resolves the per-user directories Rift reads from and writes to: the
configuration directory, the cache (cover art, artist pictures), the data
directory and the log directory.

Each location can be overridden through an environment variable, which is
how the test suite isolates itself from the real user profile.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

APP_NAME = "Rift"
APP_ID = "me.wdkq.rift"

ENV_CONFIG_DIR = "RIFT_CONFIG_DIR"
ENV_CACHE_DIR = "RIFT_CACHE_DIR"
ENV_DATA_DIR = "RIFT_DATA_DIR"


@dataclass
class RuntimePaths:
    """Container for all runtime-related paths."""

    config_dir: Path
    cache_dir: Path
    data_dir: Path

    @property
    def covers_dir(self) -> Path:
        return self.cache_dir / "covers"

    @property
    def artists_dir(self) -> Path:
        return self.cache_dir / "artists"

    @property
    def logs_dir(self) -> Path:
        return self.data_dir / "logs"


@dataclass
class RuntimeConfig:
    """
    Configuration for the runtime environment.

    Detects the platform conventions once and keeps the resulting paths.
    """

    platform: str = sys.platform
    paths: Optional[RuntimePaths] = None

    @classmethod
    def detect(cls) -> RuntimeConfig:
        """
        Detect the current runtime configuration.

        Returns:
            RuntimeConfig: Detected configuration for the current environment.
        """
        config = cls()
        config.paths = cls._build_paths(config.platform)
        return config

    @staticmethod
    def _build_paths(platform: str) -> RuntimePaths:
        home = Path.home()

        if platform == "win32":
            roaming = Path(os.environ.get("APPDATA", home / "AppData" / "Roaming"))
            local = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
            config_base, cache_base, data_base = roaming, local, local
        elif platform == "darwin":
            support = home / "Library" / "Application Support"
            config_base, cache_base, data_base = support, home / "Library" / "Caches", support
        else:
            config_base = Path(os.environ.get("XDG_CONFIG_HOME", home / ".config"))
            cache_base = Path(os.environ.get("XDG_CACHE_HOME", home / ".cache"))
            data_base = Path(os.environ.get("XDG_DATA_HOME", home / ".local" / "share"))

        return RuntimePaths(
            config_dir=_env_path(ENV_CONFIG_DIR) or config_base / APP_NAME,
            cache_dir=_env_path(ENV_CACHE_DIR) or cache_base / APP_ID,
            data_dir=_env_path(ENV_DATA_DIR) or data_base / APP_ID,
        )


def _env_path(name: str) -> Optional[Path]:
    value = os.environ.get(name, "").strip()
    return Path(value).expanduser() if value else None


def get_default_music_dir() -> Path:
    """
    Get the platform's audio directory.

    Uses ``XDG_MUSIC_DIR`` when set and falls back to ``~/Music``.
    """
    xdg_music = os.environ.get("XDG_MUSIC_DIR", "").strip()
    if xdg_music:
        return Path(xdg_music).expanduser()
    return Path.home() / "Music"


# Global runtime configuration instance
_runtime_config: Optional[RuntimeConfig] = None


def get_runtime_config() -> RuntimeConfig:
    """
    Get the global runtime configuration, detecting it if necessary.

    Returns:
        RuntimeConfig: The current runtime configuration.
    """
    global _runtime_config
    if _runtime_config is None:
        _runtime_config = RuntimeConfig.detect()
    return _runtime_config


def reset_runtime_config() -> None:
    """Forget the detected paths so the next call re-reads the environment."""
    global _runtime_config
    _runtime_config = None


def get_config_dir() -> Path:
    return get_runtime_config().paths.config_dir


def get_cache_dir() -> Path:
    return get_runtime_config().paths.cache_dir


def get_covers_dir() -> Path:
    """Directory of the content-addressed cover art cache."""
    return get_runtime_config().paths.covers_dir


def get_artists_dir() -> Path:
    """Directory of the artist picture cache."""
    return get_runtime_config().paths.artists_dir


def get_data_dir() -> Path:
    return get_runtime_config().paths.data_dir


def get_logs_dir() -> Path:
    return get_runtime_config().paths.logs_dir
