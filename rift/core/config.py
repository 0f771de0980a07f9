"""
Configuration Management Module

Provides configuration management with JSON storage for Rift.
Holds library, player, search, presence and network settings. The playback
and library services only ever read these values; the settings screen is the
only writer.
"""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from multiprocessing import cpu_count
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


def get_default_scan_workers() -> int:
    """
    Default parallelism for metadata extraction during a library scan.

    Leaves one core for the rest of the system and caps at 8, since extraction
    is bound by disk reads rather than CPU.
    """
    try:
        n = cpu_count() or 4
    except NotImplementedError:
        n = 4
    return max(1, min(n - 1, 8)) if n > 1 else 1


# Default configuration values
DEFAULT_CONFIG = {
    # Library settings
    "library": {
        "music_dir": None,  # None = platform audio directory (~/Music)
        "supported_formats": ["mp3", "flac", "alac", "wav", "m4a", "ogg", "aac"],
    },

    # Player settings
    "player": {
        "volume": 0.7,
        "seek_tolerance_seconds": 1.0,
        # Front-end preferences below; stored for the UI, not read by the services
        "autoplay": True,
        "crossfade": False,
        "gapless_playback": True,
        "volume_normalization": False,
        "normalize_by_album": False,
    },

    # Search settings
    "search": {
        "max_results": None,  # None = unlimited
    },

    # Presence broadcasting
    "presence": {
        "enabled": True,
        "interval_seconds": 30,
    },

    # Remote lookups (artist pictures)
    "network": {
        "online_requests": True,
        "user_agent": "Rift/1.0",
        "timeout_seconds": 10,
    },

    # Performance settings
    "performance": {
        "scan_workers": None,  # None = detect from CPU count, see get_default_scan_workers()
    },

    # Application settings (front-end only)
    "app": {
        "launch_at_startup": False,
        "automatic_updates": True,
        "dark_theme": True,
        "native_decorations": False,
        "onboarding_played": False,
    },
}


@dataclass
class ConfigManager:
    """
    Manages application configuration with JSON storage.

    Features:
    - Load/save configuration from JSON files
    - Default value fallback
    - Dot-notation access ("player.volume")
    """

    config_dir: Path
    config_file: str = "config.json"
    _config: dict = field(default_factory=dict)
    _defaults: dict = field(default_factory=lambda: deepcopy(DEFAULT_CONFIG))
    _loaded: bool = False

    def __post_init__(self):
        """Initialize configuration after dataclass creation."""
        self.config_dir = Path(self.config_dir)
        self._config = deepcopy(self._defaults)

    @property
    def config_path(self) -> Path:
        """Get the full path to the configuration file."""
        return self.config_dir / self.config_file

    def load(self) -> bool:
        """
        Load configuration from file.

        Returns:
            bool: True if loaded successfully, False otherwise.
        """
        try:
            if self.config_path.exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)

                if not isinstance(loaded, dict):
                    raise ValueError("top-level value is not an object")

                # Merge with defaults (loaded values override defaults)
                self._config = self._merge_config(self._defaults, loaded)
                logger.info(f"Configuration loaded from {self.config_path}")
            else:
                # Use defaults and save them
                self._config = deepcopy(self._defaults)
                self.save()
                logger.info("Using default configuration")

            self._loaded = True
            return True

        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"Invalid configuration file: {e}")
            # Fall back to defaults
            self._config = deepcopy(self._defaults)
            self._loaded = True
            return False

        except OSError as e:
            logger.error(f"Failed to load configuration: {e}")
            self._config = deepcopy(self._defaults)
            self._loaded = True
            return False

    def save(self) -> bool:
        """
        Save configuration to file.

        Returns:
            bool: True if saved successfully.
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)

            logger.debug(f"Configuration saved to {self.config_path}")
            return True

        except PermissionError as e:
            logger.error(f"Permission denied saving configuration to {self.config_path}: {e}")
            return False
        except OSError as e:
            logger.error(f"Failed to save configuration to {self.config_path}: {e}", exc_info=True)
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "player.volume")
            default: Default value if key not found

        Returns:
            The configuration value or default.
        """
        if not self._loaded:
            self.load()

        parts = key.split('.')
        value = self._config

        try:
            for part in parts:
                value = value[part]
            # scan_workers None means "auto": report the CPU-based default
            if key == "performance.scan_workers" and value is None:
                return get_default_scan_workers()
            return value
        except (KeyError, TypeError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Read a boolean switch; non-boolean stored values fall back to ``default``."""
        value = self.get(key, default)
        return value if isinstance(value, bool) else default

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """
        Set a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "network.online_requests")
            value: Value to set
            save: Whether to save immediately
        """
        if not self._loaded:
            self.load()

        parts = key.split('.')
        config = self._config

        # Navigate to the parent
        for part in parts[:-1]:
            if part not in config or not isinstance(config[part], dict):
                config[part] = {}
            config = config[part]

        config[parts[-1]] = value

        if save:
            self.save()

    def reset(self, key: Optional[str] = None) -> None:
        """
        Reset configuration to defaults.

        Args:
            key: Specific key to reset, or None to reset all.
        """
        if key is None:
            self._config = deepcopy(self._defaults)
        else:
            self.set(key, self._get_default(key), save=False)

        self.save()

    def _get_default(self, key: str) -> Any:
        """Get the default value for a key."""
        value = self._defaults

        try:
            for part in key.split('.'):
                value = value[part]
            return deepcopy(value)
        except (KeyError, TypeError):
            return None

    def _merge_config(self, defaults: dict, loaded: dict) -> dict:
        """
        Recursively merge loaded config with defaults.

        Args:
            defaults: Default configuration
            loaded: Loaded configuration

        Returns:
            Merged configuration
        """
        result = deepcopy(defaults)

        for key, value in loaded.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result

    def get_all(self) -> dict:
        """Get the entire configuration dictionary."""
        if not self._loaded:
            self.load()
        return deepcopy(self._config)


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """
    Get the global configuration manager.

    Returns:
        ConfigManager: The configuration manager instance.
    """
    global _config_manager

    if _config_manager is None:
        from rift.runtime.runtime_config import get_config_dir
        _config_manager = ConfigManager(config_dir=get_config_dir())
        _config_manager.load()

    return _config_manager


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        key: Configuration key using dot notation
        default: Default value if not found

    Returns:
        The configuration value
    """
    return get_config_manager().get(key, default)


def set_config(key: str, value: Any) -> None:
    get_config_manager().set(key, value)
