"""
Bootstrap Module

Prepares the process before the library and playback services start:
configures logging, creates the runtime directories and reports which
optional backends are present.
"""

from __future__ import annotations

import importlib.util
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Configure basic logging before anything else
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)


class BootstrapError(Exception):
    """Exception raised during bootstrap process."""
    pass


class RuntimeBootstrap:
    """
    Handles the bootstrap process.

    This class is responsible for:
    - Runtime directory creation
    - Optional backend detection
    - File logging
    """

    def __init__(self):
        self._initialized = False
        self._warnings: list[str] = []

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def warnings(self) -> list[str]:
        return self._warnings.copy()

    def bootstrap(self, verbose: bool = False) -> bool:
        """
        Perform the bootstrap process.

        Args:
            verbose: Lower the console log level to DEBUG.

        Returns:
            bool: True if bootstrap was successful.

        Raises:
            BootstrapError: If the runtime directories cannot be created.
        """
        if self._initialized:
            logger.debug("Bootstrap already completed")
            return True

        if verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        logger.debug("Starting runtime bootstrap...")

        try:
            self._create_directories()
        except OSError as e:
            raise BootstrapError(f"Cannot create runtime directories: {e}") from e

        self._check_backends()
        self._initialize_logging()

        self._initialized = True
        for warning in self._warnings:
            logger.warning(warning)
        logger.debug("Runtime bootstrap completed successfully")
        return True

    def _create_directories(self) -> None:
        from .runtime_config import get_runtime_config

        paths = get_runtime_config().paths
        for directory in (paths.config_dir, paths.covers_dir, paths.artists_dir, paths.logs_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def _check_backends(self) -> None:
        if importlib.util.find_spec("gi") is None:
            self._warnings.append(
                "PyGObject is not installed; audio output will be unavailable. "
                "Install the 'gstreamer' extra to enable playback."
            )

    def _initialize_logging(self) -> None:
        """Attach a rotating file handler to the root logger."""
        from .runtime_config import get_logs_dir

        log_file = get_logs_dir() / "rift.log"

        try:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB
                backupCount=5,
                encoding="utf-8"
            )
        except OSError as e:
            self._warnings.append(f"Could not set up file logging: {e}")
            return

        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)
        logger.debug(f"Log file: {log_file}")


# Global bootstrap instance
_bootstrap: Optional[RuntimeBootstrap] = None


def get_bootstrap() -> RuntimeBootstrap:
    global _bootstrap
    if _bootstrap is None:
        _bootstrap = RuntimeBootstrap()
    return _bootstrap


def bootstrap(verbose: bool = False) -> bool:
    """
    Perform the runtime bootstrap.

    Call this at the very start of the application, before the library or
    playback services are created.
    """
    return get_bootstrap().bootstrap(verbose=verbose)
