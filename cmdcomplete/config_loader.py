"""Configuration file loading utilities.

This module handles loading, parsing, and merging TOML configuration files.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from . import constants
from .constants import CONFIG_SECTION
from .models import ConfigError
from .utils import merge

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigLoader"]


class ConfigLoader:
    """Handles loading and merging configuration files.

    Supports:
    - TOML configuration files
    - Directory-based config (multiple .toml files merged)
    - Include directives for modular configuration
    """

    def __init__(self, log: logging.Logger) -> None:
        """Initialize the config loader.

        Args:
            log: Logger instance for status and error messages
        """
        self.log = log
        self._config: dict[str, Any] = {}
        self._seen: set[Path] = set()

    @property
    def config(self) -> dict[str, Any]:
        """Return the loaded configuration."""
        return self._config

    def load(self, config_filename: str | os.PathLike[str] = "") -> dict[str, Any]:
        """Load configuration from file or directory.

        Args:
            config_filename: Optional path to config file or directory.
                           If empty, uses default CONFIG_FILE location.

        Returns:
            The loaded and merged configuration dictionary.

        Raises:
            ConfigError: If config file not found or has syntax errors.
        """
        self._seen.clear()
        config = self._open_config(config_filename or constants.CONFIG_FILE)
        merge(self._config, config, replace=True)
        return self._config

    def _open_config(self, config_filename: str | os.PathLike[str]) -> dict[str, Any]:
        """Load config file(s) into a dictionary, following includes.

        Args:
            config_filename: Configuration file or directory path

        Returns:
            The loaded configuration dictionary
        """
        fname = Path(os.path.expandvars(config_filename)).expanduser()
        if fname.resolve() in self._seen:
            self.log.warning("Skipping %s: already included", fname)
            return {}
        self._seen.add(fname.resolve())

        config = self._load_config_directory(fname) if fname.is_dir() else self._load_config_file(fname)

        settings = config.get(CONFIG_SECTION, {})
        includes = settings.get("include", []) if isinstance(settings, dict) else []
        if isinstance(includes, str):
            includes = [includes]
        elif not isinstance(includes, list):
            self.log.warning("Ignoring include in %s: expected a list of paths", fname)
            includes = []
        for extra_config in list(includes):
            merge(config, self._open_config(extra_config), replace=True)

        return config

    def _load_config_directory(self, directory: Path) -> dict[str, Any]:
        """Load and merge all .toml files from a directory.

        Args:
            directory: Path to directory containing .toml files

        Returns:
            Merged configuration from all files
        """
        config: dict[str, Any] = {}
        for toml_file in sorted(f.name for f in directory.iterdir()):
            if not toml_file.endswith(".toml"):
                continue
            merge(config, self._load_config_file(directory / toml_file), replace=True)
        return config

    def _load_config_file(self, fname: Path) -> dict[str, Any]:
        """Load a single configuration file.

        Args:
            fname: Path to the configuration file

        Returns:
            Configuration dictionary

        Raises:
            ConfigError: If file not found or has syntax errors
        """
        if not fname.exists():
            self.log.critical("Config file not found! Please create %s", fname)
            raise ConfigError(f"Config file not found: {fname}")

        self.log.info("Loading %s", fname)
        with fname.open("rb") as f:
            try:
                return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                self.log.critical("Problem reading %s: %s", fname, e)
                raise ConfigError(f"Problem reading {fname}: {e}") from e
