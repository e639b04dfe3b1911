"""Shared constants for cmdcomplete."""

import os
from pathlib import Path

__all__ = [
    "CONFIG_FILE",
    "CONFIG_SECTION",
    "DICTIONARIES_SECTION",
    "COMMANDS_SECTION",
    "DICTIONARY_PREFIX",
    "FILENAME_LABEL",
    "FREE_MARKER",
    "REPEAT_SUFFIX",
    "WILDCARD_MARKER",
]

# Grammar DSL markers
WILDCARD_MARKER = "%g"
FREE_MARKER = "_"
DICTIONARY_PREFIX = "$"

# Grammar rendering
FILENAME_LABEL = "filename"
REPEAT_SUFFIX = "..."

# Config file path - use XDG_CONFIG_HOME with fallback to ~/.config
_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "cmdcomplete" / "config.toml"

# Config file sections
CONFIG_SECTION = "cmdcomplete"
DICTIONARIES_SECTION = "dictionaries"
COMMANDS_SECTION = "commands"
