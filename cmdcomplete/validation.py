"""Configuration validation framework with schema definitions.

Provides declarative schema definitions (ConfigField, ConfigItems) for
validating the configuration file. Supports type checking, required fields,
custom validators and fuzzy matching for typo detection.

Used by:
- GrammarRegistry.from_config() to reject broken files early
- 'cmdcomplete validate' for static configuration checking
"""

import difflib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .config import BOOL_STRINGS
from .constants import COMMANDS_SECTION, CONFIG_SECTION, DICTIONARIES_SECTION

__all__ = [
    "COMMAND_SCHEMA",
    "SETTINGS_SCHEMA",
    "ConfigField",
    "ConfigItems",
    "ConfigValidator",
    "format_config_error",
    "validate_config",
]


@dataclass
class ConfigField:
    """Describes an expected configuration field for validation.

    Attributes:
        name: The configuration key name
        field_type: Expected type (str, bool, list, dict) or tuple of types for union
        required: Whether the field is required
        default: Default value if not provided
        description: Human-readable description for error messages
        validator: Custom validator function returning list of error messages
    """

    name: str
    field_type: type | tuple[type, ...] = str
    required: bool = False
    default: Any = None
    description: str = ""
    validator: Callable[[Any], list[str]] | None = None

    @property
    def type_name(self) -> str:
        """Return human-readable type name (e.g., 'str', 'str or dict')."""
        if isinstance(self.field_type, tuple):
            return " or ".join(typ.__name__ for typ in self.field_type)
        return self.field_type.__name__


class ConfigItems(list):
    """A list of ConfigField items with cached lookup by name."""

    def __init__(self, *args: ConfigField) -> None:
        super().__init__(args)
        self._cache: dict[str, ConfigField] = {}

    def get(self, name: str) -> ConfigField | None:
        """Get a ConfigField by name, with caching for repeated lookups.

        Args:
            name: The field name to look up

        Returns:
            The ConfigField if found, None otherwise
        """
        v = self._cache.get(name)
        if not v:
            for prop in self:
                if prop.name == name:
                    v = prop
                    self._cache[name] = v
                    break
        return v

    def defaults(self) -> dict[str, Any]:
        """Return the default value of every field which has one."""
        return {field.name: field.default for field in self if field.default is not None}


def _check_string_list(value: list) -> list[str]:
    """Every item of a vocabulary must be a non-empty string without spaces."""
    errors = []
    for item in value:
        if not isinstance(item, str):
            errors.append(f"Expected str items, got {type(item).__name__} ({item!r})")
        elif not item or " " in item:
            errors.append(f"Invalid word {item!r} (must be non-empty, without spaces)")
    return errors


SETTINGS_SCHEMA = ConfigItems(
    ConfigField("include", (list, str), description="Extra configuration files or folders to merge"),
    ConfigField("directory", str, default="", description="Base directory for filename completion"),
    ConfigField("trailing_repeat", bool, default=False, description="Reuse the last positional slot for extra tokens"),
)

COMMAND_SCHEMA = ConfigItems(
    ConfigField("grammar", str, required=True, description="The grammar of the command"),
    ConfigField("trailing_repeat", bool, description="Overrides the global trailing_repeat"),
    ConfigField("description", str, description="Shown by 'cmdcomplete list'"),
)


def _find_similar_key(unknown_key: str, known_keys: list[str]) -> str | None:
    """Find a similar key using fuzzy matching.

    Args:
        unknown_key: The unknown key to find a match for
        known_keys: List of valid keys to search

    Returns:
        The closest matching key, or None if no close match found
    """
    matches = difflib.get_close_matches(unknown_key, known_keys, n=1)
    if matches:
        return matches[0]
    return None


def format_config_error(section: str, field: str, message: str, suggestion: str = "") -> str:
    """Format a configuration error message.

    Args:
        section: Section name
        field: Field name that has the error
        message: Error description
        suggestion: Optional suggestion for fixing the error

    Returns:
        Formatted error message
    """
    msg = f"[{section}] Config error for '{field}': {message}"
    if suggestion:
        msg += f" -> {suggestion}"
    return msg


class ConfigValidator:
    """Validates a configuration section against a schema."""

    def __init__(self, config: dict, section: str, logger: logging.Logger) -> None:
        """Initialize the validator.

        Args:
            config: The configuration dictionary to validate
            section: Name of the section for error messages
            logger: Logger instance for warnings
        """
        self.config = config
        self.section = section
        self.log = logger

    def validate(self, schema: ConfigItems) -> list[str]:
        """Validate configuration against schema.

        Args:
            schema: List of ConfigField definitions

        Returns:
            List of error messages (empty if validation passed)
        """
        errors = []

        for field_def in schema:
            value = self.config.get(field_def.name)

            if field_def.required and value is None:
                errors.append(
                    format_config_error(
                        self.section,
                        field_def.name,
                        "Missing required field",
                        self._get_required_suggestion(field_def),
                    )
                )
                continue

            if value is None:
                continue

            type_error = self._check_type(field_def, value)
            if type_error:
                errors.append(type_error)
                continue

            if field_def.validator:
                errors.extend(
                    format_config_error(self.section, field_def.name, validation_error)
                    for validation_error in field_def.validator(value)
                )

        return errors

    def _check_type(self, field_def: ConfigField, value: Any) -> str | None:  # noqa: ANN401
        """Check if value matches expected type.

        Args:
            field_def: Field definition
            value: Value to check

        Returns:
            Error message if type mismatch, None otherwise
        """
        expected_type = field_def.field_type

        if isinstance(expected_type, tuple):
            if any(self._check_type(ConfigField(field_def.name, typ), value) is None for typ in expected_type):
                return None
            return format_config_error(
                self.section,
                field_def.name,
                f"Expected {field_def.type_name}, got {type(value).__name__}",
            )

        if expected_type is bool:
            if isinstance(value, bool) or (isinstance(value, str) and value.lower() in BOOL_STRINGS):
                return None
            return format_config_error(
                self.section,
                field_def.name,
                f"Expected bool, got {type(value).__name__}",
                "Use true/false (without quotes)",
            )

        if isinstance(value, expected_type):
            return None

        suggestions = {
            str: f'Use {field_def.name} = "value"',
            list: f'Use {field_def.name} = ["item1", "item2"]',
        }
        return format_config_error(
            self.section,
            field_def.name,
            f"Expected {field_def.type_name}, got {type(value).__name__}",
            suggestions.get(expected_type, ""),
        )

    def _get_required_suggestion(self, field_def: ConfigField) -> str:
        """Generate suggestion for a missing required field."""
        field_type = field_def.field_type
        if isinstance(field_type, tuple):
            field_type = field_type[0]

        if field_type is str:
            return f'Add {field_def.name} = "value" to [{self.section}]'
        if field_type is bool:
            return f"Add {field_def.name} = true/false to [{self.section}]"
        if field_type is list:
            return f'Add {field_def.name} = ["item"] to [{self.section}]'
        return f"Add '{field_def.name}' to [{self.section}]"

    def warn_unknown_keys(self, schema: ConfigItems) -> list[str]:
        """Log warnings for unknown configuration keys.

        Args:
            schema: List of ConfigField definitions

        Returns:
            List of warning messages
        """
        warnings = []
        known_keys = {f.name for f in schema}

        for key in self.config:
            if key in known_keys:
                continue

            similar = _find_similar_key(key, list(known_keys))
            if similar:
                msg = f"[{self.section}] Unknown option '{key}' (did you mean '{similar}'?)"
            else:
                msg = f"[{self.section}] Unknown option '{key}' - will be ignored"

            self.log.warning(msg)
            warnings.append(msg)

        return warnings


def _validate_dictionaries(section: Any, log: logging.Logger) -> list[str]:  # noqa: ANN401
    """Every dictionary entry must be a list of words."""
    if not isinstance(section, dict):
        return [format_config_error(CONFIG_SECTION, DICTIONARIES_SECTION, f"Expected section, got {type(section).__name__}")]
    schema = ConfigItems(*(ConfigField(name, list, validator=_check_string_list) for name in section))
    return ConfigValidator(section, DICTIONARIES_SECTION, log).validate(schema)


def _validate_commands(section: Any, log: logging.Logger) -> tuple[list[str], list[str]]:  # noqa: ANN401
    """Every command is a grammar string or a table with a grammar."""
    if not isinstance(section, dict):
        return [format_config_error(CONFIG_SECTION, COMMANDS_SECTION, f"Expected section, got {type(section).__name__}")], []
    errors: list[str] = []
    warnings: list[str] = []
    schema = ConfigItems(*(ConfigField(name, (str, dict)) for name in section))
    errors.extend(ConfigValidator(section, COMMANDS_SECTION, log).validate(schema))
    for name, value in section.items():
        if isinstance(value, dict):
            validator = ConfigValidator(value, f"{COMMANDS_SECTION}.{name}", log)
            errors.extend(validator.validate(COMMAND_SCHEMA))
            warnings.extend(validator.warn_unknown_keys(COMMAND_SCHEMA))
    return errors, warnings


def validate_config(config: dict, log: logging.Logger) -> tuple[list[str], list[str]]:
    """Validate a whole configuration file.

    Args:
        config: The loaded configuration
        log: Logger instance for warnings

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    settings = config.get(CONFIG_SECTION, {})
    if isinstance(settings, dict):
        validator = ConfigValidator(settings, CONFIG_SECTION, log)
        errors.extend(validator.validate(SETTINGS_SCHEMA))
        warnings.extend(validator.warn_unknown_keys(SETTINGS_SCHEMA))
    else:
        errors.append(format_config_error(CONFIG_SECTION, CONFIG_SECTION, f"Expected section, got {type(settings).__name__}"))

    errors.extend(_validate_dictionaries(config.get(DICTIONARIES_SECTION, {}), log))

    command_errors, command_warnings = _validate_commands(config.get(COMMANDS_SECTION, {}), log)
    errors.extend(command_errors)
    warnings.extend(command_warnings)

    known_sections = [CONFIG_SECTION, DICTIONARIES_SECTION, COMMANDS_SECTION]
    for key in config:
        if key not in known_sections:
            similar = _find_similar_key(key, known_sections)
            hint = f" (did you mean [{similar}]?)" if similar else " - will be ignored"
            msg = f"Unknown section [{key}]{hint}"
            log.warning(msg)
            warnings.append(msg)

    return errors, warnings
