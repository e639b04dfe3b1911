"""Configuration wrapper providing typed access to the [cmdcomplete] section."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import logging

__all__ = ["BOOL_FALSE_STRINGS", "BOOL_STRINGS", "BOOL_TRUE_STRINGS", "Configuration", "coerce_to_bool"]

# Type alias for config values
ConfigValueType = float | bool | str | list | dict

BOOL_TRUE_STRINGS = frozenset({"true", "yes", "on", "1", "enabled"})
BOOL_FALSE_STRINGS = frozenset({"false", "no", "off", "0", "disabled"})
BOOL_STRINGS = BOOL_TRUE_STRINGS | BOOL_FALSE_STRINGS


def coerce_to_bool(value: ConfigValueType | None, default: bool = False) -> bool:
    """Coerce a value to boolean, handling loose typing.

    Args:
        value: The value to coerce
        default: Default value if value is None

    Returns:
        The boolean value

    Behavior:
        - None → default
        - Empty string → False
        - Explicit falsy strings ("false", "no", "off", "0", "disabled") → False
        - Any other non-empty string → True
        - Non-string values → bool(value)
    """
    if value is None:
        return default
    if isinstance(value, str):
        if not value.strip():
            return False
        return value.lower().strip() not in BOOL_FALSE_STRINGS
    return bool(value)


class Configuration(dict):
    """Configuration wrapper providing typed access.

    Optionally accepts schema defaults, used when a key is missing.
    """

    def __init__(
        self,
        *args: Any,  # noqa: ANN401
        logger: logging.Logger,
        defaults: dict[str, ConfigValueType] | None = None,
        **kwargs: Any,  # noqa: ANN401
    ):
        """Initialize the configuration object.

        Args:
            *args: Arguments for dict
            logger: Logger instance to use for warnings
            defaults: Values returned for missing keys
            **kwargs: Keyword arguments for dict
        """
        super().__init__(*args, **kwargs)
        self.log = logger
        self._defaults = dict(defaults or {})

    def get(self, name: str, default: ConfigValueType | None = None) -> ConfigValueType | None:  # type: ignore[override]
        """Get a value with schema-aware defaults.

        Args:
            name: The configuration key
            default: Fallback if key is missing and has no schema default

        Returns:
            The value, schema default, or provided default
        """
        if name in self:
            return dict.get(self, name)  # type: ignore[no-any-return]
        return self._defaults.get(name, default)

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Get a boolean value, handling loose typing (see `coerce_to_bool`)."""
        return coerce_to_bool(self.get(name), default)

    def get_str(self, name: str, default: str = "") -> str:
        """Get a string value.

        Args:
            name: The key name
            default: Default value if key is missing

        Returns:
            The string value
        """
        value = self.get(name)
        if value is None:
            return default
        return str(value)
