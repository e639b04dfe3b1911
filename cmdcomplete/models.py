"""Shared enums and exceptions."""

from enum import IntEnum, StrEnum

__all__ = [
    "CmdCompleteError",
    "ConfigError",
    "Context",
    "DuplicateKeywordError",
    "ExitCode",
    "GrammarError",
    "MalformedKeywordError",
    "SlotKind",
    "UnknownDictionaryKeyError",
]


class Context(IntEnum):
    """What kind of token is expected at the cursor."""

    NONE = 0  # free text or a bounded vocabulary value
    UNKNOWN_KEYWORD = 1  # "--name=" typed with an undeclared name
    KEYWORD = 2  # a keyword name is being typed
    FILE_NAME = 3  # a filename slot
    OVERSIZED = 4  # no slot accepts another positional token


class SlotKind(StrEnum):
    """Shape of a grammar slot, derived from its candidates."""

    FREE = "free"
    SINGLETON = "singleton"
    WILDCARD = "wildcard"
    VOCABULARY = "vocabulary"


class ExitCode(IntEnum):
    """Standard exit codes for the cmdcomplete CLI."""

    SUCCESS = 0
    USAGE_ERROR = 1  # Bad arguments, unknown command name
    CONFIG_ERROR = 2  # Missing or invalid configuration file
    GRAMMAR_ERROR = 3  # A grammar failed to compile


class CmdCompleteError(Exception):
    """Base class for every error raised by cmdcomplete."""


class ConfigError(CmdCompleteError):
    """Used for configuration errors which already triggered logging."""


class GrammarError(CmdCompleteError):
    """A grammar string could not be compiled.

    Attributes:
        token: The grammar token that caused the failure
    """

    def __init__(self, message: str, token: str = "") -> None:
        super().__init__(message)
        self.token = token


class DuplicateKeywordError(GrammarError):
    """The same keyword name is declared twice."""


class UnknownDictionaryKeyError(GrammarError):
    """A `$NAME` reference has no entry in the dictionary."""


class MalformedKeywordError(GrammarError):
    """A bracketed token does not yield a keyword name."""
