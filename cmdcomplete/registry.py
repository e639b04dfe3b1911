"""Registry of named grammars built from the configuration file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Self

from .config import Configuration, coerce_to_bool
from .constants import COMMANDS_SECTION, CONFIG_SECTION, DICTIONARIES_SECTION
from .grammar import Grammar, compile_grammar
from .logging_setup import get_logger
from .matcher import Matcher
from .models import ConfigError, Context, GrammarError, SlotKind
from .validation import SETTINGS_SCHEMA, validate_config

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterator

    from .globbing import GlobExpander

__all__ = ["CommandEntry", "GrammarRegistry", "compile_commands"]


@dataclass
class CommandEntry:
    """A named grammar."""

    name: str
    grammar: Grammar
    description: str = ""
    triggers: set[str] = field(default_factory=set)  # first tokens selecting this grammar

    def __post_init__(self) -> None:
        self.triggers.add(self.name)
        if self.has_leading_literal:
            self.triggers.add(self.grammar.positional[0].candidates[0])

    @property
    def has_leading_literal(self) -> bool:
        """True if the grammar starts with a literal, e.g. ":vim" in ":vim %g".

        Otherwise the grammar only describes the arguments, and the command
        name typed in front of them is not part of it.
        """
        return bool(self.grammar.positional) and self.grammar.positional[0].kind == SlotKind.SINGLETON


def compile_commands(config: dict[str, Any], log: logging.Logger) -> tuple[list[CommandEntry], list[str]]:
    """Compile every grammar of the [commands] section.

    Args:
        config: The loaded configuration
        log: Logger for compile errors

    Returns:
        Tuple of (compiled entries, error messages)
    """
    settings = Configuration(config.get(CONFIG_SECTION, {}), logger=log, defaults=SETTINGS_SCHEMA.defaults())
    default_repeat = settings.get_bool("trailing_repeat")
    dictionaries = config.get(DICTIONARIES_SECTION, {})

    entries: list[CommandEntry] = []
    errors: list[str] = []
    for name, value in config.get(COMMANDS_SECTION, {}).items():
        options = value if isinstance(value, dict) else {"grammar": value}
        text = options.get("grammar", "")
        try:
            grammar = compile_grammar(
                text,
                dictionaries,
                trailing_repeat=coerce_to_bool(options.get("trailing_repeat"), default_repeat),
            )
        except GrammarError as e:
            msg = f"[{COMMANDS_SECTION}.{name}] Invalid grammar {text!r}: {e}"
            log.error(msg)
            errors.append(msg)
            continue
        entries.append(CommandEntry(name, grammar, str(options.get("description", ""))))
    return entries, errors


class GrammarRegistry:
    """Named grammars, selected by the first token of the line.

    A grammar is selected when the first token equals its name or its leading
    literal (e.g. ":vim" for ":vim %g"). While the first token is being typed,
    it is completed against those names.
    """

    def __init__(self, expander: GlobExpander | None = None, log: logging.Logger | None = None) -> None:
        self.expander = expander
        self.log = log or get_logger("cmdcomplete.registry")
        self._entries: dict[str, CommandEntry] = {}

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        expander: GlobExpander | None = None,
        log: logging.Logger | None = None,
    ) -> Self:
        """Build the registry from a loaded configuration.

        Args:
            config: The loaded configuration
            expander: Glob primitive for filename slots
            log: Logger instance

        Returns:
            The registry

        Raises:
            ConfigError: The configuration is invalid or a grammar does not compile
        """
        registry = cls(expander, log)
        errors, _warnings = validate_config(config, registry.log)
        for error in errors:
            registry.log.error(error)
        entries: list[CommandEntry] = []
        if not errors:
            entries, errors = compile_commands(config, registry.log)
        if errors:
            msg = f"{len(errors)} error(s) in configuration"
            raise ConfigError(msg)

        for entry in entries:
            registry.add(entry)

        settings = Configuration(config.get(CONFIG_SECTION, {}), logger=registry.log, defaults=SETTINGS_SCHEMA.defaults())
        directory = settings.get_str("directory")
        if directory:
            registry.chdir(os.path.expanduser(directory))
        return registry

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CommandEntry]:
        return iter(self._entries.values())

    def add(self, entry: CommandEntry) -> None:
        """Register a grammar, replacing any grammar with the same name."""
        if entry.name in self._entries:
            self.log.warning("Replacing grammar %s", entry.name)
        self._entries[entry.name] = entry

    def get(self, name: str) -> Grammar | None:
        """Return the grammar called `name`."""
        entry = self._entries.get(name)
        return entry.grammar if entry else None

    def names(self) -> list[str]:
        """Return the sorted grammar names."""
        return sorted(self._entries)

    def chdir(self, path: str) -> None:
        """Set the filename completion directory of every grammar."""
        for entry in self._entries.values():
            entry.grammar.chdir(path)

    def lookup(self, line: str) -> CommandEntry | None:
        """Return the entry selected by the first token of `line`."""
        first = line.split(" ")[0]
        if first in self._entries:
            return self._entries[first]
        for entry in self._entries.values():
            if first in entry.triggers:
                return entry
        return None

    def matcher(self, line: str) -> Matcher | None:
        """Return a matcher for the grammar selected by `line`."""
        entry = self.lookup(line)
        return Matcher(entry.grammar, self.expander) if entry else None

    def _route(self, line: str) -> tuple[Matcher | None, str, str]:
        """Split `line` into (matcher, command prefix, text for the grammar).

        Grammars starting with a literal see the whole line. Other grammars
        only see what follows the command name.
        """
        entry = self.lookup(line)
        if entry is None:
            return None, "", line
        matcher = Matcher(entry.grammar, self.expander)
        if entry.has_leading_literal:
            return matcher, "", line
        name, _, rest = line.partition(" ")
        return matcher, f"{name} ", rest

    def complete(self, line: str) -> list[str]:
        """Complete `line` with the grammar it selects.

        While the first token is being typed, it is completed against the
        registered command names instead.
        """
        if " " not in line:
            return self._complete_command(line)
        matcher, prefix, rest = self._route(line)
        if matcher is None:
            return [line]
        return [prefix + candidate for candidate in matcher.complete(rest)]

    def complete_word(self, line: str) -> list[str]:
        """Complete the last token of `line`, see `complete`."""
        if " " not in line:
            return self._complete_command(line)
        matcher, _, rest = self._route(line)
        return matcher.complete_word(rest) if matcher else [line.split(" ")[-1]]

    def context(self, line: str) -> Context:
        """Classify what is expected at the end of `line`."""
        if " " not in line:
            return Context.NONE
        matcher, _, rest = self._route(line)
        return matcher.context(rest) if matcher else Context.NONE

    def _complete_command(self, token: str) -> list[str]:
        triggers = {trigger for entry in self._entries.values() for trigger in entry.triggers}
        return sorted(trigger for trigger in triggers if trigger.startswith(token))
