"""Completion and context matching of a partially typed command line.

The line is split on single spaces. Only the last token, the one being typed,
is completed; earlier tokens only tell which slot it belongs to:

- "-name" / "--name" (no "=" yet): a keyword name, completed from the
  grammar's keyword names
- "--name=value": a keyword value, completed from that keyword's slot
- anything else: a positional value, for the slot at its position once the
  keyword tokens are skipped
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from .globbing import FilesystemGlob, GlobExpander, glob_pattern
from .logging_setup import get_logger
from .models import Context

if TYPE_CHECKING:
    from .grammar.models import Grammar, Slot

__all__ = [
    "KEYWORD_ARG_PATTERN",
    "Matcher",
    "Resolution",
    "Target",
    "complete",
    "complete_word",
    "context",
    "is_keyword_token",
    "resolve",
]

# Keyword token on the input line: dashes, name, optional "=", value
KEYWORD_ARG_PATTERN = re.compile(r"^(-{1,2})([a-zA-Z0-9]*)(={0,1})([^ =]*)$")

_default_expander = FilesystemGlob()


class Target(StrEnum):
    """What the in-progress token stands for."""

    POSITIONAL = "positional"
    KEYWORD_NAME = "keyword_name"
    KEYWORD_VALUE = "keyword_value"
    UNKNOWN_KEYWORD = "unknown_keyword"
    OVERSIZED = "oversized"


@dataclass
class Resolution:
    """The in-progress token and the slot it belongs to."""

    tokens: list[str]  # the whole line, split on spaces
    target: Target
    slot: Slot | None = None  # None for keyword names and dead ends
    word: str = ""  # the text to match against the candidates
    prefix: str = ""  # kept in front of the completed value (e.g. "--init=")

    def substitute(self, value: str) -> str:
        """Return the full line with the in-progress token replaced."""
        tokens = list(self.tokens)
        tokens[-1] = self.prefix + value
        return " ".join(tokens)


def is_keyword_token(token: str) -> bool:
    """Check if `token` has the keyword shape ("-name", "--name=value", ...)."""
    return KEYWORD_ARG_PATTERN.fullmatch(token) is not None


def resolve(grammar: Grammar, line: str) -> Resolution:
    """Find which slot the last token of `line` belongs to.

    Args:
        grammar: The compiled grammar
        line: The command line typed so far

    Returns:
        The resolution of the in-progress token
    """
    tokens = line.split(" ")
    token = tokens[-1]

    match = KEYWORD_ARG_PATTERN.fullmatch(token)
    if match:
        dashes, name, equal, value = match.groups()
        if not equal:
            return Resolution(tokens, Target.KEYWORD_NAME, word=token.lstrip("-"), prefix=dashes)
        slot = grammar.keyword.get(name)
        if slot is None:
            return Resolution(tokens, Target.UNKNOWN_KEYWORD)
        return Resolution(tokens, Target.KEYWORD_VALUE, slot, word=value, prefix=token[: token.rindex("=") + 1])

    index = len(tokens) - 1 - sum(1 for tok in tokens if is_keyword_token(tok))
    slot = grammar.slot_at(index)
    if slot is None:
        return Resolution(tokens, Target.OVERSIZED)
    return Resolution(tokens, Target.POSITIONAL, slot, word=token)


class Matcher:
    """Completes and classifies command lines for one grammar.

    Args:
        grammar: The compiled grammar
        expander: Glob primitive for filename slots (real filesystem if unset)
    """

    def __init__(self, grammar: Grammar, expander: GlobExpander | None = None) -> None:
        self.grammar = grammar
        self.expander = expander or _default_expander

    def complete(self, line: str) -> list[str]:
        """Return the completed lines for `line`.

        Each result is `line` with only the last token replaced. `[line]`
        means nothing can be completed there, an empty list means nothing
        matches what was typed.

        Args:
            line: The command line typed so far

        Returns:
            The list of full candidate lines
        """
        resolution = resolve(self.grammar, line)
        if resolution.target == Target.KEYWORD_NAME:
            return self._complete_keyword_name(resolution)
        if resolution.slot is None:
            return [line]
        return self._complete_slot(resolution, line)

    def complete_word(self, line: str) -> list[str]:
        """Return only the replacement of the last token for each completion."""
        pos = len(line.split(" ")) - 1
        return [candidate.split(" ")[pos] for candidate in self.complete(line)]

    def context(self, line: str) -> Context:
        """Classify what is expected at the end of `line`.

        Does no matching and no filesystem access.
        """
        resolution = resolve(self.grammar, line)
        if resolution.target == Target.UNKNOWN_KEYWORD:
            return Context.UNKNOWN_KEYWORD
        if resolution.target == Target.KEYWORD_NAME:
            return Context.KEYWORD
        if resolution.target == Target.OVERSIZED:
            return Context.OVERSIZED
        assert resolution.slot is not None
        return Context.FILE_NAME if resolution.slot.is_wildcard else Context.NONE

    def _complete_keyword_name(self, resolution: Resolution) -> list[str]:
        """Complete "-na" into "-name=" (or "-name" for flags without value)."""
        return [
            resolution.substitute(name if slot.is_free else f"{name}=")
            for name, slot in self.grammar.keyword.items()
            if name.startswith(resolution.word)
        ]

    def _complete_slot(self, resolution: Resolution, line: str) -> list[str]:
        slot = resolution.slot
        assert slot is not None
        word = resolution.word

        if slot.is_free:
            return [line]
        if slot.is_wildcard:
            return self._complete_filename(resolution, line)
        if len(slot) == 1:
            if slot.candidates[0].startswith(word):
                return [resolution.substitute(slot.candidates[0])]
            return [line]
        return [resolution.substitute(candidate) for candidate in slot.candidates if candidate.startswith(word)]

    def _complete_filename(self, resolution: Resolution, line: str) -> list[str]:
        pattern = glob_pattern(self.grammar.directory, resolution.word)
        try:
            paths = self.expander.expand(pattern)
        except (OSError, ValueError) as e:
            get_logger("cmdcomplete.matcher").debug("Glob failed for %r: %s", pattern, e)
            return [line]
        return [resolution.substitute(path) for path in paths]


def complete(grammar: Grammar, line: str, expander: GlobExpander | None = None) -> list[str]:
    """Return the completed lines for `line`, see `Matcher.complete`."""
    return Matcher(grammar, expander).complete(line)


def complete_word(grammar: Grammar, line: str, expander: GlobExpander | None = None) -> list[str]:
    """Return the completed last tokens for `line`, see `Matcher.complete_word`."""
    return Matcher(grammar, expander).complete_word(line)


def context(grammar: Grammar, line: str) -> Context:
    """Classify what is expected at the end of `line`, see `Matcher.context`."""
    return Matcher(grammar).context(line)
