"""Data models for compiled grammars."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..constants import WILDCARD_MARKER
from ..models import SlotKind

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["FREE_SLOT", "Grammar", "Slot"]


@dataclass(frozen=True)
class Slot:
    """The accepted values of one positional or keyword position.

    The shape depends on the number of candidates:

    - no candidate: free slot, anything goes, nothing to complete
    - one candidate: a literal, or a filename slot when it starts with "%g"
    - more candidates: a vocabulary
    """

    candidates: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "candidates", tuple(self.candidates))

    def __len__(self) -> int:
        return len(self.candidates)

    @property
    def kind(self) -> SlotKind:
        """Return the shape of this slot."""
        if not self.candidates:
            return SlotKind.FREE
        if len(self.candidates) == 1:
            return SlotKind.WILDCARD if self.candidates[0].startswith(WILDCARD_MARKER) else SlotKind.SINGLETON
        return SlotKind.VOCABULARY

    @property
    def is_free(self) -> bool:
        """True if the slot accepts anything."""
        return not self.candidates

    @property
    def is_wildcard(self) -> bool:
        """True if the slot completes file names."""
        return self.kind is SlotKind.WILDCARD


FREE_SLOT = Slot()


class _WorkingDirectory:
    """Glob base directory, guarded by a lock."""

    def __init__(self, path: str = "") -> None:
        self._path = path
        self._lock = threading.Lock()

    def get(self) -> str:
        with self._lock:
            return self._path

    def set(self, path: str) -> None:
        with self._lock:
            self._path = path


@dataclass(frozen=True)
class Grammar:  # pylint: disable=too-many-instance-attributes
    """A compiled grammar.

    Built once by `compile_grammar` and queried many times. Slots never change
    after compilation; the only mutable part is the directory used to expand
    filename slots, changed with `chdir` without recompiling.

    Thread safety: queries are read-only and may run concurrently. `chdir` is
    serialized with a lock and every query reads the directory once, but two
    sessions changing the directory of a shared grammar still see each other's
    changes: give each session its own grammar.

    Attributes:
        positional: Slots for positional tokens, in command line order
        keyword: Read-only mapping of keyword name to its value slot
        trailing_repeat: Reuse the last positional slot for extra tokens
        source: The grammar text this was compiled from
    """

    positional: tuple[Slot, ...] = ()
    keyword: Mapping[str, Slot] = field(default_factory=dict)
    trailing_repeat: bool = False
    source: str = field(default="", compare=False)
    _cwd: _WorkingDirectory = field(default_factory=_WorkingDirectory, init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "positional", tuple(self.positional))
        object.__setattr__(self, "keyword", MappingProxyType(dict(self.keyword)))

    def __hash__(self) -> int:
        # same fields as __eq__, which ignores keyword order
        return hash((self.positional, frozenset(self.keyword.items()), self.trailing_repeat))

    def __str__(self) -> str:
        from .render import render_grammar  # pylint: disable=import-outside-toplevel

        return render_grammar(self)

    @property
    def directory(self) -> str:
        """Return the base directory for filename completion."""
        return self._cwd.get()

    def chdir(self, path: str) -> None:
        """Set the base directory for filename completion.

        Args:
            path: New base directory ("" means the process working directory)
        """
        self._cwd.set(path)

    def slot_at(self, index: int) -> Slot | None:
        """Return the slot accepting the positional token at `index`.

        Args:
            index: Position of the token, keyword tokens excluded

        Returns:
            The slot, or None when the grammar accepts no more positional tokens
        """
        if index < len(self.positional):
            return self.positional[index]
        if self.trailing_repeat and self.positional:
            return self.positional[-1]
        return None
