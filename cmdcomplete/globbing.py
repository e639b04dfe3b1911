"""Filesystem glob capability used by filename slots.

The matcher never touches the filesystem directly: it asks a `GlobExpander`.
`FilesystemGlob` is the real implementation; tests and embedders can pass
anything with a matching `expand` method::

    class FakeGlob:
        def expand(self, pattern: str) -> list[str]:
            return ["readme.md"]
"""

import glob
import os
from typing import Protocol, runtime_checkable

__all__ = ["FilesystemGlob", "GlobExpander", "glob_pattern"]


@runtime_checkable
class GlobExpander(Protocol):
    """Protocol for the glob primitive."""

    def expand(self, pattern: str) -> list[str]:
        """Return the paths matching `pattern`.

        Args:
            pattern: Shell-style pattern ("*", "?", "[...]")

        Raises:
            OSError: The filesystem could not be listed
            ValueError: The pattern is invalid
        """
        ...


class FilesystemGlob:
    """Expand patterns against the real filesystem, in lexical order."""

    def expand(self, pattern: str) -> list[str]:
        """Return the sorted paths matching `pattern`, dotfiles included."""
        return sorted(glob.glob(pattern, include_hidden=True))


def glob_pattern(directory: str, word: str) -> str:
    """Build the pattern completing `word` inside `directory`.

    A trailing "*" is added unless `word` already ends with one. `word` stays
    inside `directory` even when it starts with "/", and the result is
    normalized ("./x*" gives "x*").
    """
    if not word.endswith("*"):
        word += "*"
    return os.path.normpath("/".join(part for part in (directory, word) if part))
