"""prompt_toolkit integration.

`GrammarCompleter` plugs a `Matcher` (one grammar) or a `GrammarRegistry`
(grammar picked from the first token) into any prompt_toolkit prompt.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from prompt_toolkit.completion import CompleteEvent, Completer, Completion

from .models import Context

if TYPE_CHECKING:
    from collections.abc import Iterable

    from prompt_toolkit.document import Document

__all__ = ["GrammarCompleter", "LineCompleter"]

_CONTEXT_META = {
    Context.KEYWORD: "flag",
    Context.FILE_NAME: "file",
}


class LineCompleter(Protocol):
    """Line completion API shared by `Matcher` and `GrammarRegistry`."""

    def complete(self, line: str) -> list[str]: ...

    def complete_word(self, line: str) -> list[str]: ...

    def context(self, line: str) -> Context: ...


class GrammarCompleter(Completer):
    """Complete the token under the cursor using a grammar.

    Args:
        source: A Matcher or a GrammarRegistry
    """

    def __init__(self, source: LineCompleter) -> None:
        self.source = source

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        """Yield one completion per candidate, replacing the current token."""
        text = document.text_before_cursor
        token = text.split(" ")[-1]
        meta = _CONTEXT_META.get(self.source.context(text), "")
        for word in self.source.complete_word(text):
            if word == token:
                # nothing to add, prompt_toolkit would show a no-op entry
                continue
            yield Completion(word, start_position=-len(token), display_meta=meta)
