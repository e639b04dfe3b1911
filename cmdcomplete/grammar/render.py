"""Human readable rendering of compiled grammars."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..constants import FILENAME_LABEL, FREE_MARKER, REPEAT_SUFFIX

if TYPE_CHECKING:
    from .models import Grammar, Slot

__all__ = ["render_grammar", "render_slot"]


def render_slot(slot: Slot) -> str:
    """Render one slot: "_", a literal, "filename" or "[a,b,c]"."""
    if slot.is_free:
        return FREE_MARKER
    if slot.is_wildcard:
        return FILENAME_LABEL
    if len(slot) == 1:
        return slot.candidates[0]
    return "[" + ",".join(slot.candidates) + "]"


def render_grammar(grammar: Grammar) -> str:
    """Render a grammar for display.

    The first line holds the positional slots, followed by one indented
    line per keyword. E.g.::

        :arclm filename
            -init=[true,false]
            -initfn=filename

    Args:
        grammar: The compiled grammar

    Returns:
        The multi-line rendering
    """
    lines: list[str] = []
    if grammar.positional:
        line = " ".join(render_slot(slot) for slot in grammar.positional)
        if grammar.trailing_repeat:
            line += REPEAT_SUFFIX
        lines.append(line)
    for name, slot in grammar.keyword.items():
        if slot.is_free:
            lines.append(f"    -{name}")
        else:
            lines.append(f"    -{name}={render_slot(slot)}")
    return "".join(f"{line}\n" for line in lines)
