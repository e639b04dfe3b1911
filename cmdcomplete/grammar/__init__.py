"""Grammar compilation.

This package provides:
- models: Compiled grammar structures (Slot, Grammar)
- parsing: Grammar string compilation
- render: Human readable grammar display
"""

from .models import FREE_SLOT, Grammar, Slot
from .parsing import GRAMMAR_KEYWORD_PATTERN, compile_grammar, must_compile, resolve_word
from .render import render_grammar, render_slot

__all__ = [
    "FREE_SLOT",
    "GRAMMAR_KEYWORD_PATTERN",
    "Grammar",
    "Slot",
    "compile_grammar",
    "must_compile",
    "render_grammar",
    "render_slot",
    "resolve_word",
]
