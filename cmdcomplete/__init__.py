"""cmdcomplete - command line completion from declarative grammars.

A grammar such as ``:arclm [init:$BOOL] [initfn:%g] %g`` is compiled once,
then queried for completions of partially typed lines and for the kind of
token expected at the cursor. Named grammars can be loaded from a TOML file
and plugged into prompt_toolkit prompts.
"""

from .globbing import FilesystemGlob, GlobExpander
from .grammar import Grammar, Slot, compile_grammar, must_compile, render_grammar
from .matcher import Matcher, complete, complete_word, context
from .models import (
    CmdCompleteError,
    ConfigError,
    Context,
    DuplicateKeywordError,
    GrammarError,
    MalformedKeywordError,
    UnknownDictionaryKeyError,
)

__all__ = [
    "CmdCompleteError",
    "ConfigError",
    "Context",
    "DuplicateKeywordError",
    "FilesystemGlob",
    "GlobExpander",
    "Grammar",
    "GrammarError",
    "MalformedKeywordError",
    "Matcher",
    "Slot",
    "UnknownDictionaryKeyError",
    "compile_grammar",
    "complete",
    "complete_word",
    "context",
    "must_compile",
    "render_grammar",
]
