"""Grammar string compilation."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ..constants import DICTIONARY_PREFIX, FREE_MARKER
from ..logging_setup import get_logger
from ..models import DuplicateKeywordError, ExitCode, GrammarError, MalformedKeywordError, UnknownDictionaryKeyError
from .models import FREE_SLOT, Grammar, Slot

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

__all__ = ["GRAMMAR_KEYWORD_PATTERN", "compile_grammar", "must_compile", "resolve_word"]

# Keyword declaration: [name:value]
GRAMMAR_KEYWORD_PATTERN = re.compile(r"^\[([a-zA-Z0-9]+):([$%a-zA-Z0-9._-]*)\]$")


def _is_bracketed(token: str) -> bool:
    return token.startswith("[") and token.endswith("]")


def resolve_word(word: str, dictionary: Mapping[str, Sequence[str]] | None = None) -> Slot:
    """Turn a grammar value into a slot.

    - "_" gives a free slot
    - "$NAME" gives the dictionary entry NAME as a vocabulary
    - anything else is a single literal (possibly the "%g" filename marker)

    Args:
        word: The raw grammar value
        dictionary: Named vocabularies for "$NAME" references

    Returns:
        The resolved slot

    Raises:
        UnknownDictionaryKeyError: "$NAME" is not in the dictionary
    """
    if word == FREE_MARKER:
        return FREE_SLOT
    if word.startswith(DICTIONARY_PREFIX):
        key = word[len(DICTIONARY_PREFIX) :]
        if dictionary is None or key not in dictionary:
            msg = f"no key: {key}"
            raise UnknownDictionaryKeyError(msg, word)
        return Slot(tuple(dictionary[key]))
    return Slot((word,))


def compile_grammar(
    text: str,
    dictionary: Mapping[str, Sequence[str]] | None = None,
    *,
    trailing_repeat: bool = False,
    directory: str = "",
) -> Grammar:
    """Compile a grammar string.

    Tokens are separated by spaces (repeated spaces are ignored). A token
    shaped like "[name:value]" declares a keyword, any other token declares
    the next positional slot.

    Args:
        text: The grammar, e.g. ":arclm [init:$BOOL] [initfn:%g] %g"
        dictionary: Named vocabularies for "$NAME" references
        trailing_repeat: Reuse the last positional slot for extra tokens
        directory: Base directory for filename completion

    Returns:
        The compiled grammar

    Raises:
        DuplicateKeywordError: A keyword name is declared twice
        UnknownDictionaryKeyError: A "$NAME" reference is unknown
        MalformedKeywordError: A bracketed token has no usable keyword name
    """
    positional: list[Slot] = []
    keyword: dict[str, Slot] = {}

    for token in text.split(" "):
        if not token:
            continue
        match = GRAMMAR_KEYWORD_PATTERN.fullmatch(token)
        if match:
            name, value = match.groups()
            if name in keyword:
                msg = f"key {name} already exists"
                raise DuplicateKeywordError(msg, token)
            keyword[name] = resolve_word(value, dictionary) if value else FREE_SLOT
        elif _is_bracketed(token):
            msg = f"no keyword: {token}"
            raise MalformedKeywordError(msg, token)
        else:
            positional.append(resolve_word(token, dictionary))

    grammar = Grammar(positional=tuple(positional), keyword=keyword, trailing_repeat=trailing_repeat, source=text)
    if directory:
        grammar.chdir(directory)
    get_logger("cmdcomplete.grammar").debug("Compiled %r: %d positional, %d keyword", text, len(positional), len(keyword))
    return grammar


def must_compile(
    text: str,
    dictionary: Mapping[str, Sequence[str]] | None = None,
    **kwargs: bool | str,
) -> Grammar:
    """Compile a grammar which is known to be valid, exit otherwise.

    Meant for grammars written by hand in the code. Grammars coming from
    users or files must go through `compile_grammar`.

    Args:
        text: The grammar string
        dictionary: Named vocabularies for "$NAME" references
        **kwargs: Passed to `compile_grammar`

    Returns:
        The compiled grammar
    """
    try:
        return compile_grammar(text, dictionary, **kwargs)  # type: ignore[arg-type]
    except GrammarError as e:
        get_logger("cmdcomplete.grammar").critical("Invalid grammar %r: %s", text, e)
        raise SystemExit(ExitCode.GRAMMAR_ERROR) from e
