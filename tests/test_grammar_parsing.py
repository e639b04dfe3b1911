"""Tests for grammar compilation."""

import pytest

from cmdcomplete.grammar import FREE_SLOT, GRAMMAR_KEYWORD_PATTERN, Slot, compile_grammar, must_compile, resolve_word
from cmdcomplete.models import (
    DuplicateKeywordError,
    ExitCode,
    GrammarError,
    MalformedKeywordError,
    SlotKind,
    UnknownDictionaryKeyError,
)


def test_positional_slots(arclm):
    assert [slot.kind for slot in arclm.positional] == [SlotKind.SINGLETON, SlotKind.WILDCARD]
    assert arclm.positional[0] == Slot((":arclm",))


def test_keyword_slots(arclm):
    assert set(arclm.keyword) == {"init", "initfn", "verbose"}
    assert arclm.keyword["init"].candidates == ("true", "false")
    assert arclm.keyword["initfn"].is_wildcard
    assert arclm.keyword["verbose"] is FREE_SLOT


def test_repeated_spaces_are_ignored(dictionary):
    grammar = compile_grammar("  git   _  $BOOL ", dictionary)
    assert len(grammar.positional) == 3
    assert grammar.positional[1].is_free


def test_empty_grammar():
    grammar = compile_grammar("")
    assert grammar.positional == ()
    assert dict(grammar.keyword) == {}


def test_source_is_kept():
    assert compile_grammar(":vim %g").source == ":vim %g"


def test_duplicate_keyword():
    with pytest.raises(DuplicateKeywordError) as excinfo:
        compile_grammar("[x:1] [x:2]")
    assert str(excinfo.value) == "key x already exists"
    assert excinfo.value.token == "[x:2]"


def test_unknown_dictionary_key():
    with pytest.raises(UnknownDictionaryKeyError) as excinfo:
        compile_grammar("$MISSING", {})
    assert str(excinfo.value) == "no key: MISSING"
    assert excinfo.value.token == "$MISSING"


def test_unknown_dictionary_key_without_dictionary():
    with pytest.raises(UnknownDictionaryKeyError):
        compile_grammar("cmd [color:$COLORS]")


@pytest.mark.parametrize("token", ["[:value]", "[x:a,b]", "[x]", "[x:y:z]"])
def test_malformed_keyword(token):
    with pytest.raises(MalformedKeywordError):
        compile_grammar(f"cmd {token}")


def test_errors_share_a_base_class():
    for text in ("[x:1] [x:2]", "$MISSING", "[x]"):
        with pytest.raises(GrammarError):
            compile_grammar(text, {})


def test_keyword_pattern():
    assert GRAMMAR_KEYWORD_PATTERN.fullmatch("[init:$BOOL]").groups() == ("init", "$BOOL")
    assert GRAMMAR_KEYWORD_PATTERN.fullmatch("[out:%g]").groups() == ("out", "%g")
    assert GRAMMAR_KEYWORD_PATTERN.fullmatch("[level:1.5-beta_2]").groups() == ("level", "1.5-beta_2")
    assert GRAMMAR_KEYWORD_PATTERN.fullmatch("[flag:]").groups() == ("flag", "")
    assert GRAMMAR_KEYWORD_PATTERN.fullmatch("[fl-ag:x]") is None


def test_resolve_word(dictionary):
    assert resolve_word("_") is FREE_SLOT
    assert resolve_word("%g").kind == SlotKind.WILDCARD
    assert resolve_word("%gfoo").kind == SlotKind.WILDCARD
    assert resolve_word("lit").kind == SlotKind.SINGLETON
    assert resolve_word("$COLORS", dictionary).candidates == tuple(dictionary["COLORS"])


def test_dictionary_is_not_retained():
    words = ["a", "b"]
    grammar = compile_grammar("cmd $W", {"W": words})
    words.append("c")
    assert grammar.positional[1].candidates == ("a", "b")


def test_grammar_is_immutable(arclm):
    with pytest.raises(TypeError):
        arclm.keyword["extra"] = FREE_SLOT  # type: ignore[index]
    with pytest.raises(AttributeError):
        arclm.trailing_repeat = True  # type: ignore[misc]


def test_directory_is_not_part_of_identity():
    first = compile_grammar("cmd %g")
    second = compile_grammar("cmd %g", directory="/tmp")
    assert second.directory == "/tmp"
    assert first == second
    first.chdir("/var")
    assert first.directory == "/var"


def test_slot_at():
    grammar = compile_grammar("a b")
    assert grammar.slot_at(1) == Slot(("b",))
    assert grammar.slot_at(2) is None

    repeat = compile_grammar("a b", trailing_repeat=True)
    assert repeat.slot_at(5) == Slot(("b",))
    assert compile_grammar("", trailing_repeat=True).slot_at(0) is None


def test_must_compile():
    assert must_compile(":vim %g").positional[0] == Slot((":vim",))
    with pytest.raises(SystemExit) as excinfo:
        must_compile("[x:1] [x:2]")
    assert excinfo.value.code == ExitCode.GRAMMAR_ERROR


def test_grammar_is_hashable():
    first = compile_grammar("cmd [a:x] [b:y] %g")
    second = compile_grammar("cmd [b:y] [a:x] %g", directory="/tmp")
    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second, compile_grammar("cmd %g")}) == 2
