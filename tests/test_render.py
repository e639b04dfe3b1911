"""Tests for grammar rendering."""

from cmdcomplete.grammar import FREE_SLOT, Slot, compile_grammar, render_grammar, render_slot


def test_render_slot():
    assert render_slot(FREE_SLOT) == "_"
    assert render_slot(Slot(("%g",))) == "filename"
    assert render_slot(Slot(("git",))) == "git"
    assert render_slot(Slot(("a", "b", "c"))) == "[a,b,c]"


def test_render_grammar(arclm):
    assert render_grammar(arclm) == ":arclm filename\n    -init=[true,false]\n    -initfn=filename\n    -verbose\n"
    assert str(arclm) == render_grammar(arclm)


def test_render_keywords_only():
    assert render_grammar(compile_grammar("[x:_]")) == "    -x\n"


def test_render_trailing_repeat():
    grammar = compile_grammar("rm _ %g", trailing_repeat=True)
    assert render_grammar(grammar) == "rm _ filename...\n"


def test_render_empty():
    assert render_grammar(compile_grammar("")) == ""
