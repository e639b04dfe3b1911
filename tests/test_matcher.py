"""Tests for completion and context matching."""

import pytest

from cmdcomplete.grammar import compile_grammar
from cmdcomplete.matcher import KEYWORD_ARG_PATTERN, Matcher, Target, complete, complete_word, context, is_keyword_token, resolve
from cmdcomplete.models import Context


@pytest.fixture
def matcher(arclm, fake_glob):
    return Matcher(arclm, fake_glob)


# Literal slots


def test_singleton_prefix(matcher):
    assert matcher.complete(":ar") == [":arclm"]
    assert matcher.complete("") == [":arclm"]
    assert matcher.complete(":arclm") == [":arclm"]


def test_singleton_no_match_returns_line(matcher):
    assert matcher.complete(":vim") == [":vim"]
    assert matcher.context(":vim") == Context.NONE


# Vocabulary slots


def test_vocabulary_declared_order():
    grammar = compile_grammar("paint $COLORS", {"COLORS": ["red", "green", "blue", "grey"]})
    assert complete(grammar, "paint gr") == ["paint green", "paint grey"]
    assert complete(grammar, "paint ") == ["paint red", "paint green", "paint blue", "paint grey"]


def test_vocabulary_no_match_is_empty():
    grammar = compile_grammar("paint $COLORS", {"COLORS": ["red", "green"]})
    assert complete(grammar, "paint y") == []
    assert context(grammar, "paint y") == Context.NONE


# Free slots


@pytest.mark.parametrize("line", ["echo ", "echo hello", "echo hel*"])
def test_free_slot_neutrality(line):
    grammar = compile_grammar("echo _")
    assert complete(grammar, line) == [line]
    assert context(grammar, line) == Context.NONE


def test_free_keyword_value():
    grammar = compile_grammar("echo [tag:_]")
    assert complete(grammar, "echo --tag=v1") == ["echo --tag=v1"]
    assert complete(grammar, "echo --t") == ["echo --tag"]
    assert context(grammar, "echo --tag=") == Context.NONE


# Keywords


def test_keyword_value(matcher):
    assert matcher.complete(":arclm --init=t") == [":arclm --init=true"]
    assert matcher.context(":arclm --init=t") == Context.NONE
    assert matcher.complete(":arclm -init=") == [":arclm -init=true", ":arclm -init=false"]
    assert matcher.complete(":arclm --init=x") == []


def test_keyword_value_filename(matcher, fake_glob):
    assert matcher.context(":arclm --initfn=") == Context.FILE_NAME
    assert matcher.complete(":arclm --initfn=rea") == [":arclm --initfn=readme.md", ":arclm --initfn=readme.txt"]
    assert fake_glob.patterns == ["rea*"]


def test_unknown_keyword(matcher):
    assert matcher.complete(":arclm --nope=x") == [":arclm --nope=x"]
    assert matcher.context(":arclm --nope=x") == Context.UNKNOWN_KEYWORD
    assert matcher.context(":arclm --=x") == Context.UNKNOWN_KEYWORD


def test_keyword_names(matcher):
    assert set(matcher.complete(":arclm --in")) == {":arclm --init=", ":arclm --initfn="}
    assert set(matcher.complete(":arclm -")) == {":arclm -init=", ":arclm -initfn=", ":arclm -verbose"}
    assert matcher.complete(":arclm --x") == []
    assert matcher.context(":arclm --in") == Context.KEYWORD
    assert matcher.context(":arclm -") == Context.KEYWORD


def test_keyword_without_value(matcher):
    assert matcher.complete(":arclm -v") == [":arclm -verbose"]


# Filenames


def test_filename_classification(matcher):
    assert matcher.context(":arclm ") == Context.FILE_NAME
    assert matcher.context(":arclm read") == Context.FILE_NAME


def test_filename_completion(matcher, fake_glob):
    assert matcher.complete(":arclm readme") == [":arclm readme.md", ":arclm readme.txt"]
    assert fake_glob.patterns == ["readme*"]
    assert matcher.complete(":arclm ") == [":arclm readme.md", ":arclm readme.txt", ":arclm report.pdf", ":arclm src/"]


def test_filename_star_not_doubled(matcher, fake_glob):
    matcher.complete(":arclm rep*")
    assert fake_glob.patterns == ["rep*"]


def test_filename_no_match(matcher):
    assert matcher.complete(":arclm zzz") == []


@pytest.mark.parametrize("error", [OSError("permission denied"), ValueError("bad pattern")])
def test_glob_failure_returns_line(arclm, make_glob, error):
    matcher = Matcher(arclm, make_glob(error=error))
    assert matcher.complete(":arclm rea") == [":arclm rea"]


def test_directory(arclm, make_glob):
    expander = make_glob(["/data/readme.md", "readme.txt"])
    matcher = Matcher(arclm, expander)
    arclm.chdir("/data")
    assert matcher.complete(":arclm readme") == [":arclm /data/readme.md"]
    assert expander.patterns == ["/data/readme*"]
    arclm.chdir("")
    assert matcher.complete(":arclm readme") == [":arclm readme.txt"]


def test_filename_on_disk(tmp_path):
    (tmp_path / "readme.md").write_text("")
    (tmp_path / ".readme.swp").write_text("")
    (tmp_path / "other").mkdir()
    grammar = compile_grammar(":vim %g", directory=str(tmp_path))
    assert complete(grammar, ":vim readme") == [f":vim {tmp_path / 'readme.md'}"]
    assert complete(grammar, ":vim .") == [f":vim {tmp_path / '.readme.swp'}"]


# Positions


def test_keywords_do_not_consume_positions(matcher):
    assert matcher.complete(":arclm --init=true -verbose readme") == [
        ":arclm --init=true -verbose readme.md",
        ":arclm --init=true -verbose readme.txt",
    ]
    assert matcher.context(":arclm --init=true -verbose ") == Context.FILE_NAME


def test_positional_overflow(matcher):
    assert matcher.context(":arclm a b") == Context.OVERSIZED
    assert matcher.complete(":arclm a b") == [":arclm a b"]
    assert matcher.complete(":arclm a ") == [":arclm a "]


def test_trailing_repeat(make_glob):
    grammar = compile_grammar("rm %g", trailing_repeat=True)
    expander = make_glob(["a.txt", "b.txt"])
    assert Matcher(grammar, expander).complete("rm a.txt b") == ["rm a.txt b.txt"]
    assert context(grammar, "rm a.txt b.txt ") == Context.FILE_NAME


def test_other_tokens_are_kept(matcher):
    assert matcher.complete(":arclm  --init=f") == [":arclm  --init=false"]


# complete_word


def test_complete_word(matcher):
    assert matcher.complete_word(":arclm readme") == ["readme.md", "readme.txt"]
    assert matcher.complete_word(":arclm --init=t") == ["--init=true"]
    assert matcher.complete_word(":ar") == [":arclm"]
    assert matcher.complete_word(":arclm a b") == ["b"]


def test_module_functions(arclm, fake_glob):
    assert complete_word(arclm, ":arclm rep", fake_glob) == ["report.pdf"]
    assert complete(arclm, ":arclm rep", fake_glob) == [":arclm report.pdf"]


# Tokenization


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("-", ("-", "", "", "")),
        ("--", ("--", "", "", "")),
        ("-init", ("-", "init", "", "")),
        ("--init=", ("--", "init", "=", "")),
        ("--init=t", ("--", "init", "=", "t")),
    ],
)
def test_keyword_arg_pattern(token, expected):
    assert KEYWORD_ARG_PATTERN.fullmatch(token).groups() == expected


@pytest.mark.parametrize("token", ["", "init", "---init", "--in-it", "--init=a=b", "-x y"])
def test_not_keyword_tokens(token):
    assert not is_keyword_token(token)


def test_resolve(arclm):
    resolution = resolve(arclm, ":arclm --init=t")
    assert resolution.target == Target.KEYWORD_VALUE
    assert resolution.word == "t"
    assert resolution.prefix == "--init="
    assert resolution.substitute("true") == ":arclm --init=true"

    resolution = resolve(arclm, ":arclm --ini")
    assert resolution.target == Target.KEYWORD_NAME
    assert (resolution.prefix, resolution.word) == ("--", "ini")

    assert resolve(arclm, ":arclm x y").target == Target.OVERSIZED
    assert resolve(arclm, ":arclm --no=").target == Target.UNKNOWN_KEYWORD
    assert resolve(arclm, ":arclm x").slot == arclm.positional[1]
