" generic fixtures "
import logging
from dataclasses import dataclass, field

import pytest

from cmdcomplete.grammar import compile_grammar

BOOL = ["true", "false"]
COLORS = ["red", "green", "blue", "grey"]

DICTIONARY = {"BOOL": BOOL, "COLORS": COLORS}


def pytest_configure():
    "Runs once before all"
    from cmdcomplete.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@dataclass
class FakeGlob:
    "A GlobExpander returning canned paths"

    paths: list[str] = field(default_factory=list)
    error: Exception | None = None
    patterns: list[str] = field(default_factory=list)

    def expand(self, pattern):
        self.patterns.append(pattern)
        if self.error:
            raise self.error
        prefix = pattern.rstrip("*")
        return [path for path in self.paths if path.startswith(prefix)]


@pytest.fixture
def test_logger():
    "A logger which doesn't output anything"
    logger = logging.getLogger("cmdcomplete.tests")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


@pytest.fixture
def fake_glob():
    return FakeGlob(["readme.md", "readme.txt", "report.pdf", "src/"])


@pytest.fixture
def arclm():
    "The reference grammar, with keywords and filename slots"
    return compile_grammar(":arclm [init:$BOOL] [initfn:%g] [verbose:] %g", DICTIONARY)


@pytest.fixture
def config_file(tmp_path):
    "Writes a configuration file, returns its path"

    def _write(text, name="config.toml"):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def dictionary():
    return {name: list(words) for name, words in DICTIONARY.items()}


@pytest.fixture
def make_glob():
    "Builds FakeGlob instances"
    return FakeGlob
