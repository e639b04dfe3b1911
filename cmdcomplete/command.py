"""cmdcomplete - command line completion from declarative grammars (CLI)."""

import argparse
import logging
import os
import sys
from collections.abc import Callable

import questionary
import shtab

from .completer import GrammarCompleter, LineCompleter
from .config_loader import ConfigLoader
from .grammar import compile_grammar, render_grammar
from .logging_setup import Style, get_logger, init_logger, styled, use_colors
from .matcher import Matcher
from .models import ConfigError, ExitCode, GrammarError
from .registry import GrammarRegistry, compile_commands
from .validation import validate_config

__all__ = ["get_parser", "main"]

TOML_FILE = {
    "bash": "_shtab_cmdcomplete_compgen_TOMLFiles",
    "zsh": "_files -g '(*.toml|*.TOML)'",
    "tcsh": "f:*.toml",
}

PREAMBLE = {
    "bash": """
# $1=COMP_WORDS[1]
_shtab_cmdcomplete_compgen_TOMLFiles() {
  compgen -d -- $1  # recurse into subdirs
  compgen -f -X '!*?.toml' -- $1
  compgen -f -X '!*?.TOML' -- $1
}
""",
    "zsh": "",
    "tcsh": "",
}


def parse_dictionary(value: str) -> tuple[str, list[str]]:
    """Parse a "NAME=word1,word2" command line dictionary."""
    name, sep, words = value.partition("=")
    if not sep or not name:
        msg = f"expected NAME=word1,word2, got {value!r}"
        raise argparse.ArgumentTypeError(msg)
    return name, [word for word in words.split(",") if word]


def get_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(prog="cmdcomplete", description="Complete command lines from declarative grammars")
    parser.add_argument(
        "--debug",
        help="Enable debug mode and log to a file",
        metavar="filename",
    ).complete = shtab.FILE  # type: ignore[attr-defined]
    parser.add_argument(
        "--config",
        help="Use a different configuration file or folder",
        metavar="filename",
    ).complete = TOML_FILE  # type: ignore[attr-defined]
    parser.add_argument(
        "--cwd",
        help="Base directory for filename completion",
        metavar="directory",
    ).complete = shtab.DIRECTORY  # type: ignore[attr-defined]
    parser.add_argument("--grammar", help="Use this grammar instead of the configuration file")
    parser.add_argument(
        "--dict",
        help="Dictionary for --grammar, as NAME=word1,word2 (repeatable)",
        action="append",
        type=parse_dictionary,
        default=[],
        metavar="NAME=words",
    )
    parser.add_argument("--repeat", help="Reuse the last positional slot of --grammar", action="store_true")
    shtab.add_argument_to(parser, preamble=PREAMBLE)

    subparsers = parser.add_subparsers(dest="command")
    for name, help_text in (
        ("complete", "Print the completed lines"),
        ("word", "Print the completed last tokens"),
        ("context", "Print what is expected at the end of the line"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("line", help="The command line typed so far")
    show = subparsers.add_parser("show", help="Display grammars")
    show.add_argument("name", help="grammar name", nargs="?")
    subparsers.add_parser("list", help="List the configured commands")
    subparsers.add_parser("validate", help="Validate the configuration file")
    try_cmd = subparsers.add_parser("try", help="Interactive prompt completing with the grammars")
    try_cmd.add_argument("name", help="grammar name", nargs="?")
    return parser


def _load_registry(args: argparse.Namespace, log: logging.Logger) -> GrammarRegistry:
    """Load the configured grammars."""
    config = ConfigLoader(log).load(args.config or "")
    registry = GrammarRegistry.from_config(config, log=log)
    if args.cwd:
        registry.chdir(args.cwd)
    return registry


def _load_source(args: argparse.Namespace, log: logging.Logger) -> LineCompleter:
    """Return a matcher for --grammar, else the configured registry."""
    if args.grammar:
        grammar = compile_grammar(args.grammar, dict(args.dict), trailing_repeat=args.repeat, directory=args.cwd or "")
        return Matcher(grammar)
    return _load_registry(args, log)


def run_complete(args: argparse.Namespace, log: logging.Logger) -> ExitCode:
    """Print the completed lines."""
    for line in _load_source(args, log).complete(args.line):
        print(line)
    return ExitCode.SUCCESS


def run_word(args: argparse.Namespace, log: logging.Logger) -> ExitCode:
    """Print the completed last tokens."""
    for word in _load_source(args, log).complete_word(args.line):
        print(word)
    return ExitCode.SUCCESS


def run_context(args: argparse.Namespace, log: logging.Logger) -> ExitCode:
    """Print the context name."""
    print(_load_source(args, log).context(args.line).name.lower())
    return ExitCode.SUCCESS


def run_show(args: argparse.Namespace, log: logging.Logger) -> ExitCode:
    """Display one or every grammar."""
    source = _load_source(args, log)
    if isinstance(source, Matcher):
        print(render_grammar(source.grammar), end="")
        return ExitCode.SUCCESS

    assert isinstance(source, GrammarRegistry)
    if args.name:
        grammar = source.get(args.name)
        if grammar is None:
            log.error("Unknown grammar: %s", args.name)
            return ExitCode.USAGE_ERROR
        print(render_grammar(grammar), end="")
        return ExitCode.SUCCESS

    for entry in source:
        header = f"# {entry.name}"
        print(styled(header, Style.HEADER) if use_colors(sys.stdout) else header)
        print(render_grammar(entry.grammar))
    return ExitCode.SUCCESS


def run_list(args: argparse.Namespace, log: logging.Logger) -> ExitCode:
    """List the configured commands."""
    registry = _load_registry(args, log)
    for entry in sorted(registry, key=lambda e: e.name):
        print(f" {entry.name:20s} {entry.description or entry.grammar.source}")
    return ExitCode.SUCCESS


def _silent_logger() -> logging.Logger:
    """Return the logger collecting validation messages, which are printed instead."""
    logger = logging.getLogger("cmdcomplete.validate.silent")
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
        logger.propagate = False
    return logger


def run_validate(args: argparse.Namespace, log: logging.Logger) -> ExitCode:
    """Validate the configuration file and compile every grammar."""
    config = ConfigLoader(log).load(args.config or "")
    silent_logger = _silent_logger()

    errors, warnings = validate_config(config, silent_logger)
    if not errors:
        entries, errors = compile_commands(config, silent_logger)
        print(f"Compiled {len(entries)} grammar(s)")

    for error in errors:
        print(f"  ERROR: {error}")
    for warning in warnings:
        print(f"  WARNING: {warning}")

    if not errors and not warnings:
        print("Configuration is valid!")
        return ExitCode.SUCCESS
    if errors:
        print(f"Found {len(errors)} error(s) and {len(warnings)} warning(s)")
        return ExitCode.CONFIG_ERROR
    print(f"Found {len(warnings)} warning(s)")
    return ExitCode.SUCCESS


def run_try(args: argparse.Namespace, log: logging.Logger) -> ExitCode:
    """Prompt for lines with completion until cancelled or empty."""
    source = _load_source(args, log)
    if args.name and isinstance(source, GrammarRegistry):
        grammar = source.get(args.name)
        if grammar is None:
            log.error("Unknown grammar: %s", args.name)
            return ExitCode.USAGE_ERROR
        source = Matcher(grammar, source.expander)

    completer = GrammarCompleter(source)
    while True:
        line = questionary.text("cmdcomplete>", completer=completer, qmark="").ask()
        if not line:
            return ExitCode.SUCCESS
        context = source.context(line)
        questionary.print(f"{line}  [{context.name.lower()}]", style="fg:green")


COMMANDS: dict[str, Callable[[argparse.Namespace, logging.Logger], ExitCode]] = {
    "complete": run_complete,
    "word": run_word,
    "context": run_context,
    "show": run_show,
    "list": run_list,
    "validate": run_validate,
    "try": run_try,
}


def main(argv: list[str] | None = None) -> None:
    """Run the command."""
    parser = get_parser()
    args = parser.parse_args(argv)

    if args.debug:
        init_logger(filename=args.debug, force_debug=True)
    else:
        init_logger()
    log = get_logger("cmdcomplete.cli")

    if args.cwd and not os.path.isdir(args.cwd):
        log.warning("%s is not a directory", args.cwd)

    if args.command is None:
        parser.print_help()
        sys.exit(ExitCode.USAGE_ERROR)

    try:
        code = COMMANDS[args.command](args, log)
    except GrammarError as e:
        log.critical("Invalid grammar: %s", e)
        code = ExitCode.GRAMMAR_ERROR
    except ConfigError:
        log.critical("Configuration failed.")
        code = ExitCode.CONFIG_ERROR
    except KeyboardInterrupt:
        code = ExitCode.SUCCESS
    sys.exit(code)


if __name__ == "__main__":
    main()
