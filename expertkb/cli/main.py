"""
Expert KB CLI — load a knowledge base and query it.

Commands:
    expertkb check <file>                 — Validate a source file
    expertkb show <file>                  — Show entries, questions and tips
    expertkb categories <file>            — Show the category catalog
    expertkb ask <file> [--target CAT] [--answer CAT=VALUE ...]
    expertkb interview <file> [--target CAT]

Every command loads the file into a fresh KnowledgeBaseStore; nothing
is kept between runs.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from ..config import LOG_FORMAT, NOT_FOUND_MESSAGE
from ..diagnostics import report_error
from ..errors import AnswerError, ExpertKBError, KBSyntaxError, NotFoundError
from ..explorer import format_categories, format_knowledge_base
from ..model import KnowledgeBase, Pair
from ..resolver import resolve
from ..session import KnowledgeBaseStore, Questionnaire


# =============================================================================
# HELPERS
# =============================================================================

def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def format_syntax_error(path: str, error: KBSyntaxError) -> str:
    """Format a syntax error the way compilers do: file:line:column: message."""
    return f"{path}:{error.line}:{error.column}: {error.message}"


def print_error(error: ExpertKBError) -> None:
    """Report an error to the diagnostics log and print it."""
    message = report_error(error)
    print(f"ERROR: {message}")


def load(path: str) -> Optional[KnowledgeBase]:
    """Load a knowledge base, printing the failure and returning None on error."""
    store = KnowledgeBaseStore()
    try:
        return store.load_file(path)
    except KBSyntaxError as e:
        report_error(e)
        print(format_syntax_error(path, e))
        return None
    except ExpertKBError as e:
        print_error(e)
        return None


def parse_answer(raw: str) -> Pair:
    """
    Split a CAT=VALUE command-line answer.

    Raises:
        argparse.ArgumentTypeError: If there is no '=' or the category is empty
    """
    category, sep, value = raw.partition("=")
    if not sep or not category.strip():
        raise argparse.ArgumentTypeError(f"expected CATEGORY=VALUE, got {raw!r}")
    return category.strip(), value.strip()


def read_choice(options: Sequence[str]) -> Optional[str]:
    """
    Ask for a 1-based option number until a valid one is entered.

    An empty line or end of input skips the question.
    """
    while True:
        try:
            raw = input("> ").strip()
        except EOFError:
            return None
        if not raw:
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return options[int(raw) - 1]
        print(f"Enter a number between 1 and {len(options)}, or leave empty to skip.")


def print_options(options: Sequence[str]) -> None:
    for number, option in enumerate(options, start=1):
        print(f"  {number}. {option}")


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_check(args: argparse.Namespace) -> int:
    """Validate a source file and print a summary."""
    kb = load(args.file)
    if kb is None:
        return 1

    print(f"{args.file}: OK")
    print(f"  Entries:    {len(kb.entries)}")
    print(f"  Categories: {len(kb.categories)}")
    print(f"  Questions:  {len(kb.questions)}")
    print(f"  Tips:       {len(kb.tips)}")
    print(f"  Changes:    {len(kb.changes)}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Show the whole knowledge base."""
    kb = load(args.file)
    if kb is None:
        return 1

    print(format_knowledge_base(kb))
    return 0


def cmd_categories(args: argparse.Namespace) -> int:
    """Show every category with its known values."""
    kb = load(args.file)
    if kb is None:
        return 1

    print(format_categories(kb))
    return 0


def cmd_ask(args: argparse.Namespace) -> int:
    """Resolve answers given on the command line."""
    kb = load(args.file)
    if kb is None:
        return 1

    answers = args.answers or []
    try:
        print(resolve(kb, args.target, answers))
    except NotFoundError as e:
        report_error(e)
        print(NOT_FOUND_MESSAGE)
        return 1
    return 0


def cmd_interview(args: argparse.Namespace) -> int:
    """Put the knowledge base's questions to the user, then resolve."""
    kb = load(args.file)
    if kb is None:
        return 1

    if kb.is_empty:
        print(format_knowledge_base(kb))
        return 1

    questionnaire = Questionnaire(kb)

    try:
        if args.target:
            questionnaire.select_target(args.target)
        else:
            print("What are you looking for? (empty to skip)")
            choices = questionnaire.target_choices()
            print_options(choices)
            target = read_choice(choices)
            if target is not None:
                questionnaire.select_target(target)
    except AnswerError as e:
        print_error(e)
        return 1

    for prompt in questionnaire.prompts():
        print()
        print(prompt.text)
        if not prompt.options:
            continue
        print_options(prompt.options)
        choice = read_choice(prompt.options)
        if choice is not None:
            questionnaire.answer(prompt.category, choice)

    print()
    try:
        print(questionnaire.find())
    except NotFoundError as e:
        report_error(e)
        print(NOT_FOUND_MESSAGE)
        return 1
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="expertkb",
        description="Expert KB — knowledge base parser and questionnaire",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate a knowledge base source file",
    )
    check_parser.add_argument("file", help="Source file")
    check_parser.set_defaults(func=cmd_check)

    show_parser = subparsers.add_parser(
        "show",
        help="Show entries, questions and tips",
    )
    show_parser.add_argument("file", help="Source file")
    show_parser.set_defaults(func=cmd_show)

    categories_parser = subparsers.add_parser(
        "categories",
        help="Show the category catalog",
    )
    categories_parser.add_argument("file", help="Source file")
    categories_parser.set_defaults(func=cmd_categories)

    ask_parser = subparsers.add_parser(
        "ask",
        help="Resolve answers given as arguments",
    )
    ask_parser.add_argument("file", help="Source file")
    ask_parser.add_argument(
        "--target",
        help="Category to resolve",
    )
    ask_parser.add_argument(
        "--answer",
        dest="answers",
        action="append",
        type=parse_answer,
        metavar="CATEGORY=VALUE",
        help="Confirmed answer (repeatable)",
    )
    ask_parser.set_defaults(func=cmd_ask)

    interview_parser = subparsers.add_parser(
        "interview",
        help="Answer the knowledge base's questions interactively",
    )
    interview_parser.add_argument("file", help="Source file")
    interview_parser.add_argument(
        "--target",
        help="Category to resolve (asked for when omitted)",
    )
    interview_parser.set_defaults(func=cmd_interview)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
