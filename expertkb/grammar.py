"""
Grammar for the Expert KB source format.

A source is a sequence of declarations followed by the end of input:

    # comment
    1 {
        Color: Red
        Shape: Round
    } => Fruit: Apple

    advice Color: "What color is it?"
    change Color: "Colors were regrouped."
    tip    Color: "Look at the skin, not the flesh."

Entry numbers only help authors keep track of entries; they are not
retained. Words run up to whitespace or one of  : { } " # =  ; anything
else goes in double quotes, where a backslash escapes the next character.
The keywords advice, change and tip must stand as whole words at the
start of a declaration; inside pairs they are ordinary words.

This module owns the Lark parser and the translation of Lark's errors
into KBSyntaxError. Lark exceptions never leave this module.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from lark import Lark, Token, Tree
from lark.exceptions import (
    UnexpectedCharacters,
    UnexpectedEOF,
    UnexpectedInput,
    UnexpectedToken,
)

from .config import LEXER, PARSER_ALGORITHM
from .errors import KBSyntaxError

logger = logging.getLogger(__name__)


KB_GRAMMAR = r"""
    start: declaration*

    ?declaration: entry
                | advice
                | change
                | tip

    entry: NUMBER attributes "=>" pair
    attributes: "{" attribute* "}"

    advice: _ADVICE pair
    change: _CHANGE pair
    tip: _TIP pair

    // Attribute pairs and declaration pairs are separate rules so that the
    // parser state after a value never accepts both a word and a new entry.
    attribute: (NUMBER | WORD | STRING) ":" (NUMBER | WORD | STRING)
    pair: (NUMBER | WORD | STRING) ":" (NUMBER | WORD | STRING)

    _ADVICE.2: /advice(?![^\s:{}"#=])/
    _CHANGE.2: /change(?![^\s:{}"#=])/
    _TIP.2: /tip(?![^\s:{}"#=])/
    NUMBER.2: /\d+(?![^\s:{}"#=])/
    WORD: /[^\s:{}"#=]+/
    STRING: /"(?:[^"\\]|\\.)*"/s
    COMMENT: /#[^\n]*/

    %import common.WS
    %ignore WS
    %ignore COMMENT
"""

END_OF_INPUT = "$END"

_ESCAPE = re.compile(r"\\(.)", re.DOTALL)


@lru_cache(maxsize=None)
def get_parser() -> Lark:
    """Build the Lark parser once per process."""
    return Lark(
        KB_GRAMMAR,
        parser=PARSER_ALGORITHM,
        lexer=LEXER,
        propagate_positions=True,
    )


# =============================================================================
# TOKENS
# =============================================================================

def atom_text(token: Token) -> str:
    """Return the text an atom token stands for, with quotes removed."""
    if token.type == "STRING":
        return _ESCAPE.sub(r"\1", token.value[1:-1])
    return str(token.value)


def pair_values(tree: Tree) -> tuple[str, str]:
    """Extract (category, value) from a `pair` subtree."""
    category, value = tree.children
    return atom_text(category), atom_text(value)


# =============================================================================
# ERROR TRANSLATION
# =============================================================================

def end_position(text: str) -> tuple[int, int]:
    """1-based (line, column) just past the last character of `text`."""
    line = text.count("\n") + 1
    column = len(text) - (text.rfind("\n") + 1) + 1
    return line, column


def describe_terminal(name: str) -> str:
    """Human-readable name for a grammar terminal."""
    if name == END_OF_INPUT:
        return "end of input"
    try:
        terminal = get_parser().get_terminal(name)
    except KeyError:
        return name
    if terminal.pattern.type == "str":
        return repr(terminal.pattern.value)
    if name.startswith("_"):
        # keyword terminals are filtered out of the tree
        return repr(name[1:].lower())
    return name.lower()


def _describe_expected(expected) -> str:
    if not expected:
        return ""
    names = sorted(describe_terminal(name) for name in expected)
    return "; expected " + ", ".join(names)


def to_syntax_error(error: UnexpectedInput, text: str) -> KBSyntaxError:
    """
    Convert a Lark error into a KBSyntaxError.

    Positions point at the start of the offending token or character.
    When the input ends early, they point just past the last character.
    """
    if isinstance(error, UnexpectedCharacters):
        message = f"Unexpected character {error.char!r}" + _describe_expected(error.allowed)
        return KBSyntaxError(message, error.line, error.column)

    if isinstance(error, UnexpectedToken):
        token = error.token
        expected = _describe_expected(error.expected)
        if token.type == END_OF_INPUT:
            line, column = end_position(text)
            return KBSyntaxError("Unexpected end of input" + expected, line, column)
        message = f"Unexpected {describe_terminal(token.type)} {token.value!r}" + expected
        return KBSyntaxError(message, token.line, token.column)

    if isinstance(error, UnexpectedEOF):
        line, column = end_position(text)
        return KBSyntaxError(
            "Unexpected end of input" + _describe_expected(error.expected),
            line,
            column,
        )

    line = error.line if error.line > 0 else 1
    column = error.column if error.column > 0 else 1
    return KBSyntaxError(str(error), line, column)


def parse_tree(text: str) -> Tree:
    """
    Run the grammar over the whole text.

    Raises:
        KBSyntaxError: If the text does not match the grammar
    """
    try:
        return get_parser().parse(text)
    except UnexpectedInput as e:
        error = to_syntax_error(e, text)
        logger.debug("Syntax error at %d:%d: %s", error.line, error.column, error.message)
        raise error from None
