"""
Knowledge base parser.

    parse(text) -> KnowledgeBase

The whole source is parsed atomically: any grammar violation raises
KBSyntaxError and no partial knowledge base is ever returned.
"""

from __future__ import annotations

import logging
from typing import Iterator

from lark import Tree

from .builder import KnowledgeBaseBuilder
from .errors import GrammarMismatchError
from .grammar import pair_values, parse_tree
from .model import Declaration, DeclarationKind, KnowledgeBase

logger = logging.getLogger(__name__)


_PROMPT_KINDS = {
    "advice": DeclarationKind.ADVICE,
    "change": DeclarationKind.CHANGE,
    "tip": DeclarationKind.TIP,
}


def _entry_declaration(tree: Tree) -> Declaration:
    number, attributes, terminal = tree.children
    category, value = pair_values(terminal)
    return Declaration(
        kind=DeclarationKind.ENTRY,
        category=category,
        text=value,
        attributes=tuple(pair_values(pair) for pair in attributes.children),
        number=int(number),
        line=tree.meta.line,
    )


def to_declaration(tree: Tree) -> Declaration:
    """
    Convert one top-level production into a Declaration.

    Raises:
        GrammarMismatchError: If the production is not a declaration rule
    """
    rule = str(tree.data)

    if rule == "entry":
        return _entry_declaration(tree)

    kind = _PROMPT_KINDS.get(rule)
    if kind is None:
        raise GrammarMismatchError(f"Grammar produced unknown declaration rule: {rule!r}")

    (pair,) = tree.children
    category, text = pair_values(pair)
    return Declaration(kind=kind, category=category, text=text, line=tree.meta.line)


def iter_declarations(text: str) -> Iterator[Declaration]:
    """
    Parse `text` and yield its declarations in source order.

    The text is parsed in full before the first declaration is yielded.
    """
    tree = parse_tree(text)
    for child in tree.children:
        yield to_declaration(child)


def parse(text: str) -> KnowledgeBase:
    """
    Parse knowledge base source text.

    Raises:
        KBSyntaxError: If the text does not match the grammar

    Returns:
        A new, immutable KnowledgeBase
    """
    builder = KnowledgeBaseBuilder()
    builder.add_declarations(iter_declarations(text))
    kb = builder.build()

    logger.info(
        "Parsed knowledge base: %d entries, %d categories, %d questions, %d tips, %d changes",
        len(kb.entries),
        len(kb.categories),
        len(kb.questions),
        len(kb.tips),
        len(kb.changes),
    )
    return kb
