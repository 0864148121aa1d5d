"""
Knowledge-Base Builder for Expert KB.

Consumes parsed declarations strictly in source order and accumulates
them into the in-memory model:

    ENTRY   → entries, plus catalog registration of every pair it carries
    ADVICE  → questions   (last declaration wins)
    CHANGE  → changes     (last declaration wins)
    TIP     → tips        (last declaration wins)

The builder is private to one parse call. `build()` hands out a frozen
snapshot; nothing the builder does afterwards can reach it.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .errors import GrammarMismatchError
from .model import Declaration, DeclarationKind, Entry, KnowledgeBase, Pair

logger = logging.getLogger(__name__)


class KnowledgeBaseBuilder:
    """Accumulates declarations into a KnowledgeBase."""

    def __init__(self) -> None:
        self._entries: list[Entry] = []
        self._categories: dict[str, list[str]] = {}
        self._questions: dict[str, str] = {}
        self._tips: dict[str, str] = {}
        self._changes: dict[str, str] = {}

    # =========================================================================
    # CATALOG
    # =========================================================================

    def add_category(self, category: str, value: str) -> None:
        """
        Register a (category, value) pair in the catalog.

        Values stay distinct per category and keep first-seen order.
        """
        values = self._categories.setdefault(category, [])
        if value not in values:
            values.append(value)

    # =========================================================================
    # DECLARATIONS
    # =========================================================================

    def add_entry(self, category: str, value: str, attributes: Iterable[Pair] = ()) -> Entry:
        """Append an entry and register all of its pairs in the catalog."""
        pairs: list[Pair] = []
        for attr_category, attr_value in attributes:
            self.add_category(attr_category, attr_value)
            pairs.append((attr_category, attr_value))

        self.add_category(category, value)

        entry = Entry(value=value, category=category, attributes=tuple(pairs))
        self._entries.append(entry)
        return entry

    def add_declaration(self, declaration: Declaration) -> None:
        """
        Route one declaration to the matching collection.

        Raises:
            GrammarMismatchError: If the declaration kind is not one the
                grammar produces
        """
        kind = declaration.kind

        if kind is DeclarationKind.ENTRY:
            self.add_entry(declaration.category, declaration.text, declaration.attributes)
        elif kind is DeclarationKind.ADVICE:
            self._questions[declaration.category] = declaration.text
        elif kind is DeclarationKind.CHANGE:
            self._changes[declaration.category] = declaration.text
        elif kind is DeclarationKind.TIP:
            self._tips[declaration.category] = declaration.text
        else:
            raise GrammarMismatchError(f"Unexpected declaration kind: {kind!r}")

        logger.debug(
            "Added %s declaration for category %r (line %s)",
            getattr(kind, "value", kind),
            declaration.category,
            declaration.line,
        )

    def add_declarations(self, declarations: Iterable[Declaration]) -> KnowledgeBaseBuilder:
        for declaration in declarations:
            self.add_declaration(declaration)
        return self

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def build(self) -> KnowledgeBase:
        """Freeze the accumulated declarations into a KnowledgeBase."""
        return KnowledgeBase.from_parts(
            entries=self._entries,
            categories=self._categories,
            questions=self._questions,
            tips=self._tips,
            changes=self._changes,
        )
