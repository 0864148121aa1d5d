"""
Core data model for Expert KB.

Domain Objects:
    Entry          — A classified concept with its distinguishing attributes
    KnowledgeBase  — The immutable snapshot produced by one successful parse
    Declaration    — One parsed top-level declaration, before building

A KnowledgeBase is fully constructed or not constructed at all. Once
built it is never mutated; loading a new source replaces it wholesale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


Pair = tuple[str, str]


# =============================================================================
# ENTRY
# =============================================================================

@dataclass(frozen=True)
class Entry:
    """
    One classified concept.

    `category` names what kind of thing this entry is; `value` is the
    conclusion returned when the entry matches a query. Attribute pairs
    keep source order and may repeat.
    """
    value: str
    category: str
    attributes: tuple[Pair, ...] = ()

    def has_attribute(self, category: str, value: str) -> bool:
        """Check whether the exact (category, value) pair is attached."""
        return (category, value) in self.attributes


# =============================================================================
# KNOWLEDGE BASE
# =============================================================================

def _freeze_categories(categories: Mapping[str, list[str]]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({name: tuple(values) for name, values in categories.items()})


def _freeze_texts(texts: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(texts))


@dataclass(frozen=True)
class KnowledgeBase:
    """
    The full, read-only knowledge base.

    INVARIANTS:
    - `entries` keeps source declaration order; it is the only tie-break
      used during resolution.
    - Every (category, value) pair found on an entry, attribute or
      primary, appears in `categories[category]` exactly once.
    - `questions`, `tips` and `changes` hold the last declaration seen
      for each category name.

    Mapping fields are read-only proxies over private copies, so the
    snapshot can be shared between threads without locking.
    """
    entries: tuple[Entry, ...] = ()
    categories: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    questions: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    tips: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    changes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_parts(
        cls,
        entries: list[Entry],
        categories: Mapping[str, list[str]],
        questions: Mapping[str, str],
        tips: Mapping[str, str],
        changes: Mapping[str, str],
    ) -> KnowledgeBase:
        """Freeze builder-owned containers into a snapshot."""
        return cls(
            entries=tuple(entries),
            categories=_freeze_categories(categories),
            questions=_freeze_texts(questions),
            tips=_freeze_texts(tips),
            changes=_freeze_texts(changes),
        )

    @classmethod
    def empty(cls) -> KnowledgeBase:
        """The knowledge base held before any source is loaded."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def category_names(self) -> list[str]:
        """Category names in first-seen order."""
        return list(self.categories)

    def values_for(self, category: str) -> tuple[str, ...]:
        """Distinct values seen for a category; empty for unknown names."""
        return self.categories.get(category, ())

    def entries_in(self, category: str) -> list[Entry]:
        """Entries whose primary classification is `category`, in order."""
        return [entry for entry in self.entries if entry.category == category]


# =============================================================================
# DECLARATIONS
# =============================================================================

class DeclarationKind(Enum):
    """The closed set of top-level declarations the grammar produces."""
    ENTRY = "entry"
    ADVICE = "advice"
    CHANGE = "change"
    TIP = "tip"


@dataclass(frozen=True)
class Declaration:
    """
    One top-level declaration, in source order.

    For ENTRY, `category`/`text` hold the terminal pair and `attributes`
    the pairs inside the braces. For the prompt kinds, `text` is the
    prompt or note keyed by `category`.
    """
    kind: DeclarationKind
    category: str
    text: str
    attributes: tuple[Pair, ...] = ()
    number: Optional[int] = None
    line: Optional[int] = None
