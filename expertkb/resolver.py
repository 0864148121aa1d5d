"""
Query Resolver for Expert KB.

Matches a partially answered questionnaire against a knowledge base in
two phases:

1. Constraint discovery. Attribute pairs of entries classified under the
   target category are kept when the caller's answers contain the exact
   same pair. These are the confirmed constraints.
2. Entry matching. The first entry of the whole knowledge base, in source
   order, carrying every confirmed constraint among its attributes wins.

With no confirmed constraints (no target, no answers, or nothing under
the target matched) the first entry matches vacuously. That fall-through
is part of the resolution contract.

Resolution is pure: it only reads the knowledge base, so any number of
threads may resolve against the same snapshot.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .errors import NotFoundError
from .model import Entry, KnowledgeBase, Pair

logger = logging.getLogger(__name__)


def discover_constraints(
    kb: KnowledgeBase,
    target_category: Optional[str],
    answers: Iterable[Pair],
) -> list[Pair]:
    """
    Collect the confirmed constraints for a query.

    Candidates come from the attributes of entries whose own category is
    `target_category`; a candidate is confirmed when `answers` holds the
    same (category, value) pair. Result order is discovery order, without
    duplicates.
    """
    if target_category is None:
        return []

    answered = {tuple(pair) for pair in answers}
    confirmed: list[Pair] = []

    for entry in kb.entries:
        if entry.category != target_category:
            continue
        for pair in entry.attributes:
            if pair in answered and pair not in confirmed:
                confirmed.append(pair)

    return confirmed


def matches(entry: Entry, constraints: Iterable[Pair]) -> bool:
    """True when every constraint appears verbatim among the entry's attributes."""
    return all(entry.has_attribute(category, value) for category, value in constraints)


def find_value(
    kb: KnowledgeBase,
    target_category: Optional[str],
    answers: Iterable[Pair],
) -> Optional[str]:
    """
    Resolve a query, returning None when no entry matches.

    Every entry of the knowledge base is a candidate in phase 2, not
    only those under `target_category`.
    """
    constraints = discover_constraints(kb, target_category, answers)
    logger.debug(
        "Resolving target %r with %d confirmed constraints: %r",
        target_category,
        len(constraints),
        constraints,
    )

    for entry in kb.entries:
        if matches(entry, constraints):
            return entry.value
    return None


def resolve(
    kb: KnowledgeBase,
    target_category: Optional[str],
    answers: Iterable[Pair],
) -> str:
    """
    Resolve a query to a single conclusion.

    Args:
        kb: Knowledge base to search
        target_category: Category the questionnaire is trying to resolve,
            or None
        answers: Confirmed (category, value) answers, in caller order

    Raises:
        NotFoundError: If no entry satisfies the confirmed constraints.
            The error echoes `answers` and `target_category`.

    Returns:
        The `value` of the first matching entry
    """
    query = [tuple(pair) for pair in answers]

    value = find_value(kb, target_category, query)
    if value is None:
        raise NotFoundError(query=query, target=target_category)
    return value
