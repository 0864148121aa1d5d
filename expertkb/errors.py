"""
Error types for Expert KB.

Two recoverable failures exist at the core boundary:

    KBSyntaxError   — the source text does not match the grammar
    NotFoundError   — no entry satisfies the confirmed constraints

Both are deterministic for a given input, so callers fix the input
rather than retry. GrammarMismatchError is different: it means the
grammar emitted a production the builder does not know, which is a
programming error and is never shown to the user.
"""

from __future__ import annotations

from typing import Optional


class ExpertKBError(Exception):
    """Base class for all recoverable Expert KB errors."""
    pass


class KBSyntaxError(ExpertKBError):
    """
    Raised when knowledge base source text violates the grammar.

    Positions are 1-based. For a violation spanning a range, the start
    of the span is reported.
    """

    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"line {line}, column {column}: {message}")

    @property
    def position(self) -> tuple[int, int]:
        return (self.line, self.column)


class NotFoundError(ExpertKBError):
    """Raised when no entry satisfies the confirmed constraints of a query."""

    def __init__(self, query: list[tuple[str, str]], target: Optional[str]):
        self.query = query
        self.target = target
        super().__init__(
            f"Query {query!r} didn't find anything, target category {target!r}"
        )


class SourceLoadError(ExpertKBError):
    """Raised when a knowledge base source cannot be read from storage."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class AnswerError(ExpertKBError, ValueError):
    """Raised when a questionnaire receives a category or value it does not offer."""
    pass


class GrammarMismatchError(AssertionError):
    """
    Raised when the builder meets a production the grammar should never emit.

    This is an internal invariant violation, not a user-facing error.
    It deliberately does not derive from ExpertKBError.
    """
    pass
