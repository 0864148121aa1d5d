# Expert KB
# Knowledge base parser and questionnaire resolver

"""
Parses the Expert KB source format into an immutable KnowledgeBase and
resolves partially answered questionnaires against it.

    kb = parse(text)
    resolve(kb, "Fruit", [("Color", "Red")])
"""

from .errors import (
    AnswerError,
    ExpertKBError,
    GrammarMismatchError,
    KBSyntaxError,
    NotFoundError,
    SourceLoadError,
)
from .model import Entry, KnowledgeBase
from .parser import parse
from .resolver import find_value, resolve

__version__ = "0.1.0"

__all__ = [
    "AnswerError",
    "Entry",
    "ExpertKBError",
    "GrammarMismatchError",
    "KBSyntaxError",
    "KnowledgeBase",
    "NotFoundError",
    "SourceLoadError",
    "find_value",
    "parse",
    "resolve",
]
