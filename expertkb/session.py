"""
Session state for Expert KB collaborators.

    KnowledgeBaseStore  — owns the current knowledge base and swaps it
                          wholesale on every successful load
    Questionnaire       — answers collected against one knowledge base,
                          resolved on demand

Both are explicit objects owned by the composition root (the CLI, or
any other front end). There is no module-level "current" knowledge base.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .config import DEFAULT_ENCODING
from .errors import AnswerError, NotFoundError, SourceLoadError
from .model import KnowledgeBase, Pair
from .parser import parse
from .resolver import resolve

logger = logging.getLogger(__name__)


# =============================================================================
# KNOWLEDGE BASE STORE
# =============================================================================

class KnowledgeBaseStore:
    """
    Holds the active knowledge base.

    A failed load leaves the previous knowledge base in place. Readers
    always see one complete snapshot, either the old or the new one.
    """

    def __init__(self, kb: Optional[KnowledgeBase] = None):
        self._lock = threading.Lock()
        # (knowledge base, source) is replaced as one tuple
        self._state: tuple[KnowledgeBase, Optional[str]] = (
            kb if kb is not None else KnowledgeBase.empty(),
            None,
        )

    @property
    def current(self) -> KnowledgeBase:
        return self.snapshot()[0]

    @property
    def source(self) -> Optional[str]:
        """Where the current knowledge base came from, if known."""
        return self.snapshot()[1]

    def snapshot(self) -> tuple[KnowledgeBase, Optional[str]]:
        """Return the current knowledge base together with its source."""
        with self._lock:
            return self._state

    def load_text(self, text: str, source: Optional[str] = None) -> KnowledgeBase:
        """
        Parse `text` and make it the current knowledge base.

        Raises:
            KBSyntaxError: If the text does not parse; the current
                knowledge base is left untouched
        """
        kb = parse(text)
        with self._lock:
            self._state = (kb, source)
        logger.info("Loaded knowledge base from %s", source or "<text>")
        return kb

    def load_file(
        self,
        path: Union[str, Path],
        encoding: str = DEFAULT_ENCODING,
    ) -> KnowledgeBase:
        """
        Read a source file and make it the current knowledge base.

        Raises:
            SourceLoadError: If the file cannot be read or decoded
            KBSyntaxError: If the contents do not parse
        """
        path = Path(path)
        try:
            text = path.read_text(encoding=encoding)
        except FileNotFoundError:
            raise SourceLoadError(str(path), "file not found")
        except PermissionError:
            raise SourceLoadError(str(path), "permission denied")
        except IsADirectoryError:
            raise SourceLoadError(str(path), "is a directory")
        except UnicodeDecodeError as e:
            raise SourceLoadError(str(path), f"cannot decode as {encoding}: {e.reason}")
        except OSError as e:
            raise SourceLoadError(str(path), e.strerror or str(e))

        return self.load_text(text, source=str(path))


# =============================================================================
# QUESTIONNAIRE
# =============================================================================

@dataclass(frozen=True)
class Prompt:
    """One question to put to the user, with the answers on offer."""
    category: str
    text: str
    options: tuple[str, ...]
    answer: Optional[str] = None


class Questionnaire:
    """
    Answers collected against a single knowledge base.

    Every catalog category gets an answer slot. The target category is
    the classification being resolved and is never asked about.
    """

    def __init__(self, kb: KnowledgeBase):
        self.kb = kb
        self.target: Optional[str] = None
        self.result: Optional[str] = None
        self._answers: dict[str, Optional[str]] = {name: None for name in kb.categories}

    # =========================================================================
    # TARGET
    # =========================================================================

    def target_choices(self) -> list[str]:
        return self.kb.category_names()

    def select_target(self, category: str) -> None:
        """
        Raises:
            AnswerError: If the category is not in the catalog
        """
        if category not in self.kb.categories:
            raise AnswerError(f"Unknown target category: {category!r}")
        self.target = category

    def clear_target(self) -> None:
        self.target = None

    # =========================================================================
    # ANSWERS
    # =========================================================================

    def answer(self, category: str, value: str) -> None:
        """
        Record the user's answer for a category.

        Raises:
            AnswerError: If the category or the value is not offered
        """
        if category not in self._answers:
            raise AnswerError(f"Unknown category: {category!r}")
        if value not in self.kb.values_for(category):
            raise AnswerError(f"{value!r} is not a known value of {category!r}")
        self._answers[category] = value

    def clear_answer(self, category: str) -> None:
        if category in self._answers:
            self._answers[category] = None

    def reset(self) -> None:
        """Forget all answers, the target and the last result."""
        for category in self._answers:
            self._answers[category] = None
        self.target = None
        self.result = None

    def confirmed_answers(self) -> list[Pair]:
        """Answered (category, value) pairs in catalog order."""
        return [
            (category, value)
            for category, value in self._answers.items()
            if value is not None
        ]

    def prompts(self) -> list[Prompt]:
        """Questions to show, skipping the one about the target category."""
        return [
            Prompt(
                category=category,
                text=text,
                options=self.kb.values_for(category),
                answer=self._answers.get(category),
            )
            for category, text in self.kb.questions.items()
            if category != self.target
        ]

    # =========================================================================
    # RESOLUTION
    # =========================================================================

    def find(self) -> str:
        """
        Resolve the current answers.

        Raises:
            NotFoundError: If nothing matches; `result` is cleared
        """
        try:
            self.result = resolve(self.kb, self.target, self.confirmed_answers())
        except NotFoundError:
            self.result = None
            raise
        return self.result
