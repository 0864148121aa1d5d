"""
Plain-text views of a knowledge base.

Used by the CLI `show` and `categories` commands.
"""

from __future__ import annotations

from .config import EMPTY_KB_MESSAGE
from .model import Entry, KnowledgeBase


def format_entry(entry: Entry) -> str:
    """Format an entry as its primary pair followed by indented attributes."""
    lines = [f"{entry.category}: {entry.value}"]
    for category, value in entry.attributes:
        lines.append(f"    {category}: {value}")
    return "\n".join(lines)


def format_knowledge_base(kb: KnowledgeBase) -> str:
    """Format entries, questions and tips for display."""
    if kb.is_empty:
        return EMPTY_KB_MESSAGE

    sections = [format_entry(entry) for entry in kb.entries]

    if kb.questions:
        lines = ["Questions:"]
        lines.extend(f"  {category}: {text}" for category, text in kb.questions.items())
        sections.append("\n".join(lines))

    if kb.tips:
        lines = ["Tips:"]
        lines.extend(f"  {category}: {text}" for category, text in kb.tips.items())
        sections.append("\n".join(lines))

    return "\n\n".join(sections)


def format_categories(kb: KnowledgeBase) -> str:
    """One line per category listing its known values."""
    if not kb.categories:
        return EMPTY_KB_MESSAGE
    return "\n".join(
        f"{category}: {', '.join(values)}"
        for category, values in kb.categories.items()
    )
