"""
Central configuration for Expert KB.

Single source of truth for the constants shared by the parser, the
resolver and the command-line collaborators. Nothing here is read from
the environment; the knowledge base source text is the only input.
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# SOURCE LOADING
# =============================================================================

DEFAULT_ENCODING = "utf-8"


# =============================================================================
# PARSER
# =============================================================================

# Lark settings. LALR with the contextual lexer lets declaration keywords
# stay usable as ordinary words inside pairs.
PARSER_ALGORITHM = "lalr"
LEXER = "contextual"


# =============================================================================
# LOGGING
# =============================================================================

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_TIMESTAMP_FORMAT = "%H:%M"


# =============================================================================
# USER-FACING MESSAGES
# =============================================================================

NOT_FOUND_MESSAGE = "Not found."
EMPTY_KB_MESSAGE = "No data"


def get_config() -> dict[str, Any]:
    """Get all configuration as a dictionary."""
    return {
        "default_encoding": DEFAULT_ENCODING,
        "parser_algorithm": PARSER_ALGORITHM,
        "lexer": LEXER,
        "log_format": LOG_FORMAT,
        "log_timestamp_format": LOG_TIMESTAMP_FORMAT,
    }
