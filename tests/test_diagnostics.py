"""
Tests for diagnostics and plain-text views.

These tests verify:
1. Errors map to the documented severity and prefix
2. DiagnosticsLog stashes log records and can be cleared
3. Explorer output lists entries, questions and tips
"""

import logging

import pytest

from expertkb.diagnostics import (
    DiagnosticsLog,
    LogEntry,
    LogSeverity,
    describe_error,
    report_error,
    severity_for_level,
)
from expertkb.errors import KBSyntaxError, NotFoundError, SourceLoadError
from expertkb.explorer import format_categories, format_entry, format_knowledge_base
from expertkb.model import Entry, KnowledgeBase
from expertkb.parser import parse


# =============================================================================
# TEST FIXTURES
# =============================================================================

@pytest.fixture
def diagnostics():
    """A DiagnosticsLog attached to a dedicated logger."""
    log = logging.getLogger("expertkb.tests.diagnostics")
    log.setLevel(logging.DEBUG)
    log.propagate = False
    handler = DiagnosticsLog()
    log.addHandler(handler)
    yield log, handler
    log.removeHandler(handler)


# =============================================================================
# ERROR DESCRIPTION TESTS
# =============================================================================

class TestDescribeError:
    """Test error to message mapping."""

    def test_syntax_error(self):
        severity, message = describe_error(KBSyntaxError("Unexpected '}'", 3, 7))

        assert severity == LogSeverity.ERROR
        assert message == "Parser: line 3, column 7: Unexpected '}'"

    def test_not_found_is_info(self):
        severity, message = describe_error(NotFoundError([("Color", "Red")], "Fruit"))

        assert severity == LogSeverity.INFO
        assert message.startswith("Search: Query [('Color', 'Red')]")

    def test_source_load_error(self):
        severity, message = describe_error(SourceLoadError("fruit.kb", "file not found"))

        assert severity == LogSeverity.ERROR
        assert message == "IO: fruit.kb: file not found"

    def test_other_errors(self):
        severity, message = describe_error(RuntimeError("boom"))

        assert severity == LogSeverity.ERROR
        assert message == "boom"

    def test_severity_for_level(self):
        assert severity_for_level(logging.DEBUG) == LogSeverity.INFO
        assert severity_for_level(logging.INFO) == LogSeverity.INFO
        assert severity_for_level(logging.WARNING) == LogSeverity.WARNING
        assert severity_for_level(logging.CRITICAL) == LogSeverity.ERROR


# =============================================================================
# DIAGNOSTICS LOG TESTS
# =============================================================================

class TestDiagnosticsLog:
    """Test the stashing handler."""

    def test_report_error_is_stashed(self, diagnostics):
        log, handler = diagnostics

        message = report_error(KBSyntaxError("Unexpected end of input", 1, 17), log)

        assert len(handler.entries) == 1
        entry = handler.entries[0]
        assert entry.severity == LogSeverity.ERROR
        assert entry.message == message

    def test_not_found_logged_at_info(self, diagnostics):
        log, handler = diagnostics

        report_error(NotFoundError([], None), log)

        assert handler.entries[0].severity == LogSeverity.INFO

    def test_timestamp_format(self, diagnostics):
        log, handler = diagnostics
        log.warning("careful")

        timestamp = handler.entries[0].timestamp
        hours, minutes = timestamp.split(":")
        assert len(hours) == 2 and len(minutes) == 2

    def test_render_and_clear(self, diagnostics):
        log, handler = diagnostics
        log.error("first")
        log.info("second")

        lines = handler.render()
        assert lines[0].startswith("[ERROR] ")
        assert lines[0].endswith(" first")
        assert lines[1].startswith("[INFO] ")

        handler.clear()
        assert handler.entries == []

    def test_log_entry_render(self):
        entry = LogEntry(severity=LogSeverity.WARNING, timestamp="12:30", message="hm")
        assert entry.render() == "[WARN] 12:30 hm"


# =============================================================================
# EXPLORER TESTS
# =============================================================================

class TestExplorer:
    """Test plain-text rendering."""

    def test_format_entry(self):
        entry = Entry(value="Apple", category="Fruit", attributes=(("Color", "Red"),))
        assert format_entry(entry) == "Fruit: Apple\n    Color: Red"

    def test_empty_knowledge_base(self):
        assert format_knowledge_base(KnowledgeBase.empty()) == "No data"
        assert format_categories(KnowledgeBase.empty()) == "No data"

    def test_sections(self):
        kb = parse(
            "1 { Color: Red } => Fruit: Apple\n"
            'advice Color: "What color?"\n'
            'tip Color: "Check the skin."\n'
        )
        text = format_knowledge_base(kb)

        assert text == (
            "Fruit: Apple\n"
            "    Color: Red\n"
            "\n"
            "Questions:\n"
            "  Color: What color?\n"
            "\n"
            "Tips:\n"
            "  Color: Check the skin."
        )

    def test_sections_omitted_when_empty(self):
        text = format_knowledge_base(parse("1 {} => Animal: Cat"))

        assert "Questions:" not in text
        assert "Tips:" not in text

    def test_format_categories(self):
        kb = parse(
            "1 { Color: Red } => Fruit: Apple\n"
            "2 { Color: Green } => Fruit: Lime\n"
        )
        assert format_categories(kb) == "Color: Red, Green\nFruit: Apple, Lime"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
