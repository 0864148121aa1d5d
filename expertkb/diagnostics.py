"""
Diagnostics log for Expert KB front ends.

Failures from loading, parsing and resolving are reported through the
standard logging machinery. DiagnosticsLog is a logging handler that
keeps what it receives so a front end can show it, and clear it, later.

Severity mapping:
    KBSyntaxError    → ERROR  "Parser: ..."
    SourceLoadError  → ERROR  "IO: ..."
    NotFoundError    → INFO   "Search: ..."
    anything else    → ERROR
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .config import LOG_TIMESTAMP_FORMAT
from .errors import KBSyntaxError, NotFoundError, SourceLoadError

_package_logger = logging.getLogger("expertkb")


class LogSeverity(Enum):
    INFO = "INFO"
    WARNING = "WARN"
    ERROR = "ERROR"


_LEVELS = {
    LogSeverity.INFO: logging.INFO,
    LogSeverity.WARNING: logging.WARNING,
    LogSeverity.ERROR: logging.ERROR,
}


def severity_for_level(levelno: int) -> LogSeverity:
    if levelno >= logging.ERROR:
        return LogSeverity.ERROR
    if levelno >= logging.WARNING:
        return LogSeverity.WARNING
    return LogSeverity.INFO


@dataclass(frozen=True)
class LogEntry:
    severity: LogSeverity
    timestamp: str
    message: str

    def render(self) -> str:
        return f"[{self.severity.value}] {self.timestamp} {self.message}"


class DiagnosticsLog(logging.Handler):
    """Logging handler that stashes records for later display."""

    def __init__(self, level: int = logging.INFO):
        super().__init__(level)
        self.entries: list[LogEntry] = []

    def emit(self, record: logging.LogRecord) -> None:
        timestamp = datetime.fromtimestamp(record.created).strftime(LOG_TIMESTAMP_FORMAT)
        self.entries.append(
            LogEntry(
                severity=severity_for_level(record.levelno),
                timestamp=timestamp,
                message=record.getMessage(),
            )
        )

    def clear(self) -> None:
        self.entries.clear()

    def render(self) -> list[str]:
        return [entry.render() for entry in self.entries]


def describe_error(error: BaseException) -> tuple[LogSeverity, str]:
    """Map an error to the severity and message shown to the user."""
    if isinstance(error, KBSyntaxError):
        return LogSeverity.ERROR, f"Parser: {error}"
    if isinstance(error, SourceLoadError):
        return LogSeverity.ERROR, f"IO: {error}"
    if isinstance(error, NotFoundError):
        return LogSeverity.INFO, f"Search: {error}"
    return LogSeverity.ERROR, str(error)


def report_error(error: BaseException, log: Optional[logging.Logger] = None) -> str:
    """
    Log an error at its mapped severity and return the message.

    Without `log`, the record goes to the package logger so that a
    DiagnosticsLog attached there sees failures from every module.
    """
    severity, message = describe_error(error)
    (log or _package_logger).log(_LEVELS[severity], message)
    return message
