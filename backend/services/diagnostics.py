"""
Diagnostic sink for errors the game recovers from.

Components that swallow a failure (storage, event listeners) hand it to a
sink instead of a process-wide handler, so each engine can route its own
errors.
"""

import logging
from typing import List, Optional, Tuple


logger = logging.getLogger(__name__)


class DiagnosticSink:
    """Base interface: receives recovered errors with a short context string."""

    def report(self, context: str, error: BaseException) -> None:
        raise NotImplementedError


class LoggingDiagnosticSink(DiagnosticSink):
    """Default sink that forwards reports to the logging module."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def report(self, context: str, error: BaseException) -> None:
        self.log.error(f"{context}: {error}")


class CollectingDiagnosticSink(DiagnosticSink):
    """Keeps reports in memory; handy for tests and debugging sessions."""

    def __init__(self):
        self.reports: List[Tuple[str, BaseException]] = []

    def report(self, context: str, error: BaseException) -> None:
        self.reports.append((context, error))
