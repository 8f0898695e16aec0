"""
Result and diagnostic types for templating operations.

Replacement functions report success as a plain bool. Conditions that are
recovered locally (unparseable HTML, unknown hyperlink targets) are logged
and, when the caller passes a list, recorded there as Diagnostic entries.
"""

import logging
from dataclasses import dataclass
from enum import Enum


class DiagnosticKind(Enum):
    """Kinds of recoverable problems met while building runs."""

    MALFORMED_PAYLOAD = "malformed_payload"
    UNRESOLVABLE_LINK = "unresolvable_link"


@dataclass
class Diagnostic:
    """A recoverable problem met during a replacement.

    Attributes:
        kind: What went wrong
        message: Human-readable description
        detail: The offending input (HTML slice, URL, ...) if any
    """

    kind: DiagnosticKind
    message: str
    detail: str | None = None

    def __str__(self) -> str:
        """Get string representation of the diagnostic."""
        if self.detail is None:
            return f"{self.kind.value}: {self.message}"
        return f"{self.kind.value}: {self.message} [{self.detail}]"


def report(
    logger: logging.Logger,
    diagnostics: list[Diagnostic] | None,
    kind: DiagnosticKind,
    message: str,
    detail: str | None = None,
) -> Diagnostic:
    """Log a recoverable problem and record it on the caller's list.

    Args:
        logger: Logger of the reporting module
        diagnostics: Caller-supplied list to append to, or None
        kind: Kind of problem
        message: Human-readable description
        detail: The offending input, if any

    Returns:
        The recorded Diagnostic
    """
    diagnostic = Diagnostic(kind=kind, message=message, detail=detail)
    logger.warning("%s", diagnostic)
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    return diagnostic
