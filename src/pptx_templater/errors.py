"""
Custom exception classes for pptx_templater package.

Most conditions met while replacing tags are recovered locally and reported
through diagnostics instead of being raised; these exceptions mark the
points where a collaborator gives up.
"""


class PptxTemplaterError(Exception):
    """Base exception for all pptx_templater errors."""

    pass


class MalformedHtmlError(PptxTemplaterError):
    """Raised when an HTML payload cannot be parsed into elements.

    Attributes:
        html: The HTML that failed to parse
        reason: Explanation from the underlying parser (optional)
    """

    def __init__(self, html: str, reason: str | None = None) -> None:
        self.html = html
        self.reason = reason
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message with a preview of the payload."""
        preview = self.html if len(self.html) <= 80 else self.html[:77] + "..."
        msg = f"HTML is empty or has errors: {preview!r}"
        if self.reason:
            msg += f": {self.reason}"
        return msg
