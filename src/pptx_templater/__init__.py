"""
pptx_templater - Replace placeholder tags in PowerPoint paragraphs.

A DrawingML paragraph (a:p) is a sequence of independently formatted runs,
and a tag such as {{name}} is frequently split across several of them. This
package finds tags in the paragraph's combined text and rewrites the runs
so the replacement takes the tag's place, either in place (keeping each
run's formatting) or by rebuilding the runs from an HTML payload.

Example:
    >>> from pptx_templater import Paragraph, replace_tag
    >>> para = Paragraph(element)  # an a:p from a slide
    >>> replace_tag(para, r"\\{\\{name\\}\\}", "World")
    True
"""

__version__ = "0.1.0"
__all__ = [
    "Paragraph",
    "StyleHints",
    "scale_font_size",
    "replace_tag",
    "replace_tag_with_html",
    "replace_tag_with_hyperlink",
    "html_to_plain_text",
    "remove_invalid_xml_chars",
    "get_texts",
    "classify_html",
    "Diagnostic",
    "DiagnosticKind",
    "PptxTemplaterError",
    "MalformedHtmlError",
]

from .errors import MalformedHtmlError, PptxTemplaterError
from .models.paragraph import Paragraph
from .models.run import StyleHints, scale_font_size
from .results import Diagnostic, DiagnosticKind
from .rich_text import classify_html, replace_tag_with_html, replace_tag_with_hyperlink
from .splicer import replace_tag
from .text_search import get_texts
from .text_transform import html_to_plain_text, remove_invalid_xml_chars
