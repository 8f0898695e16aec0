"""
Document model classes for pptx_templater.

These classes provide convenient wrappers around DrawingML elements.
"""

from pptx_templater.models.paragraph import Paragraph
from pptx_templater.models.run import StyleHints, scale_font_size

__all__ = [
    "Paragraph",
    "StyleHints",
    "scale_font_size",
]
