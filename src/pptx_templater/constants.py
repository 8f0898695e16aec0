"""
Centralized constants for DrawingML namespaces and templating defaults.

Import from here rather than redefining namespace URLs or default values
in individual modules.
"""

import os

# =============================================================================
# Namespaces
# =============================================================================

# DrawingML main namespace (a:p, a:r, a:t, ...)
A_NAMESPACE = "http://schemas.openxmlformats.org/drawingml/2006/main"

# Office Document relationships (r:id on a:hlinkClick)
OFFICE_RELATIONSHIPS_NAMESPACE = (
    "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
)
RELATIONSHIP_NAMESPACE = OFFICE_RELATIONSHIPS_NAMESPACE  # Alias for compatibility

NSMAP = {"a": A_NAMESPACE, "r": RELATIONSHIP_NAMESPACE}


# =============================================================================
# Run formatting defaults
# =============================================================================

# Font applied by replace_tag_with_hyperlink() when none is given
DEFAULT_FONT_NAME = "Calibri"

# Hundredths of a point, i.e. 8pt
DEFAULT_FONT_SIZE = 800

# Sizes at or below this value are whole points and get scaled by 100
POINT_SIZE_THRESHOLD = 99

# a:rPr/@u value written for underlined HTML runs
HTML_UNDERLINE_STYLE = "dash"


# =============================================================================
# HTML handling
# =============================================================================

# Parent tags whose children are each followed by an a:br
BLOCK_LEVEL_TAGS = ("div", "p")

# Entities decoded by html_to_plain_text(), applied in this order.
# A decoded non-breaking space is treated like &nbsp;.
HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&le;", "≤"),
    ("&gt;", ">"),
    ("&ge;", "≥"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&euro;", "€"),
    ("\xa0", " "),
)

DEFAULT_NEWLINE = os.linesep

# Textual rewrites for tags the rich builder does not interpret.
# </li> is rewritten to the line separator separately.
UNHANDLED_HTML_TAGS = (
    ("<ul>", "<div>"),
    ("</ul>", "</div>"),
    ("<li>", "• "),
)
