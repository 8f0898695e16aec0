"""
Run formatting for DrawingML text runs (a:r).

Structure of a run:
a:r (Run)
 a:rPr (Run properties: b, i, u, sz attributes; a:latin, a:hlinkClick children)
 a:t (Text)
"""

from dataclasses import dataclass

from lxml import etree

from pptx_templater.constants import (
    A_NAMESPACE,
    HTML_UNDERLINE_STYLE,
    POINT_SIZE_THRESHOLD,
    RELATIONSHIP_NAMESPACE,
)

# a:rPr children that must come after a:latin in schema order
_AFTER_LATIN = (
    f"{{{A_NAMESPACE}}}ea",
    f"{{{A_NAMESPACE}}}cs",
    f"{{{A_NAMESPACE}}}sym",
    f"{{{A_NAMESPACE}}}hlinkClick",
    f"{{{A_NAMESPACE}}}hlinkMouseOver",
    f"{{{A_NAMESPACE}}}rtl",
    f"{{{A_NAMESPACE}}}extLst",
)

# a:rPr children that must come after a:hlinkClick
_AFTER_HLINK = (
    f"{{{A_NAMESPACE}}}hlinkMouseOver",
    f"{{{A_NAMESPACE}}}rtl",
    f"{{{A_NAMESPACE}}}extLst",
)


def scale_font_size(size: int) -> int:
    """Convert a font size to hundredths of a point.

    Sizes under 100 are whole points as shown in the PowerPoint UI,
    e.g. 8 becomes 800.
    """
    return size if size > POINT_SIZE_THRESHOLD else size * 100


@dataclass
class StyleHints:
    """Formatting to apply to a newly created run.

    Attributes:
        bold: Whether the run is bold
        italic: Whether the run is italic
        underline: Whether the run is underlined
        font_name: Latin typeface, or None to inherit
        font_size: Size in hundredths of a point (or whole points under 100),
            or None to inherit
        hyperlink_id: Relationship id of a click hyperlink, or None
    """

    bold: bool = False
    italic: bool = False
    underline: bool = False
    font_name: str | None = None
    font_size: int | None = None
    hyperlink_id: str | None = None

    def has_formatting(self) -> bool:
        """Check if these hints change anything on a run."""
        return (
            self.bold
            or self.italic
            or self.underline
            or self.font_name is not None
            or self.font_size is not None
            or self.hyperlink_id is not None
        )


def get_or_create_rpr(run: etree._Element) -> etree._Element:
    """Get the run's a:rPr, creating it as the first child if missing."""
    rpr = run.find(f"{{{A_NAMESPACE}}}rPr")
    if rpr is None:
        rpr = etree.Element(f"{{{A_NAMESPACE}}}rPr")
        run.insert(0, rpr)
    return rpr


def _insert_before(parent: etree._Element, child: etree._Element, successors: tuple) -> None:
    for index, existing in enumerate(parent):
        if existing.tag in successors:
            parent.insert(index, child)
            return
    parent.append(child)


def set_latin_font(run: etree._Element, font_name: str) -> None:
    """Replace the run's latin typeface."""
    rpr = get_or_create_rpr(run)
    for latin in rpr.findall(f"{{{A_NAMESPACE}}}latin"):
        rpr.remove(latin)
    latin = etree.Element(f"{{{A_NAMESPACE}}}latin")
    latin.set("typeface", font_name)
    _insert_before(rpr, latin, _AFTER_LATIN)


def set_font_size(run: etree._Element, font_size: int) -> None:
    """Set the run's font size, scaling whole points to hundredths."""
    get_or_create_rpr(run).set("sz", str(scale_font_size(font_size)))


def set_hyperlink(run: etree._Element, relationship_id: str) -> None:
    """Attach a click hyperlink pointing at a slide-level relationship."""
    rpr = get_or_create_rpr(run)
    for link in rpr.findall(f"{{{A_NAMESPACE}}}hlinkClick"):
        rpr.remove(link)
    link = etree.Element(f"{{{A_NAMESPACE}}}hlinkClick")
    link.set(f"{{{RELATIONSHIP_NAMESPACE}}}id", relationship_id)
    _insert_before(rpr, link, _AFTER_HLINK)


def apply_style_hints(run: etree._Element, hints: StyleHints) -> None:
    """Write style hints into the run's a:rPr.

    Args:
        run: The a:r element
        hints: Formatting to apply; unset fields leave the run untouched
    """
    rpr = get_or_create_rpr(run)
    if hints.bold:
        rpr.set("b", "1")
    if hints.italic:
        rpr.set("i", "1")
    if hints.underline:
        rpr.set("u", HTML_UNDERLINE_STYLE)
    if hints.font_size is not None:
        set_font_size(run, hints.font_size)
    if hints.font_name is not None:
        set_latin_font(run, hints.font_name)
    if hints.hyperlink_id is not None:
        set_hyperlink(run, hints.hyperlink_id)
