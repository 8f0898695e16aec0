"""
Paragraph wrapper class for convenient access to DrawingML paragraphs.

Structure of a paragraph:
a:p (Paragraph)
 a:pPr (Paragraph properties, optional, first)
 a:r (Run)
  a:rPr (Run properties)
  a:t (Text)
 a:br (Line break)
 a:endParaRPr (End-of-paragraph run properties, optional, last)

A tag may be split across several a:t elements, e.g. "Another tag: {{bonjour"
in one run and "}} le monde !" in the next.
"""

from lxml import etree

from pptx_templater.constants import A_NAMESPACE, NSMAP
from pptx_templater.models.run import StyleHints, apply_style_hints

_KEPT_ON_CLEAR = (f"{{{A_NAMESPACE}}}pPr", f"{{{A_NAMESPACE}}}endParaRPr")


class Paragraph:
    """Wrapper around an a:p (paragraph) element.

    The wrapper holds no state of its own; every property reads the
    current XML, so it never goes stale after an edit.
    """

    def __init__(self, element: etree._Element):
        """Initialize Paragraph wrapper.

        Args:
            element: The a:p XML element to wrap
        """
        if element.tag != f"{{{A_NAMESPACE}}}p":
            raise ValueError(f"Expected a:p element, got {element.tag}")
        self._element = element

    @classmethod
    def from_xml(cls, xml: str | bytes) -> "Paragraph":
        """Parse a standalone a:p snippet.

        Args:
            xml: Serialized a:p element declaring the DrawingML namespace

        Returns:
            Paragraph wrapping the parsed element
        """
        if isinstance(xml, str):
            xml = xml.encode("utf-8")
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        return cls(etree.fromstring(xml, parser))

    @classmethod
    def new(cls) -> "Paragraph":
        """Create an empty paragraph."""
        return cls(etree.Element(f"{{{A_NAMESPACE}}}p", nsmap=NSMAP))

    @property
    def element(self) -> etree._Element:
        """Get the underlying XML element."""
        return self._element

    @property
    def fragments(self) -> list[etree._Element]:
        """Get all a:t elements in document order.

        Includes text inside fields (a:fld/a:t) as well as runs.
        """
        return list(self._element.iter(f"{{{A_NAMESPACE}}}t"))

    @property
    def runs(self) -> list[etree._Element]:
        """Get all a:r elements in this paragraph."""
        return list(self._element.iter(f"{{{A_NAMESPACE}}}r"))

    @property
    def text(self) -> str:
        """Get the concatenated text of every fragment.

        Returns:
            Combined text, or an empty string if all fragments are empty
        """
        return "".join(t.text or "" for t in self.fragments)

    def clear(self) -> None:
        """Remove all runs, breaks and fields.

        Paragraph properties (a:pPr) and end-of-paragraph properties
        (a:endParaRPr) are kept so the paragraph keeps its layout.
        """
        for child in list(self._element):
            if child.tag not in _KEPT_ON_CLEAR:
                self._element.remove(child)

    def _append_content(self, child: etree._Element) -> None:
        end = self._element.find(f"{{{A_NAMESPACE}}}endParaRPr")
        if end is None:
            self._element.append(child)
        else:
            end.addprevious(child)

    def append_run(self, text: str, hints: StyleHints | None = None) -> etree._Element:
        """Append a new run holding text.

        Args:
            text: Content of the run's a:t
            hints: Formatting for the run's a:rPr (optional)

        Returns:
            The new a:r element
        """
        run = etree.Element(f"{{{A_NAMESPACE}}}r")
        etree.SubElement(run, f"{{{A_NAMESPACE}}}rPr")
        t = etree.SubElement(run, f"{{{A_NAMESPACE}}}t")
        t.text = text
        if hints is not None:
            apply_style_hints(run, hints)
        self._append_content(run)
        return run

    def append_break(self) -> etree._Element:
        """Append a line break (a:br)."""
        br = etree.Element(f"{{{A_NAMESPACE}}}br")
        self._append_content(br)
        return br

    def contains(self, text: str, case_sensitive: bool = True) -> bool:
        """Check if paragraph contains specific text.

        Args:
            text: Text to search for
            case_sensitive: Whether search should be case sensitive

        Returns:
            True if text is found in paragraph
        """
        para_text = self.text
        if not case_sensitive:
            para_text = para_text.lower()
            text = text.lower()
        return text in para_text

    def to_xml(self) -> str:
        """Serialize the paragraph element."""
        return etree.tostring(self._element, encoding="unicode")

    def __repr__(self) -> str:
        """String representation of the paragraph."""
        text = self.text
        text_preview = text[:50] + "..." if len(text) > 50 else text
        return f"<Paragraph: {text_preview!r}>"
