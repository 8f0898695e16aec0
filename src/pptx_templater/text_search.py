"""
Text search functionality for finding tags in DrawingML paragraphs.

A paragraph's text may be fragmented across multiple a:t elements. This
module concatenates the fragments into one logical string, records where
each fragment sits in it, and runs the tag pattern against that string so
matches can be mapped back onto the fragments.

The index is a snapshot: it must be rebuilt after any edit to the
fragments.
"""

import re
from dataclasses import dataclass

from lxml import etree

from .models.paragraph import Paragraph


@dataclass
class TextIndex:
    """Associates an a:t element with its range in the paragraph text.

    Attributes:
        element: The a:t element
        start: Offset of the fragment's first character in the paragraph text
    """

    element: etree._Element
    start: int

    @property
    def text(self) -> str:
        """Get the fragment's current text."""
        return self.element.text or ""

    @property
    def end(self) -> int:
        """Offset just past the fragment's last character."""
        return self.start + len(self.text)

    def contains(self, offset: int) -> bool:
        """Check if writing may begin at offset within this fragment.

        The end offset is inclusive: a match starting on the boundary
        between two fragments can be located in either of them.
        """
        return self.start <= offset <= self.end


@dataclass
class PatternMatch:
    """A tag match in the paragraph text.

    Attributes:
        start: Offset of the first matched character
        length: Number of matched characters
    """

    start: int
    length: int

    @property
    def end(self) -> int:
        """Offset just past the match."""
        return self.start + self.length


def get_texts(paragraph: Paragraph) -> str:
    """Return all the texts found inside a paragraph.

    If all a:t in the paragraph are empty, returns an empty string.
    """
    return paragraph.text


def build_text_index(paragraph: Paragraph) -> tuple[str, list[TextIndex]]:
    """Build the paragraph text and the index of its fragments.

    Empty fragments get an entry whose start equals its end.

    Args:
        paragraph: The paragraph to index

    Returns:
        Tuple of (paragraph text, list of TextIndex in document order)
    """
    entries = []
    chunks = []
    offset = 0
    for element in paragraph.fragments:
        entry = TextIndex(element=element, start=offset)
        entries.append(entry)
        chunks.append(entry.text)
        offset = entry.end
    return "".join(chunks), entries


def locate(entries: list[TextIndex], offset: int) -> int | None:
    """Find the first fragment in which writing at offset may begin.

    Args:
        entries: Index built by build_text_index()
        offset: Offset in the paragraph text

    Returns:
        Position of the entry in entries, or None if offset is out of range
    """
    for position, entry in enumerate(entries):
        if entry.contains(offset):
            return position
    return None


def compile_tag(tag: str | re.Pattern[str]) -> re.Pattern[str]:
    """Compile a tag pattern.

    Raises:
        re.error: If the pattern is invalid
    """
    if isinstance(tag, re.Pattern):
        return tag
    try:
        return re.compile(tag)
    except re.error as e:
        raise re.error(f"Invalid regex pattern '{tag}': {e}") from e


def find_first_match(
    tag: str | re.Pattern[str], text: str, pos: int = 0
) -> PatternMatch | None:
    """Find the first non-empty match of a tag pattern.

    Empty matches are skipped so that a pattern which can match the empty
    string never stalls a replacement loop.

    Args:
        tag: Regex pattern (string or compiled)
        text: Paragraph text to search
        pos: Offset at which the search starts

    Returns:
        The first PatternMatch at or after pos, or None

    Raises:
        re.error: If the pattern is invalid
    """
    pattern = compile_tag(tag)
    while pos <= len(text):
        match = pattern.search(text, pos)
        if match is None:
            return None
        if match.end() > match.start():
            return PatternMatch(start=match.start(), length=match.end() - match.start())
        pos = match.start() + 1
    return None
