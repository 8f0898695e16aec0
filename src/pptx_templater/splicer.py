"""
In-place tag replacement across fragmented a:t elements.

The replacement is written over the matched characters, fragment by
fragment, so every run keeps its own formatting. When the replacement is
longer than the match, the surplus is inserted where the last matched
character was; when it is shorter, the remaining matched characters are
deleted.

Known quirk: for a match spanning several fragments, the surplus of a
longer replacement lands in whichever fragment holds the match's last
character, which may be in the middle of that fragment's text.
"""

import logging
import re
from dataclasses import dataclass

from .models.paragraph import Paragraph
from .text_search import TextIndex, build_text_index, find_first_match, locate
from .text_transform import remove_invalid_xml_chars

logger = logging.getLogger(__name__)


@dataclass
class SpliceCursor:
    """Write position shared across the fragments of one match.

    Attributes:
        index: Column in the current fragment where writing continues
        done: Characters of the match consumed so far
    """

    index: int
    done: int = 0


def _splice_fragment(
    chars: list[str], cursor: SpliceCursor, new_text: str, match_length: int
) -> None:
    """Rewrite one fragment's characters for the current match.

    Args:
        chars: Mutable character buffer of the fragment
        cursor: Shared write position, advanced in place
        new_text: Replacement text
        match_length: Length of the matched text
    """
    k = cursor.index
    while k < len(chars):
        if cursor.done < len(new_text):
            if cursor.done >= match_length - 1:
                # Replacement is longer than the match: insert the rest here
                remains = new_text[cursor.done :]
                chars[k : k + 1] = list(remains)
                cursor.done += len(remains)
                return
            chars[k] = new_text[cursor.done]
        elif cursor.done < match_length:
            # Replacement is shorter than the match: erase what is left
            remains = min(match_length - cursor.done, len(chars) - k)
            del chars[k : k + remains]
            cursor.done += remains
            return
        k += 1
        cursor.done += 1


def _splice(
    entries: list[TextIndex], position: int, index: int, new_text: str, length: int
) -> None:
    cursor = SpliceCursor(index=index)
    for entry in entries[position:]:
        chars = list(entry.text)
        _splice_fragment(chars, cursor, new_text, length)
        entry.element.text = "".join(chars)
        cursor.index = 0
        if cursor.done >= max(len(new_text), length):
            break


def replace_tag(
    paragraph: Paragraph, tag: str | re.Pattern[str] | None, new_text: str | None
) -> bool:
    """Replace every match of a tag inside a paragraph (a:p).

    Text is rewritten in place across the paragraph's a:t elements, so the
    formatting of each run is preserved.

    Args:
        paragraph: The paragraph to edit
        tag: Regex of the tag to replace; if None or empty nothing is done
        new_text: Replacement text; None is treated as an empty string

    Returns:
        True if at least one tag was found and replaced, False otherwise

    Raises:
        re.error: If tag is not a valid regex

    Example:
        >>> replace_tag(paragraph, r"\\{\\{name\\}\\}", "World")
        True
    """
    replaced = False

    if not tag:
        return replaced

    new_text = remove_invalid_xml_chars(new_text or "")

    pos = 0
    while True:
        text, entries = build_text_index(paragraph)
        match = find_first_match(tag, text, pos)
        if match is None:
            break

        position = locate(entries, match.start)
        if position is None:
            break

        index = match.start - entries[position].start
        _splice(entries, position, index, new_text, match.length)
        logger.debug(
            "Replaced %d characters at offset %d with %d characters",
            match.length,
            match.start,
            len(new_text),
        )

        replaced = True
        # Never search inside text that was just written
        pos = match.start + len(new_text)

    return replaced
