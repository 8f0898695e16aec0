"""
Text transformations applied before content is written into runs.

- html_to_plain_text() flattens an HTML fragment into trimmed lines
- remove_invalid_xml_chars() drops characters XML 1.0 cannot carry
- correct_unhandled_html_tags() rewrites list markup into block/bullet text
"""

import re

from .constants import DEFAULT_NEWLINE, HTML_ENTITIES, UNHANDLED_HTML_TAGS

_TAG = re.compile(r"<[^>]*>")
_NEWLINES = re.compile(r"\r\n?|\n")

# Internal line break marker; NUL cannot occur in XML text
_BR = "\x00"
_REPEATED_BR = re.compile(f"{_BR}(?: *{_BR})+")


def _is_valid_xml_char(char: str) -> bool:
    value = ord(char)
    return (
        0x0020 <= value <= 0xD7FF
        or 0xE000 <= value <= 0xFFFD
        or value in (0x0009, 0x000A, 0x000D)
    )


def remove_invalid_xml_chars(text: str) -> str:
    """Remove characters that are invalid for XML encoding.

    Keeps tab, line feed, carriage return and the ranges U+0020-U+D7FF and
    U+E000-U+FFFD. Everything else, including characters outside the Basic
    Multilingual Plane, is dropped.

    Args:
        text: Text to be written into XML

    Returns:
        Text with invalid characters removed
    """
    return "".join(char for char in text if _is_valid_xml_char(char))


def correct_unhandled_html_tags(html: str, newline: str = DEFAULT_NEWLINE) -> str:
    """Rewrite unordered lists into markup the run builder understands.

    <ul> becomes <div>, <li> becomes a bullet and </li> a line separator.
    This is a plain textual rewrite; attributes on these tags prevent it.

    Args:
        html: HTML fragment
        newline: Line separator written for </li>

    Returns:
        Rewritten HTML with surrounding whitespace trimmed
    """
    for old, new in UNHANDLED_HTML_TAGS:
        html = html.replace(old, new)
    html = html.replace("</li>", newline)
    return html.strip()


def html_to_plain_text(html: str | None, newline: str = DEFAULT_NEWLINE) -> str:
    """Convert HTML to plain text.

    Tags are removed, a fixed set of entities is decoded, runs of blank
    lines collapse into one line break, and every line is trimmed.

    Args:
        html: HTML fragment, or None
        newline: Line separator used in the result

    Returns:
        Plain text; empty string for None

    Examples:
        >>> html_to_plain_text("<p>Hello <b>World</b></p>")
        'Hello World'

        >>> html_to_plain_text("A &amp; B &lt;tag&gt;")
        'A & B <tag>'
    """
    if html is None:
        return ""

    # The line break marker must not occur in the input
    text = _TAG.sub("", html.replace(_BR, ""))
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)

    # Collapse blank lines
    text = _NEWLINES.sub(_BR, text)
    text = _REPEATED_BR.sub(_BR, text)
    while text.startswith(_BR):
        text = text[len(_BR) :]

    # Trim each line individually
    lines = text.split(_BR)
    text = "".join(line.strip() + newline for line in lines)

    # Remove excess line separators at the beginning and the end
    if newline:
        while len(text) >= len(newline) and text.startswith(newline):
            text = text[len(newline) :]
        while len(text) >= len(newline) and text.endswith(newline):
            text = text[: -len(newline)]

    return text
