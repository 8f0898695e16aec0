"""
Tag replacement that rebuilds a paragraph's runs from HTML or a hyperlink.

Unlike replace_tag(), which edits text in place, these functions discard
the paragraph's runs once the tag is found and append freshly formatted
ones. Each direct child of a top-level HTML element becomes one run:

- <b>/<strong>, <i>/<em> and <u> (or an inline underline style) anywhere
  in the child's HTML make the whole run bold, italic or underlined
- an <a> whose URL is one of the caller's hyperlink targets links the run
  to that relationship id
- children of a block-level element (<div>, <p>) are each followed by a
  line break
- whitespace-only text between elements is dropped, except as the very
  first child, which becomes an empty run

Example:
    >>> replace_tag_with_html(
    ...     paragraph,
    ...     r"\\{\\{body\\}\\}",
    ...     "<p>See <a href='https://example.com'>docs</a></p>",
    ...     hyperlinks={"rId2": "https://example.com"},
    ... )
    True
"""

import html as html_lib
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from lxml import etree

from .constants import BLOCK_LEVEL_TAGS, DEFAULT_FONT_NAME, DEFAULT_FONT_SIZE, DEFAULT_NEWLINE
from .errors import MalformedHtmlError
from .html_tree import find_body_or_first_element
from .models.paragraph import Paragraph
from .models.run import StyleHints, set_font_size, set_latin_font
from .results import Diagnostic, DiagnosticKind, report
from .text_search import find_first_match
from .text_transform import (
    correct_unhandled_html_tags,
    html_to_plain_text,
    remove_invalid_xml_chars,
)

logger = logging.getLogger(__name__)

_HTTP_URL = re.compile(r"https?://[^\s\"'<>]+")


@dataclass
class HtmlRunFormat:
    """Formatting detected in a fragment of HTML.

    Attributes:
        bold: Contains <b> or <strong>
        italic: Contains <i> or <em>
        underline: Contains <u> or an inline underline style
        link: Contains an <a> tag
        url: First http(s) URL found in the fragment, if any
    """

    bold: bool = False
    italic: bool = False
    underline: bool = False
    link: bool = False
    url: str | None = None


def classify_html(raw_html: str) -> HtmlRunFormat:
    """Detect run formatting by looking for tags in raw HTML.

    Detection is by substring, so nesting depth does not matter and a
    single formatted word marks the whole fragment.

    Args:
        raw_html: HTML of one child element

    Returns:
        HtmlRunFormat describing the fragment
    """
    url_match = _HTTP_URL.search(raw_html)
    return HtmlRunFormat(
        bold="<b>" in raw_html or "<strong>" in raw_html,
        italic="<i>" in raw_html or "<em>" in raw_html,
        underline="<u>" in raw_html or "text-decoration: underline" in raw_html,
        link="<a" in raw_html,
        url=html_lib.unescape(url_match.group(0)) if url_match else None,
    )


def resolve_hyperlink(
    url: str | None,
    hyperlinks: Mapping[str, str] | None,
    diagnostics: list[Diagnostic] | None = None,
) -> str | None:
    """Find the relationship id whose target is url.

    Args:
        url: Link target found in the HTML
        hyperlinks: Relationship id to URL mapping defined on the slide
        diagnostics: List collecting recoverable problems (optional)

    Returns:
        The first matching relationship id, or None
    """
    if url is not None and hyperlinks:
        for relationship_id, target in hyperlinks.items():
            if target == url:
                return relationship_id

    report(
        logger,
        diagnostics,
        DiagnosticKind.UNRESOLVABLE_LINK,
        "URL is not available, run left without hyperlink",
        url,
    )
    return None


def _apply_font(
    runs: Iterable[etree._Element], font_name: str | None, font_size: int | None
) -> None:
    for run in runs:
        if font_name is not None:
            set_latin_font(run, font_name)
        if font_size:
            set_font_size(run, font_size)


def _append_html_runs(
    paragraph: Paragraph,
    html: str,
    hyperlinks: Mapping[str, str] | None,
    block_tags: Iterable[str],
    newline: str,
    diagnostics: list[Diagnostic] | None,
) -> list[etree._Element]:
    """Append one run per child of each top-level HTML element."""
    runs = []
    block_tags = frozenset(block_tags)
    first_line = True
    remaining = html

    while True:
        try:
            node = find_body_or_first_element(remaining)
        except MalformedHtmlError as e:
            report(logger, diagnostics, DiagnosticKind.MALFORMED_PAYLOAD, str(e), remaining)
            break
        if node is None:
            break

        for child in node.children:
            if child.is_text and not first_line and not child.inner_html.strip():
                # Indentation between elements of pretty-printed HTML
                continue

            fmt = classify_html(child.html)
            hints = StyleHints(bold=fmt.bold, italic=fmt.italic, underline=fmt.underline)
            if fmt.link:
                hints.hyperlink_id = resolve_hyperlink(fmt.url, hyperlinks, diagnostics)

            text = html_to_plain_text(child.inner_html, newline) + " "
            if first_line:
                # Avoid an empty line at the beginning of the text
                if not text.strip():
                    text = ""
                first_line = False

            runs.append(paragraph.append_run(text, hints))
            if child.parent_tag in block_tags:
                paragraph.append_break()

        remaining = node.remainder
        if not remaining.strip():
            break

    return runs


def replace_tag_with_html(
    paragraph: Paragraph,
    tag: str | re.Pattern[str] | None,
    html: str | None,
    font_name: str | None = None,
    font_size: int | None = None,
    hyperlinks: Mapping[str, str] | None = None,
    *,
    block_tags: Iterable[str] = BLOCK_LEVEL_TAGS,
    newline: str = DEFAULT_NEWLINE,
    diagnostics: list[Diagnostic] | None = None,
) -> bool:
    """Replace a paragraph holding a tag with runs built from HTML.

    When the tag is found, every run of the paragraph is removed (paragraph
    properties are kept) and new runs are appended from the HTML. The
    rebuild happens once since no other match can survive it.

    Args:
        paragraph: The paragraph to rebuild
        tag: Regex of the tag to replace; if None or empty nothing is done
        html: HTML payload; None is treated as an empty string
        font_name: Latin typeface for every new run (optional)
        font_size: Font size for every new run, e.g. 800 or 8 for 8pt (optional)
        hyperlinks: Relationship id to URL mapping defined on the slide
        block_tags: Tags whose children are each followed by a line break
        newline: Line separator used when flattening HTML
        diagnostics: List collecting recoverable problems (optional)

    Returns:
        True if the tag was found and the paragraph rebuilt, False otherwise

    Raises:
        re.error: If tag is not a valid regex
    """
    if not tag:
        return False

    html = correct_unhandled_html_tags(html or "", newline)
    html = remove_invalid_xml_chars(html)

    if find_first_match(tag, paragraph.text) is None:
        return False

    paragraph.clear()
    runs = _append_html_runs(paragraph, html, hyperlinks, block_tags, newline, diagnostics)
    _apply_font(runs, font_name, font_size)
    logger.debug("Rebuilt paragraph from HTML into %d runs", len(runs))
    return True


def replace_tag_with_hyperlink(
    paragraph: Paragraph,
    tag: str | re.Pattern[str] | None,
    new_text: str | None,
    relationship_id: str,
    font_name: str = DEFAULT_FONT_NAME,
    font_size: int = DEFAULT_FONT_SIZE,
) -> bool:
    """Replace a paragraph holding a tag with a single hyperlinked run.

    The relationship must already exist on the slide.

    Args:
        paragraph: The paragraph to rebuild
        tag: Regex of the tag to replace; if None or empty nothing is done
        new_text: Link text; None is treated as an empty string
        relationship_id: Hyperlink relationship id, e.g. "rId2"
        font_name: Latin typeface of the run
        font_size: Font size, e.g. 800 or 8 for 8pt

    Returns:
        True if the tag was found and replaced, False otherwise

    Raises:
        re.error: If tag is not a valid regex
    """
    if not tag:
        return False

    new_text = remove_invalid_xml_chars(new_text or "")

    if find_first_match(tag, paragraph.text) is None:
        return False

    paragraph.clear()
    paragraph.append_run(new_text, StyleHints(hyperlink_id=relationship_id))
    _apply_font(paragraph.runs, font_name, font_size)
    logger.debug("Replaced paragraph with hyperlink %s", relationship_id)
    return True
