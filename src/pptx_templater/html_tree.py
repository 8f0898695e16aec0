"""
Minimal HTML tree access for building runs from an HTML payload.

The payload is consumed one top-level element at a time: the first element
(or the <body>, when there is one) is exposed together with its direct
children, and the HTML that follows it is returned as the remainder to be
parsed next.

Raw HTML is re-serialized by BeautifulSoup with the "minimal" formatter, so
&, < and > come back as entities and every other character as itself.
"""

import logging
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from .errors import MalformedHtmlError

logger = logging.getLogger(__name__)

_FORMATTER = "minimal"


@dataclass
class HtmlChild:
    """A direct child (element or text) of a parsed top-level element.

    Attributes:
        parent_tag: Tag name of the enclosing element ("" for loose text)
        html: Raw HTML of the child, including its own tags
        inner_html: HTML between the child's tags (the text itself for text)
        is_text: Whether the child is a text node rather than an element
    """

    parent_tag: str
    html: str
    inner_html: str
    is_text: bool = False


@dataclass
class HtmlNode:
    """A top-level element and what is left of the payload after it.

    Attributes:
        tag: Tag name ("" for loose top-level text)
        html: Raw HTML of the element
        children: Direct children in document order
        remainder: Serialized HTML following the element
    """

    tag: str
    html: str
    children: list[HtmlChild] = field(default_factory=list)
    remainder: str = ""


def _serialize(node: PageElement) -> str:
    if isinstance(node, Tag):
        return node.decode(formatter=_FORMATTER)
    return node.output_ready(formatter=_FORMATTER)


def _is_content(node: PageElement) -> bool:
    # Comments, doctypes, CDATA and processing instructions carry no text
    return not isinstance(node, PreformattedString)


def _child(parent_tag: str, node: PageElement) -> HtmlChild:
    if isinstance(node, Tag):
        inner = node.decode_contents(formatter=_FORMATTER)
    else:
        inner = _serialize(node)
    return HtmlChild(
        parent_tag=parent_tag,
        html=_serialize(node),
        inner_html=inner,
        is_text=not isinstance(node, Tag),
    )


def _node(tag: Tag) -> HtmlNode:
    children = [_child(tag.name, child) for child in tag.contents if _is_content(child)]
    return HtmlNode(tag=tag.name, html=_serialize(tag), children=children)


def find_body_or_first_element(html: str) -> HtmlNode | None:
    """Parse the first top-level element of an HTML fragment.

    Args:
        html: HTML fragment

    Returns:
        HtmlNode for the <body> if present, otherwise for the first
        top-level element or run of loose text; None if the fragment holds
        nothing but whitespace

    Raises:
        MalformedHtmlError: If the parser rejects the markup
    """
    if not html or not html.strip():
        return None

    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as e:
        raise MalformedHtmlError(html, str(e)) from e

    body = soup.find("body")
    if isinstance(body, Tag):
        logger.debug("Using <body> as the HTML root")
        return _node(body)

    for position, first in enumerate(soup.contents):
        if not _is_content(first):
            continue
        if isinstance(first, NavigableString) and not first.strip():
            continue
        break
    else:
        return None

    if isinstance(first, Tag):
        node = _node(first)
    else:
        text = _serialize(first)
        node = HtmlNode(tag="", html=text, children=[HtmlChild("", text, text, is_text=True)])

    following = soup.contents[position + 1 :]
    node.remainder = "".join(_serialize(n) for n in following if _is_content(n))
    return node
