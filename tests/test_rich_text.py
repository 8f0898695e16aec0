"""
Tests for rebuilding paragraphs from HTML and hyperlinks.
"""

import logging

import pytest
from lxml import etree

from pptx_templater import (
    Diagnostic,
    DiagnosticKind,
    MalformedHtmlError,
    classify_html,
    replace_tag_with_html,
    replace_tag_with_hyperlink,
)
from pptx_templater.constants import A_NAMESPACE, NSMAP, RELATIONSHIP_NAMESPACE
from pptx_templater.models.paragraph import Paragraph

TAG = r"\{\{body\}\}"


def create_paragraph(*texts: str) -> Paragraph:
    """Create a paragraph with paragraph properties and one run per text."""
    p = etree.Element(f"{{{A_NAMESPACE}}}p", nsmap=NSMAP)
    etree.SubElement(p, f"{{{A_NAMESPACE}}}pPr").set("algn", "l")
    for text in texts:
        r = etree.SubElement(p, f"{{{A_NAMESPACE}}}r")
        etree.SubElement(r, f"{{{A_NAMESPACE}}}rPr").set("lang", "en-US")
        t = etree.SubElement(r, f"{{{A_NAMESPACE}}}t")
        t.text = text
    etree.SubElement(p, f"{{{A_NAMESPACE}}}endParaRPr").set("lang", "en-US")
    return Paragraph(p)


def content_tags(paragraph: Paragraph) -> list[str]:
    """Get local names of the paragraph's children, without properties."""
    return [
        etree.QName(child).localname
        for child in paragraph.element
        if etree.QName(child).localname not in ("pPr", "endParaRPr")
    ]


def run_texts(paragraph: Paragraph) -> list[str]:
    """Get the text of each run."""
    return [run.find(f"{{{A_NAMESPACE}}}t").text or "" for run in paragraph.runs]


def run_properties(paragraph: Paragraph) -> list[etree._Element]:
    """Get the a:rPr of each run."""
    return [run.find(f"{{{A_NAMESPACE}}}rPr") for run in paragraph.runs]


class TestClassifyHtml:
    """Tests for classify_html()."""

    def test_plain_text(self):
        """Test text without formatting tags."""
        fmt = classify_html("plain")
        assert not (fmt.bold or fmt.italic or fmt.underline or fmt.link)
        assert fmt.url is None

    @pytest.mark.parametrize(
        ("html", "attribute"),
        [
            ("<b>x</b>", "bold"),
            ("<strong>x</strong>", "bold"),
            ("<i>x</i>", "italic"),
            ("<em>x</em>", "italic"),
            ("<u>x</u>", "underline"),
            ('<span style="text-decoration: underline">x</span>', "underline"),
        ],
    )
    def test_formatting_tags(self, html, attribute):
        """Test each formatting tag is detected."""
        assert getattr(classify_html(html), attribute) is True

    def test_nested_formatting(self):
        """Test tags are found at any depth."""
        fmt = classify_html("<span>a <em><strong>b</strong></em></span>")
        assert fmt.bold and fmt.italic and not fmt.underline

    def test_link_url(self):
        """Test the URL of an anchor is extracted and unescaped."""
        fmt = classify_html('<a href="https://example.com/a?x=1&amp;y=2">docs</a>')
        assert fmt.link is True
        assert fmt.url == "https://example.com/a?x=1&y=2"


class TestReplaceTagWithHtml:
    """Tests for replace_tag_with_html()."""

    def test_rebuilds_runs_from_html(self):
        """Test each child of a block element becomes a run and a break."""
        para = create_paragraph("Intro {{bo", "dy}}")

        assert replace_tag_with_html(para, TAG, "<p>Hello <b>World</b></p>", newline="\n")
        assert run_texts(para) == ["Hello ", "World "]
        assert content_tags(para) == ["r", "br", "r", "br"]

        plain, bold = run_properties(para)
        assert plain.get("b") is None
        assert bold.get("b") == "1"

    def test_keeps_paragraph_properties(self):
        """Test a:pPr and a:endParaRPr survive the rebuild."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<div>x</div>", newline="\n")
        tags = [etree.QName(child).localname for child in para.element]
        assert tags == ["pPr", "r", "br", "endParaRPr"]

    def test_several_top_level_elements(self):
        """Test the whole payload is consumed."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<p>one</p><p>two</p>", newline="\n")
        assert run_texts(para) == ["one ", "two "]
        assert content_tags(para) == ["r", "br", "r", "br"]

    def test_loose_text_has_no_break(self):
        """Test text outside a block element is not followed by a break."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "plain text", newline="\n")
        assert run_texts(para) == ["plain text "]
        assert content_tags(para) == ["r"]

    def test_non_block_parent_has_no_break(self):
        """Test only children of configured block tags get a break."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<span>a<i>b</i></span>", newline="\n")
        assert content_tags(para) == ["r", "r"]
        assert run_properties(para)[1].get("i") == "1"

    def test_custom_block_tags(self):
        """Test the block tag set can be overridden."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(
            para, TAG, "<section>a</section>", block_tags=("section",), newline="\n"
        )
        assert content_tags(para) == ["r", "br"]

    def test_underline(self):
        """Test underline styles are written as dashed underline."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<div><u>a</u></div>", newline="\n")
        assert run_properties(para)[0].get("u") == "dash"

    def test_list_is_rewritten_to_bullets(self):
        """Test unordered lists become bullet lines."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(
            para, TAG, "<ul><li>One</li><li>Two</li></ul>", newline="\n"
        )
        assert run_texts(para) == ["• One\n• Two "]
        assert content_tags(para) == ["r", "br"]

    def test_leading_blank_child_is_emptied(self):
        """Test a blank first child does not produce an empty line."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<div> <b>x</b></div>", newline="\n")
        assert run_texts(para) == ["", "x "]

    def test_later_blank_text_is_dropped(self):
        """Test whitespace-only text after the first child adds no run."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<div>a</div><div> </div>", newline="\n")
        assert run_texts(para) == ["a "]
        assert content_tags(para) == ["r", "br"]

    def test_pretty_printed_html(self):
        """Test indentation between block elements adds no runs or breaks."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<div>\n<p>x</p>\n</div>", newline="\n")
        assert run_texts(para) == ["", "x "]
        assert content_tags(para) == ["r", "br", "r", "br"]

    def test_entities_are_flattened(self):
        """Test child text is decoded."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<p>A&nbsp;&amp; B &lt;tag&gt;</p>", newline="\n")
        assert run_texts(para) == ["A & B <tag> "]

    def test_font_name_and_size(self):
        """Test the font is applied to every new run."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(
            para, TAG, "<p>a<b>b</b></p>", font_name="Arial", font_size=12, newline="\n"
        )
        for rpr in run_properties(para):
            assert rpr.get("sz") == "1200"
            assert rpr.find(f"{{{A_NAMESPACE}}}latin").get("typeface") == "Arial"

    def test_no_font_by_default(self):
        """Test runs inherit the font when none is given."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<p>a</p>", newline="\n")
        rpr = run_properties(para)[0]
        assert rpr.get("sz") is None
        assert rpr.find(f"{{{A_NAMESPACE}}}latin") is None

    def test_hyperlink_is_resolved(self):
        """Test an anchor is linked to the matching relationship id."""
        para = create_paragraph("{{body}}")
        hyperlinks = {"rId1": "https://other.example", "rId7": "https://example.com/a"}

        assert replace_tag_with_html(
            para,
            TAG,
            '<div><a href="https://example.com/a">docs</a></div>',
            hyperlinks=hyperlinks,
            newline="\n",
        )
        link = run_properties(para)[0].find(f"{{{A_NAMESPACE}}}hlinkClick")
        assert link.get(f"{{{RELATIONSHIP_NAMESPACE}}}id") == "rId7"
        assert run_texts(para) == ["docs "]

    def test_first_matching_relationship_wins(self):
        """Test duplicate targets resolve to the first id."""
        para = create_paragraph("{{body}}")
        hyperlinks = {"rId3": "https://example.com", "rId4": "https://example.com"}

        assert replace_tag_with_html(
            para, TAG, '<p><a href="https://example.com">x</a></p>', hyperlinks=hyperlinks
        )
        link = run_properties(para)[0].find(f"{{{A_NAMESPACE}}}hlinkClick")
        assert link.get(f"{{{RELATIONSHIP_NAMESPACE}}}id") == "rId3"

    def test_unresolvable_hyperlink(self, caplog):
        """Test an unknown URL leaves the run unlinked and is reported."""
        para = create_paragraph("{{body}}")
        diagnostics: list[Diagnostic] = []

        with caplog.at_level(logging.WARNING, logger="pptx_templater"):
            assert replace_tag_with_html(
                para,
                TAG,
                '<p><a href="https://unknown.example">x</a></p>',
                hyperlinks={"rId1": "https://example.com"},
                diagnostics=diagnostics,
            )

        assert run_properties(para)[0].find(f"{{{A_NAMESPACE}}}hlinkClick") is None
        assert [d.kind for d in diagnostics] == [DiagnosticKind.UNRESOLVABLE_LINK]
        assert diagnostics[0].detail == "https://unknown.example"
        assert "URL is not available" in caplog.text

    def test_hyperlink_without_mapping(self):
        """Test a link without any mapping is not an error."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, '<p><a href="https://x.example">x</a></p>')
        assert run_properties(para)[0].find(f"{{{A_NAMESPACE}}}hlinkClick") is None

    def test_malformed_html_is_reported(self, monkeypatch):
        """Test a parser failure leaves the paragraph empty and is reported."""

        def reject(html):
            raise MalformedHtmlError(html, "unexpected end")

        monkeypatch.setattr("pptx_templater.rich_text.find_body_or_first_element", reject)
        para = create_paragraph("{{body}}")
        diagnostics: list[Diagnostic] = []

        assert replace_tag_with_html(para, TAG, "<p>x", diagnostics=diagnostics)
        assert para.runs == []
        assert [d.kind for d in diagnostics] == [DiagnosticKind.MALFORMED_PAYLOAD]

    def test_empty_html_clears_paragraph(self):
        """Test a None payload removes the tag's runs."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, None)
        assert para.runs == []
        assert para.text == ""

    def test_invalid_xml_characters_are_removed(self):
        """Test control characters in the payload never reach the runs."""
        para = create_paragraph("{{body}}")

        assert replace_tag_with_html(para, TAG, "<p>a\x00b\x1bc</p>", newline="\n")
        assert run_texts(para) == ["abc "]

    def test_no_match(self):
        """Test the paragraph is untouched when the tag is missing."""
        para = create_paragraph("no tag here")
        before = etree.tostring(para.element)

        assert replace_tag_with_html(para, TAG, "<p>x</p>") is False
        assert etree.tostring(para.element) == before

    @pytest.mark.parametrize("tag", [None, ""])
    def test_empty_tag(self, tag):
        """Test a None or empty tag does nothing."""
        para = create_paragraph("{{body}}")
        assert replace_tag_with_html(para, tag, "<p>x</p>") is False
        assert para.text == "{{body}}"


class TestReplaceTagWithHyperlink:
    """Tests for replace_tag_with_hyperlink()."""

    def test_single_linked_run(self):
        """Test the paragraph becomes one hyperlinked run."""
        para = create_paragraph("See {{li", "nk}}")

        assert replace_tag_with_hyperlink(para, r"\{\{link\}\}", "Click", "rId3")
        assert run_texts(para) == ["Click"]

        rpr = run_properties(para)[0]
        assert rpr.get("sz") == "800"
        assert [etree.QName(child).localname for child in rpr] == ["latin", "hlinkClick"]
        assert rpr.find(f"{{{A_NAMESPACE}}}latin").get("typeface") == "Calibri"
        link = rpr.find(f"{{{A_NAMESPACE}}}hlinkClick")
        assert link.get(f"{{{RELATIONSHIP_NAMESPACE}}}id") == "rId3"

    def test_point_size_is_scaled(self):
        """Test whole point sizes are converted to hundredths."""
        para = create_paragraph("{{link}}")

        assert replace_tag_with_hyperlink(
            para, r"\{\{link\}\}", "x", "rId1", font_name="Arial", font_size=10
        )
        rpr = run_properties(para)[0]
        assert rpr.get("sz") == "1000"
        assert rpr.find(f"{{{A_NAMESPACE}}}latin").get("typeface") == "Arial"

    def test_none_text(self):
        """Test None link text becomes an empty run."""
        para = create_paragraph("{{link}}")

        assert replace_tag_with_hyperlink(para, r"\{\{link\}\}", None, "rId1")
        assert run_texts(para) == [""]

    def test_no_match(self):
        """Test nothing changes without a match."""
        para = create_paragraph("plain")

        assert replace_tag_with_hyperlink(para, r"\{\{link\}\}", "x", "rId1") is False
        assert para.text == "plain"

    def test_empty_tag(self):
        """Test an empty tag does nothing."""
        para = create_paragraph("{{link}}")
        assert replace_tag_with_hyperlink(para, "", "x", "rId1") is False
