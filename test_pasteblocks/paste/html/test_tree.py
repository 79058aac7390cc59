# pyright: reportPrivateUsage=false

"""Test suite for `pasteblocks.paste.html.tree` module."""

from __future__ import annotations

import pytest
from lxml import etree

from pasteblocks.paste.html.tree import (
    ElementNode,
    TextNode,
    _to_node,
    html_parser,
    parse_fragment,
)

# -- parse_fragment() ----------------------------


def test_parse_fragment_returns_the_body_element_of_a_bare_fragment():
    body = parse_fragment("Text <b>bold child</b> tail of child")

    assert body == ElementNode(
        "body",
        children=(
            TextNode("Text "),
            ElementNode("b", children=(TextNode("bold child"),)),
            TextNode(" tail of child"),
        ),
    )


def and_it_does_not_wrap_leading_text_in_an_implied_paragraph():
    body = parse_fragment("hi<br>hello")
    assert [c.tag if isinstance(c, ElementNode) else c.text for c in body.children] == [
        "hi",
        "br",
        "hello",
    ]


def test_parse_fragment_finds_the_body_of_a_whole_document():
    body = parse_fragment("<html><head><title>T</title></head><body><p>hello</p></body></html>")

    assert body.tag == "body"
    assert body.children == (ElementNode("p", children=(TextNode("hello"),)),)


@pytest.mark.parametrize(
    "html",
    [
        "<script>alert(1)</script>hello",
        "<style>b { color: red; }</style>hello",
        "<noscript>enable js</noscript>hello",
        "<template><b>x</b></template>hello",
        "<!-- a comment -->hello",
    ],
)
def test_parse_fragment_removes_content_that_never_reaches_a_paste(html: str):
    body = parse_fragment(html)
    assert body.children == (TextNode("hello"),)


def test_parse_fragment_lowercases_tags_and_attribute_names():
    body = parse_fragment('<A HREF="http://x.com/Path" Title="Go">x</A>')

    (anchor,) = body.children
    assert isinstance(anchor, ElementNode)
    assert anchor.tag == "a"
    assert dict(anchor.attributes) == {"href": "http://x.com/Path", "title": "Go"}


def test_parse_fragment_accepts_markup_with_an_xml_encoding_declaration():
    body = parse_fragment('<?xml version="1.0" encoding="utf-8"?><body><p>hello</p></body>')
    assert body.children == (ElementNode("p", children=(TextNode("hello"),)),)


def test_parse_fragment_returns_an_empty_body_for_an_empty_fragment():
    assert parse_fragment("") == ElementNode("body")


def test_parse_fragment_handles_deeply_nested_markup():
    depth = 200
    body = parse_fragment("<span>" * depth + "deep" + "</span>" * depth)

    element, nesting = body, 0
    while element.children and isinstance(element.children[0], ElementNode):
        element, nesting = element.children[0], nesting + 1

    assert element.children == (TextNode("deep"),)
    assert nesting == depth


# -- _to_node() ----------------------------------


def test_to_node_keeps_text_and_tails_in_document_order():
    root = etree.fromstring("<div>a<b>b</b>c<!--x-->d<i>e</i></div>", etree.XMLParser())

    node = _to_node(root)

    assert node == ElementNode(
        "div",
        children=(
            TextNode("a"),
            ElementNode("b", children=(TextNode("b"),)),
            TextNode("c"),
            TextNode("d"),
            ElementNode("i", children=(TextNode("e"),)),
        ),
    )


def test_html_parser_makes_a_new_parser_for_each_call():
    assert html_parser() is not html_parser()


class DescribeElementNode:
    """Unit-test suite for `pasteblocks.paste.html.tree.ElementNode` objects."""

    def it_provides_access_to_its_attributes(self):
        element = parse_fragment('<a href="x">y</a>').children[0]
        assert isinstance(element, ElementNode)

        assert element.get("href") == "x"
        assert element.get("title") is None
        assert element.get("title", "") == ""

    def and_its_attributes_are_read_only(self):
        element = parse_fragment('<a href="x">y</a>').children[0]
        assert isinstance(element, ElementNode)

        with pytest.raises(TypeError):
            element.attributes["href"] = "z"  # pyright: ignore[reportIndexIssue]

    def it_generates_itself_and_its_descendant_elements_in_document_order(self):
        body = parse_fragment("<div><p>a<b>b</b></p><ul><li>c</li></ul></div>text")
        assert [e.tag for e in body.iter()] == ["body", "div", "p", "b", "ul", "li"]
