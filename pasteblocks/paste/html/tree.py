"""Parse an HTML fragment into a tree of fixed-schema nodes.

The tree walker does not touch `lxml` elements directly. The parsed document is converted into
`ElementNode` and `TextNode` objects, where an element is just its tag name, a read-only attribute
mapping, and its children. Text and tail strings of `lxml` elements become `TextNode` children in
document order, so for example:

    <p>Text <b>bold child</b> tail of child</p>

becomes `ElementNode("p", {}, (TextNode("Text "), ElementNode("b", ...), TextNode(" tail...")))`.
"""

from __future__ import annotations

import dataclasses as dc
import re
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Union, cast

from lxml import etree
from typing_extensions import TypeAlias

# -- elements whose content never contributes to a paste --
STRIPPED_TAGS = (
    "head",
    "link",
    "meta",
    "noscript",
    "object",
    "script",
    "style",
    "template",
    "title",
)

BODY_START_TAG_RE = re.compile(r"<body\b", re.IGNORECASE)


@dc.dataclass(frozen=True)
class TextNode:
    """A run of character data."""

    text: str


@dc.dataclass(frozen=True)
class ElementNode:
    """An HTML element reduced to tag name, attributes, and children."""

    tag: str
    attributes: Mapping[str, str] = dc.field(default_factory=lambda: MappingProxyType({}))
    children: tuple[Node, ...] = ()

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Value of attribute `name`, `default` when the attribute is absent."""
        return self.attributes.get(name, default)

    def iter(self) -> Iterator[ElementNode]:
        """Generate this element and each descendant element in document order."""
        stack: list[ElementNode] = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(
                reversed([c for c in element.children if isinstance(c, ElementNode)])
            )


Node: TypeAlias = Union[TextNode, ElementNode]


def html_parser() -> etree.HTMLParser:
    """A new parser for one conversion.

    `lxml` parser objects are not safe to share between threads, so each call gets its own.
    """
    return etree.HTMLParser(remove_comments=True, remove_pis=True, no_network=True)


def parse_fragment(html: str) -> ElementNode:
    """Parse `html` and return its `<body>` as an `ElementNode` tree.

    Bare fragments are wrapped in a body element before parsing. Without an open `<body>`, the
    `libxml2` parser wraps leading text in an implied `<p>` element, which would be mistaken for
    paragraph markup.

    Raises `etree.ParserError` or `etree.XMLSyntaxError` when `lxml` cannot produce a document.
    """
    if not BODY_START_TAG_RE.search(html):
        html = f"<html><body>{html}</body></html>"

    # NOTE - `lxml` will not parse a `str` that includes an XML encoding declaration and raises
    # ValueError in that case. Encoding the str as UTF-8 and parsing the bytes works around it.
    try:
        root = etree.fromstring(html, html_parser())
    except ValueError:
        root = etree.fromstring(
            html.encode("utf-8"),
            etree.HTMLParser(
                remove_comments=True, remove_pis=True, no_network=True, encoding="utf-8"
            ),
        )

    if root is None:
        return ElementNode("body")

    etree.strip_elements(root, *STRIPPED_TAGS, with_tail=False)

    body = root.find(".//body")
    return _to_node(cast(etree._Element, body if body is not None else root))


def _to_node(element: etree._Element) -> ElementNode:
    """Convert `element` and its subtree, text and tails included, to an `ElementNode`.

    The conversion is iterative, so arbitrarily deep markup cannot exhaust the interpreter stack.
    """
    # -- one list of converted children per element that is started but not yet ended --
    stack: list[list[Node]] = [[]]

    for event, e in etree.iterwalk(element, events=("start", "end")):
        # -- comments and processing instructions have a non-str tag; keep only their tail --
        is_element = isinstance(e.tag, str)
        if event == "start":
            stack.append([TextNode(e.text)] if is_element and e.text else [])
            continue

        children = stack.pop()
        if is_element:
            stack[-1].append(
                ElementNode(
                    tag=cast(str, e.tag).lower(),
                    attributes=MappingProxyType({str(k).lower(): str(v) for k, v in e.items()}),
                    children=tuple(children),
                )
            )
        # -- the tail of the root element lies outside the converted subtree --
        if len(stack) > 1 and e.tail:
            stack[-1].append(TextNode(e.tail))

    return cast(ElementNode, stack[0][0])
