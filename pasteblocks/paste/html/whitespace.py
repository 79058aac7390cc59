"""Whitespace normalization applied to pasted HTML before and during parsing.

Pasted markup carries whitespace used for formatting its source, which a browser does not render.
The rules implemented here are:

- Carriage-return and zero-width-space characters are removed outright, whether they appear
  literally or as numeric character references.
- Surrogate pairs are joined and lone surrogates become U+FFFD, so parsing never stops short.
- Outside `<pre>` elements, each run of newlines, tabs, and spaces is reduced to a single space.
  Inside `<pre>` elements, whitespace is preserved.
- Whitespace between a block container's start tag and its first child element is removed, as is
  whitespace between a comment and the element that follows it.
- Whitespace between two inline elements is never removed, only reduced to one space, so adjacent
  words are not joined.
"""

from __future__ import annotations

import re
from typing import Iterator

# -- control characters lxml refuses to parse, excepting tab and newline --
CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
# -- libxml2 stops parsing at a surrogate code point, which a Python str can still hold --
SURROGATE_PAIR_RE = re.compile(r"([\ud800-\udbff])([\udc00-\udfff])")
SURROGATE_RE = re.compile(r"[\ud800-\udfff]")
REPLACEMENT_CHAR = "\ufffd"
CARRIAGE_RETURN_RE = re.compile(r"\r|&#0*13;|&#x0*d;", re.IGNORECASE)
ZERO_WIDTH_SPACE_RE = re.compile(r"\u200b|&#0*8203;|&#x0*200b;", re.IGNORECASE)
COMMENT_RE = re.compile(r"<!--.*?-->(?:\s+(?=<[a-zA-Z]))?", re.DOTALL)
PRE_ELEMENT_RE = re.compile(r"(<pre\b[^>]*>.*?</pre\s*>)", re.DOTALL | re.IGNORECASE)
SOURCE_WHITESPACE_RE = re.compile(r"[ \t\n\f]+")
NBSP = "\u00a0"

BLOCK_CONTAINER_TAGS = (
    "address",
    "article",
    "aside",
    "blockquote",
    "body",
    "center",
    "dd",
    "div",
    "dl",
    "dt",
    "figure",
    "footer",
    "h[1-6]",
    "header",
    "html",
    "li",
    "main",
    "ol",
    "p",
    "section",
    "table",
    "tbody",
    "td",
    "tfoot",
    "th",
    "thead",
    "tr",
    "ul",
)
BLOCK_LEADING_WHITESPACE_RE = re.compile(
    r"(<(?:%s)\b[^>]*>)\s+(?=<[a-zA-Z]|\Z)" % "|".join(BLOCK_CONTAINER_TAGS), re.IGNORECASE
)


def normalize_html(html: str) -> str:
    """Rewrite `html` so parsing it produces predictable text-node boundaries.

    Example
    -------
    ' <div>\n  <p>hello\n  world</p>&#13;</div> ' -> '<div><p>hello world</p></div>'
    """
    html = _repair_surrogates(html)
    html = html.replace("\r\n", "\n")
    html = CARRIAGE_RETURN_RE.sub("", html)
    html = ZERO_WIDTH_SPACE_RE.sub("", html)
    html = CONTROL_CHARS_RE.sub("", html)
    html = COMMENT_RE.sub("", html)

    return "".join(
        segment if is_pre else _normalize_flow_segment(segment)
        for segment, is_pre in _iter_pre_segments(html)
    ).strip()


def _repair_surrogates(html: str) -> str:
    """Join surrogate pairs into the character they encode and replace any lone surrogate.

    Example
    -------
    'a\\ud83d\\ude00b\\udfff' -> 'a\\U0001f600b\\ufffd'
    """
    if not SURROGATE_RE.search(html):
        return html

    html = SURROGATE_PAIR_RE.sub(
        lambda m: chr(0x10000 + ((ord(m[1]) - 0xD800) << 10) + (ord(m[2]) - 0xDC00)), html
    )
    return SURROGATE_RE.sub(REPLACEMENT_CHAR, html)


def _iter_pre_segments(html: str) -> Iterator[tuple[str, bool]]:
    """Generate `(segment, is_pre)` pairs that together make up `html`, in order."""
    # -- re.split() with a capturing group places captured `<pre>` elements at odd indices --
    for idx, segment in enumerate(PRE_ELEMENT_RE.split(html)):
        if segment:
            yield segment, idx % 2 == 1


def _normalize_flow_segment(html: str) -> str:
    """Collapse source whitespace in markup known to contain no `<pre>` element.

    A segment that is not the last one is always followed by a `<pre>` start tag.
    """
    html = SOURCE_WHITESPACE_RE.sub(" ", html)
    return BLOCK_LEADING_WHITESPACE_RE.sub(r"\1", html)


def clean_text(text: str) -> str:
    """Remove carriage returns and zero-width spaces from a parsed text node.

    Character references are already decoded at this point so these can reappear even though the
    markup was normalized.
    """
    return text.replace("\r", "").replace("\u200b", "")


def collapse_whitespace(text: str) -> str:
    """Reduce each run of source whitespace to one space.

    Non-breaking spaces are not source whitespace and are left in place, see `render_nbsp()`.

    Example
    -------
    'hello\n   there  you' -> 'hello there you'
    """
    return SOURCE_WHITESPACE_RE.sub(" ", clean_text(text))


def render_nbsp(text: str) -> str:
    """Replace each non-breaking space with an ordinary space."""
    return text.replace(NBSP, " ")


def is_blank(text: str) -> bool:
    """True when `text` contains only source whitespace (non-breaking spaces are content)."""
    return not SOURCE_WHITESPACE_RE.sub("", clean_text(text))
