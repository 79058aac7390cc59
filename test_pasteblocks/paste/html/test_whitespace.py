"""Test suite for `pasteblocks.paste.html.whitespace` module."""

from __future__ import annotations

import pytest

from pasteblocks.paste.html.whitespace import (
    NBSP,
    clean_text,
    collapse_whitespace,
    is_blank,
    normalize_html,
    render_nbsp,
)

# -- normalize_html() ----------------------------


@pytest.mark.parametrize(
    ("html", "expected_value"),
    [
        # -- carriage returns and zero-width spaces are removed, literal or as references --
        ("hi\r\nthere", "hi there"),
        ("hi&#13;&#8203;hello", "hihello"),
        ("hi&#x0D;&#x200B;hello", "hihello"),
        ("hi\u200bhello", "hihello"),
        # -- runs of source whitespace become one space --
        ("<div>hello\n\t  there</div>", "<div>hello there</div>"),
        # -- whitespace between a block container and its first child element is removed --
        ("<ul>\n  <li>one</li>\n  <li>two</li>\n</ul>", "<ul><li>one</li> <li>two</li> </ul>"),
        ("<html><body> <p>hello</p></body></html>", "<html><body><p>hello</p></body></html>"),
        # -- comments go, with the whitespace that separates them from the next element --
        ("<body><!--comment--> <p>hello</p></body>", "<body><p>hello</p></body>"),
        ("a<!-- multi\nline -->b", "ab"),
        # -- whitespace between inline elements is kept --
        ("<span>hello</span> <span>hi</span>", "<span>hello</span> <span>hi</span>"),
        (
            "<span>hello</span><span> </span><span>world</span>",
            "<span>hello</span><span> </span><span>world</span>",
        ),
        # -- whitespace surrounding the fragment is removed --
        ("  <h1>hi</h1>  ", "<h1>hi</h1>"),
    ],
)
def test_normalize_html_produces_normalized_markup(html: str, expected_value: str):
    assert normalize_html(html) == expected_value


def test_normalize_html_leaves_whitespace_inside_pre_elements_alone():
    html = "<div>\n  <pre>def f():\n    return  1\n</pre>\n</div>"
    assert normalize_html(html) == "<div><pre>def f():\n    return  1\n</pre> </div>"


def test_normalize_html_removes_carriage_returns_inside_pre_elements():
    assert normalize_html("<pre>a\r\nb&#13;</pre>") == "<pre>a\nb</pre>"


def test_normalize_html_removes_control_characters():
    assert normalize_html("a\x00b\x0bc\x1fd") == "abcd"


@pytest.mark.parametrize(
    ("html", "expected_value"),
    [
        ("a\ud83d\ude00b", "a\U0001f600b"),
        ("<p>a\udfffb</p>", "<p>a\ufffdb</p>"),
        ("\ud800<b>x</b>\udc00", "\ufffd<b>x</b>\ufffd"),
        ("\ude00\ud83d", "\ufffd\ufffd"),
    ],
)
def test_normalize_html_repairs_surrogates(html: str, expected_value: str):
    assert normalize_html(html) == expected_value


# -- clean_text() --------------------------------


def test_clean_text_removes_carriage_returns_and_zero_width_spaces():
    assert clean_text("a\rb\u200bc\n d") == "abc\n d"


# -- collapse_whitespace() -----------------------


@pytest.mark.parametrize(
    ("text", "expected_value"),
    [
        ("hello\n   there  you", "hello there you"),
        ("  leading and trailing  ", " leading and trailing "),
        ("tab\tand\fformfeed", "tab and formfeed"),
        # -- a non-breaking space is content, not source whitespace --
        (f"a{NBSP}{NBSP}b", f"a{NBSP}{NBSP}b"),
    ],
)
def test_collapse_whitespace(text: str, expected_value: str):
    assert collapse_whitespace(text) == expected_value


# -- render_nbsp() -------------------------------


def test_render_nbsp_replaces_non_breaking_spaces_with_spaces():
    assert render_nbsp(f"a{NBSP}b{NBSP}") == "a b "


# -- is_blank() ----------------------------------


@pytest.mark.parametrize(
    ("text", "expected_value"),
    [
        ("", True),
        (" \n\t ", True),
        ("\r\u200b", True),
        (NBSP, False),
        (" x ", False),
    ],
)
def test_is_blank(text: str, expected_value: bool):
    assert is_blank(text) is expected_value
