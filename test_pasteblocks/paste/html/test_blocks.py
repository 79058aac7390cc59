"""Test suite for `pasteblocks.paste.html.blocks` module."""

from __future__ import annotations

from typing import Optional

import pytest

from pasteblocks.documents.block_map import DEFAULT_BLOCK_RENDER_MAP, BlockRenderMap
from pasteblocks.paste.html.blocks import BlockClassification, BlockClassifier
from pasteblocks.paste.html.tree import parse_fragment

CUSTOM_BLOCK_MAP = BlockRenderMap(
    {
        "header-one": "h1",
        "header-two": "h2",
        "header-three": "h3",
        "unordered-list-item": "li",
        "ordered-list-item": "li",
        "blockquote": "blockquote",
        "code-block": "pre",
        "paragraph": "p",
        "unstyled": "div",
    }
)


def classifier(html: str, block_render_map: BlockRenderMap = CUSTOM_BLOCK_MAP) -> BlockClassifier:
    return BlockClassifier(block_render_map, parse_fragment(html))


class DescribeBlockClassifier:
    """Unit-test suite for `pasteblocks.paste.html.blocks.BlockClassifier` objects."""

    @pytest.mark.parametrize(
        ("tag", "block_type"),
        [
            ("h1", "header-one"),
            ("h2", "header-two"),
            ("blockquote", "blockquote"),
            ("p", "paragraph"),
        ],
    )
    def it_classifies_a_tag_by_the_block_render_map(self, tag: str, block_type: str):
        classification = classifier(f"<{tag}>x</{tag}>").classify(tag)
        assert classification == BlockClassification(block_type)

    def it_does_not_classify_an_inline_or_unmapped_tag(self):
        blocks = classifier("<h1>x</h1><h4>y</h4>")

        assert blocks.classify("span") is None
        assert blocks.classify("h4") is None

    def it_marks_a_pre_block_as_literal(self):
        assert classifier("<pre>x</pre>").classify("pre") == BlockClassification(
            "code-block", literal=True
        )

    def and_a_code_block_opened_by_any_element(self):
        block_map = BlockRenderMap({"code-block": {"element": "pre", "aliased_elements": ["xmp"]}})
        assert classifier("<xmp>x</xmp>", block_map).classify("xmp") == BlockClassification(
            "code-block", literal=True
        )

    def it_absorbs_a_block_tag_nested_in_an_open_block(self):
        blocks = classifier("<ul><li><h2>what</h2></li></ul>")
        assert blocks.classify("h2", enclosing_block_tag="li", list_tag="ul", list_depth=1) is None

    @pytest.mark.parametrize(
        ("list_tag", "list_depth", "expected_value"),
        [
            ("ul", 1, BlockClassification("unordered-list-item", 0)),
            ("ol", 1, BlockClassification("ordered-list-item", 0)),
            ("ol", 2, BlockClassification("ordered-list-item", 1)),
            ("ul", 3, BlockClassification("unordered-list-item", 2)),
            # -- a list item outside any list is an unordered item at the top level --
            (None, 0, BlockClassification("unordered-list-item", 0)),
        ],
    )
    def it_types_a_list_item_by_its_nearest_list_and_depth_by_the_nesting(
        self, list_tag: Optional[str], list_depth: int, expected_value: BlockClassification
    ):
        blocks = classifier("<ul><li>x</li></ul>")
        assert blocks.classify("li", list_tag=list_tag, list_depth=list_depth) == expected_value

    def but_a_list_item_nested_in_a_list_item_opens_its_own_block(self):
        blocks = classifier("<ul><li>a<ol><li>b</li></ol></li></ul>")

        classification = blocks.classify(
            "li", enclosing_block_tag="li", list_tag="ol", list_depth=2
        )

        assert classification == BlockClassification("ordered-list-item", 1)

    def it_falls_back_to_the_other_list_type_when_only_that_one_is_allowed(self):
        block_map = BlockRenderMap({"unordered-list-item": "li", "unstyled": "div"})
        blocks = classifier("<ol><li>x</li></ol>", block_map)

        assert blocks.classify("li", list_tag="ol", list_depth=1) == BlockClassification(
            "unordered-list-item", 0
        )

    def it_treats_generic_containers_as_blocks_without_paragraphs(self):
        blocks = classifier("<div>hi</div><div>hello</div>")

        assert blocks.has_paragraphs is False
        assert blocks.classify("div") == BlockClassification("unstyled")

    def and_also_next_to_other_block_markup(self):
        blocks = classifier("<h1>T</h1><div>one</div><div>two</div>")

        assert blocks.has_paragraphs is False
        assert blocks.classify("h1") == BlockClassification("header-one")
        assert blocks.classify("div") == BlockClassification("unstyled")

    def but_not_when_the_fragment_has_paragraphs(self):
        blocks = classifier("<div><p>hi</p><p>hello</p></div>")

        assert blocks.has_paragraphs is True
        assert blocks.classify("div") is None
        assert blocks.classify("p") == BlockClassification("paragraph")

    def it_treats_the_default_map_p_alias_as_a_paragraph(self):
        blocks = classifier("<div><p>a</p></div>", DEFAULT_BLOCK_RENDER_MAP)

        assert blocks.classify("div") is None
        assert blocks.classify("p") == BlockClassification("unstyled")

    def but_p_is_no_paragraph_when_the_map_does_not_qualify_it(self):
        block_map = BlockRenderMap({"header-one": "h1", "unstyled": "div"})
        blocks = classifier("<div><p>a</p></div>", block_map)

        assert blocks.has_paragraphs is False
        assert blocks.classify("div") == BlockClassification("unstyled")
        assert blocks.classify("p") is None

    def it_keeps_the_generic_container_as_the_default_type_when_the_map_omits_it(self):
        blocks = classifier("<div>x</div>", BlockRenderMap({"header-one": "h1"}))
        assert blocks.classify("div") == BlockClassification("unstyled")
