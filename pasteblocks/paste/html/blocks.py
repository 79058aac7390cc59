"""Decide where blocks start and which block type each one gets.

An element starts a block when its tag qualifies for a block type in the block-render map and no
block is open yet. Block elements nested inside an open block are absorbed into it, so the
outermost block wins. The single exception is a list item nested (through a list) inside another
list item; it starts its own block one level deeper.

Generic containers (the element of the default block type, normally `<div>`) start `unstyled`
blocks unless the fragment holds explicit paragraph elements the map qualifies. Once such
paragraphs are present, generic containers are transparent, which keeps `<div><p>..</p></div>`
from producing a paragraph inside an unstyled block.
"""

from __future__ import annotations

from typing import FrozenSet, NamedTuple, Optional

from pasteblocks.documents.block_map import BlockRenderMap
from pasteblocks.documents.content import BlockType
from pasteblocks.logger import logger
from pasteblocks.paste.html.tree import ElementNode
from pasteblocks.utils import lazyproperty

LIST_ITEM_TAG = "li"
LIST_ITEM_TYPE_BY_CONTAINER = {
    "ol": BlockType.ORDERED_LIST_ITEM,
    "ul": BlockType.UNORDERED_LIST_ITEM,
}
LIST_CONTAINER_TAGS = frozenset(LIST_ITEM_TYPE_BY_CONTAINER)

# -- elements whose whitespace and line breaks are content --
LITERAL_TAGS = frozenset({"pre"})


class BlockClassification(NamedTuple):
    """Block type and depth for a block opened by an element."""

    block_type: str
    depth: int = 0
    literal: bool = False


DEFAULT_BLOCK = BlockClassification(BlockType.UNSTYLED)


class BlockClassifier:
    """Classifies elements of one parsed fragment against a block-render map."""

    def __init__(self, block_render_map: BlockRenderMap, root: ElementNode):
        self._block_render_map = block_render_map
        self._root = root

    def classify(
        self,
        tag: str,
        enclosing_block_tag: Optional[str] = None,
        list_tag: Optional[str] = None,
        list_depth: int = 0,
    ) -> Optional[BlockClassification]:
        """Classification for an element with `tag`, None when it does not start a block.

        `enclosing_block_tag` is the tag of the element that opened the block currently open, if
        any. `list_tag` is the nearest enclosing list container and `list_depth` the number of
        enclosing list containers.
        """
        if tag not in self._block_tags:
            return None

        if enclosing_block_tag is not None and not (
            tag == LIST_ITEM_TAG and enclosing_block_tag == LIST_ITEM_TAG
        ):
            return None

        block_type = self._block_type(tag, list_tag)
        if block_type is None:
            logger.debug("no allowed block type for <%s>, treating it as inline", tag)
            return None

        return BlockClassification(
            block_type=block_type,
            depth=max(list_depth - 1, 0) if block_type in BlockType.LIST_ITEM_TYPES else 0,
            literal=tag in LITERAL_TAGS or block_type == BlockType.CODE_BLOCK,
        )

    @lazyproperty
    def has_paragraphs(self) -> bool:
        """True when the fragment holds an element the map qualifies as an explicit paragraph."""
        paragraph_tags = self._block_render_map.paragraph_tags
        return any(e.tag in paragraph_tags for e in self._root.iter())

    @lazyproperty
    def _block_tags(self) -> FrozenSet[str]:
        """Tags that can start a block in this fragment."""
        supported_tags = self._block_render_map.supported_tags
        if self.has_paragraphs:
            return supported_tags
        return supported_tags | {self._block_render_map.unstyled_element}

    def _block_type(self, tag: str, list_tag: Optional[str]) -> Optional[str]:
        """Block type for `tag`, None when the map allows no block type for it."""
        candidates = self._block_render_map.types_for_tag(tag)

        if tag == LIST_ITEM_TAG:
            preferred = LIST_ITEM_TYPE_BY_CONTAINER.get(
                list_tag or "ul", BlockType.UNORDERED_LIST_ITEM
            )
            if preferred in candidates:
                return preferred
            # -- `li` mapped only to the other list type, or to something else entirely --
            return candidates[0] if candidates else None

        if candidates:
            return candidates[0]

        # -- the generic container always maps to the default block type --
        if tag == self._block_render_map.unstyled_element:
            return BlockType.UNSTYLED

        return None
