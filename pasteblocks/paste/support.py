"""Default paste-support configuration.

`PasteSupport` is a plain immutable value. Callers build one (or use `DEFAULT_PASTE_SUPPORT`) and
pass it explicitly; nothing in the package reads it from process-wide state.
"""

from __future__ import annotations

import dataclasses as dc
from typing import Iterable, Optional

from pasteblocks.documents.block_map import DEFAULT_BLOCK_RENDER_MAP, BlockRenderMap
from pasteblocks.documents.content import BlockType, InlineStyle
from pasteblocks.errors import PasteContractError


def validate_names(names: Iterable[str], what: str = "inline style") -> tuple[str, ...]:
    """Ordered, de-duplicated tuple of style or block-type names.

    Raises `PasteContractError` when `names` is a bare str or any name is not a non-empty str.
    """
    if isinstance(names, str):
        raise PasteContractError(f"{what} names must be a collection of names, not a str")

    validated: list[str] = []
    for name in names:
        if not isinstance(name, str) or not name:
            raise PasteContractError(f"{what} names must be non-empty str, got {name!r}")
        if name not in validated:
            validated.append(name)
    return tuple(validated)


@dc.dataclass(frozen=True)
class PasteSupport:
    """Which inline styles, block types, links, and images a paste may produce."""

    inline_styles: tuple[str, ...] = (
        InlineStyle.BOLD,
        InlineStyle.CODE,
        InlineStyle.ITALIC,
        InlineStyle.STRIKETHROUGH,
        InlineStyle.UNDERLINE,
    )
    block_types: tuple[str, ...] = (
        BlockType.HEADER_ONE,
        BlockType.HEADER_TWO,
        BlockType.HEADER_THREE,
        BlockType.HEADER_FOUR,
        BlockType.HEADER_FIVE,
        BlockType.HEADER_SIX,
        BlockType.UNORDERED_LIST_ITEM,
        BlockType.ORDERED_LIST_ITEM,
        BlockType.BLOCKQUOTE,
        BlockType.ATOMIC,
        BlockType.CODE_BLOCK,
        BlockType.UNSTYLED,
    )
    links: bool = True
    images: bool = False

    def __post_init__(self):
        object.__setattr__(self, "inline_styles", validate_names(self.inline_styles))
        object.__setattr__(self, "block_types", validate_names(self.block_types, "block type"))

    def block_render_map(self, block_render_map: Optional[BlockRenderMap] = None) -> BlockRenderMap:
        """`block_render_map` (default map when None) restricted to the supported block types."""
        if block_render_map is None:
            block_render_map = DEFAULT_BLOCK_RENDER_MAP
        return block_render_map.restrict(self.block_types)


DEFAULT_PASTE_SUPPORT = PasteSupport()
