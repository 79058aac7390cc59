"""Provides `process_text()`, the plain-text counterpart of `process_html()`."""

from __future__ import annotations

from typing import Iterable, Optional, Union

from pasteblocks.documents.content import (
    EMPTY_CHARACTER,
    BlockType,
    CharacterMetadata,
    ContentBlock,
)
from pasteblocks.errors import PasteContractError


def process_text(
    lines: Union[str, Iterable[str]],
    character: Optional[CharacterMetadata] = None,
    block_type: str = BlockType.UNSTYLED,
) -> tuple[ContentBlock, ...]:
    """One `block_type` block per line of pasted plain text.

    `lines` is either the pasted text, split here on line boundaries, or its lines already split.
    Every character of every block carries `character`, typically the style in effect at the
    insertion point. Empty lines produce empty blocks, they are paragraph breaks the user typed.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    character = EMPTY_CHARACTER if character is None else character
    if not isinstance(character, CharacterMetadata):
        raise PasteContractError(
            f"character must be a CharacterMetadata, got {type(character).__name__}"
        )

    return tuple(
        ContentBlock(block_type, line, characters=(character,) * len(line)) for line in lines
    )
