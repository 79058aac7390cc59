"""Document model produced by the paste processor.

A converted fragment is an ordered sequence of `ContentBlock` objects plus an `EntityMap`. Each
block holds its text and one `CharacterMetadata` per character of that text. Character metadata
carries the set of active inline-style names and an optional entity key. The key always resolves
in the entity map returned alongside the blocks.
"""

from __future__ import annotations

import dataclasses as dc
import uuid
from types import MappingProxyType
from typing import Any, FrozenSet, Iterable, Iterator, Mapping, Optional, Sequence

from typing_extensions import TypedDict

from pasteblocks.utils import iter_runs, lazyproperty


class BlockType:
    UNSTYLED = "unstyled"
    PARAGRAPH = "paragraph"
    HEADER_ONE = "header-one"
    HEADER_TWO = "header-two"
    HEADER_THREE = "header-three"
    HEADER_FOUR = "header-four"
    HEADER_FIVE = "header-five"
    HEADER_SIX = "header-six"
    UNORDERED_LIST_ITEM = "unordered-list-item"
    ORDERED_LIST_ITEM = "ordered-list-item"
    BLOCKQUOTE = "blockquote"
    CODE_BLOCK = "code-block"
    ATOMIC = "atomic"

    LIST_ITEM_TYPES = frozenset((UNORDERED_LIST_ITEM, ORDERED_LIST_ITEM))


class InlineStyle:
    BOLD = "BOLD"
    CODE = "CODE"
    ITALIC = "ITALIC"
    STRIKETHROUGH = "STRIKETHROUGH"
    UNDERLINE = "UNDERLINE"


class EntityType:
    LINK = "LINK"
    IMAGE = "IMAGE"


class Mutability:
    MUTABLE = "MUTABLE"
    IMMUTABLE = "IMMUTABLE"


class StyleRange(TypedDict):
    """A run of characters sharing one inline style."""

    offset: int
    length: int
    style: str


class EntityRange(TypedDict):
    """A run of characters referencing the same entity."""

    offset: int
    length: int
    key: str


@dc.dataclass(frozen=True)
class CharacterMetadata:
    """Inline style names and entity reference of a single character."""

    style: FrozenSet[str] = frozenset()
    entity: Optional[str] = None

    def has_style(self, style: str) -> bool:
        return style in self.style


EMPTY_CHARACTER = CharacterMetadata()


@dc.dataclass(frozen=True)
class Entity:
    """An out-of-band annotation, a link or an image, referenced by one or more characters.

    `data` is read-only; the entity is never changed once created.
    """

    type: str
    mutability: str
    data: Mapping[str, str] = dc.field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "mutability": self.mutability, "data": dict(self.data)}


class EntityMap(Mapping[str, Entity]):
    """Entities created during a single conversion, keyed by opaque string identifiers.

    Keys are unique only within the map that issued them.
    """

    def __init__(self):
        self._entities: dict[str, Entity] = {}
        self._last_key = 0

    def __getitem__(self, key: str) -> Entity:
        return self._entities[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        return f"EntityMap({self._entities!r})"

    def add(self, entity: Entity) -> str:
        """Store `entity` and return the key it was assigned."""
        self._last_key += 1
        key = str(self._last_key)
        self._entities[key] = entity
        return key

    def create(self, entity_type: str, mutability: str, data: Mapping[str, str]) -> str:
        """Create an entity from its parts, store it, and return its key."""
        return self.add(Entity(entity_type, mutability, data))

    def to_dict(self) -> dict[str, Any]:
        return {key: entity.to_dict() for key, entity in self._entities.items()}


class ContentBlock:
    """A paragraph-level unit of text with one block type.

    `depth` is meaningful only for list-item block types and is 0 for every other type.
    """

    def __init__(
        self,
        block_type: str,
        text: str,
        characters: Optional[Sequence[CharacterMetadata]] = None,
        depth: int = 0,
        key: Optional[str] = None,
    ):
        characters = (
            tuple(characters) if characters is not None else (EMPTY_CHARACTER,) * len(text)
        )
        if len(characters) != len(text):
            raise ValueError(
                f"block text has {len(text)} characters but {len(characters)} character-metadata"
                " items were provided"
            )
        if depth < 0:
            raise ValueError(f"block depth must be non-negative, got {depth}")

        self.type = block_type
        self.text = text
        self.characters: tuple[CharacterMetadata, ...] = characters
        self.depth = depth
        self._key = key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentBlock):
            return False
        return all(
            (
                self.type == other.type,
                self.depth == other.depth,
                self.text == other.text,
                self.characters == other.characters,
            )
        )

    def __len__(self) -> int:
        return len(self.text)

    def __repr__(self) -> str:
        return f"ContentBlock(type={self.type!r}, depth={self.depth}, text={self.text!r})"

    def __str__(self) -> str:
        return self.text

    @property
    def key(self) -> str:
        if self._key is None:
            self._key = uuid.uuid4().hex[:8]
        return self._key

    @lazyproperty
    def entities(self) -> tuple[Optional[str], ...]:
        """Entity key (or None) of each character, in text order."""
        return tuple(c.entity for c in self.characters)

    @lazyproperty
    def styles(self) -> tuple[FrozenSet[str], ...]:
        """Inline-style set of each character, in text order."""
        return tuple(c.style for c in self.characters)

    @lazyproperty
    def inline_style_ranges(self) -> list[StyleRange]:
        """Maximal runs of each inline style, ordered by offset then style name."""
        style_names = sorted({s for c in self.characters for s in c.style})
        ranges = [
            StyleRange(offset=offset, length=length, style=style)
            for style in style_names
            for active, offset, length in iter_runs(self.characters, lambda c: c.has_style(style))
            if active
        ]
        return sorted(ranges, key=lambda r: (r["offset"], r["style"]))

    @lazyproperty
    def entity_ranges(self) -> list[EntityRange]:
        """Maximal runs of characters referencing the same entity."""
        return [
            EntityRange(offset=offset, length=length, key=entity_key)
            for entity_key, offset, length in iter_runs(self.characters, lambda c: c.entity)
            if entity_key is not None
        ]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible (str keys) dict."""
        return {
            "key": self.key,
            "type": self.type,
            "depth": self.depth,
            "text": self.text,
            "inline_style_ranges": [dict(r) for r in self.inline_style_ranges],
            "entity_ranges": [dict(r) for r in self.entity_ranges],
        }


@dc.dataclass(frozen=True)
class ContentFragment:
    """The result of converting one fragment: blocks in document order and their entities."""

    blocks: tuple[ContentBlock, ...]
    entities: EntityMap

    @classmethod
    def from_blocks(cls, blocks: Iterable[ContentBlock], entities: EntityMap) -> ContentFragment:
        return cls(tuple(blocks), entities)

    @property
    def text(self) -> str:
        """Text of all blocks joined by newlines, mostly useful for debugging and tests."""
        return "\n".join(b.text for b in self.blocks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "blocks": [b.to_dict() for b in self.blocks],
            "entity_map": self.entities.to_dict(),
        }
