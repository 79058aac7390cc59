"""Block-type allowlist: which block types a conversion may produce and from which elements."""

from __future__ import annotations

import dataclasses as dc
from types import MappingProxyType
from typing import Any, FrozenSet, Iterator, Mapping, Optional, Union

from pasteblocks.documents.content import BlockType
from pasteblocks.errors import InvalidBlockRenderMapError

DEFAULT_UNSTYLED_ELEMENT = "div"
PARAGRAPH_TAG = "p"


@dc.dataclass(frozen=True)
class BlockRenderConfig:
    """Element descriptor for one block type.

    `element` is the primary tag name; `aliased_elements` are further tag names that also qualify
    for the block type.
    """

    element: str
    aliased_elements: FrozenSet[str] = frozenset()

    @classmethod
    def from_value(cls, block_type: str, value: Any) -> BlockRenderConfig:
        """Coerce a tag name, a `{"element": ..., "aliased_elements": [...]}` mapping, or an
        existing config into a validated `BlockRenderConfig`."""
        if isinstance(value, BlockRenderConfig):
            element, aliases = value.element, value.aliased_elements
        elif isinstance(value, str):
            element, aliases = value, frozenset()
        elif isinstance(value, Mapping):
            element = value.get("element")
            aliases = value.get("aliased_elements") or ()
        else:
            raise InvalidBlockRenderMapError(block_type, f"unsupported descriptor {value!r}")

        if not isinstance(element, str) or not element.strip():
            raise InvalidBlockRenderMapError(block_type, "element must be a non-empty tag name")
        if isinstance(aliases, str) or not all(
            isinstance(a, str) and a.strip() for a in aliases
        ):
            raise InvalidBlockRenderMapError(
                block_type, "aliased_elements must be a collection of tag names"
            )

        return cls(
            element=element.strip().lower(),
            aliased_elements=frozenset(a.strip().lower() for a in aliases),
        )

    @property
    def tags(self) -> FrozenSet[str]:
        """Every tag name that qualifies for this block type."""
        return self.aliased_elements | {self.element}


BlockRenderMapLike = Union["BlockRenderMap", Mapping[str, Any]]


class BlockRenderMap(Mapping[str, BlockRenderConfig]):
    """Immutable, validated mapping from block-type name to `BlockRenderConfig`.

    Insertion order is significant; when more than one block type qualifies the same tag, the
    earlier one wins (list items excepted, those are chosen by their enclosing list).
    """

    def __init__(self, entries: Mapping[str, Any]):
        configs: dict[str, BlockRenderConfig] = {}
        for block_type, value in entries.items():
            if not isinstance(block_type, str) or not block_type:
                raise InvalidBlockRenderMapError(block_type, "block type must be a non-empty str")
            configs[block_type] = BlockRenderConfig.from_value(block_type, value)
        self._configs = MappingProxyType(configs)

    @classmethod
    def coerce(cls, value: Optional[BlockRenderMapLike]) -> BlockRenderMap:
        if value is None:
            return DEFAULT_BLOCK_RENDER_MAP
        if isinstance(value, BlockRenderMap):
            return value
        return cls(value)

    def __getitem__(self, block_type: str) -> BlockRenderConfig:
        return self._configs[block_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def __repr__(self) -> str:
        return f"BlockRenderMap({dict(self._configs)!r})"

    @property
    def unstyled_element(self) -> str:
        """Tag of the generic container that maps to the default block type."""
        config = self._configs.get(BlockType.UNSTYLED)
        return config.element if config else DEFAULT_UNSTYLED_ELEMENT

    def types_for_tag(self, tag: str) -> tuple[str, ...]:
        """Block types qualified by `tag`, in map order."""
        return tuple(t for t, config in self._configs.items() if tag in config.tags)

    @property
    def supported_tags(self) -> FrozenSet[str]:
        """Tags qualifying a block type other than the generic (unstyled) container."""
        unstyled_element = self.unstyled_element
        return frozenset(
            tag for config in self._configs.values() for tag in config.tags
        ) - {unstyled_element}

    @property
    def paragraph_tags(self) -> FrozenSet[str]:
        """Tags marking explicit paragraphs: those of a `paragraph` entry, and `p` when mapped."""
        config = self._configs.get(BlockType.PARAGRAPH)
        tags = config.tags if config else frozenset()
        return (tags | ({PARAGRAPH_TAG} & self.supported_tags)) - {self.unstyled_element}

    def restrict(self, block_types: Any) -> BlockRenderMap:
        """A new map holding only the entries whose block type is in `block_types`."""
        allowed = set(block_types)
        return BlockRenderMap({t: c for t, c in self._configs.items() if t in allowed})


DEFAULT_BLOCK_RENDER_MAP = BlockRenderMap(
    {
        BlockType.HEADER_ONE: "h1",
        BlockType.HEADER_TWO: "h2",
        BlockType.HEADER_THREE: "h3",
        BlockType.HEADER_FOUR: "h4",
        BlockType.HEADER_FIVE: "h5",
        BlockType.HEADER_SIX: "h6",
        BlockType.BLOCKQUOTE: "blockquote",
        BlockType.CODE_BLOCK: "pre",
        BlockType.ATOMIC: "figure",
        BlockType.UNORDERED_LIST_ITEM: "li",
        BlockType.ORDERED_LIST_ITEM: "li",
        BlockType.UNSTYLED: {"element": "div", "aliased_elements": ["p"]},
    }
)
