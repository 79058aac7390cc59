"""Provides `process_html()` and `paste_html()`."""

from __future__ import annotations

from typing import Iterable, Optional

from lxml import etree

from pasteblocks.documents.block_map import BlockRenderMap, BlockRenderMapLike
from pasteblocks.documents.content import BlockType, ContentBlock, ContentFragment, EntityMap
from pasteblocks.errors import PasteContractError
from pasteblocks.logger import logger, trace_logger
from pasteblocks.paste.html.blocks import BlockClassifier
from pasteblocks.paste.html.entities import EntityExtractor
from pasteblocks.paste.html.styles import StyleResolver
from pasteblocks.paste.html.tree import parse_fragment
from pasteblocks.paste.html.walker import TreeWalker
from pasteblocks.paste.html.whitespace import collapse_whitespace, normalize_html
from pasteblocks.paste.support import DEFAULT_PASTE_SUPPORT, PasteSupport, validate_names
from pasteblocks.utils import lazyproperty


def process_html(
    html: str,
    block_render_map: Optional[BlockRenderMapLike] = None,
    inline_styles: Optional[Iterable[str]] = None,
    allow_images: bool = False,
    allow_links: bool = True,
) -> ContentFragment:
    """Convert a pasted HTML fragment into content blocks and the entities they reference.

    Parameters
    ----------
    html
        The fragment as it came off the clipboard. It need not be well-formed.
    block_render_map
        Mapping from block-type name to the element (and aliased elements) that qualify for it. A
        plain mapping is validated and converted. When omitted, `DEFAULT_BLOCK_RENDER_MAP` is used.
    inline_styles
        Inline-style names that may appear on characters. All others are dropped. When omitted,
        the inline styles of `DEFAULT_PASTE_SUPPORT` are allowed.
    allow_images
        When True, an `<img>` with a usable source becomes an IMAGE entity whose text is the
        source URL. Otherwise images contribute nothing.
    allow_links
        When True, an `<a>` with a safe reference becomes a LINK entity over its content.

    The result always holds at least one block. Malformed markup never raises; the only errors
    are `PasteContractError` subclasses for invalid arguments.
    """
    if not isinstance(html, str):
        raise PasteContractError(f"html must be a str, got {type(html).__name__}")

    opts = PasteProcessorOptions(
        block_render_map=block_render_map,
        inline_styles=inline_styles,
        allow_images=allow_images,
        allow_links=allow_links,
    )

    return _HtmlPasteProcessor.process(html, opts)


def paste_html(
    html: str,
    support: PasteSupport = DEFAULT_PASTE_SUPPORT,
    block_render_map: Optional[BlockRenderMap] = None,
) -> ContentFragment:
    """Convert `html` with what `support` allows.

    `block_render_map` defaults to `DEFAULT_BLOCK_RENDER_MAP` and is restricted to the block types
    of `support`.
    """
    return process_html(
        html,
        block_render_map=support.block_render_map(block_render_map),
        inline_styles=support.inline_styles,
        allow_images=support.images,
        allow_links=support.links,
    )


class PasteProcessorOptions:
    """Encapsulates paste option validation, computation, and application of defaults."""

    def __init__(
        self,
        *,
        block_render_map: Optional[BlockRenderMapLike] = None,
        inline_styles: Optional[Iterable[str]] = None,
        allow_images: bool = False,
        allow_links: bool = True,
    ):
        self._block_render_map = block_render_map
        self._inline_styles = inline_styles
        self._allow_images = allow_images
        self._allow_links = allow_links

    @lazyproperty
    def block_render_map(self) -> BlockRenderMap:
        """The validated block-type allowlist."""
        return BlockRenderMap.coerce(self._block_render_map)

    @lazyproperty
    def inline_styles(self) -> tuple[str, ...]:
        """Ordered names of the inline styles characters may carry."""
        if self._inline_styles is None:
            return DEFAULT_PASTE_SUPPORT.inline_styles
        return validate_names(self._inline_styles)

    @lazyproperty
    def allow_images(self) -> bool:
        """When True, images become IMAGE entities represented by their source URL."""
        return bool(self._allow_images)

    @lazyproperty
    def allow_links(self) -> bool:
        """When True, anchors with a safe reference become LINK entities."""
        return bool(self._allow_links)


class _HtmlPasteProcessor:
    """Converts one HTML fragment into a `ContentFragment`."""

    def __init__(self, html: str, opts: PasteProcessorOptions):
        self._html = html
        self._opts = opts

    @classmethod
    def process(cls, html: str, opts: PasteProcessorOptions) -> ContentFragment:
        """Blocks and entities for `html` converted with `opts`."""
        return cls(html, opts)._process()

    def _process(self) -> ContentFragment:
        # -- options are validated before the markup is touched --
        block_render_map = self._opts.block_render_map
        inline_styles = self._opts.inline_styles
        html = self._normalized_html

        try:
            root = parse_fragment(html)
        except (etree.ParserError, etree.XMLSyntaxError) as e:
            logger.warning("HTML fragment could not be parsed, pasting it as plain text: %s", e)
            return ContentFragment.from_blocks(self._literal_text_blocks(html), EntityMap())

        entity_map = EntityMap()
        walker = TreeWalker(
            classifier=BlockClassifier(block_render_map, root),
            style_resolver=StyleResolver(inline_styles),
            entity_extractor=EntityExtractor(
                entity_map,
                allow_links=self._opts.allow_links,
                allow_images=self._opts.allow_images,
            ),
        )
        blocks = self._assemble([buffer.to_block() for buffer in walker.walk(root)])

        return ContentFragment.from_blocks(blocks, entity_map)

    @lazyproperty
    def _normalized_html(self) -> str:
        return normalize_html(self._html)

    @staticmethod
    def _assemble(blocks: list[ContentBlock]) -> list[ContentBlock]:
        """Final block sequence, empty blocks dropped, never itself empty.

        When every block is empty the first is kept. When there are no blocks at all a single
        empty default block stands in.
        """
        non_empty = [b for b in blocks if b.text]
        if not non_empty:
            non_empty = blocks[:1] or [ContentBlock(BlockType.UNSTYLED, "")]

        for b in non_empty:
            trace_logger.detail(  # type: ignore
                "assembled %s block, depth=%d, %d characters", b.type, b.depth, len(b)
            )

        return non_empty

    @staticmethod
    def _literal_text_blocks(html: str) -> list[ContentBlock]:
        """The single unstyled block used when `html` cannot be parsed."""
        return [ContentBlock(BlockType.UNSTYLED, collapse_whitespace(html).strip())]
