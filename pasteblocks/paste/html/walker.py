"""Depth-first traversal of a parsed fragment, accumulating characters into block buffers.

The walk uses an explicit stack. Each element is visited twice: on enter, where the context its
descendants inherit is computed, and on exit, where a block it opened is closed. Because each stack
entry carries its own `_Context` snapshot, leaving an element restores its parent's style, entity,
and block context without any bookkeeping.
"""

from __future__ import annotations

from typing import FrozenSet, NamedTuple, Optional

from pasteblocks.documents.content import CharacterMetadata, ContentBlock
from pasteblocks.paste.html.blocks import (
    DEFAULT_BLOCK,
    LIST_CONTAINER_TAGS,
    BlockClassification,
    BlockClassifier,
)
from pasteblocks.paste.html.entities import EntityExtractor
from pasteblocks.paste.html.styles import StyleResolver
from pasteblocks.paste.html.tree import ElementNode, Node, TextNode
from pasteblocks.paste.html.whitespace import (
    clean_text,
    collapse_whitespace,
    is_blank,
    render_nbsp,
)

LINE_BREAK_TAG = "br"
ANCHOR_TAG = "a"
IMAGE_TAG = "img"


class _Context(NamedTuple):
    """State an element passes down to its descendants."""

    style: FrozenSet[str] = frozenset()
    entity: Optional[str] = None
    # -- tag and classification of the element that opened the enclosing block, if any --
    block_tag: Optional[str] = None
    block: Optional[BlockClassification] = None
    # -- nearest enclosing list container and the number of enclosing list containers --
    list_tag: Optional[str] = None
    list_depth: int = 0

    @property
    def character(self) -> CharacterMetadata:
        return CharacterMetadata(style=self.style, entity=self.entity)


class _Visit(NamedTuple):
    """One pending step of the traversal."""

    node: Node
    context: _Context
    is_exit: bool = False
    closes_block: bool = False


class _BlockBuffer:
    """Characters accumulated for one block, in document order."""

    def __init__(self, classification: BlockClassification):
        self.classification = classification
        self._text: list[str] = []
        self._characters: list[CharacterMetadata] = []

    def __len__(self) -> int:
        return len(self._text)

    @property
    def is_literal(self) -> bool:
        return self.classification.literal

    def append(self, text: str, character: CharacterMetadata):
        self._text.extend(text)
        self._characters.extend([character] * len(text))

    def ends_with(self, *chars: str) -> bool:
        """True when the last character appended is one of `chars`."""
        return bool(self._text) and self._text[-1] in chars

    def drop_last(self, char: str):
        """Remove the last character appended when it is `char`."""
        if self.ends_with(char):
            self._text.pop()
            self._characters.pop()

    def to_block(self) -> ContentBlock:
        """A `ContentBlock` holding the buffered characters, trimmed at its edges.

        A literal block loses one leading and one trailing newline. Any other block loses its
        trailing collapsed spaces. Non-breaking spaces are rendered as spaces only here, so they
        survive that trimming.
        """
        start, end = 0, len(self._text)
        if self.is_literal:
            if end and self._text[0] == "\n":
                start += 1
            if end > start and self._text[end - 1] == "\n":
                end -= 1
        else:
            while end > start and self._text[end - 1] == " ":
                end -= 1

        return ContentBlock(
            block_type=self.classification.block_type,
            text=render_nbsp("".join(self._text[start:end])),
            characters=self._characters[start:end],
            depth=self.classification.depth,
        )


class TreeWalker:
    """Walks one parsed fragment and produces its block buffers in document order.

    A walker is single-use; construct a new one for each fragment.
    """

    def __init__(
        self,
        classifier: BlockClassifier,
        style_resolver: StyleResolver,
        entity_extractor: EntityExtractor,
    ):
        self._classifier = classifier
        self._style_resolver = style_resolver
        self._entity_extractor = entity_extractor
        self._blocks: list[_BlockBuffer] = []
        self._current: Optional[_BlockBuffer] = None
        self._line_break_pending = False

    def walk(self, root: ElementNode) -> list[_BlockBuffer]:
        """Block buffers for the content of `root`, which itself contributes no block."""
        root_context = _Context()
        stack = [_Visit(child, root_context) for child in reversed(root.children)]

        while stack:
            visit = stack.pop()
            node = visit.node

            if visit.is_exit:
                if visit.closes_block:
                    self._close_block()
                continue

            if isinstance(node, TextNode):
                self._on_text(node.text, visit.context)
                continue

            entered = self._on_enter(node, visit.context)
            if entered is None:
                continue
            context, opened_block = entered
            stack.append(_Visit(node, context, is_exit=True, closes_block=opened_block))
            stack.extend(_Visit(child, context) for child in reversed(node.children))

        return self._blocks

    # -- element handlers ------------------------------------------------------------------------

    def _on_enter(
        self, element: ElementNode, context: _Context
    ) -> Optional[tuple[_Context, bool]]:
        """Context for the children of `element` and whether it opened a block.

        Returns None for void elements, which are fully handled here.
        """
        tag = element.tag

        if tag == LINE_BREAK_TAG:
            self._on_line_break(context)
            return None
        if tag == IMAGE_TAG:
            self._on_image(element, context)
            return None

        style = self._style_resolver.resolve(tag, element.get("style")).apply(context.style)

        entity = context.entity
        if tag == ANCHOR_TAG and (key := self._entity_extractor.link_entity(element)) is not None:
            entity = key

        classification = self._classifier.classify(
            tag,
            enclosing_block_tag=context.block_tag,
            list_tag=context.list_tag,
            list_depth=context.list_depth,
        )

        context = context._replace(style=style, entity=entity)
        if tag in LIST_CONTAINER_TAGS:
            context = context._replace(list_tag=tag, list_depth=context.list_depth + 1)
        if classification is not None:
            self._open_block(classification)
            context = context._replace(block_tag=tag, block=classification)

        return context, classification is not None

    def _on_text(self, text: str, context: _Context):
        text = clean_text(text)
        if not text:
            return

        if self._is_literal(context):
            self._ensure_block(context).append(text, context.character)
            self._line_break_pending = False
            return

        if is_blank(text):
            # -- whitespace between elements counts as one space, and only between content --
            block = self._current
            if block is None or not len(block) or block.ends_with(" ", "\n"):
                return
            block.append(" ", context.character)
            return

        block = self._ensure_block(context)
        text = collapse_whitespace(text)
        if text.startswith(" ") and (not len(block) or block.ends_with(" ", "\n")):
            text = text[1:]
        block.append(text, context.character)
        self._line_break_pending = False

    def _on_line_break(self, context: _Context):
        block = self._current

        if block is not None and block.is_literal:
            block.append("\n", context.character)
            return

        if block is None or not len(block):
            return

        if self._line_break_pending:
            self._close_block()
            self._open_block(DEFAULT_BLOCK)
            return

        # -- a collapsed space does not render at the end of a line --
        block.drop_last(" ")
        block.append("\n", context.character)
        self._line_break_pending = True

    def _on_image(self, image: ElementNode, context: _Context):
        result = self._entity_extractor.image_entity(image)
        if result is None:
            return

        key, text = result
        self._ensure_block(context).append(text, context._replace(entity=key).character)
        self._line_break_pending = False

    # -- block bookkeeping -----------------------------------------------------------------------

    def _is_literal(self, context: _Context) -> bool:
        """True when text arriving in `context` lands in a literal block."""
        if self._current is not None:
            return self._current.is_literal
        return context.block is not None and context.block.literal

    def _open_block(self, classification: BlockClassification):
        self._current = _BlockBuffer(classification)
        self._blocks.append(self._current)
        self._line_break_pending = False

    def _close_block(self):
        self._current = None
        self._line_break_pending = False

    def _ensure_block(self, context: _Context) -> _BlockBuffer:
        """The open block, opening one for orphaned content when none is open."""
        if self._current is None:
            self._open_block(context.block or DEFAULT_BLOCK)
        assert self._current is not None
        return self._current
