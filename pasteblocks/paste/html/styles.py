"""Resolve the inline styles an element applies to the text it contains.

Styles come from two sources: the tag itself (`<b>`, `<em>`, `<code>` ...) and declarations in the
element's `style` attribute. Both are expressed as lookup tables so a new mapping is a new table
entry.

A resolution is a `StyleDelta`, the style names an element adds and those it removes relative to
what it inherits. Removal matters for pasted content. Word processors commonly wrap a whole
paragraph in `<b>` and then mark the non-bold runs with `font-weight: normal`.
"""

from __future__ import annotations

import dataclasses as dc
import re
from types import MappingProxyType
from typing import Callable, FrozenSet, Iterable, Iterator, Mapping, NamedTuple, Optional

from pasteblocks.documents.content import InlineStyle

BOLD_WEIGHT_THRESHOLD = 500

INLINE_TAG_STYLES: Mapping[str, str] = MappingProxyType(
    {
        "b": InlineStyle.BOLD,
        "strong": InlineStyle.BOLD,
        "code": InlineStyle.CODE,
        "kbd": InlineStyle.CODE,
        "samp": InlineStyle.CODE,
        "tt": InlineStyle.CODE,
        "em": InlineStyle.ITALIC,
        "i": InlineStyle.ITALIC,
        "del": InlineStyle.STRIKETHROUGH,
        "s": InlineStyle.STRIKETHROUGH,
        "strike": InlineStyle.STRIKETHROUGH,
        "ins": InlineStyle.UNDERLINE,
        "u": InlineStyle.UNDERLINE,
    }
)

IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)


# ------------------------------------------------------------------------------------------------
# DECLARATION RULES
# ------------------------------------------------------------------------------------------------


def _font_weight(value: str) -> Optional[int]:
    """Numeric weight for `value`, None when `value` is not a weight this module understands."""
    keywords = {"normal": 400, "lighter": 100, "light": 300, "bold": 700, "bolder": 900}
    if value in keywords:
        return keywords[value]
    try:
        return int(float(value))
    except (OverflowError, ValueError):
        return None


def _is_bold_weight(value: str) -> bool:
    weight = _font_weight(value)
    return weight is not None and weight >= BOLD_WEIGHT_THRESHOLD


def _is_regular_weight(value: str) -> bool:
    weight = _font_weight(value)
    return weight is not None and weight < BOLD_WEIGHT_THRESHOLD


def _has_keyword(*keywords: str) -> Callable[[str], bool]:
    return lambda value: any(k in value.split() for k in keywords)


class DeclarationRule(NamedTuple):
    """Adds and/or removes styles when `predicate` holds for the value of `property`."""

    property: str
    predicate: Callable[[str], bool]
    adds: FrozenSet[str] = frozenset()
    removes: FrozenSet[str] = frozenset()


_DECORATION_LINE = frozenset({InlineStyle.UNDERLINE, InlineStyle.STRIKETHROUGH})

DECLARATION_RULES: tuple[DeclarationRule, ...] = (
    DeclarationRule("font-weight", _is_bold_weight, adds=frozenset({InlineStyle.BOLD})),
    DeclarationRule("font-weight", _is_regular_weight, removes=frozenset({InlineStyle.BOLD})),
    DeclarationRule(
        "font-style", _has_keyword("italic", "oblique"), adds=frozenset({InlineStyle.ITALIC})
    ),
    DeclarationRule("font-style", _has_keyword("normal"), removes=frozenset({InlineStyle.ITALIC})),
    DeclarationRule(
        "text-decoration", _has_keyword("underline"), adds=frozenset({InlineStyle.UNDERLINE})
    ),
    DeclarationRule(
        "text-decoration", _has_keyword("line-through"), adds=frozenset({InlineStyle.STRIKETHROUGH})
    ),
    DeclarationRule("text-decoration", _has_keyword("none"), removes=_DECORATION_LINE),
    DeclarationRule(
        "text-decoration-line", _has_keyword("underline"), adds=frozenset({InlineStyle.UNDERLINE})
    ),
    DeclarationRule(
        "text-decoration-line",
        _has_keyword("line-through"),
        adds=frozenset({InlineStyle.STRIKETHROUGH}),
    ),
    DeclarationRule("text-decoration-line", _has_keyword("none"), removes=_DECORATION_LINE),
)


def iter_declarations(style_attribute: str) -> Iterator[tuple[str, str]]:
    """Generate `(property, value)` for each declaration in an inline `style` attribute.

    Property names and values are lower-cased and stripped; `!important` is dropped. Malformed
    declarations are skipped.

    Example
    -------
    'Font-Weight: BOLD; color:red ; junk' -> ('font-weight', 'bold'), ('color', 'red')
    """
    for declaration in style_attribute.split(";"):
        prop, sep, value = declaration.partition(":")
        prop = prop.strip().lower()
        value = IMPORTANT_RE.sub("", value).strip().lower()
        if sep and prop and value:
            yield prop, value


# ------------------------------------------------------------------------------------------------
# STYLE DELTA
# ------------------------------------------------------------------------------------------------


@dc.dataclass(frozen=True)
class StyleDelta:
    """Style names an element adds to, and removes from, the styles it inherits.

    A name is never in both sets; when tag and declarations disagree, the later one wins.
    """

    adds: FrozenSet[str] = frozenset()
    removes: FrozenSet[str] = frozenset()

    def __bool__(self) -> bool:
        return bool(self.adds or self.removes)

    def apply(self, inherited: FrozenSet[str]) -> FrozenSet[str]:
        """The style set in effect inside the element."""
        if not self:
            return inherited
        return (inherited - self.removes) | self.adds

    def then(self, adds: Iterable[str] = (), removes: Iterable[str] = ()) -> StyleDelta:
        """A new delta with `removes` then `adds` applied after this one."""
        adds, removes = frozenset(adds), frozenset(removes)
        return StyleDelta(
            adds=(self.adds - removes) | adds,
            removes=(self.removes - adds) | removes,
        )


NO_STYLE_CHANGE = StyleDelta()


class StyleResolver:
    """Computes the `StyleDelta` of an element, filtered to the allowed inline styles.

    Styles that are not allowed are dropped silently. They can neither be added nor removed.
    """

    def __init__(self, allowed_styles: Iterable[str]):
        self._allowed = frozenset(allowed_styles)

    def resolve(self, tag: str, style_attribute: Optional[str] = None) -> StyleDelta:
        """Delta for an element with `tag` and inline `style_attribute`."""
        delta = NO_STYLE_CHANGE

        if (tag_style := INLINE_TAG_STYLES.get(tag)) is not None:
            delta = delta.then(adds=(tag_style,))

        for prop, value in iter_declarations(style_attribute or ""):
            for rule in DECLARATION_RULES:
                if rule.property == prop and rule.predicate(value):
                    delta = delta.then(adds=rule.adds, removes=rule.removes)

        if not delta:
            return delta
        return StyleDelta(adds=delta.adds & self._allowed, removes=delta.removes & self._allowed)
