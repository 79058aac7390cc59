"""Link and image entities extracted from `<a>` and `<img>` elements."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from pasteblocks.documents.content import EntityMap, EntityType, Mutability
from pasteblocks.logger import logger
from pasteblocks.paste.html.tree import ElementNode

# -- schemes that execute code when the reference is followed --
SCRIPT_SCHEMES = frozenset({"javascript", "livescript", "vbscript"})

# -- anchor and image attributes carried into entity data, when present --
ANCHOR_ATTRIBUTES = ("href", "rel", "target", "title")
IMAGE_ATTRIBUTES = ("alt", "height", "src", "width")

# -- browsers ignore ASCII whitespace and control characters anywhere in a URL scheme --
SCHEME_NOISE_RE = re.compile(r"[\x00-\x20\x7f]+")
SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.\-]*):")
DATA_IMAGE_RE = re.compile(r"^data:image/", re.IGNORECASE)


def url_scheme(url: str) -> Optional[str]:
    """Lower-case scheme of `url` as a browser would read it, None for a relative reference.

    Example
    -------
    ' Java\tScript:alert(1)' -> 'javascript'
    """
    match = SCHEME_RE.match(SCHEME_NOISE_RE.sub("", url).lower())
    return match.group(1) if match else None


def is_safe_link(href: Optional[str]) -> bool:
    """True when `href` is non-empty and following it cannot execute script."""
    if not href or not href.strip():
        return False
    scheme = url_scheme(href)
    return scheme not in SCRIPT_SCHEMES and scheme != "data"


def is_safe_image_source(src: Optional[str]) -> bool:
    """True when `src` is non-empty and names an image rather than script.

    `data:` sources are accepted only when their media type is an image.
    """
    if not src or not src.strip():
        return False
    scheme = url_scheme(src)
    if scheme == "data":
        return bool(DATA_IMAGE_RE.match(src.strip()))
    return scheme not in SCRIPT_SCHEMES


def normalize_url(url: str) -> str:
    """Normalized form of a link reference.

    Scheme and host of hierarchical http(s) URLs are lower-cased and a bare origin gets a trailing
    slash. `mailto:` and any other reference is returned verbatim apart from surrounding
    whitespace.

    Example
    -------
    'HTTP://www.Example.com' -> 'http://www.example.com/'
    """
    url = url.strip()
    scheme = url_scheme(url)
    if scheme not in ("http", "https"):
        return url

    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    # -- user-info is case-sensitive, leave a netloc carrying it alone --
    netloc = parts.netloc if "@" in parts.netloc else parts.netloc.lower()
    path = parts.path or ("/" if netloc else "")
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


class EntityExtractor:
    """Creates LINK and IMAGE entities in `entity_map` for the elements that qualify.

    Links and images are gated independently by `allow_links` and `allow_images`. An element that
    does not qualify produces no entity. For an anchor that means its content remains as plain
    inline content.
    """

    def __init__(self, entity_map: EntityMap, allow_links: bool = True, allow_images: bool = False):
        self._entity_map = entity_map
        self._allow_links = allow_links
        self._allow_images = allow_images

    def link_entity(self, anchor: ElementNode) -> Optional[str]:
        """Key of a new LINK entity for `anchor`, None when links are off or the href is unsafe."""
        if not self._allow_links:
            return None

        href = anchor.get("href")
        if not is_safe_link(href):
            logger.debug("dropping link with empty or unsafe reference %r", href)
            return None

        data = {
            name: value for name in ANCHOR_ATTRIBUTES if (value := anchor.get(name) or "").strip()
        }
        data["url"] = normalize_url(href or "")
        return self._entity_map.create(EntityType.LINK, Mutability.MUTABLE, data)

    def image_entity(self, image: ElementNode) -> Optional[tuple[str, str]]:
        """`(entity_key, text)` for `image`, None when images are off or the source is unusable.

        The text is the image's textual representation, its source URL.
        """
        if not self._allow_images:
            return None

        src = (image.get("src") or "").strip()
        if not is_safe_image_source(src):
            logger.debug("dropping image with empty or unsafe source %r", src)
            return None

        data = {
            name: value for name in IMAGE_ATTRIBUTES if (value := image.get(name) or "").strip()
        }
        data["src"] = src
        return self._entity_map.create(EntityType.IMAGE, Mutability.IMMUTABLE, data), src
