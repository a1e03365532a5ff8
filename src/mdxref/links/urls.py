"""URL classification, normalisation and aliasing.

Every key used against the entity index or the per-URL document table must
go through ``canonicalize`` first: raw URLs differ in domain, trailing
slashes and aliasing, and using them directly makes lookups silently miss.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping

from mdxref.core.models import EntityReference, UrlKind

ENTITY_TYPES: tuple[str, ...] = (
    "spells",
    "monsters",
    "magic-items",
    "equipment",
    "classes",
    "feats",
    "species",
    "backgrounds",
)
"""Closed set of first path segments that denote entity URLs."""

SOURCE_PREFIX = "/sources/"

DEFAULT_DOMAINS: tuple[str, ...] = (
    "https://www.dndbeyond.com",
    "http://www.dndbeyond.com",
)

_ENTITY_TYPES_PATTERN = "|".join(re.escape(t) for t in ENTITY_TYPES)
_ENTITY_PATH = re.compile(rf"^/({_ENTITY_TYPES_PATTERN})/")
_ENTITY_URL = re.compile(rf"^/({_ENTITY_TYPES_PATTERN})/(\d+)(?:-(.+))?$")
_IMAGE_URL = re.compile(r"\.(jpe?g|png|gif|webp|svg)$", re.IGNORECASE)
_DUPLICATE_SUFFIX = re.compile(r"--(\d+)$")
_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_NON_ANCHOR = re.compile(r"[^a-z0-9-]")
_HYPHENS = re.compile(r"-+")


def normalize_url(url: str, domains: Iterable[str] = DEFAULT_DOMAINS) -> str:
    """Normalise a link URL to a rooted ``/path#anchor`` form.

    >>> normalize_url("https://www.dndbeyond.com/sources/dnd/phb-2024/spells/#fireball")
    '/sources/dnd/phb-2024/spells#fireball'
    >>> normalize_url("sources/dnd/phb-2024/spells/")
    '/sources/dnd/phb-2024/spells'
    """
    normalized = url
    for domain in domains:
        prefix = domain.rstrip("/") + "/"
        if normalized.startswith(prefix):
            normalized = normalized[len(prefix) :]
            break

    normalized = normalized.replace("/#", "#", 1)
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized[:-1]

    if normalized and not normalized.startswith(("/", "#")):
        normalized = "/" + normalized
    return normalized


def split_url(url: str) -> tuple[str, str | None]:
    """Split ``path#anchor`` into path and anchor (None when absent or empty)."""
    path, _, anchor = url.partition("#")
    return path, anchor or None


def apply_alias(path: str, aliases: Mapping[str, str]) -> str:
    """Rewrite a path through the alias table; unknown paths pass through."""
    return aliases.get(path, path)


def canonicalize(
    url: str,
    aliases: Mapping[str, str],
    domains: Iterable[str] = DEFAULT_DOMAINS,
) -> str:
    """Normalise then alias a URL path."""
    return apply_alias(normalize_url(url, domains), aliases)


def classify(path: str) -> UrlKind:
    """Classify a normalised path."""
    if path.startswith("#"):
        return UrlKind.INTERNAL_ANCHOR
    if is_entity_url(path):
        return UrlKind.ENTITY
    if is_source_url(path):
        return UrlKind.SOURCE
    return UrlKind.EXTERNAL


def is_entity_url(path: str) -> bool:
    return _ENTITY_PATH.match(path) is not None


def is_source_url(path: str) -> bool:
    return path.startswith(SOURCE_PREFIX)


def is_image_url(url: str) -> bool:
    return _IMAGE_URL.search(url) is not None


def is_site_url(url: str, domains: Iterable[str] = DEFAULT_DOMAINS) -> bool:
    """True when the URL points at one of the configured source domains."""
    return any(url.startswith(domain.rstrip("/")) for domain in domains)


def is_local_markdown(url: str, extension: str = ".md", id_length: int = 4) -> bool:
    """True for links that already point at an output file."""
    if url.endswith(extension):
        return True
    return re.match(rf"^[a-z0-9]{{{id_length}}}{re.escape(extension)}", url) is not None


def should_resolve(
    url: str,
    domains: Iterable[str] = DEFAULT_DOMAINS,
    extension: str = ".md",
    id_length: int = 4,
) -> bool:
    """Decide whether a link is a candidate for resolution at all."""
    if url.startswith("#"):
        return True
    if is_local_markdown(url, extension, id_length):
        return False
    if is_image_url(url):
        return False
    if is_site_url(url, domains):
        return True
    return is_source_url(url) or is_entity_url(url)


def parse_entity_url(path: str) -> EntityReference | None:
    """Parse ``/{type}/{digits}(-{slug})?`` into an EntityReference.

    >>> parse_entity_url("/spells/2619022-magic-missile").slug
    'magic-missile'
    >>> parse_entity_url("/sources/dnd/phb") is None
    True
    """
    match = _ENTITY_URL.match(path)
    if match is None:
        return None
    entity_type, numeric_id, slug = match.groups()
    return EntityReference(type=entity_type, numeric_id=numeric_id, slug=slug, url=path)


def normalize_anchor(anchor: str) -> str:
    """Convert an HTML id such as ``OpportunityAttack`` into ``opportunity-attack``."""
    anchor = _CAMEL_BOUNDARY.sub(r"\1-\2", anchor).lower()
    anchor = _NON_ANCHOR.sub("-", anchor)
    anchor = _HYPHENS.sub("-", anchor)
    return anchor.strip("-")


def format_anchor(anchor: str) -> str:
    """Rewrite the internal ``--N`` duplicate suffix to the public ``-N``."""
    return _DUPLICATE_SUFFIX.sub(r"-\1", anchor)
