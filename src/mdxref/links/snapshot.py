"""Read-only lookup tables shared by every document's resolution.

The snapshot is built once, before any worker starts, and only read
afterwards; that is what makes per-document resolution safe to run
concurrently without locks.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from mdxref.config import MdxrefConfig
from mdxref.core.models import Collection, DocumentDescriptor, EntityMatch
from mdxref.links.entity_index import EntityIndexBuilder, collect_entity_references
from mdxref.links.urls import canonicalize, split_url
from mdxref.tracker import IssueTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionSnapshot:
    """Frozen lookup tables for link resolution."""

    documents: tuple[DocumentDescriptor, ...]
    documents_by_url: Mapping[str, DocumentDescriptor]
    collections_by_url: Mapping[str, Collection]
    entity_index: Mapping[str, EntityMatch]
    unresolved_entities: tuple[str, ...] = ()


def build_snapshot(
    documents: Sequence[DocumentDescriptor],
    collections: Sequence[Collection],
    config: MdxrefConfig,
    tracker: IssueTracker | None = None,
) -> ResolutionSnapshot:
    """Index the written documents, collections and entities of a batch."""
    links = config.links
    written = tuple(d for d in documents if d.written)

    def key(url: str) -> str:
        path, _ = split_url(canonicalize(url, links.url_aliases, links.domains))
        return path

    by_url: dict[str, DocumentDescriptor] = {}
    for document in written:
        if document.canonical_url:
            by_url.setdefault(key(document.canonical_url), document)

    collections_by_url = {key(c.book_url): c for c in collections if c.book_url}

    builder = EntityIndexBuilder(written, links)
    entity_index = builder.build(collect_entity_references(written))

    if tracker is not None:
        tracker.set_documents(len(written))
        tracker.set_entity_index(len(entity_index), builder.unresolved)

    logger.info(
        "Snapshot ready: %d documents, %d canonical URLs, %d collections, %d entities",
        len(written),
        len(by_url),
        len(collections_by_url),
        len(entity_index),
    )

    return ResolutionSnapshot(
        documents=written,
        documents_by_url=MappingProxyType(by_url),
        collections_by_url=MappingProxyType(collections_by_url),
        entity_index=MappingProxyType(entity_index),
        unresolved_entities=tuple(builder.unresolved),
    )
