"""Entity index: where does each referenced entity's heading live?

Entity references (a spell linked from a class feature heading, an item in
an equipment table...) point at site URLs such as ``/spells/123-fireball``.
The index maps each canonical entity URL to the output document and anchor
of the heading that best matches the entity's slug. It is built once per
run, after every document is processed and before any is rewritten,
because a link in one document may target a heading in any other.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from mdxref.anchors.matcher import find_match
from mdxref.config import LinksConfig
from mdxref.core.models import DocumentDescriptor, EntityMatch, EntityReference
from mdxref.links.urls import canonicalize, parse_entity_url, split_url

logger = logging.getLogger(__name__)


def collect_entity_references(documents: Iterable[DocumentDescriptor]) -> list[EntityReference]:
    """Gather entity references from all documents, in document order."""
    return [entity for document in documents for entity in document.entities]


class EntityIndexBuilder:
    """Builds the entity URL -> (file, anchor) index.

    Candidate documents for an entity type are restricted by
    ``links.entity_locations``: only documents whose aliased canonical URL
    starts with one of the configured prefixes are searched. Types without
    an entry search every document.
    """

    def __init__(self, documents: Sequence[DocumentDescriptor], config: LinksConfig) -> None:
        self._config = config
        self._documents = [d for d in documents if d.written and d.anchors is not None]
        self._unresolved: list[str] = []
        self._candidates: dict[str, list[DocumentDescriptor]] = {}

    @property
    def unresolved(self) -> list[str]:
        """Canonical entity URLs that matched no heading in the last build."""
        return list(self._unresolved)

    def build(self, references: Iterable[EntityReference]) -> dict[str, EntityMatch]:
        """Resolve every distinct entity reference.

        References are deduplicated by canonical URL; the first occurrence
        of a URL decides its entry.
        """
        index: dict[str, EntityMatch] = {}
        attempted: set[str] = set()
        self._unresolved = []

        for reference in references:
            url, _ = split_url(self._canonical(reference.url))
            if url in attempted:
                continue
            attempted.add(url)

            entity = parse_entity_url(url) or reference
            match = self.resolve(entity)
            if match is None:
                logger.debug("No heading found for entity %s", url)
                self._unresolved.append(url)
                continue

            logger.debug("Entity %s -> %s#%s", url, match.file_id, match.anchor)
            index[url] = match

        logger.info(
            "Entity index built: %d resolved, %d unresolved",
            len(index),
            len(self._unresolved),
        )
        return index

    def resolve(self, entity: EntityReference) -> EntityMatch | None:
        """Find the best heading for one entity across its candidate documents."""
        if not entity.slug:
            return None

        best: tuple[EntityMatch, int] | None = None
        for document in self.candidates_for(entity.type):
            if document.anchors is None:
                continue
            result = find_match(entity.slug, document.anchors.valid, self._config.max_match_step)
            if result is None:
                continue
            if best is None or result.step < best[1]:
                best = (EntityMatch(file_id=document.unique_id, anchor=result.anchor), result.step)
                if result.step == 1:
                    break

        return best[0] if best else None

    def candidates_for(self, entity_type: str) -> list[DocumentDescriptor]:
        """Documents allowed to define entities of the given type."""
        cached = self._candidates.get(entity_type)
        if cached is not None:
            return cached

        prefixes = self._config.entity_locations.get(entity_type)
        if prefixes is None:
            candidates = list(self._documents)
        else:
            candidates = []
            seen: set[str] = set()
            for prefix in prefixes:
                for document in self._documents:
                    if document.canonical_url is None or document.unique_id in seen:
                        continue
                    if self._canonical(document.canonical_url).startswith(prefix):
                        seen.add(document.unique_id)
                        candidates.append(document)

        self._candidates[entity_type] = candidates
        return candidates

    def _canonical(self, url: str) -> str:
        return canonicalize(url, self._config.url_aliases, self._config.domains)
