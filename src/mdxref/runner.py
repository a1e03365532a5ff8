"""Resolution runner: builds the snapshot, then rewrites documents concurrently."""

from __future__ import annotations

import asyncio
import logging

from mdxref.container import Container
from mdxref.core.errors import DocumentIOError
from mdxref.core.models import DocumentDescriptor, ResolutionSummary
from mdxref.links.resolver import LinkResolver
from mdxref.links.snapshot import build_snapshot

logger = logging.getLogger(__name__)


class ResolutionRunner:
    """Runs one link-resolution pass over a converted batch.

    The snapshot (document tables and entity index) is fully built before
    the first worker starts and is never mutated afterwards. Each worker
    touches only its own document, so the read-resolve-write cycles run
    in a bounded thread pool without further locking. A document that
    cannot be read or written is recorded and skipped.
    """

    def __init__(self, container: Container) -> None:
        self._container = container

    async def run(self, dry_run: bool = False) -> ResolutionSummary:
        """Resolve every written document of the batch."""
        container = self._container
        tracker = container.tracker

        if not container.config.links.resolve_internal:
            logger.info("Link resolution disabled; nothing to do")
            return tracker.summary(dry_run=dry_run)

        snapshot = build_snapshot(
            container.batch.documents,
            container.batch.collections,
            container.config,
            tracker,
        )
        resolver = LinkResolver(snapshot, container.config, tracker)

        semaphore = asyncio.Semaphore(container.config.workers)

        async def worker(document: DocumentDescriptor) -> None:
            async with semaphore:
                await asyncio.to_thread(self._process_document, resolver, document, dry_run)

        logger.info(
            "Resolving links in %d documents (%d workers%s)",
            len(snapshot.documents),
            container.config.workers,
            ", dry run" if dry_run else "",
        )
        await asyncio.gather(*(worker(document) for document in snapshot.documents))

        summary = tracker.summary(dry_run=dry_run)
        logger.info(
            "Resolved %d links, %d unresolved, %d documents rewritten",
            summary.resolved_links,
            summary.unresolved_links,
            summary.rewritten,
        )
        return summary

    def _process_document(
        self,
        resolver: LinkResolver,
        document: DocumentDescriptor,
        dry_run: bool = False,
    ) -> None:
        """Read, resolve and (if changed) write one document."""
        store = self._container.store
        tracker = self._container.tracker

        try:
            content = store.read_text(document.path)
        except DocumentIOError as e:
            tracker.track_file_error(document.path, e, "read")
            return

        resolved = resolver.resolve_content(content, document)
        if resolved == content:
            logger.debug("No changes in %s", document.path)
            return

        if dry_run:
            logger.debug("Would rewrite %s", document.path)
            tracker.increment_rewritten()
            return

        try:
            store.write_text(document.path, resolved)
        except DocumentIOError as e:
            tracker.track_file_error(document.path, e, "write")
            return

        logger.debug("Rewrote %s", document.path)
        tracker.increment_rewritten()


async def run_resolution(container: Container, dry_run: bool = False) -> ResolutionSummary:
    """One-shot resolution pass over the container's batch."""
    runner = ResolutionRunner(container)
    return await runner.run(dry_run=dry_run)
