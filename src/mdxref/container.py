"""Dependency injection container for mdxref."""

from __future__ import annotations

from dataclasses import dataclass, field

from mdxref.adapters.manifest import Batch
from mdxref.config import MdxrefConfig
from mdxref.core.interfaces import DocumentStorePort
from mdxref.tracker import IssueTracker


@dataclass
class Container:
    """DI container holding the batch, its store and run-wide collaborators."""

    config: MdxrefConfig
    batch: Batch
    store: DocumentStorePort
    tracker: IssueTracker = field(default_factory=IssueTracker)

    @staticmethod
    def create_default(config: MdxrefConfig, batch: Batch) -> Container:
        """Create a container with production adapters."""
        from mdxref.adapters.filesystem import FilesystemDocumentStore

        return Container(
            config=config,
            batch=batch,
            store=FilesystemDocumentStore(batch.output_dir),
            tracker=IssueTracker(config.links.fallback_style),
        )

    @staticmethod
    def create_for_testing(
        config: MdxrefConfig | None = None,
        batch: Batch | None = None,
        store: DocumentStorePort | None = None,
        tracker: IssueTracker | None = None,
    ) -> Container:
        """Create a container with test/mock adapters.

        All parameters are optional. Provide mocks for the components
        you want to control in tests.
        """
        from pathlib import Path

        if config is None:
            config = MdxrefConfig()

        if batch is None:
            batch = Batch(output_dir=Path("."))

        # Use a stub that raises if accidentally called without being mocked
        class StubDocumentStore(DocumentStorePort):
            def read_text(self, path: str) -> str:
                raise NotImplementedError("Provide a mock store")

            def write_text(self, path: str, content: str) -> None:
                raise NotImplementedError("Provide a mock store")

        return Container(
            config=config,
            batch=batch,
            store=store or StubDocumentStore(),
            tracker=tracker or IssueTracker(config.links.fallback_style),
        )
