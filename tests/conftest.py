"""Shared test fixtures for mdxref."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from mdxref.adapters.filesystem import FilesystemDocumentStore
from mdxref.adapters.manifest import Batch
from mdxref.anchors.generator import AnchorSetBuilder
from mdxref.config import LinksConfig, MdxrefConfig
from mdxref.container import Container
from mdxref.core.models import Collection, DocumentDescriptor, FileAnchors
from mdxref.links.urls import parse_entity_url
from mdxref.tracker import IssueTracker


def build_anchors(*headings: str | tuple[str, str]) -> FileAnchors:
    """Build FileAnchors from heading texts or (text, html_id) pairs."""
    builder = AnchorSetBuilder()
    for heading in headings:
        if isinstance(heading, tuple):
            builder.add_heading(*heading)
        else:
            builder.add_heading(heading)
    return builder.build()


def build_document(
    unique_id: str = "a3f9",
    canonical_url: str | None = None,
    headings: tuple[str | tuple[str, str], ...] = (),
    entities: tuple[str, ...] = (),
    **kwargs: Any,
) -> DocumentDescriptor:
    """Create a test document from headings and entity URLs."""
    if "anchors" not in kwargs:
        kwargs["anchors"] = build_anchors(*headings)
    return DocumentDescriptor(
        unique_id=unique_id,
        path=kwargs.pop("path", f"{unique_id}.md"),
        canonical_url=canonical_url,
        entities=[e for e in (parse_entity_url(url) for url in entities) if e is not None],
        **kwargs,
    )


def build_config(**links: Any) -> MdxrefConfig:
    """Create a config with the given links settings."""
    return MdxrefConfig(links=LinksConfig(**links))


@pytest.fixture()
def make_document() -> Callable[..., DocumentDescriptor]:
    """Factory fixture for test documents."""
    return build_document


@pytest.fixture()
def make_config() -> Callable[..., MdxrefConfig]:
    """Factory fixture for configs with custom links settings."""
    return build_config


@pytest.fixture()
def equipment_doc() -> DocumentDescriptor:
    """A document holding equipment headings."""
    return build_document(
        unique_id="eq01",
        canonical_url="/sources/dnd/phb-2024/equipment",
        headings=(
            ("Equipment", "Equipment"),
            ("Bell (1 GP)", "Bell1GP"),
            ("Holy Water (25 GP)", "HolyWater25GP"),
            ("Opportunity Attack", "OpportunityAttack"),
        ),
    )


@pytest.fixture()
def spells_doc() -> DocumentDescriptor:
    """A document holding spell headings."""
    return build_document(
        unique_id="sp01",
        canonical_url="/sources/dnd/phb-2024/spells",
        headings=(("Spells", "Spells"), ("Fireball", "Fireball"), ("Magic Missile", "MagicMissile")),
    )


@pytest.fixture()
def classes_doc() -> DocumentDescriptor:
    """A document whose headings link to entities defined elsewhere."""
    return build_document(
        unique_id="cl01",
        canonical_url="/sources/dnd/phb-2024/classes",
        headings=(("Wizard", "Wizard"), ("Arcane Recovery", "ArcaneRecovery")),
        entities=("/spells/123-fireball", "/equipment/5-bell"),
    )


@pytest.fixture()
def phb_collection() -> Collection:
    """The collection the test documents belong to."""
    return Collection(id="phb0", book_url="/sources/dnd/phb-2024")


@pytest.fixture()
def tracker() -> IssueTracker:
    """A tracker with the default (bold) fallback style."""
    return IssueTracker()


@pytest.fixture()
def batch_dir(
    tmp_path: Path,
    equipment_doc: DocumentDescriptor,
    spells_doc: DocumentDescriptor,
    classes_doc: DocumentDescriptor,
    phb_collection: Collection,
) -> Batch:
    """Write a small rendered batch to disk."""
    (tmp_path / "eq01.md").write_text(
        "# Equipment\n\n## Bell (1 GP)\n\nSee [Fireball](/spells/123-fireball).\n"
    )
    (tmp_path / "sp01.md").write_text(
        "# Spells\n\n## Fireball\n\nUse a [bell](/equipment/5-bell) and [fireball](#Fireball).\n"
        "![Fireball art](https://example.com/fireball.png)\n"
    )
    (tmp_path / "cl01.md").write_text(
        "# Wizard\n\nRead the [Player's Handbook](/sources/dnd/phb-2024) and "
        "[unknown](/sources/dnd/dmg-2024/lore#Dragons).\n"
    )
    return Batch(
        output_dir=tmp_path,
        documents=[equipment_doc, spells_doc, classes_doc],
        collections=[phb_collection],
    )


@pytest.fixture()
def test_container(batch_dir: Batch) -> Container:
    """A container over the on-disk batch."""
    config = build_config(entity_locations={"equipment": ["/sources/dnd/phb-2024/equipment"]})
    return Container(
        config=config,
        batch=batch_dir,
        store=FilesystemDocumentStore(batch_dir.output_dir),
        tracker=IssueTracker(config.links.fallback_style),
    )
