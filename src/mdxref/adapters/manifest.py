"""Batch manifest loading.

The manifest is what the HTML conversion step leaves behind for link
resolution: one entry per output document (its ID, rendered path,
canonical URL and either precomputed anchors or its headings) plus the
collections whose index files may be linked directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from mdxref.anchors.generator import AnchorSetBuilder
from mdxref.core.errors import ManifestError
from mdxref.core.models import Collection, DocumentDescriptor, EntityReference, FileAnchors
from mdxref.links.urls import normalize_url, parse_entity_url

logger = logging.getLogger(__name__)


class HeadingYAML(BaseModel):
    """A heading as recorded by the converter."""

    text: str
    html_id: str | None = None
    links: list[str] = Field(default_factory=list, description="URLs linked from the heading")


class DocumentYAML(BaseModel):
    """Document entry from the manifest file."""

    unique_id: str
    path: str
    canonical_url: str | None = None
    written: bool = True
    anchors: FileAnchors | None = None
    headings: list[HeadingYAML] | None = None
    entities: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_anchor_source(self) -> DocumentYAML:
        """Anchors come either precomputed or from headings, not both."""
        if self.anchors is not None and self.headings is not None:
            raise ValueError(f"Document {self.unique_id!r}: give 'anchors' or 'headings', not both")
        return self


class ManifestYAML(BaseModel):
    """Top-level manifest file."""

    output_dir: str = "."
    collections: list[Collection] = Field(default_factory=list)
    documents: list[DocumentYAML] = Field(default_factory=list)


@dataclass
class Batch:
    """A converted batch ready for link resolution."""

    output_dir: Path
    documents: list[DocumentDescriptor] = field(default_factory=list)
    collections: list[Collection] = field(default_factory=list)


def build_descriptor(entry: DocumentYAML) -> DocumentDescriptor:
    """Turn a manifest entry into a DocumentDescriptor."""
    anchors = entry.anchors
    entity_urls = list(entry.entities)

    if entry.headings is not None:
        builder = AnchorSetBuilder()
        for heading in entry.headings:
            builder.add_heading(heading.text, heading.html_id)
            entity_urls.extend(heading.links)
        anchors = builder.build()

    return DocumentDescriptor(
        unique_id=entry.unique_id,
        path=entry.path,
        canonical_url=entry.canonical_url,
        anchors=anchors,
        entities=_parse_entities(entity_urls),
        written=entry.written,
    )


def _parse_entities(urls: list[str]) -> list[EntityReference]:
    entities = []
    for url in urls:
        entity = parse_entity_url(normalize_url(url).partition("#")[0])
        if entity is not None:
            entities.append(entity)
    return entities


def load_manifest(path: str | Path) -> Batch:
    """Load and validate a batch manifest (YAML or JSON).

    Raises:
        ManifestError: If the manifest is missing, unreadable, or invalid.
    """
    manifest_path = Path(path).expanduser()

    if not manifest_path.exists():
        raise ManifestError(f"Manifest not found: {manifest_path}")

    try:
        raw = manifest_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot read manifest: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in manifest: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError("Manifest must contain a mapping")

    try:
        manifest = ManifestYAML(**data)
    except Exception as e:
        raise ManifestError(f"Invalid manifest: {e}") from e

    seen: set[str] = set()
    for entry in manifest.documents:
        if entry.unique_id in seen:
            raise ManifestError(f"Duplicate document id: {entry.unique_id}")
        seen.add(entry.unique_id)

    output_dir = Path(manifest.output_dir).expanduser()
    if not output_dir.is_absolute():
        output_dir = manifest_path.parent / output_dir

    documents = [build_descriptor(entry) for entry in manifest.documents]
    logger.info(
        "Loaded manifest %s: %d documents, %d collections",
        manifest_path,
        len(documents),
        len(manifest.collections),
    )
    return Batch(output_dir=output_dir, documents=documents, collections=manifest.collections)
