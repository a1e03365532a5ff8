"""Tests for domain models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from mdxref.core.models import (
    DocumentDescriptor,
    FallbackStyle,
    FileAnchors,
    IssueReason,
    LinkTarget,
    ResolutionSummary,
    UrlKind,
)


class TestEnums:
    """Tests for string enums."""

    def test_values(self) -> None:
        assert UrlKind.INTERNAL_ANCHOR.value == "internal-anchor"
        assert FallbackStyle("italic") is FallbackStyle.ITALIC
        assert IssueReason.HEADER_LINK.value == "header-link"

    def test_reason_order(self) -> None:
        assert [r.value for r in IssueReason] == [
            "url-not-in-mapping",
            "entity-not-found",
            "anchor-not-found",
            "no-anchors",
            "header-link",
        ]


class TestDocumentDescriptor:
    """Tests for DocumentDescriptor."""

    def test_defaults(self) -> None:
        doc = DocumentDescriptor(unique_id="a3f9", path="a3f9.md")
        assert doc.canonical_url is None
        assert doc.anchors is None
        assert doc.entities == []
        assert doc.written is True

    def test_frozen(self) -> None:
        doc = DocumentDescriptor(unique_id="a3f9", path="a3f9.md")
        with pytest.raises(ValidationError):
            doc.unique_id = "b000"  # type: ignore[misc]

    def test_with_anchors(self) -> None:
        anchors = FileAnchors(valid=["fireball"], html_id_to_anchor={"Fireball": "fireball"})
        doc = DocumentDescriptor(unique_id="sp01", path="sp01.md", anchors=anchors)
        assert doc.anchors is not None
        assert doc.anchors.html_id_to_anchor["Fireball"] == "fireball"


class TestLinkTarget:
    """Tests for LinkTarget."""

    def test_empty_anchor_means_file(self) -> None:
        assert LinkTarget(file_id="phb0").anchor == ""


class TestResolutionSummary:
    """Tests for ResolutionSummary."""

    def test_unresolved_links_sums_reasons(self) -> None:
        summary = ResolutionSummary(
            issues_by_reason={IssueReason.NO_ANCHORS: 2, IssueReason.HEADER_LINK: 3}
        )
        assert summary.unresolved_links == 5

    def test_defaults(self) -> None:
        summary = ResolutionSummary()
        assert summary.unresolved_links == 0
        assert summary.dry_run is False
