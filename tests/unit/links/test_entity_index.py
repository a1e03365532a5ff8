"""Tests for the entity index builder."""

from __future__ import annotations

from typing import Any

from mdxref.config import LinksConfig
from mdxref.core.models import DocumentDescriptor, EntityMatch
from mdxref.links.entity_index import EntityIndexBuilder, collect_entity_references
from mdxref.links.urls import parse_entity_url


def refs(*urls: str) -> list:
    return [parse_entity_url(url) for url in urls]


class TestCollectEntityReferences:
    """Tests for collect_entity_references()."""

    def test_document_order(self, classes_doc: DocumentDescriptor, make_document: Any) -> None:
        other = make_document("zz01", entities=("/monsters/7-goblin",))
        urls = [e.url for e in collect_entity_references([classes_doc, other])]
        assert urls == ["/spells/123-fireball", "/equipment/5-bell", "/monsters/7-goblin"]


class TestEntityIndexBuilder:
    """Tests for EntityIndexBuilder.build()."""

    def test_round_trip(self, spells_doc: DocumentDescriptor) -> None:
        builder = EntityIndexBuilder([spells_doc], LinksConfig())
        index = builder.build(refs("/spells/123-fireball"))
        assert index["/spells/123-fireball"] == EntityMatch(file_id="sp01", anchor="fireball")

    def test_location_restriction(
        self,
        equipment_doc: DocumentDescriptor,
        spells_doc: DocumentDescriptor,
        make_document: Any,
    ) -> None:
        decoy = make_document("dc01", canonical_url="/sources/dnd/other/bells", headings=("Bell",))
        config = LinksConfig(entity_locations={"equipment": ["/sources/dnd/phb-2024/equipment"]})
        builder = EntityIndexBuilder([decoy, spells_doc, equipment_doc], config)
        index = builder.build(refs("/equipment/5-bell"))
        assert index["/equipment/5-bell"] == EntityMatch(file_id="eq01", anchor="bell-1-gp")

    def test_unrestricted_type_searches_all(self, equipment_doc: DocumentDescriptor) -> None:
        builder = EntityIndexBuilder([equipment_doc], LinksConfig())
        index = builder.build(refs("/equipment/5-holy-water"))
        assert index["/equipment/5-holy-water"].anchor == "holy-water-25-gp"

    def test_lowest_step_wins_across_documents(self, make_document: Any) -> None:
        loose = make_document("lo01", headings=("Bugbears",))
        exact = make_document("ex01", headings=("Bugbear Chief", "Bugbear"))
        builder = EntityIndexBuilder([loose, exact], LinksConfig())
        index = builder.build(refs("/monsters/9-bugbear"))
        # "bugbears" also yields the variant "bugbear", an exact hit in the first document
        assert index["/monsters/9-bugbear"] == EntityMatch(file_id="lo01", anchor="bugbear")

    def test_better_step_in_later_document(self, make_document: Any) -> None:
        prefix = make_document("pr01", headings=("Bugbear Stalker",))
        exact = make_document("ex01", headings=("Bugbear",))
        builder = EntityIndexBuilder([prefix, exact], LinksConfig())
        index = builder.build(refs("/monsters/9-bugbear"))
        assert index["/monsters/9-bugbear"].file_id == "ex01"

    def test_unresolved_tracked(self, spells_doc: DocumentDescriptor) -> None:
        builder = EntityIndexBuilder([spells_doc], LinksConfig())
        index = builder.build(refs("/spells/1-wish", "/monsters/2"))
        assert index == {}
        assert builder.unresolved == ["/spells/1-wish", "/monsters/2"]

    def test_deduplicates_by_canonical_url(self, spells_doc: DocumentDescriptor) -> None:
        config = LinksConfig(url_aliases={"/spells/999-fire-ball": "/spells/123-fireball"})
        builder = EntityIndexBuilder([spells_doc], config)
        index = builder.build(refs("/spells/999-fire-ball", "/spells/123-fireball"))
        assert list(index) == ["/spells/123-fireball"]

    def test_max_match_step_limits_matching(self, equipment_doc: DocumentDescriptor) -> None:
        builder = EntityIndexBuilder([equipment_doc], LinksConfig(max_match_step=2))
        index = builder.build(refs("/equipment/5-bell"))
        assert index == {}

    def test_unwritten_documents_ignored(self, make_document: Any) -> None:
        pending = make_document("pe01", headings=("Fireball",), written=False)
        builder = EntityIndexBuilder([pending], LinksConfig())
        assert builder.build(refs("/spells/123-fireball")) == {}

    def test_candidates_use_aliased_canonical_url(self, make_document: Any) -> None:
        doc = make_document(
            "fr01",
            canonical_url="/sources/dnd/free-rules/equipment",
            headings=("Bell",),
        )
        config = LinksConfig(
            url_aliases={"/sources/dnd/free-rules/equipment": "/sources/dnd/phb-2024/equipment"},
            entity_locations={"equipment": ["/sources/dnd/phb-2024/equipment"]},
        )
        builder = EntityIndexBuilder([doc], config)
        assert [d.unique_id for d in builder.candidates_for("equipment")] == ["fr01"]
