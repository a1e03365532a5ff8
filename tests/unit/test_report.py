"""Tests for the summary report."""

from __future__ import annotations

from mdxref.core.models import (
    FileIssue,
    FileIssueReason,
    IssueReason,
    LinkIssue,
    ResolutionSummary,
)
from mdxref.report import render_summary


def issue(text: str, reason: IssueReason = IssueReason.URL_NOT_IN_MAPPING) -> LinkIssue:
    return LinkIssue(path="a3f9.md", text=text, url=f"/sources/dnd/x#{text}", reason=reason)


class TestRenderSummary:
    """Tests for render_summary()."""

    def test_totals(self) -> None:
        summary = ResolutionSummary(
            documents=4,
            rewritten=3,
            resolved_links=10,
            entity_index_size=7,
            unresolved_entities=["/spells/1-wish"],
            duration_seconds=1.234,
        )
        lines = render_summary(summary)
        assert lines[0] == "Link Resolution Summary"
        assert "  Documents:          4" in lines
        assert "  Rewritten:          3" in lines
        assert "  Resolved links:     10" in lines
        assert "  Unresolved links:   0" in lines
        assert "  Entity index:       7 resolved, 1 unresolved" in lines
        assert lines[-1] == "Completed in 1.23s"
        assert "Unresolved links by reason:" not in lines

    def test_dry_run_labels(self) -> None:
        lines = render_summary(ResolutionSummary(rewritten=2, dry_run=True))
        assert lines[0] == "Link Resolution Summary (dry run)"
        assert "  Would rewrite:      2" in lines

    def test_reasons_in_fixed_order(self) -> None:
        summary = ResolutionSummary(
            issues_by_reason={IssueReason.HEADER_LINK: 1, IssueReason.URL_NOT_IN_MAPPING: 2}
        )
        lines = render_summary(summary)
        start = lines.index("Unresolved links by reason:")
        assert lines[start + 1 : start + 3] == [
            "  URL not in mapping [url-not-in-mapping]: 2",
            "  Header links (downgraded) [header-link]: 1",
        ]

    def test_verbose_examples(self) -> None:
        issues = [issue(f"t{i}") for i in range(7)]
        summary = ResolutionSummary(issues_by_reason={IssueReason.URL_NOT_IN_MAPPING: 7})
        lines = render_summary(summary, issues, verbose=True)
        assert "    - a3f9.md: [t0](/sources/dnd/x#t0)" in lines
        assert "    - a3f9.md: [t5](/sources/dnd/x#t5)" not in lines
        assert "    ... and 2 more" in lines

    def test_examples_hidden_without_verbose(self) -> None:
        summary = ResolutionSummary(issues_by_reason={IssueReason.URL_NOT_IN_MAPPING: 1})
        lines = render_summary(summary, [issue("t0")])
        assert not any(line.startswith("    - ") for line in lines)

    def test_file_errors(self) -> None:
        summary = ResolutionSummary(
            file_issues=[
                FileIssue(path="b.md", reason=FileIssueReason.READ_ERROR, details="missing")
            ]
        )
        lines = render_summary(summary)
        assert "File errors:" in lines
        assert "  b.md [read-error]: missing" in lines

    def test_unresolved_entities_listed_when_verbose(self) -> None:
        summary = ResolutionSummary(unresolved_entities=["/spells/1-wish", "/monsters/2"])
        lines = render_summary(summary, verbose=True, examples=1)
        assert "Unresolved entities:" in lines
        assert "    - /spells/1-wish" in lines
        assert "    ... and 1 more" in lines
