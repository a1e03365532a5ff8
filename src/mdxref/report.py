"""Plain-text summary of a resolution run."""

from __future__ import annotations

from collections.abc import Sequence

from mdxref.core.models import IssueReason, LinkIssue, ResolutionSummary

_REASON_LABELS: dict[IssueReason, str] = {
    IssueReason.URL_NOT_IN_MAPPING: "URL not in mapping",
    IssueReason.ENTITY_NOT_FOUND: "Entity not found",
    IssueReason.ANCHOR_NOT_FOUND: "Anchor not found",
    IssueReason.NO_ANCHORS: "No anchors in target",
    IssueReason.HEADER_LINK: "Header links (downgraded)",
}


def render_summary(
    summary: ResolutionSummary,
    issues: Sequence[LinkIssue] = (),
    verbose: bool = False,
    examples: int = 5,
) -> list[str]:
    """Render the summary as lines of text.

    Issues are grouped by reason in a fixed order. In verbose mode up to
    ``examples`` concrete links are listed under each reason.
    """
    title = "Link Resolution Summary" + (" (dry run)" if summary.dry_run else "")
    lines = [title, "=" * 40]
    lines.append(f"  Documents:          {summary.documents}")
    rewritten_label = "Would rewrite:" if summary.dry_run else "Rewritten:"
    lines.append(f"  {rewritten_label:<20}{summary.rewritten}")
    lines.append(f"  Resolved links:     {summary.resolved_links}")
    lines.append(f"  Unresolved links:   {summary.unresolved_links}")
    lines.append(
        f"  Entity index:       {summary.entity_index_size} resolved, "
        f"{len(summary.unresolved_entities)} unresolved"
    )

    if summary.issues_by_reason:
        lines.append("")
        lines.append("Unresolved links by reason:")
        for reason in IssueReason:
            count = summary.issues_by_reason.get(reason, 0)
            if not count:
                continue
            lines.append(f"  {_REASON_LABELS[reason]} [{reason.value}]: {count}")
            if verbose:
                shown = [i for i in issues if i.reason == reason][:examples]
                for issue in shown:
                    lines.append(f"    - {issue.path}: [{issue.text}]({issue.url})")
                if count > len(shown):
                    lines.append(f"    ... and {count - len(shown)} more")

    if summary.file_issues:
        lines.append("")
        lines.append("File errors:")
        for file_issue in summary.file_issues:
            lines.append(f"  {file_issue.path} [{file_issue.reason.value}]: {file_issue.details}")

    if verbose and summary.unresolved_entities:
        lines.append("")
        lines.append("Unresolved entities:")
        for url in summary.unresolved_entities[:examples]:
            lines.append(f"    - {url}")
        remaining = len(summary.unresolved_entities) - examples
        if remaining > 0:
            lines.append(f"    ... and {remaining} more")

    lines.append("")
    lines.append(f"Completed in {summary.duration_seconds:.2f}s")
    return lines
