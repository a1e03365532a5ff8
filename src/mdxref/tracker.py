"""Issue tracking for a resolution run.

Documents are resolved concurrently in worker threads, so every mutation
goes through a lock. Link issues are suppressed entirely when the fallback
style is ``none``: the user asked to keep raw links and nothing is lost.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter

from mdxref.core.models import (
    FallbackStyle,
    FileIssue,
    FileIssueReason,
    IssueReason,
    LinkIssue,
    ResolutionSummary,
)

logger = logging.getLogger(__name__)


class IssueTracker:
    """Collects unresolved links, file errors and counters."""

    def __init__(self, fallback_style: FallbackStyle = FallbackStyle.BOLD) -> None:
        self._fallback_style = fallback_style
        self._lock = threading.Lock()
        self._link_issues: list[LinkIssue] = []
        self._file_issues: list[FileIssue] = []
        self._resolved = 0
        self._rewritten = 0
        self._documents = 0
        self._unresolved_entities: list[str] = []
        self._entity_index_size = 0
        self._started = time.monotonic()

    @property
    def link_issues(self) -> list[LinkIssue]:
        with self._lock:
            return list(self._link_issues)

    @property
    def file_issues(self) -> list[FileIssue]:
        with self._lock:
            return list(self._file_issues)

    def track_link_issue(self, path: str, text: str, url: str, reason: IssueReason) -> None:
        """Record an unresolved link (no-op for fallback style none)."""
        if self._fallback_style == FallbackStyle.NONE:
            return
        issue = LinkIssue(path=path, text=text, url=url, reason=reason)
        with self._lock:
            self._link_issues.append(issue)

    def track_file_error(self, path: str, error: Exception, context: str = "read") -> None:
        """Record a document that could not be read or written."""
        reason = FileIssueReason.WRITE_ERROR if context == "write" else FileIssueReason.READ_ERROR
        logger.warning("Failed to %s %s: %s", context, path, error)
        with self._lock:
            self._file_issues.append(FileIssue(path=path, reason=reason, details=str(error)))

    def increment_resolved(self) -> None:
        with self._lock:
            self._resolved += 1

    def increment_rewritten(self) -> None:
        with self._lock:
            self._rewritten += 1

    def set_documents(self, count: int) -> None:
        with self._lock:
            self._documents = count

    def set_entity_index(self, size: int, unresolved: list[str]) -> None:
        """Record the outcome of the entity index build."""
        with self._lock:
            self._entity_index_size = size
            self._unresolved_entities = list(unresolved)

    def summary(self, dry_run: bool = False) -> ResolutionSummary:
        """Snapshot the counters into a ResolutionSummary."""
        with self._lock:
            counts = Counter(issue.reason for issue in self._link_issues)
            return ResolutionSummary(
                documents=self._documents,
                rewritten=self._rewritten,
                resolved_links=self._resolved,
                issues_by_reason={reason: counts[reason] for reason in IssueReason if counts[reason]},
                file_issues=list(self._file_issues),
                entity_index_size=self._entity_index_size,
                unresolved_entities=list(self._unresolved_entities),
                dry_run=dry_run,
                duration_seconds=time.monotonic() - self._started,
            )
