"""Link resolution: rewrite site links in rendered Markdown to local targets.

For each ``[text](url)`` in a document:

- links to output files, images and foreign sites are left alone;
- ``#id`` same-page links are looked up in the document's own HTML id map
  (exact only; misses stay as they are);
- entity URLs go through the entity index;
- source URLs resolve to a collection index, or to a document plus an
  anchor matched against that document's headings;
- anything else is rendered with the configured fallback style and
  recorded as an issue.
"""

from __future__ import annotations

import logging
import re

from mdxref.anchors.matcher import find_match
from mdxref.config import MdxrefConfig
from mdxref.core.models import (
    DocumentDescriptor,
    FallbackStyle,
    IssueReason,
    LinkTarget,
    Unresolved,
    UrlKind,
)
from mdxref.links.snapshot import ResolutionSnapshot
from mdxref.links.urls import (
    canonicalize,
    classify,
    format_anchor,
    normalize_anchor,
    normalize_url,
    should_resolve,
    split_url,
)
from mdxref.tracker import IssueTracker

logger = logging.getLogger(__name__)

_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_IMAGE_LINE = re.compile(r"^\s*!")


class LinkResolver:
    """Rewrites the links of one document at a time against a snapshot."""

    def __init__(
        self,
        snapshot: ResolutionSnapshot,
        config: MdxrefConfig,
        tracker: IssueTracker,
    ) -> None:
        self._snapshot = snapshot
        self._config = config
        self._tracker = tracker
        links = config.links
        # Compared against the aliased link path, so entries are not aliased themselves
        self._exclude = frozenset(normalize_url(url, links.domains) for url in links.exclude_urls)

    def resolve_content(self, content: str, document: DocumentDescriptor) -> str:
        """Resolve every link in a document's content; image lines are kept verbatim."""
        lines = content.split("\n")
        return "\n".join(
            line if _IMAGE_LINE.match(line) else self._resolve_line(line, document)
            for line in lines
        )

    def _resolve_line(self, line: str, document: DocumentDescriptor) -> str:
        return _LINK_PATTERN.sub(
            lambda m: self.resolve_link(m.group(1), m.group(2), document),
            line,
        )

    def resolve_link(self, text: str, url: str, document: DocumentDescriptor) -> str:
        """Return the Markdown that replaces ``[text](url)`` in ``document``."""
        original = f"[{text}]({url})"
        output = self._config.output
        if not should_resolve(url, self._config.links.domains, output.extension, output.id_length):
            return original

        if url.startswith("#"):
            return self._resolve_same_page(text, url[1:], document, original)

        path, anchor = self.parse_url(url)

        if path in self._exclude:
            return self._fallback(text) or original

        result = self.resolve_target(path, anchor, document)
        if isinstance(result, LinkTarget):
            self._tracker.increment_resolved()
            return self._render(text, result, document)

        logger.debug("Unresolved link %s in %s (%s)", url, document.path, result.reason.value)
        fallback = self._fallback(text)
        if fallback is None:
            return original
        self._tracker.track_link_issue(document.path, text, url, result.reason)
        return fallback

    def parse_url(self, url: str) -> tuple[str, str | None]:
        """Split a link into canonical path and anchor.

        An alias may itself point at ``path#anchor``; its anchor then
        replaces the one on the link.
        """
        links = self._config.links
        raw_path, anchor = split_url(url)
        path = canonicalize(raw_path, links.url_aliases, links.domains)
        if "#" in path:
            path, alias_anchor = split_url(path)
            anchor = alias_anchor or anchor
        return path, anchor

    def resolve_target(
        self,
        path: str,
        anchor: str | None,
        document: DocumentDescriptor,
    ) -> LinkTarget | Unresolved:
        """Map a canonical path and anchor to a local target."""
        kind = classify(path)
        if kind is UrlKind.ENTITY:
            match = self._snapshot.entity_index.get(path)
            if match is None:
                return Unresolved(reason=IssueReason.ENTITY_NOT_FOUND)
            return LinkTarget(file_id=match.file_id, anchor=anchor or match.anchor)

        if kind is UrlKind.SOURCE:
            return self._resolve_source(path, anchor)

        return Unresolved(reason=IssueReason.URL_NOT_IN_MAPPING)

    def _resolve_source(self, path: str, anchor: str | None) -> LinkTarget | Unresolved:
        if not anchor:
            collection = self._snapshot.collections_by_url.get(path)
            if collection is not None:
                return LinkTarget(file_id=collection.id)
            if path in self._snapshot.documents_by_url:
                # Document-level links have no Markdown target
                return Unresolved(reason=IssueReason.HEADER_LINK)
            return Unresolved(reason=IssueReason.URL_NOT_IN_MAPPING)

        target = self._snapshot.documents_by_url.get(path)
        if target is None:
            return Unresolved(reason=IssueReason.URL_NOT_IN_MAPPING)

        anchors = target.anchors
        if anchors is None or not (anchors.valid or anchors.html_id_to_anchor):
            return Unresolved(reason=IssueReason.NO_ANCHORS)

        matched = anchors.html_id_to_anchor.get(anchor)
        if matched is None:
            result = find_match(
                normalize_anchor(anchor),
                anchors.valid,
                self._config.links.max_match_step,
            )
            if result is None:
                return Unresolved(reason=IssueReason.ANCHOR_NOT_FOUND)
            matched = result.anchor

        return LinkTarget(file_id=target.unique_id, anchor=matched)

    def _resolve_same_page(
        self,
        text: str,
        html_id: str,
        document: DocumentDescriptor,
        original: str,
    ) -> str:
        if document.anchors is None:
            return original
        anchor = document.anchors.html_id_to_anchor.get(html_id)
        if anchor is None:
            return original
        self._tracker.increment_resolved()
        return f"[{text}](#{format_anchor(anchor)})"

    def _render(self, text: str, target: LinkTarget, document: DocumentDescriptor) -> str:
        anchor = format_anchor(target.anchor)
        if target.file_id == document.unique_id:
            # "#" alone for a target without anchor
            return f"[{text}](#{anchor})"
        filename = f"{target.file_id}{self._config.output.extension}"
        if anchor:
            return f"[{text}]({filename}#{anchor})"
        return f"[{text}]({filename})"

    def _fallback(self, text: str) -> str | None:
        """Render unresolved link text; None means keep the original link."""
        markdown = self._config.markdown
        style = self._config.links.fallback_style
        if style is FallbackStyle.NONE:
            return None
        if style is FallbackStyle.ITALIC:
            return f"{markdown.emphasis}{text}{markdown.emphasis}"
        if style is FallbackStyle.PLAIN:
            return text
        return f"{markdown.strong}{text}{markdown.strong}"
