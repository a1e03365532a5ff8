"""Heading anchor generation.

Anchors are GitHub-style slugs: lowercase, punctuation removed, whitespace
collapsed to single hyphens. Every heading contributes its slug plus a
singular or plural variant to the document's valid anchors, so a reference
spelled "bugbear" still finds a heading spelled "Bugbears".

Duplicate headings inside one document get an internal ``--N`` suffix
(``attack``, ``attack--1``, ``attack--2``). The double hyphen keeps them
distinct from slugs that naturally end in a number; it is rewritten to the
public ``-N`` form only when a link is emitted.
"""

from __future__ import annotations

import re

from mdxref.core.models import FileAnchors

# Anything that is not a letter, digit, whitespace or hyphen (\w also covers "_")
_DISALLOWED = re.compile(r"[^\w\s-]|_")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

DUPLICATE_SEPARATOR = "--"


def generate_anchor(text: str) -> str:
    """Turn heading text into an anchor slug.

    >>> generate_anchor("Bell (1 GP)")
    'bell-1-gp'
    >>> generate_anchor("Opportunity Attack")
    'opportunity-attack'
    """
    anchor = _DISALLOWED.sub("", text.lower())
    anchor = _WHITESPACE.sub("-", anchor)
    anchor = _HYPHENS.sub("-", anchor)
    return anchor.strip("-")


def anchor_variants(anchor: str) -> list[str]:
    """Return the anchor followed by its plural or singular variant."""
    if anchor.endswith("s"):
        if len(anchor) > 1:
            return [anchor, anchor[:-1]]
        return [anchor]
    return [anchor, anchor + "s"]


class AnchorSetBuilder:
    """Accumulates the headings of one document into a FileAnchors value."""

    def __init__(self) -> None:
        self._valid: list[str] = []
        self._seen_valid: set[str] = set()
        self._html_ids: dict[str, str] = {}
        self._occurrences: dict[str, int] = {}

    def add_heading(self, text: str, html_id: str | None = None) -> str | None:
        """Register a heading and return its (possibly disambiguated) anchor.

        Headings that produce an empty slug are ignored and return None.
        """
        base = generate_anchor(text)
        if not base:
            return None

        count = self._occurrences.get(base, 0)
        self._occurrences[base] = count + 1

        if count == 0:
            anchor = base
            for variant in anchor_variants(base):
                self._add_valid(variant)
        else:
            anchor = f"{base}{DUPLICATE_SEPARATOR}{count}"
            self._add_valid(anchor)

        if html_id:
            self._html_ids[html_id] = anchor
        return anchor

    def build(self) -> FileAnchors:
        """Freeze the collected anchors."""
        return FileAnchors(valid=list(self._valid), html_id_to_anchor=dict(self._html_ids))

    def _add_valid(self, anchor: str) -> None:
        if anchor not in self._seen_valid:
            self._seen_valid.add(anchor)
            self._valid.append(anchor)
