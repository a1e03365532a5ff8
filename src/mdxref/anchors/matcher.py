"""Anchor matcher: a ranked cascade of matching strategies.

Search terms (entity slugs, normalised HTML ids) and candidate anchors
(generated from headings) come from different free-text sources, so they
disagree on pluralisation, punctuation, qualifiers ("50 gp", "varies") and
word order. Strategies are tried from most to least precise; the first
strategy with at least one matching candidate wins and its step number is
the confidence of the match (1 = exact).

Steps:
    1.  exact, ignoring a trailing ``--N`` duplicate suffix
    2.  exact after stripping a trailing "s" from both sides
    3.  candidate words start with the search words
    4.  as 3, each word singularised
    5.  exact with hyphens removed
    6.  as 5, singularised
    7.  candidate (no hyphens) starts with search (no hyphens)
    8.  as 7, singularised
    9.  search starts with ``candidate + "-"``           (longest wins)
    10. candidate words are an ordered subset of search (longest wins)
    11. as 10, each word singularised                    (longest wins)
    12. every singularised search word appears in the candidate
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from mdxref.core.models import AnchorMatch

_DUPLICATE_SUFFIX = re.compile(r"--\d+$")

MAX_STEP = 12


def singularize(word: str) -> str:
    """Strip one trailing "s"."""
    return word[:-1] if word.endswith("s") else word


@dataclass(frozen=True)
class AnchorForms:
    """Pre-computed normalised forms of one anchor string."""

    original: str
    norm: str
    norm_singular: str
    no_hyphens: str
    no_hyphens_singular: str
    words: tuple[str, ...]
    words_singular: tuple[str, ...]

    @classmethod
    def of(cls, anchor: str, strip_duplicate: bool = True) -> AnchorForms:
        norm = _DUPLICATE_SUFFIX.sub("", anchor) if strip_duplicate else anchor
        words = tuple(norm.split("-"))
        no_hyphens = norm.replace("-", "")
        return cls(
            original=anchor,
            norm=norm,
            norm_singular=singularize(norm),
            no_hyphens=no_hyphens,
            no_hyphens_singular=singularize(no_hyphens),
            words=words,
            words_singular=tuple(singularize(w) for w in words),
        )


Predicate = Callable[[AnchorForms, AnchorForms], bool]


@dataclass(frozen=True)
class Strategy:
    """One rung of the cascade: predicate(search, candidate) plus tie-break."""

    step: int
    name: str
    predicate: Predicate
    prefer_longest: bool = False

    def pick(self, matches: Sequence[AnchorForms]) -> AnchorForms:
        """Reduce this strategy's matches to a single winner.

        Equal lengths keep the earliest candidate.
        """
        if self.prefer_longest:
            return max(matches, key=lambda m: len(m.original))
        return min(matches, key=lambda m: len(m.original))


def _is_prefix(prefix: Sequence[str], words: Sequence[str]) -> bool:
    return len(prefix) <= len(words) and tuple(words[: len(prefix)]) == tuple(prefix)


def _is_subsequence(needle: Sequence[str], haystack: Sequence[str]) -> bool:
    remaining = iter(haystack)
    return all(word in remaining for word in needle)


def _word_subset(s: AnchorForms, c: AnchorForms) -> bool:
    return len(c.words) >= 2 and _is_subsequence(c.words, s.words)


def _word_subset_singular(s: AnchorForms, c: AnchorForms) -> bool:
    return len(c.words_singular) >= 2 and _is_subsequence(c.words_singular, s.words_singular)


def _unordered_words(s: AnchorForms, c: AnchorForms) -> bool:
    if len(s.words) < 2 or len(c.words) < 2:
        return False
    available = set(c.words_singular)
    return all(word in available for word in s.words_singular)


STRATEGIES: tuple[Strategy, ...] = (
    Strategy(1, "exact", lambda s, c: c.norm == s.norm),
    Strategy(2, "exact-singular", lambda s, c: c.norm_singular == s.norm_singular),
    Strategy(3, "word-prefix", lambda s, c: _is_prefix(s.words, c.words)),
    Strategy(4, "word-prefix-singular", lambda s, c: _is_prefix(s.words_singular, c.words_singular)),
    Strategy(5, "exact-no-hyphens", lambda s, c: c.no_hyphens == s.no_hyphens),
    Strategy(
        6,
        "exact-no-hyphens-singular",
        lambda s, c: c.no_hyphens_singular == s.no_hyphens_singular,
    ),
    Strategy(7, "prefix-no-hyphens", lambda s, c: c.no_hyphens.startswith(s.no_hyphens)),
    Strategy(
        8,
        "prefix-no-hyphens-singular",
        lambda s, c: c.no_hyphens_singular.startswith(s.no_hyphens_singular),
    ),
    Strategy(9, "reverse-prefix", lambda s, c: s.norm.startswith(c.norm + "-"), prefer_longest=True),
    Strategy(10, "word-subset", _word_subset, prefer_longest=True),
    Strategy(11, "word-subset-singular", _word_subset_singular, prefer_longest=True),
    Strategy(12, "unordered-words", _unordered_words),
)
"""The cascade, highest confidence first."""

_STRATEGY_BY_STEP = {strategy.step: strategy for strategy in STRATEGIES}


def strategy_for_step(step: int) -> Strategy:
    """Look up a strategy by its step number."""
    return _STRATEGY_BY_STEP[step]


def find_match(
    search: str,
    candidates: Sequence[str],
    max_step: int | None = None,
) -> AnchorMatch | None:
    """Find the best candidate anchor for a search term.

    Args:
        search: Anchor-like search term (entity slug, normalised HTML id).
        candidates: A document's valid anchors, in document order.
        max_step: Optional last strategy to try; later steps are skipped.

    Returns:
        The winning anchor and the step that produced it, or None.
    """
    if not search or not candidates:
        return None

    query = AnchorForms.of(search, strip_duplicate=False)
    forms = [AnchorForms.of(candidate) for candidate in candidates]
    last = MAX_STEP if max_step is None else max_step

    for strategy in STRATEGIES:
        if strategy.step > last:
            break
        matches = [form for form in forms if strategy.predicate(query, form)]
        if matches:
            return AnchorMatch(anchor=strategy.pick(matches).original, step=strategy.step)

    return None


def explain_match(
    search: str,
    candidates: Sequence[str],
    max_step: int | None = None,
) -> tuple[AnchorMatch, str] | None:
    """Like find_match, but also name the strategy that matched."""
    match = find_match(search, candidates, max_step)
    if match is None:
        return None
    return match, strategy_for_step(match.step).name
