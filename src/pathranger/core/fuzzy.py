"""Fuzzy search over visited directories.

The matcher scores a query against a candidate path by aligning the query's
characters, in order, somewhere inside the candidate. Among all alignments
the best-scoring one wins:

    - every matched character earns SCORE_MATCH
    - matches at word starts (after / - _ . or space) earn BONUS_BOUNDARY,
      camelCase humps earn BONUS_CAMEL; the first query character counts double
    - each pair of adjacent matches earns BONUS_CONSECUTIVE
    - a gap costs SCORE_GAP_START plus SCORE_GAP_EXTENSION per extra character
    - a case-insensitive substring hit adds BONUS_SUBSTRING per query character

Candidates the query is not a subsequence of are dropped, not scored zero.
Matching is case-insensitive unless the query contains an uppercase letter.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from pathranger.core.store import Store
from pathranger.core.visits import all_paths

SCORE_MATCH = 16
SCORE_GAP_START = -3
SCORE_GAP_EXTENSION = -1
BONUS_BOUNDARY = 8
BONUS_CAMEL = 7
BONUS_CONSECUTIVE = 4
BONUS_FIRST_CHAR_MULTIPLIER = 2
BONUS_SUBSTRING = 2

DEFAULT_LIMIT = 10

_DELIMITERS = frozenset("/\\-_. ")


@dataclass(frozen=True, slots=True)
class FuzzyScore:
    score: int
    positions: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class SearchMatch:
    path: str
    score: int
    positions: tuple[int, ...] = ()


def _char_bonus(text: str, index: int) -> int:
    if index == 0:
        return BONUS_BOUNDARY
    prev, current = text[index - 1], text[index]
    if prev in _DELIMITERS:
        return BONUS_BOUNDARY
    if prev.islower() and current.isupper():
        return BONUS_CAMEL
    return 0


def _is_subsequence(query: list[str], text: list[str]) -> bool:
    it = iter(text)
    return all(ch in it for ch in query)


def fuzzy_score(query: str, candidate: str) -> FuzzyScore | None:
    """Score ``candidate`` against ``query``; None when there is no match."""
    if not query:
        return FuzzyScore(score=0, positions=())

    # Folded per character so indices stay aligned with the candidate.
    if any(ch.isupper() for ch in query):
        needle, haystack = list(query), list(candidate)
    else:
        needle = [ch.lower() for ch in query]
        haystack = [ch.lower() for ch in candidate]

    if not _is_subsequence(needle, haystack):
        return None

    n, m = len(needle), len(haystack)
    bonuses = [_char_bonus(candidate, j) for j in range(m)]

    prev_row: list[int | None] = []
    backrefs: list[list[int]] = []

    for i in range(n):
        row: list[int | None] = [None] * m
        row_back = [-1] * m
        gap_best: int | None = None
        gap_from = -1

        for j in range(i, m):
            if i > 0:
                if gap_best is not None:
                    gap_best += SCORE_GAP_EXTENSION
                if j >= 2:
                    entering = prev_row[j - 2]
                    if entering is not None and (
                        gap_best is None or entering + SCORE_GAP_START > gap_best
                    ):
                        gap_best = entering + SCORE_GAP_START
                        gap_from = j - 2

            if haystack[j] != needle[i]:
                continue

            if i == 0:
                row[j] = SCORE_MATCH + bonuses[j] * BONUS_FIRST_CHAR_MULTIPLIER
                continue

            best: int | None = None
            source = -1
            diagonal = prev_row[j - 1]
            if diagonal is not None:
                best = diagonal + SCORE_MATCH + bonuses[j] + BONUS_CONSECUTIVE
                source = j - 1
            if gap_best is not None:
                gapped = gap_best + SCORE_MATCH + bonuses[j]
                if best is None or gapped > best:
                    best = gapped
                    source = gap_from
            row[j] = best
            row_back[j] = source

        prev_row = row
        backrefs.append(row_back)

    end = -1
    total: int | None = None
    for j, value in enumerate(prev_row):
        if value is not None and (total is None or value > total):
            total = value
            end = j

    if total is None:
        return None

    positions = [end]
    for i in range(n - 1, 0, -1):
        positions.append(backrefs[i][positions[-1]])
    positions.reverse()

    if query.lower() in candidate.lower():
        total += BONUS_SUBSTRING * n

    return FuzzyScore(score=total, positions=tuple(positions))


def rank(query: str, candidates: Iterable[str], limit: int = DEFAULT_LIMIT) -> list[SearchMatch]:
    """Best matches first; equal scores fall back to path order."""
    matches: list[SearchMatch] = []
    for path in candidates:
        result = fuzzy_score(query, path)
        if result is not None:
            matches.append(SearchMatch(path=path, score=result.score, positions=result.positions))
    matches.sort(key=lambda match: (-match.score, match.path))
    return matches[: max(limit, 0)]


def search(store: Store, query: str, limit: int = DEFAULT_LIMIT) -> list[SearchMatch]:
    return rank(query, all_paths(store), limit=limit)


__all__ = ["DEFAULT_LIMIT", "FuzzyScore", "SearchMatch", "fuzzy_score", "rank", "search"]
