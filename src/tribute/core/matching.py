# matching.py
# SPDX-License-Identifier: MIT
"""Edit-distance helpers used for "did you mean" suggestions."""

from __future__ import annotations

from collections.abc import Iterable

__all__ = [
    "edit_distance",
    "best_matches",
    "closest_match",
]


def edit_distance(lhs: str, rhs: str) -> int:
    """Return the Levenshtein distance between two strings.

    Insertions, deletions and substitutions all cost 1. The comparison is
    exact; callers lowercase first when they want case-insensitivity.
    """
    if lhs == rhs:
        return 0
    if not lhs:
        return len(rhs)
    if not rhs:
        return len(lhs)
    previous = list(range(len(rhs) + 1))
    for i, left in enumerate(lhs, start=1):
        current = [i]
        for j, right in enumerate(rhs, start=1):
            if left == right:
                current.append(previous[j - 1])
            else:
                current.append(min(previous[j], current[j - 1], previous[j - 1]) + 1)
        previous = current
    return previous[-1]


def best_matches(query: str, candidates: Iterable[str]) -> list[str]:
    """Return candidates close to ``query``, nearest first.

    A candidate qualifies when its case-insensitive edit distance is at most
    half the query length, or when it starts with the same letter as the
    query. Equal distances keep their input order.

    Args:
        query (str): The misspelled value.
        candidates (Iterable[str]): Valid values to choose from.

    Returns:
        list[str]: Qualifying candidates in their original spelling; empty
        when nothing qualifies.
    """
    lowered_query = query.lower()
    threshold = len(lowered_query) // 2
    scored: list[tuple[int, str]] = []
    for candidate in candidates:
        lowered = candidate.lower()
        distance = edit_distance(lowered, lowered_query)
        shares_prefix = bool(lowered) and bool(lowered_query) and lowered[0] == lowered_query[0]
        if distance <= threshold or shares_prefix:
            scored.append((distance, candidate))
    scored.sort(key=lambda item: item[0])
    return [candidate for _, candidate in scored]


def closest_match(query: str, candidates: Iterable[str]) -> str | None:
    """Return the single best suggestion for ``query``, if any."""
    matches = best_matches(query, candidates)
    return matches[0] if matches else None
