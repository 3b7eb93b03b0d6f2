"""Picker filter matching over display labels.

Substring matches rank first (earlier and shorter is better); when no label
contains the query, a subsequence score is used instead.
"""

from __future__ import annotations

WORD_BOUNDARIES = "/_- ."


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``query`` as an in-order subsequence of ``candidate``.

    Consecutive runs and word-boundary hits score higher; ``None`` means the
    query characters do not all occur in order.
    """
    if not query:
        return 0
    query_folded = query.casefold()
    candidate_folded = candidate.casefold()

    score = 0
    prev_idx = -1
    run = 0
    for needle in query_folded:
        idx = candidate_folded.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            run = 0
            score -= min(40, (idx - prev_idx - 1) * 2)
        if idx == 0 or candidate_folded[idx - 1] in WORD_BOUNDARIES:
            score += 35
        prev_idx = idx
    return score - len(candidate_folded) // 5


def match_labels(query: str, labels: list[str], limit: int = 500) -> list[int]:
    """Return indices of ``labels`` matching ``query``, best first.

    An empty query keeps every label in its original order.
    """
    if not query:
        return list(range(len(labels)))[: max(1, limit)]

    query_folded = query.casefold()
    substring_hits: list[tuple[int, int, int]] = []
    for idx, label in enumerate(labels):
        found = label.casefold().find(query_folded)
        if found >= 0:
            substring_hits.append((found, len(label), idx))
    if substring_hits:
        substring_hits.sort()
        return [idx for _found, _length, idx in substring_hits[: max(1, limit)]]

    scored: list[tuple[int, int, int]] = []
    for idx, label in enumerate(labels):
        score = fuzzy_score(query, label)
        if score is not None:
            scored.append((-score, len(label), idx))
    scored.sort()
    return [idx for _score, _length, idx in scored[: max(1, limit)]]


__all__ = ["fuzzy_score", "match_labels"]
