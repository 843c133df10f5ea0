"""
Approximate term matching for free-text restaurant search.

Mirrors a search engine ``fuzzy`` query with automatic fuzziness: a query
term matches an indexed token when the edit distance between them is within
a budget that grows with the term length.
"""
from __future__ import annotations

import re

_TOKEN_RE = re.compile(r"\w+")


def tokenize(text: str | None) -> list[str]:
    if not text:
        return []
    return _TOKEN_RE.findall(text.lower())


def max_edits(term: str) -> int:
    """Allowed edits for a term: 0 up to 2 chars, 1 up to 5, 2 beyond."""
    if len(term) <= 2:
        return 0
    if len(term) <= 5:
        return 1
    return 2


def edit_distance(a: str, b: str) -> int:
    """Optimal string alignment distance.

    Counts insertions, deletions, substitutions and transpositions of two
    adjacent characters.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    prev_prev: list[int] = []
    prev = list(range(len(b) + 1))
    for i in range(1, len(a) + 1):
        current = [i] + [0] * len(b)
        for j in range(1, len(b) + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            current[j] = min(
                prev[j] + 1,
                current[j - 1] + 1,
                prev[j - 1] + cost,
            )
            if (
                i > 1
                and j > 1
                and a[i - 1] == b[j - 2]
                and a[i - 2] == b[j - 1]
            ):
                current[j] = min(current[j], prev_prev[j - 2] + 1)
        prev_prev, prev = prev, current
    return prev[-1]


def best_match_distance(query: str, *fields: str | None) -> int | None:
    """Smallest edit distance between any query term and any field token.

    Only pairs within the query term's edit budget count. Returns ``None``
    when nothing matches.
    """
    field_tokens = [tok for f in fields for tok in tokenize(f)]
    best: int | None = None
    for term in tokenize(query):
        budget = max_edits(term)
        for token in field_tokens:
            # Length difference alone already exceeds the budget
            if abs(len(term) - len(token)) > budget:
                continue
            distance = edit_distance(term, token)
            if distance <= budget and (best is None or distance < best):
                best = distance
    return best
