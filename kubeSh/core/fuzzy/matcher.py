# kubeSh/core/fuzzy/matcher.py
"""
Fuzzy matching for completion suggestions and picker filtering.

Candidates are ranked by how closely they match a query: exact match, prefix,
substring and finally in-order subsequence. A subsequence match earns a bonus
that shrinks as the matched span grows, so compact matches sort first.
"""

import re
import logging
from typing import List, NamedTuple, Optional, Sequence

from kubeSh.constants import (
    RANK_EXACT,
    RANK_PREFIX,
    RANK_SUBSTRING,
    RANK_SUBSEQUENCE,
    MAX_COMPACTNESS_BONUS,
)

logger = logging.getLogger(__name__)

class ScoredCandidate(NamedTuple):
    """A candidate paired with its rank for a single match call"""
    candidate: str
    rank: int

def _subsequence_pattern(query: str) -> "re.Pattern[str]":
    # Every query character is escaped so user input never acts as a pattern
    return re.compile(".*".join(re.escape(char) for char in query))

def _rank(query: str, candidate: str, pattern: "re.Pattern[str]") -> int:
    lowered = candidate.lower()
    if lowered == query:
        return RANK_EXACT
    if lowered.startswith(query):
        return RANK_PREFIX
    if query in lowered:
        return RANK_SUBSTRING

    found = pattern.search(lowered)
    if found is None:
        return 0
    span = found.end() - found.start()
    return RANK_SUBSEQUENCE + max(0, MAX_COMPACTNESS_BONUS - (span - len(query)))

def rank(query: str, candidate: Optional[str]) -> int:
    """
    Score a single candidate against a query.

    Args:
        query: The text typed by the user
        candidate: The candidate to score

    Returns:
        The rank (100, 80, 60 or 40-60), or 0 when the candidate does not match
    """
    if not query or not candidate:
        return 0
    lowered_query = query.lower()
    return _rank(lowered_query, candidate, _subsequence_pattern(lowered_query))

def score(query: str, candidates: Sequence[Optional[str]]) -> List[ScoredCandidate]:
    """
    Score every matching candidate, preserving input order.

    Empty or None candidates are skipped, as are candidates that do not match.
    """
    lowered_query = query.lower()
    pattern = _subsequence_pattern(lowered_query)

    scored = []
    for candidate in candidates:
        if not candidate:
            continue
        candidate_rank = _rank(lowered_query, candidate, pattern)
        if candidate_rank > 0:
            scored.append(ScoredCandidate(candidate, candidate_rank))
    return scored

def match(query: str, candidates: Sequence[Optional[str]]) -> List[str]:
    """
    Filter and rank candidates against a query.

    An empty query returns the candidate list unchanged. Otherwise only matching
    candidates are returned, ordered by descending rank. The sort is stable so
    candidates of equal rank keep their input order.

    Args:
        query: The text typed by the user
        candidates: Ordered candidate strings

    Returns:
        The matching candidates, best first
    """
    if not query:
        return candidates if isinstance(candidates, list) else list(candidates)

    scored = score(query, candidates)
    scored.sort(key=lambda item: item.rank, reverse=True)
    logger.debug(f"Fuzzy match '{query}': {len(scored)} of {len(candidates)} candidates")
    return [item.candidate for item in scored]
