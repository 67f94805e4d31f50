"""Suggestions for an unresolved dotted namespace name."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from . import config
from .scoring import composite_score


def _segment_score(query_parts: List[str], ns_parts: List[str]) -> float:
    """Average score of the matching segments, or 0.0 if too few match."""
    total = 0.0
    matched = 0
    for q, n in zip(query_parts, ns_parts):
        s = composite_score(q, n)
        if s >= config.NAMESPACE_PART_MIN_SCORE:
            total += s
            matched += 1
    if matched == 0 or matched / len(query_parts) < config.NAMESPACE_PART_MIN_RATIO:
        return 0.0
    return total / matched


def suggest_namespaces(
    query: str,
    namespaces: Iterable[str],
    top_k: int = config.TOP_K,
) -> List[Tuple[str, float]]:
    """
    Closest known namespaces to ``query``.

    Whole dotted names are compared first with a stricter threshold.  Only if
    nothing clears it, and the query has several segments, namespaces with the
    same segment count are compared segment by segment.
    """
    if not query:
        return []
    known = list(dict.fromkeys(ns for ns in namespaces if ns))

    result: List[Tuple[str, float]] = []
    for ns in known:
        s = composite_score(query, ns)
        if s >= config.NAMESPACE_FULL_MIN_SCORE:
            result.append((ns, s))

    query_parts = query.split(".")
    if not result and len(query_parts) > 1:
        for ns in known:
            ns_parts = ns.split(".")
            if len(ns_parts) != len(query_parts):
                continue
            avg = _segment_score(query_parts, ns_parts)
            if avg > 0.0:
                result.append((ns, avg))

    result.sort(key=lambda t: -t[1])
    return result[:top_k]
