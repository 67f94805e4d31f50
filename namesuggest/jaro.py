from __future__ import annotations

from typing import List, Tuple

from .config import WINKLER_MAX_PREFIX, WINKLER_SCALING


# ---------------------------------------------------------------------------
# Match / transposition helpers
# ---------------------------------------------------------------------------

def _find_matches(s1: str, s2: str, match_distance: int) -> Tuple[int, List[bool], List[bool]]:
    """
    Mark characters of ``s1`` and ``s2`` that match within ``match_distance``.

    Both strings are scanned forward and the first unused equal character in
    each window wins.  Changing the scan direction changes which duplicate is
    matched and therefore the transposition count.
    """
    len1, len2 = len(s1), len(s2)
    s1_matches = [False] * len1
    s2_matches = [False] * len2
    matches = 0

    for i in range(len1):
        start = max(0, i - match_distance)
        end = min(i + match_distance + 1, len2)
        ch = s1[i]
        for j in range(start, end):
            if s2_matches[j] or s2[j] != ch:
                continue
            s1_matches[i] = True
            s2_matches[j] = True
            matches += 1
            break

    return matches, s1_matches, s2_matches


def _count_transpositions(s1: str, s2: str, s1_matches: List[bool], s2_matches: List[bool]) -> int:
    transpositions = 0
    k = 0
    for i, matched in enumerate(s1_matches):
        if not matched:
            continue
        while not s2_matches[k]:
            k += 1
        if s1[i] != s2[k]:
            transpositions += 1
        k += 1
    return transpositions // 2


def _jaro_score(matches: int, transpositions: int, len1: int, len2: int) -> float:
    return (matches / len1 + matches / len2 + (matches - transpositions) / matches) / 3.0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def jaro(s1: str, s2: str) -> float:
    """
    Jaro similarity in [0, 1].

    Equal strings (including two empty ones) score 1.0, a single empty string
    scores 0.0.
    """
    if s1 == s2:
        return 1.0

    len1, len2 = len(s1), len(s2)
    if len1 == 0 or len2 == 0:
        return 0.0

    match_distance = max(len1, len2) // 2 - 1
    matches, s1_matches, s2_matches = _find_matches(s1, s2, match_distance)
    if matches == 0:
        return 0.0

    transpositions = _count_transpositions(s1, s2, s1_matches, s2_matches)
    return _jaro_score(matches, transpositions, len1, len2)


def common_prefix_length(s1: str, s2: str, limit: int = WINKLER_MAX_PREFIX) -> int:
    prefix = 0
    for a, b in zip(s1[:limit], s2[:limit]):
        if a != b:
            break
        prefix += 1
    return prefix


def jaro_winkler(s1: str, s2: str) -> float:
    """Jaro similarity boosted by up to four shared leading characters."""
    sim = jaro(s1, s2)
    prefix = common_prefix_length(s1, s2)
    return sim + prefix * WINKLER_SCALING * (1 - sim)
