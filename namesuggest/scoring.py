"""
Composite similarity between a query name and a candidate name.

score = jaro_winkler(normalized)
        + exact-match bonus
        + containment bonus
        + token-overlap bonus
        - length penalty

No clamping: scores can exceed 1.0 (or dip below 0.0) and consumers compare
against the fixed MIN_SCORE threshold instead of normalising.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from loguru import logger

from . import config
from .jaro import jaro_winkler
from .normalize import normalize, unique_tokens
from .pipeline_types import Candidate, ScoredCandidate

V = TypeVar("V")


# ---------------------------------------------------------------------------
# Score components
# ---------------------------------------------------------------------------

def _token_bonus(query: str, candidate: str) -> float:
    bonus = 0.0
    matched = 0
    cand_tokens = unique_tokens(candidate)
    for tq in unique_tokens(query):
        for tc in cand_tokens:
            if tq == tc:
                bonus += config.TOKEN_EXACT_BONUS
                matched += 1
            elif tq.startswith(tc) or tc.startswith(tq):
                bonus += config.TOKEN_PARTIAL_BONUS
                matched += 1
    if matched >= config.MULTI_TOKEN_MIN_PAIRS:
        bonus += config.MULTI_TOKEN_BONUS
    return bonus


def _components(query: str, candidate: str) -> Tuple[float, float, float, float, float]:
    norm_query = normalize(query)
    norm_candidate = normalize(candidate)

    base = jaro_winkler(norm_query, norm_candidate)
    exact = config.EXACT_MATCH_BONUS if norm_query == norm_candidate else 0.0

    # an empty side contains nothing
    contains = bool(norm_query) and bool(norm_candidate) and (
        norm_query in norm_candidate or norm_candidate in norm_query
    )
    containment = config.CONTAINMENT_BONUS if contains else 0.0

    tokens = _token_bonus(query, candidate)
    penalty = max(0, len(candidate) - len(query)) * config.LENGTH_PENALTY_PER_CHAR
    return base, exact, containment, tokens, penalty


def composite_score(query: str, candidate: str) -> float:
    """Composite similarity of ``candidate`` to ``query`` (unbounded)."""
    base, exact, containment, tokens, penalty = _components(query, candidate)
    return base + exact + containment + tokens - penalty


def explain_score(query: str, candidate: str) -> Dict[str, float]:
    """
    Per-component breakdown of :func:`composite_score`.

    Useful for inspecting why a name ranks where it does; ``final`` is the
    exact value ``composite_score`` returns.
    """
    base, exact, containment, tokens, penalty = _components(query, candidate)
    return {
        "base": base,
        "exact": exact,
        "containment": containment,
        "tokens": tokens,
        "length_penalty": penalty,
        "final": base + exact + containment + tokens - penalty,
    }


def is_self_match(query: str, candidate: str) -> bool:
    """True when ``candidate`` is the query itself once normalised."""
    return normalize(query) == normalize(candidate)


# ---------------------------------------------------------------------------
# Pool scoring
# ---------------------------------------------------------------------------

def score_candidates(
    query: str,
    candidates: Sequence[Candidate],
    max_workers: Optional[int] = None,
) -> List[ScoredCandidate]:
    """
    Score every candidate against ``query``, keeping input order.

    With ``max_workers > 1`` and a large enough pool the work is spread over a
    thread pool; results are identical to the sequential path.
    """
    if max_workers is None:
        max_workers = config.SCORING_WORKERS

    keys = [c.key for c in candidates]
    if max_workers > 1 and len(keys) >= config.PARALLEL_MIN_CANDIDATES:
        logger.debug("Scoring {} candidates on {} workers", len(keys), max_workers)
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            scores = list(pool.map(composite_score, [query] * len(keys), keys))
    else:
        scores = [composite_score(query, k) for k in keys]

    return [ScoredCandidate(candidate=c, similarity_score=s) for c, s in zip(candidates, scores)]


# ---------------------------------------------------------------------------
# Flat finders (no tiers, no dedup)
# ---------------------------------------------------------------------------

def find_similar_symbols(
    query: str,
    entries: Iterable[Tuple[str, V]],
    top_k: int = config.TOP_K,
) -> List[Tuple[str, V, float]]:
    """
    Rank ``(key, value)`` pairs against ``query``.

    Keys may repeat.  Empty keys and keys equal to the query are skipped: an
    existing exact name would already have resolved.
    """
    scored = [
        (key, value, composite_score(query, key))
        for key, value in entries
        if key and key != query
    ]
    kept = [t for t in scored if t[2] >= config.MIN_SCORE]
    kept.sort(key=lambda t: -t[2])
    return kept[:top_k]


def find_similar_names(
    query: str,
    names: Iterable[str],
    top_k: int = config.TOP_K,
) -> List[Tuple[str, float]]:
    """Rank plain names against ``query`` (no self exclusion)."""
    scored = [(n, composite_score(query, n)) for n in names if n]
    kept = [t for t in scored if t[1] >= config.MIN_SCORE]
    kept.sort(key=lambda t: -t[1])
    return kept[:top_k]


def find_possible_exports(
    query: str,
    exports: Optional[Iterable[str]],
    top_k: int = config.TOP_K,
) -> List[Tuple[str, float]]:
    """Like :func:`find_similar_names` but strictly above the threshold."""
    if exports is None:
        return []
    scored = [(n, composite_score(query, n)) for n in exports if n]
    kept = [t for t in scored if t[1] > config.MIN_SCORE]
    kept.sort(key=lambda t: -t[1])
    return kept[:top_k]
