from __future__ import annotations

from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from loguru import logger

from . import config
from .context import UsagePosition, filter_candidates
from .pipeline_types import (
    Candidate,
    ContractViolation,
    ProvenanceTier,
    ScoredCandidate,
    Suggestion,
    Symbol,
)
from .scoring import is_self_match, score_candidates

# ---------------------------------------------------------------------------
# Bonus tables
# ---------------------------------------------------------------------------

# no UNKNOWN entry
TIER_BONUS: Mapping[ProvenanceTier, float] = {
    ProvenanceTier.LOCAL_SCOPE: config.LOCAL_SCOPE_BONUS,
    ProvenanceTier.CURRENT_CLASS: config.CURRENT_CLASS_BONUS,
    ProvenanceTier.CURRENT_PROJECT: config.CURRENT_PROJECT_BONUS,
    ProvenanceTier.EXTERNAL_LIBRARY: config.EXTERNAL_LIBRARY_BONUS,
}


def tier_bonus(tier: ProvenanceTier) -> float:
    try:
        return TIER_BONUS[tier]
    except KeyError:
        raise ContractViolation(f"no bonus defined for provenance tier {tier!r}") from None


def well_known_bonus(symbol: Symbol, similarity_score: float) -> float:
    """
    Small nudge for very common container / utility types.

    Only applies to near-exact matches so a common name never beats a
    clearly closer one on bonus alone.
    """
    if similarity_score < config.WELL_KNOWN_MIN_SIMILARITY:
        return 0.0
    return config.WELL_KNOWN_BONUS if symbol.short_name in config.WELL_KNOWN_NAMES else 0.0


def final_score(scored: ScoredCandidate) -> float:
    c = scored.candidate
    sim = scored.similarity_score
    return sim + tier_bonus(c.tier) + well_known_bonus(c.value, sim)


# ---------------------------------------------------------------------------
# Main entry
# ---------------------------------------------------------------------------

def _default_identity(symbol: Symbol) -> str:
    return symbol.identity_key


def _checked(candidates: Iterable[Candidate]) -> Iterator[Candidate]:
    for c in candidates:
        if not isinstance(c, Candidate):
            raise ContractViolation(f"expected Candidate, got {type(c).__name__}")
        yield c


def rank_key(entry: Tuple[int, Suggestion]) -> Tuple[float, float, int]:
    """Sort key for ``(input order, suggestion)``: final desc, similarity desc, order."""
    order, s = entry
    return (-s.final_score, -s.similarity_score, order)


def rank_suggestions(
    query: str,
    candidates: Iterable[Candidate],
    usage: Optional[UsagePosition] = None,
    identity_key: Optional[Callable[[Symbol], str]] = None,
    top_k: int = config.TOP_K,
    max_workers: Optional[int] = None,
) -> List[Suggestion]:
    """
    Rank a tiered candidate pool against ``query``:
      1) drop candidates that cannot appear in ``usage`` position
      2) composite-score the rest (optionally on a thread pool)
      3) drop scores under MIN_SCORE and self-matches
      4) add tier + well-known bonuses
      5) collapse duplicates by identity key, keeping the best final score
      6) sort by (-final, -similarity, input order) and keep ``top_k``

    ``candidates`` may be a lazy iterable; it is consumed once and only the
    entries that fit ``usage`` are held for scoring.
    """
    if not query:
        return []

    key_of = identity_key or _default_identity
    eligible = list(filter_candidates(_checked(candidates), usage))
    if not eligible:
        logger.debug("No candidates fit usage {} for '{}'", usage, query)
        return []

    scored = score_candidates(query, eligible, max_workers=max_workers)

    # identity -> (order, suggestion); first occurrence wins ties
    best: Dict[str, Tuple[int, Suggestion]] = {}
    above = 0
    for order, sc in enumerate(scored):
        c = sc.candidate
        if sc.similarity_score < config.MIN_SCORE:
            continue
        above += 1
        ident = key_of(c.value)
        if is_self_match(query, c.key) or ident == query:
            continue

        suggestion = Suggestion(
            identity_key=ident,
            value=c.value,
            similarity_score=sc.similarity_score,
            final_score=final_score(sc),
            tier=c.tier,
        )
        prev = best.get(ident)
        if prev is None or suggestion.final_score > prev[1].final_score:
            best[ident] = (order, suggestion)

    ranked = sorted(best.values(), key=rank_key)
    out = [s for _, s in ranked[:top_k]]

    logger.debug(
        "Ranked '{}': {} eligible, {} above threshold, {} distinct, {} returned",
        query, len(eligible), above, len(best), len(out),
    )
    return out
