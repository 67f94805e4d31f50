"""
FastAPI application for identifier suggestions.

- POST /suggest ranks a caller-supplied, tiered candidate pool
- POST /namespaces suggests dotted namespace names
- Optional library tier comes from the universe file configured at startup
- Caller errors (blank query, unknown tier, contract violations) are 422s
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from . import config
from .config import (
    CandidateIn,
    HealthResponse,
    NamespaceItem,
    NamespaceRequest,
    NamespaceResponse,
    SuggestionItem,
    SuggestRequest,
    SuggestResponse,
    SymbolIn,
)
from .context import UsagePosition
from .logging_utils import configure_logging
from .namespaces import suggest_namespaces
from .pipeline_types import (
    Candidate,
    ContractViolation,
    ProvenanceTier,
    Suggestion,
    Symbol,
    SymbolKind,
    TypeKind,
)
from .ranking import rank_suggestions
from .universe import SymbolUniverse, get_universe


# -----------------------
# Wire <-> engine mapping
# -----------------------

def _to_symbol(raw: SymbolIn) -> Symbol:
    try:
        kind = SymbolKind(raw.kind.strip().lower())
    except ValueError:
        raise ContractViolation(f"unknown symbol kind {raw.kind!r}") from None
    type_kind: Optional[TypeKind] = None
    if raw.type_kind is not None:
        try:
            type_kind = TypeKind(raw.type_kind.strip().lower())
        except ValueError:
            raise ContractViolation(f"unknown type kind {raw.type_kind!r}") from None
    elif kind is SymbolKind.TYPE:
        type_kind = TypeKind.CLASS
    return Symbol(
        kind=kind,
        name=raw.name,
        qualified_name=raw.qualified_name,
        type_kind=type_kind,
        base_types=tuple(raw.base_types),
    )


def _to_candidate(raw: CandidateIn) -> Candidate:
    return Candidate(key=raw.key, value=_to_symbol(raw.symbol), tier=ProvenanceTier(raw.tier))


def _to_item(s: Suggestion) -> SuggestionItem:
    return SuggestionItem(
        identity_key=s.identity_key,
        name=s.value.name,
        kind=s.value.kind.value,
        tier=s.tier.value,
        similarity_score=s.similarity_score,
        final_score=s.final_score,
    )


def _caller_types(candidates: Iterable[Candidate]) -> List[str]:
    return [
        c.value.qualified_name
        for c in candidates
        if c.value.kind is SymbolKind.TYPE and c.value.qualified_name
    ]


def run_suggest(req: SuggestRequest, universe: Optional[SymbolUniverse] = None) -> SuggestResponse:
    query = req.query.strip()
    candidates = [_to_candidate(c) for c in req.candidates]
    if req.include_library:
        if universe is None:
            logger.warning("include_library requested but no universe is loaded")
        else:
            candidates.extend(universe.library_candidates(exclude=_caller_types(candidates)))
    ranked = rank_suggestions(query, candidates, usage=UsagePosition(req.usage))
    return SuggestResponse(suggestions=[_to_item(s) for s in ranked])


# -----------------------
# FastAPI app + startup
# -----------------------

app = FastAPI(title="namesuggest")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_universe: Optional[SymbolUniverse] = None


def _configured_universe_path() -> Optional[Path]:
    if config.UNIVERSE_PATH is not None:
        return config.UNIVERSE_PATH
    if config.DEFAULT_UNIVERSE_PATH.exists():
        return config.DEFAULT_UNIVERSE_PATH
    return None


@app.on_event("startup")
def startup_event() -> None:
    global _universe
    configure_logging()
    logger.info("Starting namesuggest service...")
    path = _configured_universe_path()
    if path is None:
        logger.info("No universe configured; library tier disabled.")
        return
    try:
        _universe = get_universe(path)
    except (OSError, ValueError) as e:
        _universe = None
        logger.warning("Failed to load universe {}: {}", path, e)
    logger.info("Startup complete.")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/suggest", response_model=SuggestResponse)
def suggest(req: SuggestRequest) -> SuggestResponse:
    if not req.query.strip():
        raise HTTPException(status_code=422, detail="Query must be non-empty")
    try:
        return run_suggest(req, _universe)
    except ContractViolation as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@app.post("/namespaces", response_model=NamespaceResponse)
def namespaces(req: NamespaceRequest) -> NamespaceResponse:
    query = req.query.strip()
    if not query:
        raise HTTPException(status_code=422, detail="Query must be non-empty")
    if req.namespaces is not None:
        known: Iterable[str] = req.namespaces
    elif _universe is not None:
        known = _universe.namespaces()
    else:
        raise HTTPException(status_code=500, detail="No namespaces supplied and no universe loaded")
    found = suggest_namespaces(query, known)
    return NamespaceResponse(suggestions=[NamespaceItem(name=n, score=s) for n, s in found])
