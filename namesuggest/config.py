from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_UNIVERSE_PATH = DATA_DIR / "universe.json"

UNIVERSE_PATH: Optional[Path] = (
    Path(os.environ["NAMESUGGEST_UNIVERSE"]) if os.getenv("NAMESUGGEST_UNIVERSE") else None
)


# ---------------------------
# Scoring constants
# ---------------------------

MIN_SCORE = 0.3           # acceptance threshold for every result set
TOP_K = 5

EXACT_MATCH_BONUS = 0.3
CONTAINMENT_BONUS = 0.2
TOKEN_EXACT_BONUS = 0.2
TOKEN_PARTIAL_BONUS = 0.1
MULTI_TOKEN_BONUS = 0.2
MULTI_TOKEN_MIN_PAIRS = 2
LENGTH_PENALTY_PER_CHAR = 0.01

WINKLER_SCALING = 0.1
WINKLER_MAX_PREFIX = 4


# ---------------------------
# Ranking constants
# ---------------------------

LOCAL_SCOPE_BONUS = 0.3
CURRENT_CLASS_BONUS = 0.2
CURRENT_PROJECT_BONUS = 0.1
EXTERNAL_LIBRARY_BONUS = 0.0

WELL_KNOWN_BONUS = 0.25
WELL_KNOWN_MIN_SIMILARITY = 0.8

# Short names of very common container / utility types
WELL_KNOWN_NAMES = frozenset(
    {
        "Dictionary",
        "List",
        "Array",
        "String",
        "StringBuilder",
        "HashSet",
        "Queue",
        "Stack",
        "ConcurrentDictionary",
        "IEnumerable",
        "ICollection",
        "IList",
        "IDictionary",
        "Task",
        "DateTime",
        "TimeSpan",
        "Guid",
    }
)

ATTRIBUTE_BASE_TYPE = "System.Attribute"
ATTRIBUTE_SUFFIX = "Attribute"


# ---------------------------
# Namespace suggestions
# ---------------------------

NAMESPACE_FULL_MIN_SCORE = 0.7   # whole dotted name
NAMESPACE_PART_MIN_SCORE = 0.6   # per segment fallback
NAMESPACE_PART_MIN_RATIO = 0.5   # share of segments that must match


# ---------------------------
# Runtime toggles
# ---------------------------

DEFAULT_WORKERS = 1
SCORING_WORKERS = int(os.getenv("NAMESUGGEST_WORKERS", str(DEFAULT_WORKERS)))

# Below this pool size the thread pool costs more than it saves
PARALLEL_MIN_CANDIDATES = 256


# ---------------------------
# Logging / observability
# ---------------------------

LOG_LEVEL = os.getenv("NAMESUGGEST_LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("NAMESUGGEST_LOG_FILE", "0") == "1"
LOG_DIR = PROJECT_ROOT / "logs"


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

TIER_NAMES = ("local_scope", "current_class", "current_project", "external_library")
USAGE_NAMES = ("unknown", "type", "value", "attribute", "namespace")


class SymbolIn(BaseModel):
    """
    Wire form of a candidate's symbol. ``kind`` and ``type_kind`` use the
    lowercase enum values from :mod:`namesuggest.pipeline_types`.
    """

    kind: str
    name: str = Field(..., min_length=1)
    qualified_name: str = ""
    type_kind: Optional[str] = None
    base_types: List[str] = Field(default_factory=list)


class CandidateIn(BaseModel):
    key: str = Field(..., min_length=1)
    tier: str
    symbol: SymbolIn

    @field_validator("tier")
    @classmethod
    def _known_tier(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in TIER_NAMES:
            raise ValueError(f"tier must be one of {', '.join(TIER_NAMES)}; got {v!r}")
        return v


class SuggestRequest(BaseModel):
    query: str = Field(..., min_length=1)
    candidates: List[CandidateIn] = Field(default_factory=list)
    usage: str = "unknown"
    include_library: bool = False

    @field_validator("usage")
    @classmethod
    def _known_usage(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in USAGE_NAMES:
            raise ValueError(f"usage must be one of {', '.join(USAGE_NAMES)}; got {v!r}")
        return v


class SuggestionItem(BaseModel):
    """
    Canonical schema for a single ranked suggestion.
    """

    identity_key: str
    name: str
    kind: str
    tier: str
    similarity_score: float
    final_score: float


class SuggestResponse(BaseModel):
    """
    Response body for POST /suggest.
    """

    suggestions: List[SuggestionItem]


class NamespaceRequest(BaseModel):
    query: str = Field(..., min_length=1)
    namespaces: Optional[List[str]] = None


class NamespaceItem(BaseModel):
    name: str
    score: float


class NamespaceResponse(BaseModel):
    """
    Response body for POST /namespaces.
    """

    suggestions: List[NamespaceItem]


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
