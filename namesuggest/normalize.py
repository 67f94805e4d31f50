"""
Identifier normalisation helpers shared by the scorer and the ranker.

Both sides of a comparison go through the same helpers so a query and a
candidate always see the same view of a name.

Public helpers:

* normalize(s) -> str
    Lower-cases and drops underscores / whitespace.  Used right before
    Jaro-Winkler and the containment check.

* tokenize(s) -> List[str]
    Splits an identifier into lower-case word tokens.  Works on the *raw*
    name so camel-case boundaries are still visible.

* extract_short_type_name(name) -> str
    Strips namespace and generic arity from a fully-qualified type name.
"""

from __future__ import annotations

import re
from typing import List, Optional

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# Zero-width split before each upper-case letter, or consume one separator /
# digit.  Runs of separators produce empty pieces which tokenize() drops.
_SPLIT_RE = re.compile(r"(?=[A-Z])|[_\s\d]")

_NORMALIZE_RE = re.compile(r"[_\s]")

_GENERIC_START_RE = re.compile(r"[<`]")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize(s: Optional[str]) -> str:
    """Lower-case ``s`` and remove every underscore and whitespace char."""
    if not s:
        return ""
    return _NORMALIZE_RE.sub("", s.lower())


def tokenize(s: Optional[str]) -> List[str]:
    """Split an identifier at camel-case, ``_``, whitespace and digit boundaries.

    >>> tokenize("mixedCASE_with_123")
    ['mixed', 'c', 'a', 's', 'e', 'with']
    """
    if not s:
        return []
    return [piece.lower() for piece in _SPLIT_RE.split(s) if piece]


def unique_tokens(s: Optional[str]) -> List[str]:
    """Tokens of ``s`` with duplicates removed, first occurrence kept."""
    return list(dict.fromkeys(tokenize(s)))


def extract_short_type_name(full_name: Optional[str]) -> str:
    """Name after the last dot, without generic parameters.

    'System.Collections.Generic.List`1' -> 'List'
    'Foo.Bar<T>' -> 'Bar'
    """
    if not full_name:
        return ""
    name = full_name[full_name.rfind(".") + 1:]
    m = _GENERIC_START_RE.search(name)
    return name[: m.start()] if m else name


def last_segment(full_name: Optional[str]) -> str:
    """Name after the last dot, generic suffix kept."""
    if not full_name:
        return ""
    return full_name[full_name.rfind(".") + 1:]
