"""
Candidate universe: the caller-side table of every known type and namespace.

A universe file is a JSON namespace tree:

    {"name": "", "types": [...], "namespaces": [...]}

where each type is ``{"name", "kind", "bases": [...], "nested": [...]}`` and
each child namespace has the same shape as the root.  The tree is walked
lazily, so scoring can start before the whole universe has been visited, and
every ``iter()`` on a :class:`SymbolUniverse` starts a fresh walk.

Loaded universes are cached per path and file mtime; the rebuild runs under a
lock so concurrent requests never load the same file twice.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from loguru import logger

from .normalize import extract_short_type_name
from .pipeline_types import Candidate, ProvenanceTier, Symbol, TypeKind


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TypeNode:
    name: str
    kind: TypeKind = TypeKind.CLASS
    bases: Tuple[str, ...] = ()
    nested: Tuple["TypeNode", ...] = ()


@dataclass(frozen=True)
class NamespaceNode:
    name: str
    types: Tuple[TypeNode, ...] = ()
    namespaces: Tuple["NamespaceNode", ...] = ()


def _join(prefix: str, name: str) -> str:
    if not prefix:
        return name
    if not name:
        return prefix
    return f"{prefix}.{name}"


def _parse_type(raw: Any, where: str) -> TypeNode:
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str) or not raw["name"]:
        raise ValueError(f"Malformed type node under '{where or '<global>'}': {raw!r}")
    kind_raw = str(raw.get("kind", TypeKind.CLASS.value)).lower()
    try:
        kind = TypeKind(kind_raw)
    except ValueError:
        raise ValueError(f"Unknown type kind '{kind_raw}' for type '{_join(where, raw['name'])}'") from None
    here = _join(where, raw["name"])
    return TypeNode(
        name=raw["name"],
        kind=kind,
        bases=tuple(str(b) for b in raw.get("bases", []) or []),
        nested=tuple(_parse_type(t, here) for t in raw.get("nested", []) or []),
    )


def _parse_namespace(raw: Any, where: str = "") -> NamespaceNode:
    if not isinstance(raw, dict):
        raise ValueError(f"Malformed namespace node under '{where or '<global>'}': {raw!r}")
    name = str(raw.get("name", "") or "")
    here = _join(where, name)
    return NamespaceNode(
        name=name,
        types=tuple(_parse_type(t, here) for t in raw.get("types", []) or []),
        namespaces=tuple(_parse_namespace(n, here) for n in raw.get("namespaces", []) or []),
    )


def parse_universe(raw: Dict[str, Any]) -> NamespaceNode:
    return _parse_namespace(raw)


# ---------------------------------------------------------------------------
# Lazy walks
# ---------------------------------------------------------------------------

def _iter_type_with_nested(node: TypeNode, prefix: str) -> Iterator[Symbol]:
    qualified = _join(prefix, node.name)
    yield Symbol.for_type(
        extract_short_type_name(node.name),
        qualified_name=qualified,
        type_kind=node.kind,
        base_types=node.bases,
    )
    for child in node.nested:
        yield from _iter_type_with_nested(child, qualified)


def iter_type_symbols(root: NamespaceNode, prefix: str = "") -> Iterator[Symbol]:
    """Depth-first walk yielding every type (nested types included)."""
    here = _join(prefix, root.name)
    for t in root.types:
        yield from _iter_type_with_nested(t, here)
    for ns in root.namespaces:
        yield from iter_type_symbols(ns, here)


def iter_namespace_names(root: NamespaceNode, prefix: str = "") -> Iterator[str]:
    """Depth-first walk yielding every non-global dotted namespace name."""
    here = _join(prefix, root.name)
    if here:
        yield here
    for ns in root.namespaces:
        yield from iter_namespace_names(ns, here)


class SymbolUniverse:
    """Restartable view over a namespace tree."""

    def __init__(self, root: NamespaceNode):
        self.root = root

    def __iter__(self) -> Iterator[Symbol]:
        return iter_type_symbols(self.root)

    def namespaces(self) -> Iterator[str]:
        return iter_namespace_names(self.root)

    def library_candidates(self, exclude: Iterable[str] = ()) -> Iterator[Candidate]:
        """
        Every type as an EXTERNAL_LIBRARY candidate keyed by its short name,
        skipping qualified names in ``exclude`` (e.g. the caller's own types).
        """
        skip = frozenset(exclude)
        for sym in self:
            if sym.qualified_name in skip:
                continue
            yield Candidate(key=sym.name, value=sym, tier=ProvenanceTier.EXTERNAL_LIBRARY)


# ---------------------------------------------------------------------------
# Loading + process-wide cache
# ---------------------------------------------------------------------------

def load_universe(path: Path) -> SymbolUniverse:
    if not path.exists():
        raise FileNotFoundError(f"Universe file not found: {path}")
    logger.info("Loading symbol universe from {}", path)
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    return SymbolUniverse(parse_universe(raw))


_CACHE: Dict[Path, Tuple[float, SymbolUniverse]] = {}
_CACHE_LOCK = threading.Lock()


def get_universe(path: Path) -> SymbolUniverse:
    """
    Cached :func:`load_universe`.  A changed mtime triggers a reload; only one
    thread rebuilds while the others wait for its result.
    """
    key = path.resolve()
    mtime = key.stat().st_mtime if key.exists() else -1.0
    with _CACHE_LOCK:
        hit = _CACHE.get(key)
        if hit is not None and hit[0] == mtime:
            return hit[1]
        universe = load_universe(key)
        _CACHE[key] = (mtime, universe)
        n = sum(1 for _ in universe)
        logger.info("Cached universe {}: {} types", key, n)
        return universe


def clear_universe_cache(path: Optional[Path] = None) -> None:
    with _CACHE_LOCK:
        if path is None:
            _CACHE.clear()
        else:
            _CACHE.pop(path.resolve(), None)
