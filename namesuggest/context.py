"""
Usage-position filter applied to a candidate pool before scoring.

The caller decides how the unresolved name is used (as a type, a value, an
attribute or a namespace); this module only drops candidates that could not
appear in that position.  It never raises and an empty result is valid.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator, Optional

from .config import ATTRIBUTE_BASE_TYPE, ATTRIBUTE_SUFFIX
from .pipeline_types import Candidate, Symbol, SymbolKind, TypeKind


class UsagePosition(str, Enum):
    UNKNOWN = "unknown"
    TYPE = "type"
    VALUE = "value"
    ATTRIBUTE = "attribute"
    NAMESPACE = "namespace"


_TYPE_POSITION_KINDS = frozenset(
    {TypeKind.CLASS, TypeKind.STRUCT, TypeKind.INTERFACE, TypeKind.ENUM, TypeKind.DELEGATE}
)
_VALUE_POSITION_TYPE_KINDS = frozenset({TypeKind.ENUM, TypeKind.CLASS, TypeKind.STRUCT})
_VALUE_KINDS = frozenset(
    {
        SymbolKind.METHOD,
        SymbolKind.PROPERTY,
        SymbolKind.FIELD,
        SymbolKind.LOCAL,
        SymbolKind.PARAMETER,
    }
)


def _fits_type(symbol: Symbol) -> bool:
    if symbol.kind is SymbolKind.TYPE:
        return symbol.type_kind in _TYPE_POSITION_KINDS
    # bare names from a type table are assumed to be types
    return symbol.kind is SymbolKind.RAW_NAME


def _fits_attribute(symbol: Symbol) -> bool:
    if symbol.kind is SymbolKind.TYPE:
        return ATTRIBUTE_BASE_TYPE in symbol.base_types
    if symbol.kind is SymbolKind.RAW_NAME:
        return symbol.name.endswith(ATTRIBUTE_SUFFIX)
    return False


def _fits_namespace(symbol: Symbol) -> bool:
    if symbol.kind is SymbolKind.NAMESPACE:
        return True
    if symbol.kind is SymbolKind.RAW_NAME:
        return "." in symbol.name
    return False


def _fits_value(symbol: Symbol) -> bool:
    if symbol.kind in _VALUE_KINDS:
        return True
    if symbol.kind is SymbolKind.TYPE:
        return symbol.type_kind in _VALUE_POSITION_TYPE_KINDS
    return symbol.kind is SymbolKind.RAW_NAME


_PREDICATES = {
    UsagePosition.TYPE: _fits_type,
    UsagePosition.ATTRIBUTE: _fits_attribute,
    UsagePosition.NAMESPACE: _fits_namespace,
    UsagePosition.VALUE: _fits_value,
}


def is_usable_in(symbol: Symbol, usage: Optional[UsagePosition]) -> bool:
    """Whether ``symbol`` could stand in the given usage position."""
    predicate = _PREDICATES.get(usage) if usage is not None else None
    if predicate is None:
        return True
    return predicate(symbol)


def filter_candidates(
    candidates: Iterable[Candidate],
    usage: Optional[UsagePosition] = None,
) -> Iterator[Candidate]:
    """Lazily yield the candidates whose value fits ``usage``."""
    for c in candidates:
        if is_usable_in(c.value, usage):
            yield c
