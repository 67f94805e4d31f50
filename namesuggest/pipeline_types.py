"""Typed containers shared across the scoring and ranking modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .normalize import last_segment


class ContractViolation(ValueError):
    """Raised when a caller hands the engine input it promised never to send."""


class SymbolKind(str, Enum):
    METHOD = "method"
    PROPERTY = "property"
    FIELD = "field"
    EVENT = "event"
    LOCAL = "local"
    PARAMETER = "parameter"
    TYPE = "type"
    NAMESPACE = "namespace"
    RAW_NAME = "raw_name"


class TypeKind(str, Enum):
    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    ENUM = "enum"
    DELEGATE = "delegate"
    OTHER = "other"


class ProvenanceTier(str, Enum):
    """
    Where a candidate was found, most specific first.

    ``UNKNOWN`` only exists as a default for callers that have not classified
    a candidate yet; it can never be attached to a :class:`Candidate`.
    """

    UNKNOWN = "unknown"
    LOCAL_SCOPE = "local_scope"
    CURRENT_CLASS = "current_class"
    CURRENT_PROJECT = "current_project"
    EXTERNAL_LIBRARY = "external_library"


@dataclass(frozen=True)
class Symbol:
    """
    The value travelling alongside a candidate key.

    ``kind`` is the tag; ``type_kind`` and ``base_types`` are only meaningful
    for ``SymbolKind.TYPE``.  ``base_types`` holds the whole inheritance chain
    (qualified names, nearest first) so attribute checks need no symbol graph.
    """

    kind: SymbolKind
    name: str
    qualified_name: str = ""
    type_kind: Optional[TypeKind] = None
    base_types: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.kind, SymbolKind):
            raise ContractViolation(f"symbol kind must be a SymbolKind, got {self.kind!r}")
        if not isinstance(self.name, str):
            raise ContractViolation(f"symbol name must be a string, got {type(self.name).__name__}")
        if self.type_kind is not None and self.kind is not SymbolKind.TYPE:
            raise ContractViolation(f"type_kind is only valid on type symbols (got {self.kind.value})")
        # frozen: lists from callers are coerced so the symbol stays hashable
        object.__setattr__(self, "base_types", tuple(self.base_types))

    # -- factories ---------------------------------------------------------

    @classmethod
    def for_method(cls, name: str, qualified_name: str = "") -> "Symbol":
        return cls(SymbolKind.METHOD, name, qualified_name)

    @classmethod
    def for_property(cls, name: str, qualified_name: str = "") -> "Symbol":
        return cls(SymbolKind.PROPERTY, name, qualified_name)

    @classmethod
    def for_field(cls, name: str, qualified_name: str = "") -> "Symbol":
        return cls(SymbolKind.FIELD, name, qualified_name)

    @classmethod
    def for_event(cls, name: str, qualified_name: str = "") -> "Symbol":
        return cls(SymbolKind.EVENT, name, qualified_name)

    @classmethod
    def for_local(cls, name: str, qualified_name: str = "") -> "Symbol":
        return cls(SymbolKind.LOCAL, name, qualified_name)

    @classmethod
    def for_parameter(cls, name: str, qualified_name: str = "") -> "Symbol":
        return cls(SymbolKind.PARAMETER, name, qualified_name)

    @classmethod
    def for_type(
        cls,
        name: str,
        qualified_name: str = "",
        type_kind: TypeKind = TypeKind.CLASS,
        base_types: Tuple[str, ...] = (),
    ) -> "Symbol":
        return cls(SymbolKind.TYPE, name, qualified_name, type_kind, base_types)

    @classmethod
    def for_namespace(cls, qualified_name: str) -> "Symbol":
        return cls(SymbolKind.NAMESPACE, last_segment(qualified_name), qualified_name)

    @classmethod
    def for_raw(cls, text: str) -> "Symbol":
        return cls(SymbolKind.RAW_NAME, text)

    # -- derived keys ------------------------------------------------------

    @property
    def identity_key(self) -> str:
        """Canonical key used to recognise the same entity found twice."""
        return self.qualified_name or self.name

    @property
    def short_name(self) -> str:
        if self.kind is SymbolKind.RAW_NAME:
            return last_segment(self.name)
        return self.name


@dataclass(frozen=True)
class Candidate:
    key: str
    value: Symbol
    tier: ProvenanceTier

    def __post_init__(self) -> None:
        if not isinstance(self.key, str):
            raise ContractViolation(f"candidate key must be a string, got {type(self.key).__name__}")
        if not isinstance(self.value, Symbol):
            raise ContractViolation(f"candidate value must be a Symbol, got {type(self.value).__name__}")
        if not isinstance(self.tier, ProvenanceTier):
            raise ContractViolation(f"candidate tier must be a ProvenanceTier, got {self.tier!r}")
        if self.tier is ProvenanceTier.UNKNOWN:
            raise ContractViolation(f"candidate {self.key!r} has no provenance tier (UNKNOWN)")


@dataclass(frozen=True)
class ScoredCandidate:
    """A candidate plus its composite similarity to the query."""

    candidate: Candidate
    similarity_score: float


@dataclass(frozen=True)
class Suggestion:
    identity_key: str
    value: Symbol
    similarity_score: float
    final_score: float
    tier: ProvenanceTier
