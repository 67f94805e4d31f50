from namesuggest.context import UsagePosition, filter_candidates, is_usable_in
from namesuggest.pipeline_types import Candidate, ProvenanceTier, Symbol, TypeKind


def _cand(sym: Symbol, tier=ProvenanceTier.CURRENT_PROJECT) -> Candidate:
    return Candidate(key=sym.name, value=sym, tier=tier)


def test_type_position_accepts_types_and_raw_names_only():
    assert is_usable_in(Symbol.for_type("Widget", "App.Widget"), UsagePosition.TYPE)
    assert is_usable_in(Symbol.for_type("IWidget", type_kind=TypeKind.INTERFACE), UsagePosition.TYPE)
    assert is_usable_in(Symbol.for_raw("Widget"), UsagePosition.TYPE)
    assert not is_usable_in(Symbol.for_type("Odd", type_kind=TypeKind.OTHER), UsagePosition.TYPE)
    assert not is_usable_in(Symbol.for_local("widget"), UsagePosition.TYPE)
    assert not is_usable_in(Symbol.for_method("Widget"), UsagePosition.TYPE)


def test_value_position():
    assert is_usable_in(Symbol.for_local("count"), UsagePosition.VALUE)
    assert is_usable_in(Symbol.for_parameter("count"), UsagePosition.VALUE)
    assert is_usable_in(Symbol.for_property("Count"), UsagePosition.VALUE)
    # static access through an enum / class / struct name
    assert is_usable_in(Symbol.for_type("Color", type_kind=TypeKind.ENUM), UsagePosition.VALUE)
    assert not is_usable_in(Symbol.for_type("IThing", type_kind=TypeKind.INTERFACE), UsagePosition.VALUE)
    assert not is_usable_in(Symbol.for_event("Clicked"), UsagePosition.VALUE)
    assert not is_usable_in(Symbol.for_namespace("System.IO"), UsagePosition.VALUE)


def test_attribute_position():
    attr = Symbol.for_type("ObsoleteAttribute", "System.ObsoleteAttribute", base_types=["System.Attribute"])
    plain = Symbol.for_type("Widget", "App.Widget", base_types=["System.Object"])
    assert is_usable_in(attr, UsagePosition.ATTRIBUTE)
    assert not is_usable_in(plain, UsagePosition.ATTRIBUTE)
    assert is_usable_in(Symbol.for_raw("SerializableAttribute"), UsagePosition.ATTRIBUTE)
    assert not is_usable_in(Symbol.for_raw("AttributeTable"), UsagePosition.ATTRIBUTE)


def test_namespace_position():
    assert is_usable_in(Symbol.for_namespace("System.Collections"), UsagePosition.NAMESPACE)
    assert is_usable_in(Symbol.for_raw("System.Linq"), UsagePosition.NAMESPACE)
    assert not is_usable_in(Symbol.for_raw("Linq"), UsagePosition.NAMESPACE)
    assert not is_usable_in(Symbol.for_type("Linq"), UsagePosition.NAMESPACE)


def test_unknown_and_none_accept_everything():
    syms = [Symbol.for_local("x"), Symbol.for_event("E"), Symbol.for_namespace("A.B")]
    for s in syms:
        assert is_usable_in(s, UsagePosition.UNKNOWN)
        assert is_usable_in(s, None)


def test_filter_candidates_is_lazy_and_ordered():
    pool = [
        _cand(Symbol.for_local("widget"), ProvenanceTier.LOCAL_SCOPE),
        _cand(Symbol.for_type("Widget", "App.Widget")),
        _cand(Symbol.for_type("Gadget", "App.Gadget")),
    ]
    gen = filter_candidates(pool, UsagePosition.TYPE)
    assert iter(gen) is gen
    assert [c.value.name for c in gen] == ["Widget", "Gadget"]


def test_filter_candidates_may_return_nothing():
    pool = [_cand(Symbol.for_local("widget"), ProvenanceTier.LOCAL_SCOPE)]
    assert list(filter_candidates(pool, UsagePosition.ATTRIBUTE)) == []
