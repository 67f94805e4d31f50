import pytest
from loguru import logger

from namesuggest.context import UsagePosition
from namesuggest.pipeline_types import (
    Candidate,
    ContractViolation,
    ProvenanceTier,
    ScoredCandidate,
    Suggestion,
    Symbol,
    SymbolKind,
)
from namesuggest.ranking import final_score, rank_key, rank_suggestions, tier_bonus, well_known_bonus


def _field(name: str, owner: str = "App.Foo", tier=ProvenanceTier.CURRENT_PROJECT) -> Candidate:
    return Candidate(key=name, value=Symbol.for_field(name, f"{owner}.{name}"), tier=tier)


def test_length_ranks_above_longer_variant():
    pool = [_field("LengthInBytes"), _field("Length")]
    out = rank_suggestions("Lenght", pool)
    assert [s.value.name for s in out][:2] == ["Length", "LengthInBytes"]
    assert out[0].similarity_score > 0.3


def test_self_match_is_never_returned():
    pool = [_field("Length"), _field("Lenght"), _field("Width")]
    out = rank_suggestions("Length", pool)
    assert "Length" not in [s.value.name for s in out]


def test_self_match_excluded_after_normalisation():
    pool = [_field("user_name"), _field("userNames")]
    out = rank_suggestions("UserName", pool)
    assert [s.value.name for s in out] == ["userNames"]


def test_duplicates_collapse_to_best_tier():
    sym = Symbol.for_field("Count", "App.Foo.Count")
    pool = [
        Candidate(key="Count", value=sym, tier=ProvenanceTier.CURRENT_PROJECT),
        Candidate(key="Count", value=sym, tier=ProvenanceTier.LOCAL_SCOPE),
    ]
    out = rank_suggestions("Cuont", pool)
    assert len(out) == 1
    assert out[0].identity_key == "App.Foo.Count"
    assert out[0].tier is ProvenanceTier.LOCAL_SCOPE
    assert abs(out[0].final_score - (out[0].similarity_score + 0.3)) < 1e-9


def test_top_k_and_non_increasing_order():
    names = [
        "itemCounter", "itemCounts", "itemCnt", "itemCount2", "itemAmount",
        "itemCountMax", "itemTotal", "itemsCount", "item_count_x", "itemCountAll",
    ]
    pool = [_field(n) for n in names]
    out = rank_suggestions("itemCount", pool)
    assert len(out) == 5
    finals = [s.final_score for s in out]
    assert all(a >= b for a, b in zip(finals, finals[1:]))


def test_tier_precedence_on_equal_similarity():
    pool = [
        Candidate(key="total", value=Symbol.for_field("total", "App.Foo.total"), tier=ProvenanceTier.CURRENT_PROJECT),
        Candidate(key="total", value=Symbol.for_local("total", "App.Foo.Run.total"), tier=ProvenanceTier.LOCAL_SCOPE),
        Candidate(key="total", value=Symbol.for_field("total", "App.Bar.total"), tier=ProvenanceTier.CURRENT_CLASS),
    ]
    out = rank_suggestions("totl", pool)
    assert [s.tier for s in out] == [
        ProvenanceTier.LOCAL_SCOPE,
        ProvenanceTier.CURRENT_CLASS,
        ProvenanceTier.CURRENT_PROJECT,
    ]
    assert out[0].similarity_score == out[1].similarity_score == out[2].similarity_score


def test_ranking_is_idempotent():
    pool = [_field(n) for n in ["alpha", "alphabet", "alpaca", "alphaBeta", "alp"]]
    first = rank_suggestions("alpah", pool)
    second = rank_suggestions("alpah", pool)
    assert first == second
    assert repr(first) == repr(second)


def test_type_position_never_surfaces_locals():
    pool = [
        Candidate(key="widget", value=Symbol.for_local("widget"), tier=ProvenanceTier.LOCAL_SCOPE),
        Candidate(key="Widgets", value=Symbol.for_type("Widgets", "App.Widgets"), tier=ProvenanceTier.CURRENT_PROJECT),
    ]
    out = rank_suggestions("Widgte", pool, usage=UsagePosition.TYPE)
    assert out
    assert all(s.value.kind is not SymbolKind.LOCAL for s in out)

    # without a usage position the local wins on tier
    unfiltered = rank_suggestions("Widgte", pool)
    assert unfiltered[0].value.kind is SymbolKind.LOCAL


def test_well_known_bonus_only_for_close_matches():
    lst = Symbol.for_type("List", "System.Collections.Generic.List`1")
    assert well_known_bonus(lst, 0.9) == 0.25
    assert well_known_bonus(lst, 0.5) == 0.0
    assert well_known_bonus(Symbol.for_type("Widget"), 0.95) == 0.0
    assert well_known_bonus(Symbol.for_raw("System.Collections.Generic.Dictionary"), 0.9) == 0.25


def test_final_score_adds_tier_and_well_known():
    c = Candidate(key="List", value=Symbol.for_type("List", "System.List"), tier=ProvenanceTier.CURRENT_CLASS)
    assert abs(final_score(ScoredCandidate(candidate=c, similarity_score=0.85)) - (0.85 + 0.2 + 0.25)) < 1e-9


def test_unknown_tier_is_a_contract_violation():
    with pytest.raises(ContractViolation):
        Candidate(key="x", value=Symbol.for_local("x"), tier=ProvenanceTier.UNKNOWN)
    with pytest.raises(ContractViolation):
        tier_bonus(ProvenanceTier.UNKNOWN)


def test_non_candidate_in_pool_is_rejected():
    with pytest.raises(ContractViolation):
        rank_suggestions("abc", [("abc", "not a candidate")])


def test_degenerate_inputs_return_empty():
    assert rank_suggestions("", [_field("abc")]) == []
    assert rank_suggestions("abc", []) == []
    assert rank_suggestions("qqqq", [_field("zzzz")]) == []


def test_custom_identity_key_controls_dedup():
    pool = [
        _field("Count", owner="App.A"),
        _field("Count", owner="App.B", tier=ProvenanceTier.CURRENT_CLASS),
    ]
    by_name = rank_suggestions("Cuont", pool, identity_key=lambda s: s.name)
    assert len(by_name) == 1
    assert by_name[0].tier is ProvenanceTier.CURRENT_CLASS
    assert len(rank_suggestions("Cuont", pool)) == 2


def test_identity_equal_to_raw_query_is_excluded():
    # key differs from the query once normalised, but the identity matches it
    pool = [
        Candidate(key="Foo", value=Symbol.for_field("Foo", "Fooo"), tier=ProvenanceTier.LOCAL_SCOPE),
        _field("Food"),
    ]
    out = rank_suggestions("Fooo", pool)
    assert "Fooo" not in [s.identity_key for s in out]
    assert [s.value.name for s in out] == ["Food"]


def test_equal_final_breaks_tie_on_similarity_then_order():
    sym = Symbol.for_field("x")
    low_sim = Suggestion("a", sym, similarity_score=0.7, final_score=1.0, tier=ProvenanceTier.LOCAL_SCOPE)
    high_sim = Suggestion("b", sym, similarity_score=0.9, final_score=1.0, tier=ProvenanceTier.CURRENT_CLASS)
    same = Suggestion("c", sym, similarity_score=0.9, final_score=1.0, tier=ProvenanceTier.CURRENT_CLASS)
    ranked = sorted([(0, low_sim), (2, same), (1, high_sim)], key=rank_key)
    assert [s.identity_key for _, s in ranked] == ["b", "c", "a"]


def test_lazy_pool_is_accepted_and_checked():
    gen = (_field(n) for n in ["Length", "LengthInBytes"])
    out = rank_suggestions("Lenght", gen)
    assert [s.value.name for s in out] == ["Length", "LengthInBytes"]

    bad = (c for c in [_field("Length"), "Width"])
    with pytest.raises(ContractViolation):
        rank_suggestions("Lenght", bad)


def test_debug_summary_counts_threshold_and_distinct_separately():
    messages = []
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        pool = [_field("Length"), _field("Length", owner="App.Bar"), _field("Lenght"), _field("zzzz")]
        rank_suggestions("Length", pool, identity_key=lambda s: s.name)
    finally:
        logger.remove(sink_id)
    summary = [m for m in messages if m.startswith("Ranked 'Length'")]
    # 3 clear the threshold; both Length entries are self-matches
    assert summary == ["Ranked 'Length': 4 eligible, 3 above threshold, 1 distinct, 1 returned\n"]
