import pandas as pd
import pytest

from namesuggest.eval import build_gold_sets, evaluate, predict, recall_at_k, reciprocal_rank


def test_recall_at_k_basic():
    gold = {"a", "b", "c"}
    preds = ["x", "b", "c", "y"]
    r = recall_at_k(gold, preds, k=3)
    # in top-3 preds we have b and c -> 2/3
    assert abs(r - (2 / 3)) < 1e-6
    assert recall_at_k(set(), preds, k=3) == 0.0


def test_reciprocal_rank():
    assert reciprocal_rank({"b"}, ["a", "b", "c"]) == 0.5
    assert reciprocal_rank({"z"}, ["a", "b"]) == 0.0


def test_evaluate_multiple_queries():
    gold = {"q1": {"a", "b"}, "q2": {"x"}}
    preds = {"q1": ["a", "z"], "q2": ["y", "x"], "q3": ["ignored"]}
    scores = evaluate(preds, gold, ks=(2,))
    # q1: 1/2, q2: 1/1 -> mean = 0.75
    assert abs(scores["recall@2"] - 0.75) < 1e-6
    # q1: 1/1, q2: 1/2
    assert abs(scores["mrr"] - 0.75) < 1e-6


def test_evaluate_no_overlap():
    assert evaluate({"q": ["a"]}, {"other": {"a"}}, ks=(1,)) == {"recall@1": 0.0, "mrr": 0.0}


def test_build_gold_sets_from_csv(tmp_path):
    p = tmp_path / "gold.csv"
    pd.DataFrame(
        {"query": ["Lenght", "Lenght", "Widht"], "EXPECTED": ["Length", "Len", "Width"]}
    ).to_csv(p, index=False)
    gold = build_gold_sets(p)
    assert gold == {"Lenght": {"Length", "Len"}, "Widht": {"Width"}}


def test_build_gold_sets_requires_columns(tmp_path):
    p = tmp_path / "bad.csv"
    pd.DataFrame({"q": ["a"], "e": ["b"]}).to_csv(p, index=False)
    with pytest.raises(ValueError):
        build_gold_sets(p)


def test_predict_end_to_end():
    names = ["Length", "LengthInBytes", "Width", "Height"]
    preds = predict(["Lenght", "Widht"], names)
    assert preds["Lenght"][0] == "Length"
    assert preds["Widht"][0] == "Width"
