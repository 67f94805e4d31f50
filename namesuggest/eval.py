# namesuggest/eval.py
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Set

import numpy as np
import pandas as pd

from . import config
from .cli import names_to_candidates, read_names
from .logging_utils import configure_logging
from .ranking import rank_suggestions

# ---------- IO helpers ----------

def _read_any(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    ext = path.suffix.lower()
    if ext in [".xlsx", ".xls"]:
        df = pd.read_excel(path)
    else:
        df = pd.read_csv(path, encoding="utf-8")
    cols = {str(c).strip().lower(): c for c in df.columns}
    qcol, ecol = cols.get("query"), cols.get("expected")
    if not qcol or not ecol:
        raise ValueError(
            f"Expected columns 'Query' and 'Expected'. Found: {list(df.columns)}"
        )
    return df.rename(columns={qcol: "Query", ecol: "Expected"})


def build_gold_sets(path: Path) -> Dict[str, Set[str]]:
    """
    query -> {acceptable names}. A query may appear on several rows when more
    than one correction is acceptable.
    """
    df = _read_any(path)
    gold: Dict[str, Set[str]] = {}
    for q, e in df[["Query", "Expected"]].itertuples(index=False, name=None):
        q, e = str(q).strip(), str(e).strip()
        if q and e:
            gold.setdefault(q, set()).add(e)
    return gold

# ---------- metrics ----------

def recall_at_k(gold: Set[str], preds: List[str], k: int) -> float:
    if not gold:
        return 0.0
    hits = len(gold.intersection(preds[:k]))
    return hits / float(len(gold))


def reciprocal_rank(gold: Set[str], preds: List[str]) -> float:
    for i, p in enumerate(preds, 1):
        if p in gold:
            return 1.0 / i
    return 0.0


def evaluate(
    preds: Dict[str, List[str]],
    gold: Dict[str, Set[str]],
    ks: Sequence[int] = (1, 3, 5),
) -> Dict[str, float]:
    """Mean Recall@k for each k plus MRR over the queries present in both."""
    keys = [q for q in preds if q in gold]
    if not keys:
        out = {f"recall@{k}": 0.0 for k in ks}
        out["mrr"] = 0.0
        return out
    out = {
        f"recall@{k}": float(np.mean([recall_at_k(gold[q], preds[q], k) for q in keys]))
        for k in ks
    }
    out["mrr"] = float(np.mean([reciprocal_rank(gold[q], preds[q]) for q in keys]))
    return out

# ---------- engine runner ----------

def predict(queries: Iterable[str], names: Sequence[str], top_k: int = config.TOP_K) -> Dict[str, List[str]]:
    """query -> suggested names in rank order, over one flat project tier."""
    candidates = names_to_candidates(names)
    return {
        q: [s.value.name for s in rank_suggestions(q, candidates, top_k=top_k)]
        for q in queries
    }

# ---------- CLI ----------

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--gold", type=Path, required=True,
                    help="CSV/XLSX with 'Query' and 'Expected' columns")
    ap.add_argument("--names", type=Path, required=True,
                    help="Known names, one per line")
    ap.add_argument("--k", type=int, nargs="+", default=[1, 3, 5])
    args = ap.parse_args()
    configure_logging()

    gold = build_gold_sets(args.gold)
    names = read_names(args.names)
    preds = predict(gold.keys(), names, top_k=max(max(args.k), config.TOP_K))

    scores = evaluate(preds, gold, ks=args.k)
    for k in args.k:
        print(f"Recall@{k}: {scores[f'recall@{k}']:.4f}")
    print(f"MRR: {scores['mrr']:.4f}")

if __name__ == "__main__":
    main()
