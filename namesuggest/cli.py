from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import config
from .context import UsagePosition
from .logging_utils import configure_logging
from .namespaces import suggest_namespaces
from .pipeline_types import Candidate, ProvenanceTier, Symbol
from .ranking import rank_suggestions
from .scoring import composite_score, explain_score
from .universe import get_universe


def read_names(path: Path) -> List[str]:
    """One name per line; blank lines and ``#`` comments are skipped."""
    if not path.exists():
        raise FileNotFoundError(f"Names file not found: {path}")
    names: List[str] = []
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                names.append(line)
    return names


def names_to_candidates(names: Sequence[str]) -> List[Candidate]:
    return [
        Candidate(key=n, value=Symbol.for_raw(n), tier=ProvenanceTier.CURRENT_PROJECT)
        for n in names
    ]


def _format_breakdown(parts: dict) -> str:
    return " ".join(f"{k}={v:+.4f}" for k, v in parts.items() if k != "final")


# ---------- subcommands ----------

def cmd_suggest(args: argparse.Namespace) -> int:
    candidates: List[Candidate] = []
    if args.names:
        candidates.extend(names_to_candidates(read_names(args.names)))
    if args.universe:
        candidates.extend(get_universe(args.universe).library_candidates())
    if not candidates:
        print("error: give --names and/or --universe", file=sys.stderr)
        return 2

    usage = UsagePosition(args.usage)
    ranked = rank_suggestions(args.query, candidates, usage=usage, top_k=args.top_k)
    if not ranked:
        print("(no suggestions)")
        return 1
    for i, s in enumerate(ranked, 1):
        print(f"{i:>2}. {s.identity_key:<40} final={s.final_score:.4f} sim={s.similarity_score:.4f} [{s.tier.value}]")
        if args.explain:
            print(f"    {_format_breakdown(explain_score(args.query, s.value.name))}")
    return 0


def cmd_namespaces(args: argparse.Namespace) -> int:
    universe = get_universe(args.universe)
    found = suggest_namespaces(args.query, universe.namespaces(), top_k=args.top_k)
    if not found:
        print("(no suggestions)")
        return 1
    for i, (name, score) in enumerate(found, 1):
        print(f"{i:>2}. {name:<40} score={score:.4f}")
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    print(f"{composite_score(args.query, args.key):.6f}")
    print(_format_breakdown(explain_score(args.query, args.key)))
    return 0


# ---------- CLI ----------

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="namesuggest", description="Did-you-mean suggestions for identifiers")
    ap.add_argument("--log-level", default=None, help="Overrides NAMESUGGEST_LOG_LEVEL")
    sub = ap.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("suggest", help="Rank known names against a misspelled one")
    sp.add_argument("query")
    sp.add_argument("--names", type=Path, help="Text file, one candidate name per line")
    sp.add_argument("--universe", type=Path, default=config.UNIVERSE_PATH,
                    help="Universe JSON (library tier); defaults to NAMESUGGEST_UNIVERSE")
    sp.add_argument("--usage", choices=config.USAGE_NAMES, default="unknown")
    sp.add_argument("--top-k", type=int, default=config.TOP_K)
    sp.add_argument("--explain", action="store_true", help="Print the score breakdown per result")
    sp.set_defaults(func=cmd_suggest)

    np_ = sub.add_parser("namespaces", help="Suggest namespaces for a dotted name")
    np_.add_argument("query")
    np_.add_argument("--universe", type=Path, required=True)
    np_.add_argument("--top-k", type=int, default=config.TOP_K)
    np_.set_defaults(func=cmd_namespaces)

    sc = sub.add_parser("score", help="Composite score of one pair")
    sc.add_argument("query")
    sc.add_argument("key")
    sc.set_defaults(func=cmd_score)
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
