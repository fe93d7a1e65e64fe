#!/usr/bin/env python3
"""
scripts/prioritise.py — Rank disease, mouse and fish gene models for a set of
patient phenotypes, from the command line.

Requires MongoDB populated by the ingest scripts.  Uses the Redis match cache
when REDIS_URL is set.

Usage:
    python -m scripts.prioritise --hpo HP:0001156 HP:0001363
    python -m scripts.prioritise --hpo HP:0001156 "NOT seizures" --organisms human,mouse
    python -m scripts.prioritise --hpo HP:0001156 --disease-id OMIM:101600 --candidate-gene FGFR2
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

# Ensure project root is on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from core.config import MATCH_CACHE_TTL, ORGANISMS_TO_RUN, REDIS_URL
from core.data_loader import load_all
from core.database import get_db
from core.match_cache import MatchCache
from phenotype.ontology import OntologyService
from phenotype.service import PhenotypeMatchService
from tools import hpo_lookup, model_rank

# ── Logging ──────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("prioritise")


def describe_model(model) -> str:
    if hasattr(model, "disease_id"):
        return f"{model.disease_id} {model.disease_term}".strip()
    return f"{model.model_gene_id} {model.model_gene_symbol}".strip()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Phenodigm model prioritisation")
    parser.add_argument("--hpo", nargs="+", required=True,
                        help="HPO ids or labels; prefix with 'NOT ' or '!' for excluded findings")
    parser.add_argument("--organisms", default=ORGANISMS_TO_RUN,
                        help="Comma-separated subset of human,mouse,fish")
    parser.add_argument("--top", type=int, default=20, help="Number of models to print")
    parser.add_argument("--disease-id", default="", help="Benchmark: known disease id")
    parser.add_argument("--candidate-gene", default="", help="Benchmark: known gene symbol")
    parser.add_argument("--no-cache", action="store_true", help="Skip the Redis match cache")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    args = parser.parse_args(argv)

    try:
        options = model_rank.RunOptions.from_run_params(
            args.organisms, args.disease_id, args.candidate_gene
        )
    except model_rank.InvalidRunParameterError as exc:
        parser.error(str(exc))

    db = get_db()
    data = load_all(db)

    cache = None
    if REDIS_URL and not args.no_cache:
        cache = MatchCache(REDIS_URL, ttl=MATCH_CACHE_TTL)
    service = PhenotypeMatchService(OntologyService(db, cache=cache))

    query_terms = hpo_lookup.run(args.hpo, data)
    if not query_terms:
        logger.error("None of the inputs resolved to an HPO term: %s", args.hpo)
        return 1
    for term in query_terms:
        print(f"  {'+' if term.present else '-'} {term.id} {term.label}")

    t0 = time.time()
    results = model_rank.run(query_terms, data["models"], service, options)
    logger.info("Ranked %d models in %.1fs", len(results), time.time() - t0)

    top = results[:args.top]
    gene_scores = model_rank.best_gene_scores(results)

    if args.json:
        print(json.dumps({
            "models": [m.model_dump() for m in top],
            "genes": gene_scores,
        }, indent=2, default=str))
        return 0

    print(f"\n{'='*60}")
    print(f"  Top {len(top)} models")
    print(f"{'='*60}")
    for rank, match in enumerate(top, start=1):
        model = match.model
        print(f"  {rank:>3}. {match.score:.4f}  {model.organism.value:<6} "
              f"{model.human_gene_symbol:<10} {describe_model(model)}")
        for pm in match.best_phenotype_matches:
            print(f"         {pm.query_phenotype_id} -> {pm.match_phenotype_id} "
                  f"{pm.match_phenotype.label} ({pm.score:.3f})")

    print(f"\n{'='*60}")
    print(f"  Gene phenotype scores")
    print(f"{'='*60}")
    for symbol, score in list(gene_scores.items())[:args.top]:
        print(f"  {symbol:<10} {score:.4f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
