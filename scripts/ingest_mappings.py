"""
scripts/ingest_mappings.py — Load the precomputed OWLSim phenotype mappings
(HP-HP, HP-MP, HP-ZP) into one MongoDB collection per organism.

Each input file is tab-separated with a header row:

    hp_id  hp_term  match_id  match_term  simj  ic  score  lcs_id  lcs_term

A blank ``score`` is filled in as the Phenodigm score sqrt(ic * simj).

Usage:
    python -m scripts.ingest_mappings
    python -m scripts.ingest_mappings --organisms mouse,fish
    python -m scripts.ingest_mappings --self-hits
"""

from __future__ import annotations

import argparse
import csv
import sys

# Ensure project root is importable
sys.path.insert(0, ".")

from pymongo import UpdateOne

from core.database import HPO_TERMS, get_db
from core.models import Organism
import hpo_functions

MAPPING_FILES: dict[Organism, str] = {
    Organism.HUMAN: "data/raw/hp-hp-mappings.tsv",
    Organism.MOUSE: "data/raw/hp-mp-mappings.tsv",
    Organism.FISH: "data/raw/hp-zp-mappings.tsv",
}

BATCH_SIZE = 5000


def parse_mapping_row(row: dict) -> dict | None:
    """Convert one TSV row into a mapping document, or ``None`` if unusable."""
    hp_id = (row.get("hp_id") or "").strip()
    match_id = (row.get("match_id") or "").strip()
    if not hp_id or not match_id:
        return None

    simj = float(row.get("simj") or 0.0)
    ic = float(row.get("ic") or 0.0)
    raw_score = (row.get("score") or "").strip()
    score = float(raw_score) if raw_score else hpo_functions.phenodigm_score(ic, simj)

    return {
        "_id": f"{hp_id}_{match_id}",
        "hp_id": hp_id,
        "hp_term": (row.get("hp_term") or "").strip(),
        "match_id": match_id,
        "match_term": (row.get("match_term") or "").strip(),
        "simj": simj,
        "ic": ic,
        "score": score,
        "lcs_id": (row.get("lcs_id") or "").strip(),
        "lcs_term": (row.get("lcs_term") or "").strip(),
    }


def self_hit_docs(hpo_term_docs) -> list[dict]:
    """An HP-HP mapping of every annotated term to itself: simj 1, LCS the term."""
    docs: list[dict] = []
    for term in hpo_term_docs:
        ic = float(term.get("ic_score") or 0.0)
        if ic <= 0:
            continue
        hp_id = term["_id"]
        label = term.get("label", "")
        docs.append({
            "_id": f"{hp_id}_{hp_id}",
            "hp_id": hp_id,
            "hp_term": label,
            "match_id": hp_id,
            "match_term": label,
            "simj": 1.0,
            "ic": ic,
            "score": hpo_functions.phenodigm_score(ic, 1.0),
            "lcs_id": hp_id,
            "lcs_term": label,
        })
    return docs


def _upsert(collection, docs: list[dict]) -> int:
    written = 0
    for start in range(0, len(docs), BATCH_SIZE):
        batch = docs[start:start + BATCH_SIZE]
        ops = [UpdateOne({"_id": d["_id"]}, {"$set": d}, upsert=True) for d in batch]
        collection.bulk_write(ops, ordered=False)
        written += len(batch)
    return written


def ingest_organism(db, organism: Organism, path: str) -> int:
    print(f"Parsing {organism.value.lower()} mappings from {path} ...")
    docs: list[dict] = []
    skipped = 0
    with open(path, "r", encoding="utf-8") as fh:
        for row in csv.DictReader(fh, delimiter="\t"):
            doc = parse_mapping_row(row)
            if doc is None:
                skipped += 1
                continue
            docs.append(doc)
    print(f"  -> {len(docs)} mappings parsed, {skipped} rows skipped")

    collection = db[organism.mapping_collection]
    collection.drop()
    written = _upsert(collection, docs)
    collection.create_index("hp_id")
    return written


def main() -> None:
    parser = argparse.ArgumentParser(description="Load OWLSim phenotype mappings into MongoDB")
    parser.add_argument(
        "--organisms", default="human,mouse,fish",
        help="Comma-separated organisms to load (default: human,mouse,fish)",
    )
    parser.add_argument(
        "--self-hits", action="store_true",
        help="Add an HP-HP self match for every HPO term with an IC score",
    )
    args = parser.parse_args()

    organisms = [Organism[o.strip().upper()] for o in args.organisms.split(",") if o.strip()]
    db = get_db()

    summary: dict[str, int] = {}
    for organism in organisms:
        summary[organism.mapping_collection] = ingest_organism(db, organism, MAPPING_FILES[organism])

    if args.self_hits:
        print("Adding HP-HP self matches...")
        docs = self_hit_docs(db[HPO_TERMS].find({}, {"label": 1, "ic_score": 1}))
        collection = db[Organism.HUMAN.mapping_collection]
        _upsert(collection, docs)
        collection.create_index("hp_id")
        print(f"  -> {len(docs)} self matches upserted")

    print(f"\n=== Ingestion Summary ===")
    for name, count in summary.items():
        print(f"  {name:<20}: {count}")
    print("Done.")


if __name__ == "__main__":
    main()
