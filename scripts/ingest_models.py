"""
scripts/ingest_models.py — Load disease, mouse and fish gene models into MongoDB.

Input files are tab-separated with a header row; ``phenotype_ids`` is a
comma-separated list of HP / MP / ZP ids.

    disease models : disease_id  disease_term  entrez_gene_id  human_gene_symbol  phenotype_ids
    mouse / fish   : model_gene_id  model_gene_symbol  entrez_gene_id  human_gene_symbol  phenotype_ids

Usage:  python -m scripts.ingest_models
"""

from __future__ import annotations

import csv
import sys

sys.path.insert(0, ".")

from core.database import MODEL_COLLECTIONS, get_db
from core.models import Organism

MODEL_FILES: dict[Organism, str] = {
    Organism.HUMAN: "data/raw/disease-gene-models.tsv",
    Organism.MOUSE: "data/raw/mouse-gene-models.tsv",
    Organism.FISH: "data/raw/fish-gene-models.tsv",
}


def split_ids(value: str | None) -> list[str]:
    return [t.strip() for t in (value or "").split(",") if t.strip()]


def parse_model_row(organism: Organism, row: dict) -> dict | None:
    """Convert one TSV row into a model document, or ``None`` if it lacks ids."""
    entrez = (row.get("entrez_gene_id") or "").strip()
    symbol = (row.get("human_gene_symbol") or "").strip()
    if not entrez.isdigit() or not symbol:
        return None

    doc = {
        "entrez_gene_id": int(entrez),
        "human_gene_symbol": symbol,
        "phenotype_ids": split_ids(row.get("phenotype_ids")),
    }
    if organism is Organism.HUMAN:
        disease_id = (row.get("disease_id") or "").strip()
        if not disease_id:
            return None
        doc["_id"] = f"{disease_id}_{entrez}"
        doc["disease_id"] = disease_id
        doc["disease_term"] = (row.get("disease_term") or "").strip()
    else:
        model_gene_id = (row.get("model_gene_id") or "").strip()
        if not model_gene_id:
            return None
        doc["_id"] = f"{model_gene_id}_{entrez}"
        doc["model_gene_id"] = model_gene_id
        doc["model_gene_symbol"] = (row.get("model_gene_symbol") or "").strip()
    return doc


def main() -> None:
    """Insert the model documents of every organism."""

    db = get_db()
    counts: dict[str, int] = {}

    for organism, path in MODEL_FILES.items():
        print(f"Parsing {organism.value.lower()} models: {path}")
        models: dict[str, dict] = {}
        with open(path, "r", encoding="utf-8-sig") as fh:
            for row in csv.DictReader(fh, delimiter="\t"):
                doc = parse_model_row(organism, row)
                if doc is None:
                    continue
                # the same model listed twice: merge its phenotypes
                existing = models.get(doc["_id"])
                if existing:
                    for pid in doc["phenotype_ids"]:
                        if pid not in existing["phenotype_ids"]:
                            existing["phenotype_ids"].append(pid)
                else:
                    models[doc["_id"]] = doc
        print(f"  -> Parsed {len(models)} models")

        collection = MODEL_COLLECTIONS[organism.value]
        print(f"Dropping & inserting {collection} collection...")
        db[collection].drop()
        if models:
            db[collection].insert_many(list(models.values()))
        db[collection].create_index("human_gene_symbol")
        counts[collection] = len(models)

    print(f"\n=== Ingestion Summary ===")
    for name, count in counts.items():
        print(f"  {name:<16}: {count}")
    print("Done.")


if __name__ == "__main__":
    main()
