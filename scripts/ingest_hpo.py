"""
scripts/ingest_hpo.py — Parse hp.obo and phenotype.hpoa, load HPO terms with
their synonyms, alternate ids and information content into MongoDB.

Usage:  python -m scripts.ingest_hpo
"""

from __future__ import annotations

import sys

# Ensure project root is importable
sys.path.insert(0, ".")

from pymongo import UpdateOne

from core.config import HPO_OBO_PATH, HPOA_PATH
from core.database import HPO_TERMS, get_db
import hpo_functions


def main() -> None:
    """Parse hp.obo → insert HPO terms, then compute and store IC scores."""

    db = get_db()

    # ------------------------------------------------------------------
    # 1. Load ontology
    # ------------------------------------------------------------------
    print("Loading ontology from", HPO_OBO_PATH, "...")
    ontology = hpo_functions.load_ontology(HPO_OBO_PATH)

    # ------------------------------------------------------------------
    # 2. Build HPO term documents
    # ------------------------------------------------------------------
    print("Extracting HPO terms...")
    term_docs: list[dict] = []

    for term in ontology.terms():
        tid = term.id
        if not tid.startswith("HP:") or term.obsolete:
            continue

        parents = [sup.id for sup in term.superclasses(distance=1) if sup.id != tid]

        term_docs.append({
            "_id": tid,
            "label": term.name,
            "synonyms": [s.description for s in term.synonyms],
            "alt_ids": sorted(term.alternate_ids),
            "parents": parents,
            "ic_score": 0.0,  # computed later
        })

    print(f"  -> {len(term_docs)} HP terms extracted")

    # ------------------------------------------------------------------
    # 3. Insert HPO terms
    # ------------------------------------------------------------------
    print(f"Dropping & inserting {HPO_TERMS} collection...")
    db[HPO_TERMS].drop()
    if term_docs:
        db[HPO_TERMS].insert_many(term_docs)

    # ------------------------------------------------------------------
    # 4. Compute IC scores from disease annotations
    # ------------------------------------------------------------------
    print("Reading disease annotations from", HPOA_PATH, "...")
    disease_to_hpo, _ = hpo_functions.read_disease_annotations(HPOA_PATH)

    print("Propagating annotations to ancestor terms...")
    disease_to_hpo = hpo_functions.propagate_annotations(ontology, disease_to_hpo)

    print("Computing IC scores...")
    hpo_probs = hpo_functions.hpo_term_probability(disease_to_hpo)
    ic_scores = hpo_functions.information_content_scores(hpo_probs)

    ops = [
        UpdateOne({"_id": hpo_id}, {"$set": {"ic_score": ic}})
        for hpo_id, ic in ic_scores.items()
    ]
    if ops:
        db[HPO_TERMS].bulk_write(ops, ordered=False)
    print(f"  -> Updated IC scores for {len(ops)} terms")

    # ------------------------------------------------------------------
    # 5. Indexes
    # ------------------------------------------------------------------
    print(f"Creating indexes on {HPO_TERMS}...")
    db[HPO_TERMS].create_index("alt_ids")
    db[HPO_TERMS].create_index([("label", "text"), ("synonyms", "text")])

    n_hpo = db[HPO_TERMS].count_documents({})
    print(f"\n=== Ingestion Summary ===")
    print(f"  HPO terms inserted   : {n_hpo}")
    print(f"  Terms with IC score  : {len(ops)}")
    print("Done.")


if __name__ == "__main__":
    main()
