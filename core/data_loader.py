"""
core/data_loader.py — Startup hydration: load all reference data into memory.

Called once at startup. Returns a dict with the HPO indexes used for query
term resolution and the candidate models of every organism.  The phenotype
mappings themselves are looked up per query term by ``OntologyService``.
"""

from __future__ import annotations

import time
from typing import Any

from core.database import HPO_TERMS, MODEL_COLLECTIONS
from core.models import GeneDiseaseModel, GeneModel, GeneOrthologModel, Organism


def load_all(db) -> dict[str, Any]:
    """
    Load all reference data from MongoDB into memory.

    Parameters
    ----------
    db : pymongo.database.Database
        The MongoDB database handle (from ``core.database.get_db()``).

    Returns
    -------
    dict with keys:
        - ``"hpo_index"``     : dict  — HPO ID → document
        - ``"synonym_index"`` : dict  — lowercase label / synonym → HPO ID
        - ``"alt_id_index"``  : dict  — alternate HPO ID → current HPO ID
        - ``"models"``        : dict  — Organism → list of GeneModel
    """
    t0 = time.time()
    data: dict[str, Any] = {}

    # --- HPO terms -----------------------------------------------------------
    print("Loading HPO terms...")
    hpo_index: dict[str, dict] = {}
    synonym_index: dict[str, str] = {}
    alt_id_index: dict[str, str] = {}

    for doc in db[HPO_TERMS].find():
        hpo_id = doc["_id"]
        hpo_index[hpo_id] = doc

        label = doc.get("label", "")
        if label:
            synonym_index[label.lower()] = hpo_id
        for syn in doc.get("synonyms", []):
            if syn:
                synonym_index.setdefault(syn.lower(), hpo_id)
        for alt_id in doc.get("alt_ids", []):
            alt_id_index[alt_id] = hpo_id

    data["hpo_index"] = hpo_index
    data["synonym_index"] = synonym_index
    data["alt_id_index"] = alt_id_index
    print(f"  -> {len(hpo_index)} HPO terms, {len(synonym_index)} synonym entries, "
          f"{len(alt_id_index)} alternate ids")

    # --- Models --------------------------------------------------------------
    models: dict[Organism, list[GeneModel]] = {}
    for organism in Organism:
        collection = MODEL_COLLECTIONS[organism.value]
        print(f"Loading {organism.value.lower()} models from {collection}...")
        models[organism] = [model_from_doc(organism, doc) for doc in db[collection].find()]
        print(f"  -> {len(models[organism])} models loaded")
    data["models"] = models

    elapsed = time.time() - t0
    print(f"load_all() completed in {elapsed:.1f}s")
    return data


def model_from_doc(organism: Organism, doc: dict) -> GeneModel:
    """Build the model for a document written by ``scripts/ingest_models.py``."""
    if organism is Organism.HUMAN:
        return GeneDiseaseModel(
            id=doc["_id"],
            organism=organism,
            entrez_gene_id=int(doc["entrez_gene_id"]),
            human_gene_symbol=doc["human_gene_symbol"],
            disease_id=doc["disease_id"],
            disease_term=doc.get("disease_term", ""),
            phenotype_ids=doc.get("phenotype_ids", []),
        )
    return GeneOrthologModel(
        id=doc["_id"],
        organism=organism,
        entrez_gene_id=int(doc["entrez_gene_id"]),
        human_gene_symbol=doc["human_gene_symbol"],
        model_gene_id=doc["model_gene_id"],
        model_gene_symbol=doc.get("model_gene_symbol", ""),
        phenotype_ids=doc.get("phenotype_ids", []),
    )
