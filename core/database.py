"""
core/database.py — MongoDB singleton connection.

Provides the shared client used by the ontology service, data_loader and the
ingestion scripts.  Each organism's precomputed phenotype mappings live in
their own collection (see ``Organism.mapping_collection``).
"""

from pymongo import MongoClient
from core.config import MONGODB_URI, DB_NAME


_client: MongoClient | None = None

HPO_TERMS = "hpo_terms"
MODEL_COLLECTIONS: dict[str, str] = {
    "HUMAN": "disease_models",
    "MOUSE": "mouse_models",
    "FISH": "fish_models",
}


def get_client() -> MongoClient:
    """Return (and cache) a MongoClient singleton."""
    global _client
    if _client is None:
        if not MONGODB_URI:
            raise RuntimeError("MONGODB_URI is not set in .env")
        _client = MongoClient(MONGODB_URI)
    return _client


def get_db():
    """Return the phenotype database handle."""
    return get_client()[DB_NAME]
