"""
core/config.py — Single responsibility: load environment variables from .env
and expose them as module-level constants.

Used by the ontology lookup, the match cache and the scripts.
"""

from dotenv import load_dotenv
import os

load_dotenv()

MONGODB_URI: str = os.getenv("MONGODB_URI", "")
REDIS_URL: str = os.getenv("REDIS_URL", "")
DB_NAME: str = os.getenv("DB_NAME", "phenodigm")

# seconds
MATCH_CACHE_TTL: int = int(os.getenv("MATCH_CACHE_TTL", "86400"))

HPO_OBO_PATH: str = os.getenv("HPO_OBO_PATH", "data/raw/hp.obo")
HPOA_PATH: str = os.getenv("HPOA_PATH", "data/raw/phenotype.hpoa")

# Comma-separated subset of human,mouse,fish
ORGANISMS_TO_RUN: str = os.getenv("ORGANISMS_TO_RUN", "human,mouse,fish")
