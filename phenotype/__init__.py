"""
phenotype — Cross-species phenotype matching and Phenodigm model scoring.

Re-exports the public API:
    - QueryPhenotypeMatch           (best matches / ceilings per organism)
    - CrossSpeciesPhenotypeMatcher  (forward + reciprocal matching of a model)
    - PhenodigmModelScorer          (normalised 0–1 model scores)
    - ScorerConfig, ScoringMode     (scorer normalisation modes)
    - OntologyService               (HPO terms and precomputed mappings)
    - PhenotypeMatchService         (builds matchers for a query)
"""

from phenotype.matcher import CrossSpeciesPhenotypeMatcher
from phenotype.ontology import OntologyService
from phenotype.query_match import QueryPhenotypeMatch
from phenotype.scorer import (
    PhenodigmModelScorer,
    ScorerConfig,
    ScoringMode,
    calculate_combined_score,
)
from phenotype.service import PhenotypeMatchService

__all__ = [
    "CrossSpeciesPhenotypeMatcher",
    "OntologyService",
    "PhenodigmModelScorer",
    "PhenotypeMatchService",
    "QueryPhenotypeMatch",
    "ScorerConfig",
    "ScoringMode",
    "calculate_combined_score",
]
