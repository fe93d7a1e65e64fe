"""
core/models.py — Single source of truth for ALL data models across the project.
Every module imports from here. No module defines its own value types.

All models are frozen: they are built once per analysis run from the
precomputed ontology data and shared read-only between scorers.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny


# ---------------------------------------------------------------------------
# Organism
# ---------------------------------------------------------------------------

class Organism(str, Enum):
    """Organisms with a precomputed HP-to-organism phenotype mapping table."""
    HUMAN = "HUMAN"
    MOUSE = "MOUSE"
    FISH = "FISH"

    @property
    def ncbi_taxon_id(self) -> str:
        return _ORGANISM_INFO[self.value][0]

    @property
    def species_name(self) -> str:
        return _ORGANISM_INFO[self.value][1]

    @property
    def ontology_prefix(self) -> str:
        return _ORGANISM_INFO[self.value][2]

    @property
    def mapping_collection(self) -> str:
        """MongoDB collection holding the HP-to-<prefix> phenotype mappings."""
        return f"hp_{self.ontology_prefix.lower()}_mappings"


# value → (taxon id, species name, phenotype ontology prefix)
_ORGANISM_INFO: dict[str, tuple[str, str, str]] = {
    "HUMAN": ("9606", "Homo sapiens", "HP"),
    "MOUSE": ("10090", "Mus musculus", "MP"),
    "FISH": ("7955", "Danio rerio", "ZP"),
}


# ---------------------------------------------------------------------------
# Ontology terms and pairwise matches
# ---------------------------------------------------------------------------

class PhenotypeTerm(BaseModel):
    """A single phenotype ontology term, e.g. ``HP:0001156 Brachydactyly``."""
    model_config = ConfigDict(frozen=True)

    id: str                                              # e.g. "HP:0001156"
    label: str = ""
    present: bool = True                                 # False for excluded findings

    @classmethod
    def of(cls, term_id: str, label: str) -> PhenotypeTerm:
        return cls(id=term_id, label=label)

    @classmethod
    def not_of(cls, term_id: str, label: str) -> PhenotypeTerm:
        return cls(id=term_id, label=label, present=False)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PhenotypeTerm):
            return NotImplemented
        return self.id < other.id


class PhenotypeMatch(BaseModel):
    """
    A precomputed match between a query term and a term from an organism's
    phenotype ontology, scored through their lowest common subsumer (LCS).
    """
    model_config = ConfigDict(frozen=True)

    query_phenotype: PhenotypeTerm
    match_phenotype: PhenotypeTerm
    lcs: Optional[PhenotypeTerm] = None
    ic: float = Field(default=0.0, ge=0.0)               # information content of the LCS
    simj: float = Field(default=0.0, ge=0.0, le=1.0)     # Jaccard similarity of ancestor sets
    score: float = 0.0

    @property
    def query_phenotype_id(self) -> str:
        return self.query_phenotype.id

    @property
    def match_phenotype_id(self) -> str:
        return self.match_phenotype.id


# ---------------------------------------------------------------------------
# Matcher → scorer transfer record
# ---------------------------------------------------------------------------

class PhenodigmMatchRawScore(BaseModel):
    """Raw numbers produced by a matcher for a single model."""
    model_config = ConfigDict(frozen=True)

    max_model_match_score: float = 0.0
    sum_model_best_match_scores: float = 0.0
    matching_phenotypes: tuple[str, ...] = ()
    best_phenotype_matches: tuple[PhenotypeMatch, ...] = ()


# ---------------------------------------------------------------------------
# Models (things with phenotypes which get scored)
# ---------------------------------------------------------------------------

class Model(BaseModel):
    """Anything carrying a list of organism-local phenotype ids."""
    model_config = ConfigDict(frozen=True)

    id: str
    phenotype_ids: tuple[str, ...] = ()


class GeneModel(Model):
    """A model associated with a human gene, directly or through an orthologue."""
    organism: Organism
    entrez_gene_id: int
    human_gene_symbol: str


class GeneDiseaseModel(GeneModel):
    """Human disease annotated to a gene. Phenotypes are HP ids."""
    disease_id: str                                      # e.g. "OMIM:101600"
    disease_term: str = ""


class GeneOrthologModel(GeneModel):
    """Mouse or fish orthologue of a human gene. Phenotypes are MP / ZP ids."""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_gene_id: str                                   # e.g. "MGI:95523"
    model_gene_symbol: str = ""


# ---------------------------------------------------------------------------
# Scoring output
# ---------------------------------------------------------------------------

class ModelPhenotypeMatch(BaseModel):
    """
    Final score of a model against the query phenotypes.

    Sorting a list of these puts the highest score first.
    """
    model_config = ConfigDict(frozen=True)

    score: float
    model: SerializeAsAny[Model]
    best_phenotype_matches: tuple[PhenotypeMatch, ...] = ()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ModelPhenotypeMatch):
            return NotImplemented
        return self.score > other.score
