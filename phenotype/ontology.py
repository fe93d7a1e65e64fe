"""
phenotype/ontology.py — Lookup of HPO terms and precomputed phenotype mappings.

Backed by MongoDB: ``hpo_terms`` holds the HPO terms (written by
``scripts/ingest_hpo.py``) and one collection per organism holds the OWLSim
HP-to-HP/MP/ZP mappings (written by ``scripts/ingest_mappings.py``).

Mapping documents look like::

    {"hp_id": "HP:0001156", "hp_term": "Brachydactyly",
     "match_id": "MP:0002544", "match_term": "brachydactyly",
     "simj": 0.86, "ic": 8.2, "score": 2.66,
     "lcs_id": "HP:0001156", "lcs_term": "Brachydactyly"}
"""

from __future__ import annotations

import logging
from typing import Optional

from core.database import HPO_TERMS
from core.match_cache import MatchCache
from core.models import Organism, PhenotypeMatch, PhenotypeTerm

logger = logging.getLogger(__name__)


class OntologyService:
    """Read-only view of the phenotype ontologies and their mappings."""

    def __init__(self, db, cache: Optional[MatchCache] = None) -> None:
        """
        Parameters
        ----------
        db : pymongo.database.Database
            The MongoDB database handle (from ``core.database.get_db()``).
        cache : MatchCache, optional
            Consulted before MongoDB for mapping lookups.
        """
        self._db = db
        self._cache = cache
        self._hpo_terms: dict[str, PhenotypeTerm] | None = None
        self._alt_ids: dict[str, str] = {}

    # ------------------------------------------------------------------
    # HPO terms
    # ------------------------------------------------------------------

    def _load_hpo_terms(self) -> dict[str, PhenotypeTerm]:
        if self._hpo_terms is None:
            terms: dict[str, PhenotypeTerm] = {}
            for doc in self._db[HPO_TERMS].find({}, {"label": 1, "alt_ids": 1}):
                hpo_id = doc["_id"]
                terms[hpo_id] = PhenotypeTerm.of(hpo_id, doc.get("label", ""))
                for alt_id in doc.get("alt_ids", []):
                    self._alt_ids[alt_id] = hpo_id
            logger.info("Loaded %d HPO terms, %d alternate ids", len(terms), len(self._alt_ids))
            self._hpo_terms = terms
        return self._hpo_terms

    def get_hpo_terms(self) -> list[PhenotypeTerm]:
        return list(self._load_hpo_terms().values())

    def get_current_hpo_id(self, hpo_id: str) -> str | None:
        """Resolve an obsolete / alternate id to its current primary id."""
        terms = self._load_hpo_terms()
        if hpo_id in terms:
            return hpo_id
        return self._alt_ids.get(hpo_id)

    def get_phenotype_term(self, hpo_id: str) -> PhenotypeTerm | None:
        current_id = self.get_current_hpo_id(hpo_id)
        if current_id is None:
            return None
        if current_id != hpo_id:
            logger.info("%s is an alternate id of %s", hpo_id, current_id)
        return self._load_hpo_terms()[current_id]

    # ------------------------------------------------------------------
    # Mappings
    # ------------------------------------------------------------------

    def lookup_matches_for_term(self, organism: Organism, term: PhenotypeTerm) -> set[PhenotypeMatch]:
        """
        Return the precomputed matches of ``term`` in the organism's ontology.

        The query side of every match is ``term`` itself so that the matches
        group under the same key the caller used.
        """
        if self._cache is not None:
            cached = self._cache.get_matches(organism, term.id)
            if cached is not None:
                return {m.model_copy(update={"query_phenotype": term}) for m in cached}

        collection = self._db[organism.mapping_collection]
        matches = {_match_from_doc(term, doc) for doc in collection.find({"hp_id": term.id})}

        if self._cache is not None:
            self._cache.set_matches(organism, term.id, matches)
        return matches


def _match_from_doc(query_term: PhenotypeTerm, doc: dict) -> PhenotypeMatch:
    lcs = None
    if doc.get("lcs_id"):
        lcs = PhenotypeTerm.of(doc["lcs_id"], doc.get("lcs_term", ""))
    return PhenotypeMatch(
        query_phenotype=query_term,
        match_phenotype=PhenotypeTerm.of(doc["match_id"], doc.get("match_term", "")),
        lcs=lcs,
        ic=float(doc.get("ic") or 0.0),
        simj=float(doc.get("simj") or 0.0),
        score=float(doc.get("score") or 0.0),
    )
