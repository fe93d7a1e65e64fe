"""
phenotype/service.py — Builds the per-organism phenotype matchers for a query.
"""

from __future__ import annotations

import logging
import time
from typing import Iterable, Mapping

from core.models import Organism, PhenotypeMatch, PhenotypeTerm
from phenotype.matcher import CrossSpeciesPhenotypeMatcher
from phenotype.ontology import OntologyService
from phenotype.query_match import QueryPhenotypeMatch

logger = logging.getLogger(__name__)


class PhenotypeMatchService:
    """Turns query HPO terms into matchers using an ontology lookup service."""

    def __init__(self, ontology_service: OntologyService) -> None:
        self._ontology_service = ontology_service

    def make_phenotype_terms_from_hpo_ids(self, hpo_ids: Iterable[str]) -> list[PhenotypeTerm]:
        """
        Resolve HPO ids to their current terms.

        Unknown ids are logged and dropped.  Ids resolving to the same current
        term are kept once, in first-seen order.
        """
        terms: list[PhenotypeTerm] = []
        seen: set[str] = set()
        for hpo_id in hpo_ids:
            term = self._ontology_service.get_phenotype_term(hpo_id)
            if term is None:
                logger.warning("Unable to find PhenotypeTerm for HPO id %s", hpo_id)
                continue
            if term.id in seen:
                continue
            seen.add(term.id)
            terms.append(term)
        return terms

    def get_term_phenotype_matches(
        self, organism: Organism, query_terms: Iterable[PhenotypeTerm]
    ) -> dict[PhenotypeTerm, set[PhenotypeMatch]]:
        """Look up the candidate matches of each query term; unmatched terms map to an empty set."""
        t0 = time.time()
        term_matches: dict[PhenotypeTerm, set[PhenotypeMatch]] = {}
        for term in query_terms:
            term_matches[term] = self._ontology_service.lookup_matches_for_term(organism, term)
        elapsed_ms = int((time.time() - t0) * 1000)
        logger.info(
            "Fetched %d %s phenotype matches for %d query terms in %d ms",
            sum(len(matches) for matches in term_matches.values()),
            organism.value,
            len(term_matches),
            elapsed_ms,
        )
        return term_matches

    def build_query_phenotype_match(
        self, organism: Organism, query_terms: Iterable[PhenotypeTerm]
    ) -> QueryPhenotypeMatch:
        return QueryPhenotypeMatch(organism, self.get_term_phenotype_matches(organism, query_terms))

    @staticmethod
    def build_matcher(
        organism: Organism,
        term_phenotype_matches: Mapping[PhenotypeTerm, set[PhenotypeMatch]],
    ) -> CrossSpeciesPhenotypeMatcher:
        return CrossSpeciesPhenotypeMatcher.of(organism, term_phenotype_matches)

    def get_phenotype_matcher_for_organism(
        self, query_terms: Iterable[PhenotypeTerm], organism: Organism
    ) -> CrossSpeciesPhenotypeMatcher:
        query_phenotype_match = self.build_query_phenotype_match(organism, query_terms)
        return CrossSpeciesPhenotypeMatcher.from_query_phenotype_match(query_phenotype_match)
