"""
phenotype/query_match.py — Best possible matches of the query terms in one organism.

For every query term the precomputed ontology table holds zero or more
candidate matches in the organism's phenotype ontology.  Picking the best
candidate per term describes the "theoretical model": the highest scoring
model that organism could possibly have.  Its max and average scores are the
ceilings against which real models are normalised.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from core.models import Organism, PhenotypeMatch, PhenotypeTerm


class QueryPhenotypeMatch:
    """The best phenotype match per query term for one organism."""

    def __init__(
        self,
        organism: Organism,
        query_term_phenotype_matches: Mapping[PhenotypeTerm, set[PhenotypeMatch]],
    ) -> None:
        """
        Parameters
        ----------
        organism : Organism
            The organism whose ontology the matches point into.
        query_term_phenotype_matches : Mapping[PhenotypeTerm, set[PhenotypeMatch]]
            Every query term mapped to its candidate matches.  A term without
            any match in this organism must still be present, with an empty set.
        """
        if organism is None:
            raise ValueError("organism must not be None")
        if query_term_phenotype_matches is None:
            raise ValueError("query_term_phenotype_matches must not be None")

        self._organism = organism
        self._query_term_phenotype_matches = MappingProxyType({
            term: frozenset(matches)
            for term, matches in query_term_phenotype_matches.items()
        })
        self._query_terms = tuple(self._query_term_phenotype_matches)
        self._best_phenotype_matches = tuple(
            _best_match(matches)
            for matches in self._query_term_phenotype_matches.values()
            if matches
        )
        self._max_match_score = max(
            (match.score for match in self._best_phenotype_matches), default=0.0
        )
        self._best_avg_score = self._calculate_best_avg_score()

    def _calculate_best_avg_score(self) -> float:
        # Unmatched query terms still count towards the denominator.
        if not self._best_phenotype_matches:
            return 0.0
        total = sum(match.score for match in self._best_phenotype_matches)
        return total / len(self._query_terms)

    @property
    def organism(self) -> Organism:
        return self._organism

    @property
    def query_terms(self) -> list[PhenotypeTerm]:
        return list(self._query_terms)

    @property
    def query_term_phenotype_matches(self) -> Mapping[PhenotypeTerm, frozenset[PhenotypeMatch]]:
        return self._query_term_phenotype_matches

    @property
    def best_phenotype_matches(self) -> list[PhenotypeMatch]:
        return list(self._best_phenotype_matches)

    @property
    def max_match_score(self) -> float:
        return self._max_match_score

    @property
    def best_avg_score(self) -> float:
        return self._best_avg_score

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryPhenotypeMatch):
            return NotImplemented
        return (
            self._organism == other._organism
            and dict(self._query_term_phenotype_matches) == dict(other._query_term_phenotype_matches)
        )

    def __hash__(self) -> int:
        return hash((self._organism, frozenset(self._query_term_phenotype_matches.items())))

    def __repr__(self) -> str:
        return (
            f"QueryPhenotypeMatch(organism={self._organism.value}, "
            f"query_terms={[t.id for t in self._query_terms]}, "
            f"max_match_score={self._max_match_score}, "
            f"best_avg_score={self._best_avg_score})"
        )


def _best_match(matches: frozenset[PhenotypeMatch]) -> PhenotypeMatch:
    # ties go to the lowest match id
    ordered = sorted(matches, key=lambda match: match.match_phenotype_id)
    return max(ordered, key=lambda match: match.score)
