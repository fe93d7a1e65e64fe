"""
phenotype/matcher.py — Match a model's phenotypes against the query for one organism.

The matcher is built once per organism per analysis and then asked, for each
candidate model, how well that model's phenotype ids match the query terms.
The pairwise (query id, match id) index is built up front, so scoring a model
is dict lookups only.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from core.models import (
    Organism,
    PhenodigmMatchRawScore,
    PhenotypeMatch,
    PhenotypeTerm,
)
from phenotype.query_match import QueryPhenotypeMatch

logger = logging.getLogger(__name__)


class CrossSpeciesPhenotypeMatcher:
    """
    Holds the precomputed matches of the query terms against one organism's
    phenotype ontology and scores lists of model phenotype ids against them.

    Instances are never mutated after construction and can be shared between
    threads scoring different models.
    """

    def __init__(self, query_phenotype_match: QueryPhenotypeMatch) -> None:
        if query_phenotype_match is None:
            raise ValueError("query_phenotype_match must not be None")
        self._query_phenotype_match = query_phenotype_match

        term_phenotype_matches = query_phenotype_match.query_term_phenotype_matches

        self._matched_organism_phenotype_ids = frozenset(
            match.match_phenotype_id
            for matches in term_phenotype_matches.values()
            for match in matches
        )
        self._matched_query_phenotype_ids = tuple(sorted({
            match.query_phenotype_id
            for match in query_phenotype_match.best_phenotype_matches
        }))

        # (query id, match id) -> match
        mapped_terms: dict[tuple[str, str], PhenotypeMatch] = {}
        for matches in term_phenotype_matches.values():
            for match in matches:
                key = (match.query_phenotype_id, match.match_phenotype_id)
                current = mapped_terms.get(key)
                if current is None or current.score < match.score:
                    mapped_terms[key] = match
        self._mapped_terms = MappingProxyType(mapped_terms)

    @classmethod
    def of(
        cls,
        organism: Organism,
        query_term_phenotype_matches: Mapping[PhenotypeTerm, set[PhenotypeMatch]],
    ) -> CrossSpeciesPhenotypeMatcher:
        """
        Build a matcher from the raw lookup results.

        Parameters
        ----------
        organism : Organism
            The organism these matches belong to.
        query_term_phenotype_matches : Mapping[PhenotypeTerm, set[PhenotypeMatch]]
            Query terms and their candidate matches.  Unmatched terms map to an
            empty set.
        """
        return cls(QueryPhenotypeMatch(organism, query_term_phenotype_matches))

    @classmethod
    def from_query_phenotype_match(
        cls, query_phenotype_match: QueryPhenotypeMatch
    ) -> CrossSpeciesPhenotypeMatcher:
        return cls(query_phenotype_match)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def organism(self) -> Organism:
        return self._query_phenotype_match.organism

    @property
    def query_terms(self) -> list[PhenotypeTerm]:
        return self._query_phenotype_match.query_terms

    @property
    def term_phenotype_matches(self) -> Mapping[PhenotypeTerm, frozenset[PhenotypeMatch]]:
        return self._query_phenotype_match.query_term_phenotype_matches

    @property
    def best_phenotype_matches(self) -> list[PhenotypeMatch]:
        return self._query_phenotype_match.best_phenotype_matches

    @property
    def query_phenotype_match(self) -> QueryPhenotypeMatch:
        return self._query_phenotype_match

    @property
    def matched_organism_phenotype_ids(self) -> frozenset[str]:
        return self._matched_organism_phenotype_ids

    @property
    def matched_query_phenotype_ids(self) -> list[str]:
        return list(self._matched_query_phenotype_ids)

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def match_phenotype_ids(self, model_phenotype_ids: Iterable[str]) -> PhenodigmMatchRawScore:
        """
        Calculate the best forward (query → model) and reciprocal
        (model → query) matches for a model's phenotypes.

        Both passes add their per-term best scores to the same sum, so a pair
        which is the best match in both directions is counted twice.  This is
        how the Phenodigm score is defined and the scorer's denominator
        (query terms + matched model terms) accounts for it.

        Parameters
        ----------
        model_phenotype_ids : Iterable[str]
            Phenotype ids of the model in this organism's ontology (HP, MP or
            ZP).  Ids absent from the mapping table are ignored; duplicates are
            scored independently.

        Returns
        -------
        PhenodigmMatchRawScore
            All zero and empty if nothing matched.
        """
        matched_model_phenotype_ids = [
            phenotype_id
            for phenotype_id in model_phenotype_ids
            if phenotype_id in self._matched_organism_phenotype_ids
        ]

        max_model_match_score = 0.0
        sum_model_best_match_scores = 0.0
        best_phenotype_match_for_terms: dict[PhenotypeTerm, PhenotypeMatch] = {}

        # forward hp -> mp
        for hp_id in self._matched_query_phenotype_ids:
            best_match_score = self._best_match_score(
                ((hp_id, mp_id) for mp_id in matched_model_phenotype_ids),
                best_phenotype_match_for_terms,
            )
            if best_match_score > 0:
                sum_model_best_match_scores += best_match_score
                max_model_match_score = max(best_match_score, max_model_match_score)

        # reciprocal mp -> hp
        for mp_id in matched_model_phenotype_ids:
            best_match_score = self._best_match_score(
                ((hp_id, mp_id) for hp_id in self._matched_query_phenotype_ids),
                best_phenotype_match_for_terms,
            )
            if best_match_score > 0:
                sum_model_best_match_scores += best_match_score
                max_model_match_score = max(best_match_score, max_model_match_score)

        return PhenodigmMatchRawScore(
            max_model_match_score=max_model_match_score,
            sum_model_best_match_scores=sum_model_best_match_scores,
            matching_phenotypes=matched_model_phenotype_ids,
            best_phenotype_matches=list(best_phenotype_match_for_terms.values()),
        )

    def _best_match_score(
        self,
        keys: Iterable[tuple[str, str]],
        best_phenotype_match_for_terms: dict[PhenotypeTerm, PhenotypeMatch],
    ) -> float:
        best_match_score = 0.0
        for key in keys:
            match = self._mapped_terms.get(key)
            if match is None:
                continue
            best_match_score = max(match.score, best_match_score)
            if match.score > 0:
                _add_match_if_absent_or_better(match, best_phenotype_match_for_terms)
        return best_match_score

    def calculate_best_forward_and_reciprocal_matches(
        self, model_phenotype_ids: Iterable[str]
    ) -> list[PhenotypeMatch]:
        """
        Return the best match of every query id against the model (forward),
        followed by the best match of every model id against the query
        (reciprocal).  Ids without any match contribute nothing.
        """
        matched_model_phenotype_ids = [
            phenotype_id
            for phenotype_id in model_phenotype_ids
            if phenotype_id in self._matched_organism_phenotype_ids
        ]

        forward_matches = [
            best for best in (
                self._best_match((hp_id, mp_id) for mp_id in matched_model_phenotype_ids)
                for hp_id in self._matched_query_phenotype_ids
            )
            if best is not None
        ]
        reciprocal_matches = [
            best for best in (
                self._best_match((hp_id, mp_id) for hp_id in self._matched_query_phenotype_ids)
                for mp_id in matched_model_phenotype_ids
            )
            if best is not None
        ]
        return forward_matches + reciprocal_matches

    def _best_match(self, keys: Iterable[tuple[str, str]]) -> PhenotypeMatch | None:
        found = [self._mapped_terms[key] for key in keys if key in self._mapped_terms]
        if not found:
            return None
        return max(found, key=lambda match: match.score)

    @staticmethod
    def calculate_best_phenotype_matches_by_term(
        phenotype_matches: Iterable[PhenotypeMatch],
    ) -> list[PhenotypeMatch]:
        """Group the matches by query term and keep the highest scoring one of each."""
        best_for_terms: dict[PhenotypeTerm, PhenotypeMatch] = {}
        for match in phenotype_matches:
            _add_match_if_absent_or_better(match, best_for_terms)
        return list(best_for_terms.values())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CrossSpeciesPhenotypeMatcher):
            return NotImplemented
        return self._query_phenotype_match == other._query_phenotype_match

    def __hash__(self) -> int:
        return hash(self._query_phenotype_match)

    def __repr__(self) -> str:
        return (
            f"CrossSpeciesPhenotypeMatcher(organism={self.organism.value}, "
            f"term_phenotype_matches={dict(self.term_phenotype_matches)})"
        )


def _add_match_if_absent_or_better(
    match: PhenotypeMatch,
    best_phenotype_match_for_terms: dict[PhenotypeTerm, PhenotypeMatch],
) -> None:
    query_term = match.query_phenotype
    current = best_phenotype_match_for_terms.get(query_term)
    if current is None or current.score < match.score:
        best_phenotype_match_for_terms[query_term] = match
