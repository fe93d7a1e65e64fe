"""
phenotype/scorer.py — Phenodigm model scoring.

Implements the Phenodigm (PHENOtype comparisons for DIsease Genes and Models)
score of a model against the best theoretical model for the query phenotypes,
see https://doi.org/10.1093/database/bat025

The raw max and average match scores of a model are scaled by the ceilings of
a ``QueryPhenotypeMatch`` so that models with many or few annotated phenotypes,
and models from different organisms, end up on the same 0–1 scale.  Which
ceilings and which query size are used depends on the comparison being made,
and is fixed once in a ``ScorerConfig``:

* SAME_SPECIES          — HP-HP, ceilings of the organism, all query terms.
* SINGLE_CROSS_SPECIES  — HP-MP or HP-ZP, ceilings of the organism, only the
                          query terms with a match in that organism.
* MULTI_CROSS_SPECIES   — any organism, ceilings and query size of a reference
                          (human) QueryPhenotypeMatch, so that disease, mouse
                          and fish models can be ranked together.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from core.models import Model, ModelPhenotypeMatch, PhenodigmMatchRawScore
from phenotype.matcher import CrossSpeciesPhenotypeMatcher
from phenotype.query_match import QueryPhenotypeMatch

logger = logging.getLogger(__name__)


class ScoringMode(str, Enum):
    SAME_SPECIES = "same_species"
    SINGLE_CROSS_SPECIES = "single_cross_species"
    MULTI_CROSS_SPECIES = "multi_cross_species"


@dataclass(frozen=True)
class ScorerConfig:
    """Normalisation constants of a scorer, tagged with the mode they came from."""

    mode: ScoringMode
    theoretical_max_match_score: float
    theoretical_best_avg_score: float
    num_query_phenotypes: int

    @classmethod
    def same_species(cls, matcher: CrossSpeciesPhenotypeMatcher) -> ScorerConfig:
        query_phenotype_match = matcher.query_phenotype_match
        return cls(
            mode=ScoringMode.SAME_SPECIES,
            theoretical_max_match_score=query_phenotype_match.max_match_score,
            theoretical_best_avg_score=query_phenotype_match.best_avg_score,
            num_query_phenotypes=len(matcher.query_terms),
        )

    @classmethod
    def single_cross_species(cls, matcher: CrossSpeciesPhenotypeMatcher) -> ScorerConfig:
        query_phenotype_match = matcher.query_phenotype_match
        return cls(
            mode=ScoringMode.SINGLE_CROSS_SPECIES,
            theoretical_max_match_score=query_phenotype_match.max_match_score,
            theoretical_best_avg_score=query_phenotype_match.best_avg_score,
            num_query_phenotypes=len(matcher.best_phenotype_matches),
        )

    @classmethod
    def multi_cross_species(cls, reference_query_phenotype_match: QueryPhenotypeMatch) -> ScorerConfig:
        return cls(
            mode=ScoringMode.MULTI_CROSS_SPECIES,
            theoretical_max_match_score=reference_query_phenotype_match.max_match_score,
            theoretical_best_avg_score=reference_query_phenotype_match.best_avg_score,
            num_query_phenotypes=len(reference_query_phenotype_match.query_terms),
        )


def calculate_combined_score(raw_score: PhenodigmMatchRawScore, config: ScorerConfig) -> float:
    """
    Combine a model's raw scores into a single score in [0, 1].

    The average is taken over the query phenotypes plus only those model
    phenotypes which matched something in the query, not every model
    phenotype.
    """
    sum_model_best_match_scores = raw_score.sum_model_best_match_scores
    if sum_model_best_match_scores <= 0:
        return 0.0

    total_phenotypes_with_match = config.num_query_phenotypes + len(raw_score.matching_phenotypes)
    if total_phenotypes_with_match <= 0:
        return 0.0
    model_best_avg_score = sum_model_best_match_scores / total_phenotypes_with_match

    combined_score = 50 * (
        _ratio(raw_score.max_model_match_score, config.theoretical_max_match_score)
        + _ratio(model_best_avg_score, config.theoretical_best_avg_score)
    )
    if combined_score > 100:
        combined_score = 100
    return combined_score / 100


def _ratio(score: float, ceiling: float) -> float:
    # a query with no matches at all has zero ceilings
    if ceiling <= 0:
        return 0.0
    return score / ceiling


class PhenodigmModelScorer:
    """Scores models of one organism against the query phenotypes."""

    def __init__(self, phenotype_matcher: CrossSpeciesPhenotypeMatcher, config: ScorerConfig) -> None:
        self._matcher = phenotype_matcher
        self._config = config
        if logger.isEnabledFor(logging.DEBUG):
            self._log_organism_phenotype_matches()

    @classmethod
    def for_same_species(cls, phenotype_matcher: CrossSpeciesPhenotypeMatcher) -> PhenodigmModelScorer:
        """Score human models only, e.g. diseases or patients described with HPO terms."""
        return cls(phenotype_matcher, ScorerConfig.same_species(phenotype_matcher))

    @classmethod
    def for_single_cross_species(cls, phenotype_matcher: CrossSpeciesPhenotypeMatcher) -> PhenodigmModelScorer:
        """Score models of a single non-human organism (HP-MP or HP-ZP matches)."""
        return cls(phenotype_matcher, ScorerConfig.single_cross_species(phenotype_matcher))

    @classmethod
    def for_multi_cross_species(
        cls,
        reference_query_phenotype_match: QueryPhenotypeMatch,
        phenotype_matcher: CrossSpeciesPhenotypeMatcher,
    ) -> PhenodigmModelScorer:
        """
        Score models so they are comparable across organisms.

        Parameters
        ----------
        reference_query_phenotype_match : QueryPhenotypeMatch
            The HP-HP matches of the query; supplies the ceilings and query size.
        phenotype_matcher : CrossSpeciesPhenotypeMatcher
            The matcher of the organism whose models are being scored.
        """
        return cls(phenotype_matcher, ScorerConfig.multi_cross_species(reference_query_phenotype_match))

    @property
    def config(self) -> ScorerConfig:
        return self._config

    @property
    def phenotype_matcher(self) -> CrossSpeciesPhenotypeMatcher:
        return self._matcher

    def _log_organism_phenotype_matches(self) -> None:
        logger.debug("Best %s phenotype matches:", self._matcher.organism.value)
        for query_term, matches in self._matcher.term_phenotype_matches.items():
            if not matches:
                logger.debug("%s-NOT MATCHED", query_term.id)
                continue
            best_match = max(matches, key=lambda match: match.score)
            logger.debug("%s-%s=%s", query_term.id, best_match.match_phenotype_id, best_match.score)
        logger.debug(
            "%s bestMaxScore=%s bestAvgScore=%s numQueryPhenotypes=%d",
            self._config.mode.value,
            self._config.theoretical_max_match_score,
            self._config.theoretical_best_avg_score,
            self._config.num_query_phenotypes,
        )

    def score_model(self, model: Model) -> ModelPhenotypeMatch:
        raw_score = self._matcher.match_phenotype_ids(model.phenotype_ids)
        score = calculate_combined_score(raw_score, self._config)
        return ModelPhenotypeMatch(
            score=score,
            model=model,
            best_phenotype_matches=raw_score.best_phenotype_matches,
        )

    def score_models(self, models: Iterable[Model]) -> list[ModelPhenotypeMatch]:
        """Score every model; best first."""
        return sorted(self.score_model(model) for model in models)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PhenodigmModelScorer):
            return NotImplemented
        return self._config == other._config and self._matcher == other._matcher

    def __hash__(self) -> int:
        return hash((self._config, self._matcher))

    def __repr__(self) -> str:
        return f"PhenodigmModelScorer(config={self._config!r}, organism={self._matcher.organism.value})"
