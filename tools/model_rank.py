"""
tools/model_rank.py — Score and rank disease, mouse and fish models against
the patient's phenotypes.

Every organism's models are scored on the human (HP-HP) scale, so a mouse
knockout and an OMIM disease end up in one directly comparable list.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Mapping

from core.models import (
    GeneDiseaseModel,
    GeneModel,
    ModelPhenotypeMatch,
    Organism,
    PhenotypeTerm,
)
from phenotype.scorer import PhenodigmModelScorer
from phenotype.service import PhenotypeMatchService

logger = logging.getLogger(__name__)


class InvalidRunParameterError(ValueError):
    """Raised for an unknown organism in a run parameter string."""


@dataclass(frozen=True)
class RunOptions:
    """Which organisms to score and, optionally, a disease-gene pair to benchmark."""

    organisms_to_run: tuple[Organism, ...] = (Organism.HUMAN, Organism.MOUSE, Organism.FISH)
    disease_id: str = ""
    candidate_gene_symbol: str = ""

    @classmethod
    def from_run_params(
        cls,
        run_params: str | None,
        disease_id: str = "",
        candidate_gene_symbol: str = "",
    ) -> RunOptions:
        """
        Parse a comma-separated list of organisms, e.g. ``"human,mouse"``.

        An empty or ``None`` string means all organisms.
        """
        if not run_params or not run_params.strip():
            return cls(disease_id=disease_id, candidate_gene_symbol=candidate_gene_symbol)

        requested: set[Organism] = set()
        for token in run_params.split(","):
            param = token.strip()
            try:
                requested.add(Organism[param.upper()])
            except KeyError:
                raise InvalidRunParameterError(f"'{param}' is not a valid parameter.") from None

        # always in enum order so HUMAN, the reference organism, runs first
        organisms = tuple(organism for organism in Organism if organism in requested)
        return cls(
            organisms_to_run=organisms,
            disease_id=disease_id,
            candidate_gene_symbol=candidate_gene_symbol,
        )

    @property
    def benchmarking_enabled(self) -> bool:
        return bool(self.disease_id and self.candidate_gene_symbol)

    def is_benchmarking_model(self, model: GeneModel) -> bool:
        """True for the known disease-gene model being benchmarked. Only disease models can match."""
        if not self.benchmarking_enabled or not isinstance(model, GeneDiseaseModel):
            return False
        return model.disease_id == self.disease_id and model.human_gene_symbol == self.candidate_gene_symbol


def run(
    query_terms: list[PhenotypeTerm],
    models_by_organism: Mapping[Organism, Iterable[GeneModel]],
    phenotype_match_service: PhenotypeMatchService,
    options: RunOptions | None = None,
) -> list[ModelPhenotypeMatch]:
    """
    Score every model of the requested organisms against the query terms.

    Parameters
    ----------
    query_terms : list[PhenotypeTerm]
        The patient's HPO terms.  Terms marked not present are ignored.
    models_by_organism : Mapping[Organism, Iterable[GeneModel]]
        Candidate models, e.g. ``data["models"]`` from ``load_all()``.
    phenotype_match_service : PhenotypeMatchService
        Supplies the per-organism matchers.
    options : RunOptions, optional
        Defaults to all organisms, no benchmarking.

    Returns
    -------
    list[ModelPhenotypeMatch]
        All models with a score above zero, best first.  A gene can appear
        several times, once per model.
    """
    options = options or RunOptions()

    present_terms = [term for term in query_terms if term.present]
    if len(present_terms) < len(query_terms):
        logger.info("Ignoring %d excluded phenotype(s)", len(query_terms) - len(present_terms))
    if not present_terms:
        return []

    if options.benchmarking_enabled:
        logger.info(
            "Running in benchmarking mode for disease: %s and candidate gene: %s",
            options.disease_id,
            options.candidate_gene_symbol,
        )

    # HUMAN always runs first, its HP-HP matches are the scale for every organism.
    reference_matcher = phenotype_match_service.get_phenotype_matcher_for_organism(
        present_terms, Organism.HUMAN
    )
    reference_query_phenotype_match = reference_matcher.query_phenotype_match
    if not reference_query_phenotype_match.best_phenotype_matches:
        logger.warning(
            "%s has no phenotype matches for input set %s",
            reference_query_phenotype_match,
            [term.id for term in present_terms],
        )

    results: list[ModelPhenotypeMatch] = []
    for organism in options.organisms_to_run:
        if organism is Organism.HUMAN:
            matcher = reference_matcher
        else:
            matcher = phenotype_match_service.get_phenotype_matcher_for_organism(present_terms, organism)

        models = [
            model for model in models_by_organism.get(organism, [])
            if not options.is_benchmarking_model(model)
        ]
        scorer = PhenodigmModelScorer.for_multi_cross_species(reference_query_phenotype_match, matcher)

        t0 = time.time()
        scored = [scorer.score_model(model) for model in models]
        results.extend(match for match in scored if match.score > 0)
        logger.info(
            "Scored %d %s models in %d ms",
            len(models),
            organism.value,
            int((time.time() - t0) * 1000),
        )

    return sorted(results)


def best_gene_scores(model_matches: Iterable[ModelPhenotypeMatch]) -> dict[str, float]:
    """
    Collapse model scores to one phenotype score per human gene: the best
    score of any of its models.  Returned highest first.
    """
    gene_scores: dict[str, float] = {}
    for match in model_matches:
        gene_symbol = getattr(match.model, "human_gene_symbol", None)
        if not gene_symbol:
            continue
        gene_scores[gene_symbol] = max(gene_scores.get(gene_symbol, 0.0), match.score)
    return dict(sorted(gene_scores.items(), key=lambda item: item[1], reverse=True))
