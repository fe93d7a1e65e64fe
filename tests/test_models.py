"""
tests/test_models.py — Unit tests for the pydantic value types in core/models.py.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.models import (
    GeneDiseaseModel,
    GeneOrthologModel,
    Model,
    ModelPhenotypeMatch,
    Organism,
    PhenodigmMatchRawScore,
    PhenotypeMatch,
    PhenotypeTerm,
)


# ═══════════════════════════════════════════════════════════════════════════
# 1. Organism
# ═══════════════════════════════════════════════════════════════════════════


class TestOrganism:
    def test_taxon_ids(self):
        assert Organism.HUMAN.ncbi_taxon_id == "9606"
        assert Organism.MOUSE.ncbi_taxon_id == "10090"
        assert Organism.FISH.ncbi_taxon_id == "7955"

    def test_species_names(self):
        assert Organism.HUMAN.species_name == "Homo sapiens"
        assert Organism.MOUSE.species_name == "Mus musculus"
        assert Organism.FISH.species_name == "Danio rerio"

    def test_mapping_collections(self):
        assert Organism.HUMAN.mapping_collection == "hp_hp_mappings"
        assert Organism.MOUSE.mapping_collection == "hp_mp_mappings"
        assert Organism.FISH.mapping_collection == "hp_zp_mappings"

    def test_enum_order_starts_with_human(self):
        assert list(Organism)[0] is Organism.HUMAN


# ═══════════════════════════════════════════════════════════════════════════
# 2. PhenotypeTerm
# ═══════════════════════════════════════════════════════════════════════════


class TestPhenotypeTerm:
    def test_of(self):
        term = PhenotypeTerm.of("HP:0001156", "Brachydactyly")
        assert term.id == "HP:0001156"
        assert term.label == "Brachydactyly"
        assert term.present is True

    def test_not_of(self):
        term = PhenotypeTerm.not_of("HP:0001156", "Brachydactyly")
        assert term.present is False
        assert term != PhenotypeTerm.of("HP:0001156", "Brachydactyly")

    def test_equality_and_hash(self):
        a = PhenotypeTerm.of("HP:0001156", "Brachydactyly")
        b = PhenotypeTerm.of("HP:0001156", "Brachydactyly")
        assert a == b
        assert len({a, b}) == 1

    def test_sorted_by_id(self):
        terms = [
            PhenotypeTerm.of("HP:0000003", "c"),
            PhenotypeTerm.of("HP:0000001", "z"),
            PhenotypeTerm.of("HP:0000002", "a"),
        ]
        assert [t.id for t in sorted(terms)] == ["HP:0000001", "HP:0000002", "HP:0000003"]

    def test_frozen(self):
        term = PhenotypeTerm.of("HP:0001156", "Brachydactyly")
        with pytest.raises(ValidationError):
            term.label = "other"


# ═══════════════════════════════════════════════════════════════════════════
# 3. PhenotypeMatch
# ═══════════════════════════════════════════════════════════════════════════


QUERY = PhenotypeTerm.of("HP:0001156", "Brachydactyly")
MATCH = PhenotypeTerm.of("MP:0002544", "brachydactyly")


class TestPhenotypeMatch:
    def test_ids(self):
        match = PhenotypeMatch(query_phenotype=QUERY, match_phenotype=MATCH, ic=8.0, simj=0.5, score=2.0)
        assert match.query_phenotype_id == "HP:0001156"
        assert match.match_phenotype_id == "MP:0002544"
        assert match.lcs is None

    def test_equal_matches_collapse_in_set(self):
        a = PhenotypeMatch(query_phenotype=QUERY, match_phenotype=MATCH, lcs=QUERY, ic=8.0, simj=0.5, score=2.0)
        b = PhenotypeMatch(query_phenotype=QUERY, match_phenotype=MATCH, lcs=QUERY, ic=8.0, simj=0.5, score=2.0)
        assert a == b
        assert len({a, b}) == 1

    def test_different_score_not_equal(self):
        a = PhenotypeMatch(query_phenotype=QUERY, match_phenotype=MATCH, score=2.0)
        b = PhenotypeMatch(query_phenotype=QUERY, match_phenotype=MATCH, score=2.5)
        assert a != b

    def test_simj_above_one_rejected(self):
        with pytest.raises(ValidationError):
            PhenotypeMatch(query_phenotype=QUERY, match_phenotype=MATCH, simj=1.5)

    def test_negative_ic_rejected(self):
        with pytest.raises(ValidationError):
            PhenotypeMatch(query_phenotype=QUERY, match_phenotype=MATCH, ic=-1.0)


# ═══════════════════════════════════════════════════════════════════════════
# 4. Models and results
# ═══════════════════════════════════════════════════════════════════════════


class TestGeneModels:
    def test_disease_model(self):
        model = GeneDiseaseModel(
            id="OMIM:101600_2263",
            organism=Organism.HUMAN,
            entrez_gene_id=2263,
            human_gene_symbol="FGFR2",
            disease_id="OMIM:101600",
            disease_term="Pfeiffer syndrome",
            phenotype_ids=["HP:0001156", "HP:0000244"],
        )
        assert model.organism is Organism.HUMAN
        assert model.phenotype_ids == ("HP:0001156", "HP:0000244")

    def test_ortholog_model(self):
        model = GeneOrthologModel(
            id="MGI:95523_2263",
            organism=Organism.MOUSE,
            entrez_gene_id=2263,
            human_gene_symbol="FGFR2",
            model_gene_id="MGI:95523",
            model_gene_symbol="Fgfr2",
        )
        assert model.model_gene_id == "MGI:95523"
        assert model.phenotype_ids == ()

    def test_entrez_id_coerced_from_string(self):
        model = GeneOrthologModel(
            id="ZFIN:1_2263",
            organism=Organism.FISH,
            entrez_gene_id="2263",
            human_gene_symbol="FGFR2",
            model_gene_id="ZFIN:1",
        )
        assert model.entrez_gene_id == 2263


class TestRawScore:
    def test_defaults(self):
        raw = PhenodigmMatchRawScore()
        assert raw.max_model_match_score == 0.0
        assert raw.sum_model_best_match_scores == 0.0
        assert raw.matching_phenotypes == ()
        assert raw.best_phenotype_matches == ()

    def test_list_input_stored_as_tuple(self):
        raw = PhenodigmMatchRawScore(
            sum_model_best_match_scores=1.0,
            matching_phenotypes=["MP:0002544"],
            best_phenotype_matches=[PhenotypeMatch(query_phenotype=QUERY, match_phenotype=MATCH, score=1.0)],
        )
        assert isinstance(raw.matching_phenotypes, tuple)
        assert isinstance(raw.best_phenotype_matches, tuple)
        assert hash(raw) == hash(raw.model_copy())


class TestModelPhenotypeMatch:
    def test_hashable(self):
        model = Model(id="x", phenotype_ids=["HP:0001156"])
        assert len({model, Model(id="x", phenotype_ids=["HP:0001156"])}) == 1
        assert hash(ModelPhenotypeMatch(score=0.5, model=Model(id="x"))) == hash(
            ModelPhenotypeMatch(score=0.5, model=Model(id="x"))
        )

    def test_phenotype_ids_immutable(self):
        model = Model(id="x", phenotype_ids=["HP:0001156"])
        with pytest.raises(AttributeError):
            model.phenotype_ids.append("HP:0000244")

    def test_sorts_highest_score_first(self):
        low = ModelPhenotypeMatch(score=0.2, model=Model(id="low"))
        high = ModelPhenotypeMatch(score=0.9, model=Model(id="high"))
        mid = ModelPhenotypeMatch(score=0.5, model=Model(id="mid"))
        assert [m.model.id for m in sorted([low, high, mid])] == ["high", "mid", "low"]

    def test_keeps_subclass_fields_when_dumped(self):
        model = GeneDiseaseModel(
            id="OMIM:101600_2263",
            organism=Organism.HUMAN,
            entrez_gene_id=2263,
            human_gene_symbol="FGFR2",
            disease_id="OMIM:101600",
        )
        match = ModelPhenotypeMatch(score=0.5, model=model)
        assert isinstance(match.model, GeneDiseaseModel)
        assert match.model_dump()["model"]["disease_id"] == "OMIM:101600"
