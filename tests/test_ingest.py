"""
tests/test_ingest.py — Unit tests for hpo_functions.py and the row parsers of
the ingestion scripts.  No MongoDB or ontology download required.
"""

from __future__ import annotations

import math

import pytest

import hpo_functions
from scripts.ingest_mappings import parse_mapping_row, self_hit_docs
from scripts.ingest_models import parse_model_row, split_ids
from core.models import Organism


# ═══════════════════════════════════════════════════════════════════════════
# 1. hpo_functions tests
# ═══════════════════════════════════════════════════════════════════════════


HPOA_TEXT = "\n".join([
    "#description: HPO annotations",
    "#date: 2024-01-01",
    "database_id\tdisease_name\tqualifier\thpo_id\treference\tevidence\taspect",
    "OMIM:101600\tPfeiffer syndrome\t\tHP:0001156\tPMID:1\tPCS\tP",
    "OMIM:101600\tPfeiffer syndrome\t\tHP:0000244\tPMID:1\tPCS\tP",
    "OMIM:101600\tPfeiffer syndrome\tNOT\tHP:0001250\tPMID:1\tPCS\tP",
    "OMIM:101600\tPfeiffer syndrome\t\tHP:0000006\tPMID:1\tPCS\tI",
    "OMIM:123150\tJackson-Weiss syndrome\t\tHP:0001156\tPMID:2\tPCS\tP",
    "",
])

OBO_TEXT = """format-version: 1.2
ontology: hp

[Term]
id: HP:0000001
name: All

[Term]
id: HP:0000118
name: Phenotypic abnormality
is_a: HP:0000001 ! All

[Term]
id: HP:0001155
name: Abnormality of the hand
is_a: HP:0000118 ! Phenotypic abnormality

[Term]
id: HP:0001156
name: Brachydactyly
is_a: HP:0001155 ! Abnormality of the hand

[Term]
id: HP:0000244
name: Brachyturricephaly
is_a: HP:0000118 ! Phenotypic abnormality
"""


@pytest.fixture
def ontology(tmp_path):
    path = tmp_path / "hp.obo"
    path.write_text(OBO_TEXT)
    return hpo_functions.load_ontology(str(path))


class TestDiseaseAnnotations:
    def test_read(self, tmp_path):
        path = tmp_path / "phenotype.hpoa"
        path.write_text(HPOA_TEXT)

        disease_to_hpo, disease_to_name = hpo_functions.read_disease_annotations(str(path))

        assert disease_to_hpo == {
            "OMIM:101600": {"HP:0001156", "HP:0000244"},
            "OMIM:123150": {"HP:0001156"},
        }
        assert disease_to_name["OMIM:123150"] == "Jackson-Weiss syndrome"

    def test_all_aspects(self, tmp_path):
        path = tmp_path / "phenotype.hpoa"
        path.write_text(HPOA_TEXT)

        disease_to_hpo, _ = hpo_functions.read_disease_annotations(str(path), aspect=None)

        assert "HP:0000006" in disease_to_hpo["OMIM:101600"]

    def test_probability(self):
        probs = hpo_functions.hpo_term_probability({
            "D1": {"HP:0001156", "HP:0000244"},
            "D2": {"HP:0001156"},
        })
        assert probs == {"HP:0001156": 1.0, "HP:0000244": 0.5}

    def test_probability_empty(self):
        assert hpo_functions.hpo_term_probability({}) == {}


class TestPropagation:
    def test_ancestors(self, ontology):
        assert hpo_functions.ancestors(ontology, "HP:0001156") == {"HP:0001155", "HP:0000118", "HP:0000001"}

    def test_propagate(self, ontology):
        propagated = hpo_functions.propagate_annotations(ontology, {
            "D1": {"HP:0001156", "HP:9999999"},
            "D2": {"HP:0000244"},
        })
        assert propagated["D1"] == {"HP:0001156", "HP:0001155", "HP:0000118", "HP:0000001"}
        assert propagated["D2"] == {"HP:0000244", "HP:0000118", "HP:0000001"}

    def test_parent_ic_not_above_child(self, ontology):
        propagated = hpo_functions.propagate_annotations(ontology, {
            "D1": {"HP:0001156"},
            "D2": {"HP:0000244"},
        })
        ic = hpo_functions.information_content_scores(hpo_functions.hpo_term_probability(propagated))
        assert ic["HP:0001156"] == pytest.approx(1.0)
        assert ic["HP:0000118"] == 0.0
        assert ic["HP:0000118"] <= ic["HP:0001155"] <= ic["HP:0001156"]


class TestInformationContent:
    def test_annotated_term(self):
        assert hpo_functions.information_content("HP:0000244", {"HP:0000244": 0.25}) == pytest.approx(2.0)

    def test_unannotated_term(self):
        assert hpo_functions.information_content("HP:0000244", {}) == 0.0

    def test_term_on_every_disease(self):
        assert math.copysign(1.0, hpo_functions.information_content("HP:0000118", {"HP:0000118": 1.0})) == 1.0


class TestPhenodigmScore:
    def test_geometric_mean(self):
        assert hpo_functions.phenodigm_score(8.0, 0.5) == pytest.approx(2.0)

    def test_self_match(self):
        assert hpo_functions.phenodigm_score(9.0, 1.0) == pytest.approx(3.0)

    def test_zero_inputs(self):
        assert hpo_functions.phenodigm_score(0.0, 0.5) == 0.0
        assert hpo_functions.phenodigm_score(4.0, 0.0) == 0.0


# ═══════════════════════════════════════════════════════════════════════════
# 2. ingest_mappings parser tests
# ═══════════════════════════════════════════════════════════════════════════


ROW = {
    "hp_id": "HP:0001156", "hp_term": "Brachydactyly",
    "match_id": "MP:0002544", "match_term": "brachydactyly",
    "simj": "0.5", "ic": "8.0", "score": "1.9",
    "lcs_id": "HP:0001156", "lcs_term": "Brachydactyly",
}


class TestParseMappingRow:
    def test_full_row(self):
        doc = parse_mapping_row(ROW)
        assert doc["_id"] == "HP:0001156_MP:0002544"
        assert doc["simj"] == 0.5
        assert doc["ic"] == 8.0
        assert doc["score"] == pytest.approx(1.9)
        assert doc["lcs_id"] == "HP:0001156"

    def test_blank_score_computed(self):
        doc = parse_mapping_row({**ROW, "score": ""})
        assert doc["score"] == pytest.approx(2.0)

    def test_missing_ids_skipped(self):
        assert parse_mapping_row({**ROW, "match_id": ""}) is None
        assert parse_mapping_row({**ROW, "hp_id": " "}) is None


class TestSelfHits:
    def test_self_hits(self):
        docs = self_hit_docs([
            {"_id": "HP:0001156", "label": "Brachydactyly", "ic_score": 9.0},
            {"_id": "HP:0000118", "label": "Phenotypic abnormality", "ic_score": 0.0},
        ])
        assert len(docs) == 1
        doc = docs[0]
        assert doc["_id"] == "HP:0001156_HP:0001156"
        assert doc["hp_id"] == doc["match_id"] == doc["lcs_id"] == "HP:0001156"
        assert doc["simj"] == 1.0
        assert doc["score"] == pytest.approx(math.sqrt(9.0))


# ═══════════════════════════════════════════════════════════════════════════
# 3. ingest_models parser tests
# ═══════════════════════════════════════════════════════════════════════════


class TestParseModelRow:
    def test_split_ids(self):
        assert split_ids("HP:0001156, HP:0000244,,") == ["HP:0001156", "HP:0000244"]
        assert split_ids(None) == []

    def test_disease_row(self):
        doc = parse_model_row(Organism.HUMAN, {
            "disease_id": "OMIM:101600", "disease_term": "Pfeiffer syndrome",
            "entrez_gene_id": "2263", "human_gene_symbol": "FGFR2",
            "phenotype_ids": "HP:0001156,HP:0000244",
        })
        assert doc["_id"] == "OMIM:101600_2263"
        assert doc["entrez_gene_id"] == 2263
        assert doc["phenotype_ids"] == ["HP:0001156", "HP:0000244"]

    def test_ortholog_row(self):
        doc = parse_model_row(Organism.MOUSE, {
            "model_gene_id": "MGI:95523", "model_gene_symbol": "Fgfr2",
            "entrez_gene_id": "2263", "human_gene_symbol": "FGFR2",
            "phenotype_ids": "MP:0002544",
        })
        assert doc["_id"] == "MGI:95523_2263"
        assert doc["model_gene_symbol"] == "Fgfr2"
        assert "disease_id" not in doc

    def test_rows_without_ids_skipped(self):
        assert parse_model_row(Organism.HUMAN, {"entrez_gene_id": "2263", "human_gene_symbol": "FGFR2"}) is None
        assert parse_model_row(Organism.FISH, {"entrez_gene_id": "x", "human_gene_symbol": "FGFR2",
                                               "model_gene_id": "ZFIN:1"}) is None
