#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
===============================================================================
Script Name:    hpo_functions.py
Version:        2.0

Description:
    Ontology helpers for the data build scripts.  Reads hp.obo and the HPO
    disease annotations, estimates the information content (IC) of every
    term from how many diseases are annotated to it or to one of its
    descendants, and scores a single term-to-term match the Phenodigm way.

Dependencies:
    - Python 3.x
    - Required libraries: pronto, math
===============================================================================
"""

import math
from collections import Counter

import pronto

PHENOTYPE_ROOT = 'HP:0000118'  # Phenotypic abnormality


def load_ontology(path_to_obo):
    """
    :param path_to_obo: full path to the .obo file downloaded from HPO
    :return: a pronto Ontology object containing HPO IDs, terms, and relationships
    """

    return pronto.Ontology(path_to_obo)


def read_disease_annotations(hpo_disease_annotations, aspect='P'):
    """
    :param hpo_disease_annotations: full path to the tab-delimited "phenotype.hpoa" file downloaded from HPO
    :param aspect: keep only annotations of this aspect ('P' = phenotypic abnormality), None keeps all
    :return: dictionary from disease ID -> set of HPO terms AND dictionary from disease ID -> name
    """

    disease_to_hpo = {}
    disease_to_name = {}
    columns = None

    with open(hpo_disease_annotations, 'r', encoding='utf-8') as anno_handle:
        for line in anno_handle:
            if line.startswith('#') or not line.strip():
                continue

            fields = line.rstrip('\n').split('\t')
            if columns is None:
                columns = {name: i for i, name in enumerate(fields)}
                continue

            if fields[columns['qualifier']] == 'NOT':
                continue
            aspect_col = columns.get('aspect')
            if aspect and aspect_col is not None and fields[aspect_col] != aspect:
                continue

            disease_id = fields[columns['database_id']]
            disease_to_hpo.setdefault(disease_id, set()).add(fields[columns['hpo_id']])
            disease_to_name.setdefault(disease_id, fields[columns['disease_name']])

    print(f"Number of diseases with annotations = {len(disease_to_hpo)}")
    return disease_to_hpo, disease_to_name


def ancestors(ontology, term_id):
    """
    :param ontology: pronto Ontology object (from "load_ontology")
    :param term_id: HPO term, e.g. 'HP:0001156'
    :return: set of every superclass of the term, the term itself excluded
    """

    return {sup.id for sup in ontology[term_id].superclasses() if sup.id != term_id}


def propagate_annotations(ontology, disease_to_hpo):
    """
    Annotating a disease to a term implicitly annotates it to every ancestor
    of that term.  Ids missing from the ontology are dropped.

    :return: dictionary from disease ID -> set of HPO terms including all ancestors
    """

    cache = {}
    propagated = {}
    for disease_id, hpo_set in disease_to_hpo.items():
        terms = set()
        for hpo_id in hpo_set:
            if hpo_id not in ontology:
                continue
            if hpo_id not in cache:
                cache[hpo_id] = ancestors(ontology, hpo_id)
            terms.add(hpo_id)
            terms.update(cache[hpo_id])
        propagated[disease_id] = terms
    return propagated


def hpo_term_probability(disease_to_hpo):
    """
    :param disease_to_hpo: dictionary from disease ID -> set of HPO terms
    :return: dictionary from HPO ID -> fraction of diseases annotated to it
    """

    if not disease_to_hpo:
        return {}
    counts = Counter(hpo_id for hpo_set in disease_to_hpo.values() for hpo_id in hpo_set)
    total = len(disease_to_hpo)
    return {hpo_id: count / total for hpo_id, count in counts.items()}


def information_content(hpo_term, probabilities):
    """
    :param hpo_term: a specific HPO term (e.g., 'HP:0001631')
    :param probabilities: dictionary from HPO ID -> probability (from "hpo_term_probability")
    :return: -log2(p) of the term, 0 for unannotated terms
    """

    p = probabilities.get(hpo_term)
    if not p:
        return 0.0
    return -math.log2(p) + 0.0  # avoid -0.0 for p == 1


def information_content_scores(probabilities):
    """IC of every annotated term."""
    return {hpo_id: information_content(hpo_id, probabilities) for hpo_id in probabilities}


def phenodigm_score(ic, simj):
    """
    :param ic: information content of the lowest common subsumer of the two terms
    :param simj: Jaccard similarity of the ancestor sets of the two terms
    :return: the Phenodigm match score, the geometric mean of ic and simj
    """

    if ic <= 0 or simj <= 0:
        return 0.0
    return math.sqrt(ic * simj)
