"""
tools/hpo_lookup.py — Resolve query phenotype inputs to HPO terms.

Pure programmatic.  Accepts HPO ids (current or alternate), exact labels /
synonyms, and falls back to rapidfuzz for fuzzy label matching.  A leading
``NOT`` or ``!`` marks an excluded finding.
"""

from __future__ import annotations

import logging
import re

from rapidfuzz import process as rfprocess

from core.models import PhenotypeTerm

logger = logging.getLogger(__name__)

_HP_PATTERN = re.compile(r"^HP:\d{7}$")
_NEGATION_PATTERN = re.compile(r"^(?:not\s+|!\s*)", re.IGNORECASE)

FUZZY_CUTOFF = 85


def run(raw_inputs: list[str], data: dict) -> list[PhenotypeTerm]:
    """
    Map query inputs to ``PhenotypeTerm`` objects.

    Parameters
    ----------
    raw_inputs : list[str]
        HPO ids or phenotype descriptions, e.g. ``["HP:0001156", "NOT seizures"]``.
    data : dict
        The reference-data dict returned by ``core.data_loader.load_all()``.
        Relevant keys: ``"hpo_index"``, ``"synonym_index"``, ``"alt_id_index"``.

    Returns
    -------
    list[PhenotypeTerm]
        One term per resolvable input, in input order, without duplicates.
        Unresolvable inputs are logged and skipped.
    """
    hpo_index: dict = data["hpo_index"]
    synonym_index: dict = data["synonym_index"]
    alt_id_index: dict = data.get("alt_id_index", {})
    # Pre-build the list of synonym keys once for rapidfuzz
    syn_keys: list[str] = list(synonym_index.keys())

    results: list[PhenotypeTerm] = []
    seen: set[tuple[str, bool]] = set()

    for raw in raw_inputs:
        text = raw.strip()
        negation = _NEGATION_PATTERN.match(text)
        present = negation is None
        if negation:
            text = text[negation.end():].strip()

        hpo_id = _resolve(text, hpo_index, synonym_index, alt_id_index, syn_keys)
        if hpo_id is None:
            logger.warning("No HPO term found for %r", raw)
            continue
        if (hpo_id, present) in seen:
            continue
        seen.add((hpo_id, present))

        label = hpo_index.get(hpo_id, {}).get("label", "")
        results.append(PhenotypeTerm(id=hpo_id, label=label, present=present))

    return results


def _resolve(
    text: str,
    hpo_index: dict,
    synonym_index: dict,
    alt_id_index: dict,
    syn_keys: list[str],
) -> str | None:
    # ------------------------------------------------------------------
    # Direct HPO ID input (e.g. "HP:0001250")
    # ------------------------------------------------------------------
    if _HP_PATTERN.match(text):
        if text in hpo_index:
            return text
        return alt_id_index.get(text)

    # ------------------------------------------------------------------
    # Exact match in synonym_index
    # ------------------------------------------------------------------
    normalized = text.lower()
    if normalized in synonym_index:
        return synonym_index[normalized]

    # ------------------------------------------------------------------
    # Fuzzy match via rapidfuzz
    # ------------------------------------------------------------------
    if not normalized or not syn_keys:
        return None
    match = rfprocess.extractOne(normalized, syn_keys, score_cutoff=FUZZY_CUTOFF)
    if match:
        matched_str, score, _ = match
        logger.info("Fuzzy matched %r to %r (score %.0f)", text, matched_str, score)
        return synonym_index[matched_str]
    return None
