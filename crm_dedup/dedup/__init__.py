"""
Duplicate detection: similarity primitives and the two matchers.

Nothing in this package touches the database; the matchers run over a
pre-fetched list of ``PersonRecord`` snapshots.
"""

from crm_dedup.dedup.candidates import (
    CandidatePair,
    MatchType,
    PersonRecord,
    dedupe_pairs,
    pair_key,
    sort_by_confidence,
)
from crm_dedup.dedup.config import MatchConfig
from crm_dedup.dedup.deterministic import find_deterministic_matches
from crm_dedup.dedup.fuzzy import find_fuzzy_matches, score_pair

__all__ = [
    "CandidatePair",
    "MatchType",
    "PersonRecord",
    "MatchConfig",
    "dedupe_pairs",
    "pair_key",
    "sort_by_confidence",
    "find_deterministic_matches",
    "find_fuzzy_matches",
    "score_pair",
]
