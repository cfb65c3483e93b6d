"""
Deterministic duplicate matching: same normalized email or phone.

People are bucketed by key in one pass, and pairs are only generated inside
buckets holding two or more people.
"""

from __future__ import annotations

from itertools import combinations
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from crm_dedup.dedup.candidates import CandidatePair, MatchType, PersonRecord, pair_key
from crm_dedup.dedup.config import MatchConfig


def find_deterministic_matches(
    people: Sequence[PersonRecord],
    config: MatchConfig = MatchConfig(),
) -> List[CandidatePair]:
    """Return one candidate per pair sharing an email or a phone, email first."""
    unique_people = _unique_by_id(people)
    candidates: List[CandidatePair] = []
    matched: Set[Tuple[str, str]] = set()

    for email, group in _group_by(unique_people, lambda p: p.email_key).items():
        for a, b in combinations(group, 2):
            matched.add(pair_key(a.id, b.id))
            candidates.append(
                CandidatePair(
                    person_a_id=a.id,
                    person_b_id=b.id,
                    confidence=config.email_match_confidence,
                    reason=f"exact email match: {email}",
                    match_type=MatchType.EMAIL,
                    signals={"email": 1.0},
                )
            )

    for phone, group in _group_by(unique_people, lambda p: p.phone_key).items():
        for a, b in combinations(group, 2):
            key = pair_key(a.id, b.id)
            if key in matched:
                continue
            matched.add(key)
            candidates.append(
                CandidatePair(
                    person_a_id=a.id,
                    person_b_id=b.id,
                    confidence=config.phone_match_confidence,
                    reason=f"exact phone match: {phone}",
                    match_type=MatchType.PHONE,
                    signals={"phone": 1.0},
                )
            )

    return candidates


def _group_by(
    people: Iterable[PersonRecord],
    key_fn: Callable[[PersonRecord], Optional[str]],
) -> Dict[str, List[PersonRecord]]:
    grouped: Dict[str, List[PersonRecord]] = {}
    for person in people:
        key = key_fn(person)
        if not key:
            continue
        grouped.setdefault(key, []).append(person)
    return {key: members for key, members in grouped.items() if len(members) >= 2}


def _unique_by_id(people: Iterable[PersonRecord]) -> List[PersonRecord]:
    seen = set()
    unique: List[PersonRecord] = []
    for person in people:
        if person.id in seen:
            continue
        seen.add(person.id)
        unique.append(person)
    return unique
