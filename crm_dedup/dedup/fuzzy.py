"""
Fuzzy duplicate matching over all pairs (or blocked pairs) in a workspace.

The composite score is a weighted average over the signals present on both
people: name similarity, email equality, phone similarity and location
equality. A signal missing on either side is left out of the average, never
counted as a mismatch. Two different non-null emails veto the pair outright.
"""

from __future__ import annotations

from itertools import combinations
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from crm_dedup.dedup.candidates import CandidatePair, MatchType, PersonRecord
from crm_dedup.dedup.config import MatchConfig
from crm_dedup.dedup.similarity import exact_match, name_similarity, phone_similarity


def find_fuzzy_matches(
    people: Sequence[PersonRecord],
    config: MatchConfig = MatchConfig(),
) -> List[CandidatePair]:
    candidates: List[CandidatePair] = []
    for a, b in _candidate_pairs(people, config.blocking):
        scored = score_pair(a, b, config)
        if scored is None:
            continue
        composite, signals = scored
        confidence = round(min(composite, config.fuzzy_max_confidence), 4)
        if confidence < config.fuzzy_threshold:
            continue
        candidates.append(
            CandidatePair(
                person_a_id=a.id,
                person_b_id=b.id,
                confidence=confidence,
                reason=describe_signals(signals),
                match_type=MatchType.FUZZY,
                signals=signals,
            )
        )
    return candidates


def score_pair(
    a: PersonRecord,
    b: PersonRecord,
    config: MatchConfig = MatchConfig(),
) -> Optional[Tuple[float, Dict[str, float]]]:
    """
    Composite similarity for one pair, or None when the pair is not comparable.

    Returns ``(score, signals)`` where ``signals`` maps each contributing
    field to its own 0..1 similarity.
    """
    name = name_similarity(a.name, b.name)
    if name is None:
        return None

    email = exact_match(a.email_key, b.email_key)
    if email == 0.0:
        return None

    weighted = {
        "name": (name, config.name_weight),
        "email": (email, config.email_weight),
        "phone": (phone_similarity(a.phone, b.phone), config.phone_weight),
        "location": (exact_match(a.location_key, b.location_key), config.location_weight),
    }

    total_weight = 0.0
    total = 0.0
    signals: Dict[str, float] = {}
    for field_name, (value, weight) in weighted.items():
        if value is None or weight <= 0:
            continue
        signals[field_name] = value
        total += value * weight
        total_weight += weight

    if total_weight <= 0:
        return None
    return total / total_weight, signals


def describe_signals(signals: Dict[str, float]) -> str:
    parts = [f"name similarity {signals['name']:.2f}"]
    if signals.get("email") == 1.0:
        parts.append("same email")
    phone = signals.get("phone")
    if phone is not None:
        parts.append("same phone" if phone == 1.0 else f"phone similarity {phone:.2f}")
    location = signals.get("location")
    if location is not None:
        parts.append("same location" if location == 1.0 else "different location")
    return ", ".join(parts)


def _candidate_pairs(people: Sequence[PersonRecord], blocking: bool) -> Iterator[Tuple[PersonRecord, PersonRecord]]:
    unique: Dict[object, PersonRecord] = {}
    for person in people:
        unique.setdefault(person.id, person)
    ordered = list(unique.values())

    if not blocking:
        yield from combinations(ordered, 2)
        return

    blocks: Dict[str, List[PersonRecord]] = {}
    for person in ordered:
        key = person.blocking_key
        if key is None:
            continue
        blocks.setdefault(key, []).append(person)
    for members in blocks.values():
        yield from combinations(members, 2)
