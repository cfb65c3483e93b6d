import uuid

import pytest

from crm_dedup.dedup import MatchConfig, MatchType, PersonRecord, find_deterministic_matches


pytestmark = pytest.mark.unit


def person(**fields) -> PersonRecord:
    return PersonRecord(id=uuid.uuid4(), **fields)


def test_shared_email_yields_one_candidate_regardless_of_order():
    a = person(first_name="Alice", email="alice@x.com")
    b = person(first_name="Alice", email="Alice@X.com ")

    forward = find_deterministic_matches([a, b])
    backward = find_deterministic_matches([b, a])

    assert len(forward) == 1
    assert len(backward) == 1
    assert forward[0].pair_key == backward[0].pair_key
    assert forward[0].match_type == MatchType.EMAIL
    assert forward[0].confidence == 0.98
    assert forward[0].reason == "exact email match: alice@x.com"


def test_email_reason_preferred_when_phone_also_matches():
    a = person(email="alice@x.com", phone="555-1000")
    b = person(email="alice@x.com", phone="(555) 1000")

    matches = find_deterministic_matches([a, b])

    assert len(matches) == 1
    assert matches[0].match_type == MatchType.EMAIL


def test_shared_phone_matches_on_digits():
    a = person(phone="555-1000")
    b = person(phone="555 1000")
    c = person(phone="555-2000")

    matches = find_deterministic_matches([a, b, c])

    assert len(matches) == 1
    assert {matches[0].person_a_id, matches[0].person_b_id} == {a.id, b.id}
    assert matches[0].confidence == 0.95
    assert matches[0].reason == "exact phone match: 5551000"


def test_never_pairs_a_person_with_itself():
    a = person(email="alice@x.com", phone="555-1000")

    assert find_deterministic_matches([a, a]) == []


def test_buckets_of_three_emit_every_pair():
    group = [person(email="team@x.com") for _ in range(3)]

    matches = find_deterministic_matches(group)

    assert len(matches) == 3
    assert len({m.pair_key for m in matches}) == 3


def test_missing_keys_never_match():
    assert find_deterministic_matches([person(), person(email=" ", phone="")]) == []


def test_confidences_come_from_config():
    config = MatchConfig(email_match_confidence=0.9)
    a = person(email="alice@x.com")
    b = person(email="alice@x.com")

    assert find_deterministic_matches([a, b], config)[0].confidence == 0.9
