import uuid

import pytest

from crm_dedup.dedup import MatchConfig, MatchType, PersonRecord, find_fuzzy_matches, pair_key, score_pair
from crm_dedup.dedup.fuzzy import describe_signals


pytestmark = pytest.mark.unit


def person(**fields) -> PersonRecord:
    return PersonRecord(id=uuid.uuid4(), **fields)


def test_similar_names_in_same_city_are_flagged():
    c = person(first_name="Jon", last_name="Smith", location="Austin")
    d = person(first_name="John", last_name="Smith", location="austin ")

    matches = find_fuzzy_matches([c, d])

    assert len(matches) == 1
    match = matches[0]
    assert match.match_type == MatchType.FUZZY
    assert 0.75 <= match.confidence <= 0.95
    assert match.confidence == pytest.approx(0.9143, abs=1e-4)
    assert "name similarity 0.90" in match.reason
    assert "same location" in match.reason


def test_different_emails_veto_the_pair():
    a = person(first_name="John", last_name="Smith", email="john@a.com")
    b = person(first_name="John", last_name="Smith", email="john@b.com")

    assert score_pair(a, b) is None
    assert find_fuzzy_matches([a, b]) == []


def test_missing_email_is_no_signal_rather_than_mismatch():
    a = person(first_name="John", last_name="Smith", email="john@a.com")
    b = person(first_name="John", last_name="Smith")

    score, signals = score_pair(a, b)

    assert score == 1.0
    assert "email" not in signals


def test_confidence_is_capped_below_deterministic_matches():
    a = person(first_name="John", last_name="Smith", phone="555-1000")
    b = person(first_name="John", last_name="Smith", phone="5551000")

    matches = find_fuzzy_matches([a, b])

    assert matches[0].confidence == 0.94
    assert matches[0].reason == "name similarity 1.00, same phone"


def test_scores_below_threshold_are_dropped():
    a = person(first_name="John", last_name="Doe")
    b = person(first_name="Alice", last_name="Wang")

    assert find_fuzzy_matches([a, b]) == []


def test_nameless_people_are_skipped():
    a = person(phone="555-1000")
    b = person(phone="555-1000")

    assert score_pair(a, b) is None
    assert find_fuzzy_matches([a, b]) == []


def test_different_location_pulls_score_down():
    same = score_pair(
        person(first_name="Jon", last_name="Smith", location="Austin"),
        person(first_name="John", last_name="Smith", location="Austin"),
    )[0]
    different = score_pair(
        person(first_name="Jon", last_name="Smith", location="Austin"),
        person(first_name="John", last_name="Smith", location="Boston"),
    )[0]

    assert different < same


def test_blocking_only_compares_people_sharing_a_last_name_initial():
    a = person(first_name="Jon", last_name="Smith")
    b = person(first_name="John", last_name="Smith")
    c = person(first_name="Jon", last_name="Mith")

    blocked = {m.pair_key for m in find_fuzzy_matches([a, b, c], MatchConfig(blocking=True))}
    unblocked = {m.pair_key for m in find_fuzzy_matches([a, b, c], MatchConfig(blocking=False))}

    assert pair_key(a.id, b.id) in blocked
    assert pair_key(a.id, c.id) in unblocked
    assert pair_key(a.id, c.id) not in blocked


def test_describe_signals():
    assert describe_signals({"name": 0.8, "email": 1.0, "phone": 0.5, "location": 0.0}) == (
        "name similarity 0.80, same email, phone similarity 0.50, different location"
    )
