"""Tunable knobs for the matchers, passed explicitly rather than read globally."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MatchConfig:
    email_match_confidence: float = 0.98
    phone_match_confidence: float = 0.95
    fuzzy_threshold: float = 0.75
    fuzzy_max_confidence: float = 0.94
    name_weight: float = 0.6
    email_weight: float = 0.25
    phone_weight: float = 0.15
    location_weight: float = 0.1
    blocking: bool = False

    @classmethod
    def from_settings(cls, settings) -> "MatchConfig":
        return cls(
            email_match_confidence=settings.DEDUP_EMAIL_MATCH_CONFIDENCE,
            phone_match_confidence=settings.DEDUP_PHONE_MATCH_CONFIDENCE,
            fuzzy_threshold=settings.DEDUP_FUZZY_THRESHOLD,
            fuzzy_max_confidence=settings.DEDUP_FUZZY_MAX_CONFIDENCE,
            name_weight=settings.DEDUP_NAME_WEIGHT,
            email_weight=settings.DEDUP_EMAIL_WEIGHT,
            phone_weight=settings.DEDUP_PHONE_WEIGHT,
            location_weight=settings.DEDUP_LOCATION_WEIGHT,
            blocking=settings.DEDUP_FUZZY_BLOCKING,
        )
