"""
Similarity primitives for comparing two person records.

Every function here is pure. A missing value on either side yields ``None``
("no signal") rather than a score, so callers can drop the field from a
weighted average instead of treating it as a mismatch.
"""

from __future__ import annotations

import re
from typing import Optional

from rapidfuzz.distance import Levenshtein


_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_NON_DIGIT = re.compile(r"\D")


def normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """Digits only, so "555-1000" and "(555) 1000" collide."""
    if not phone:
        return None
    digits = _NON_DIGIT.sub("", phone)
    return digits or None


def normalize_name(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    cleaned = _NON_ALNUM.sub(" ", name.lower())
    collapsed = " ".join(cleaned.split())
    return collapsed or None


def normalize_text(value: Optional[str]) -> Optional[str]:
    """Case- and whitespace-insensitive form for free text such as locations."""
    if not value:
        return None
    collapsed = " ".join(value.lower().split())
    return collapsed or None


def exact_match(a: Optional[str], b: Optional[str]) -> Optional[float]:
    """1.0 / 0.0 for two present (already normalized) values, None otherwise."""
    if a is None or b is None:
        return None
    return 1.0 if a == b else 0.0


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two raw strings."""
    return Levenshtein.distance(a, b)


def name_similarity(a: Optional[str], b: Optional[str]) -> Optional[float]:
    """
    Normalized Levenshtein similarity: ``1 - distance / max(len(a), len(b))``.

    Names are normalized first, so case, punctuation and extra whitespace
    do not count as edits.
    """
    norm_a = normalize_name(a)
    norm_b = normalize_name(b)
    if norm_a is None or norm_b is None:
        return None
    if norm_a == norm_b:
        return 1.0
    return Levenshtein.normalized_similarity(norm_a, norm_b)


def phone_similarity(a: Optional[str], b: Optional[str]) -> Optional[float]:
    norm_a = normalize_phone(a)
    norm_b = normalize_phone(b)
    if norm_a is None or norm_b is None:
        return None
    if norm_a == norm_b:
        return 1.0
    return Levenshtein.normalized_similarity(norm_a, norm_b)


def full_name(
    first_name: Optional[str],
    last_name: Optional[str],
    display_name: Optional[str] = None,
) -> Optional[str]:
    """Join first and last name, falling back to the display name when both are empty."""
    joined = " ".join(part.strip() for part in (first_name, last_name) if part and part.strip())
    if joined:
        return joined
    if display_name and display_name.strip():
        return display_name.strip()
    return None
