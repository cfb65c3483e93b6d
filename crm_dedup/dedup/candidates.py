"""
Typed shapes shared by the matchers, the scan orchestrator and the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from crm_dedup.dedup.similarity import full_name, normalize_email, normalize_name, normalize_phone, normalize_text


class MatchType:
    EMAIL = "email"
    PHONE = "phone"
    FUZZY = "fuzzy"


@dataclass(frozen=True)
class PersonRecord:
    """Read-only snapshot of the person fields the matchers look at."""

    id: UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "PersonRecord":
        return cls(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            display_name=row.display_name,
            email=row.email,
            phone=row.phone,
            location=row.location,
            created_at=row.created_at,
        )

    @property
    def name(self) -> Optional[str]:
        return full_name(self.first_name, self.last_name, self.display_name)

    @property
    def email_key(self) -> Optional[str]:
        return normalize_email(self.email)

    @property
    def phone_key(self) -> Optional[str]:
        return normalize_phone(self.phone)

    @property
    def location_key(self) -> Optional[str]:
        return normalize_text(self.location)

    @property
    def blocking_key(self) -> Optional[str]:
        """First letter of the last name token (or of the only name token)."""
        normalized = normalize_name(self.last_name) or normalize_name(self.name)
        if not normalized:
            return None
        return normalized.split()[-1][0]


@dataclass(frozen=True)
class CandidatePair:
    """One proposed duplicate pairing emitted by a matcher."""

    person_a_id: UUID
    person_b_id: UUID
    confidence: float
    reason: str
    match_type: str
    signals: dict = field(default_factory=dict, compare=False)

    @property
    def pair_key(self) -> Tuple[str, str]:
        return pair_key(self.person_a_id, self.person_b_id)


def pair_key(a: UUID, b: UUID) -> Tuple[str, str]:
    """Order-independent key: (A, B) and (B, A) map to the same tuple."""
    first, second = sorted((str(a), str(b)))
    return (first, second)


def dedupe_pairs(pairs: Iterable[CandidatePair]) -> List[CandidatePair]:
    """Keep the first candidate seen for each unordered pair; drop self-pairs."""
    seen: set[Tuple[str, str]] = set()
    unique: List[CandidatePair] = []
    for pair in pairs:
        if pair.person_a_id == pair.person_b_id:
            continue
        key = pair.pair_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(pair)
    return unique


def sort_by_confidence(pairs: Iterable[CandidatePair]) -> List[CandidatePair]:
    """Highest confidence first; ties keep their incoming order."""
    return sorted(pairs, key=lambda p: -p.confidence)
