"""
DuplicateCandidate model.

A proposed pairing of two people that may be the same contact.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedup.models.base_model import WorkspaceScopedModel


class CandidateStatus:
    """Lifecycle states for a duplicate candidate."""
    PENDING = "pending"
    DISMISSED = "dismissed"
    MERGED = "merged"

    ALL = [PENDING, DISMISSED, MERGED]


class DuplicateCandidate(WorkspaceScopedModel):
    """
    Duplicate candidates table.

    person_a_id / person_b_id are deliberately not foreign keys: a merged
    candidate keeps pointing at the absorbed person for history, and pending
    rows for deleted people drop out of the review queue via its inner join.
    """

    __tablename__ = "duplicate_candidates"

    person_a_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    person_b_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)

    confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # email / phone / fuzzy
    match_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CandidateStatus.PENDING,
    )

    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_duplicate_candidates_workspace_status", "workspace_id", "status"),
    )
