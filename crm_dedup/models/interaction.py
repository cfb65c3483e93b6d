"""
Interaction model and person participation in interactions.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedup.models.base_model import WorkspaceScopedModel


class Interaction(WorkspaceScopedModel):
    """An email, meeting or call recorded for the workspace."""

    __tablename__ = "interactions"

    interaction_type: Mapped[str] = mapped_column(String(50), nullable=False)
    subject: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class InteractionPerson(WorkspaceScopedModel):
    """A person's participation in an interaction (sender, attendee, ...)."""

    __tablename__ = "interaction_people"

    interaction_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("interactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("people.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    role: Mapped[str] = mapped_column(String(50), nullable=False, default="participant")

    __table_args__ = (
        UniqueConstraint("interaction_id", "person_id", "role", name="uq_interaction_people_interaction_person_role"),
    )
