"""
Note model.
"""

import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedup.models.base_model import WorkspaceScopedModel


class Note(WorkspaceScopedModel):
    """Free-text note attached to a person or a company."""

    __tablename__ = "notes"

    person_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("people.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    company_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("companies.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("person_id IS NOT NULL OR company_id IS NOT NULL", name="ck_notes_has_owner"),
    )
