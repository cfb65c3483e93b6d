"""
Person model.

Represents a contact within a workspace, plus the social profiles it owns.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from crm_dedup.models.base_model import JSONType, WorkspaceScopedModel


class Person(WorkspaceScopedModel):
    """
    People table - the unified contact directory.

    Created by manual entry, CSV import or connector sync. Absorbed rows are
    deleted by the merge engine once their links have been re-pointed.
    """

    __tablename__ = "people"

    # Contact information. Uniqueness is on the stored text, so case variants
    # such as "Alice@X.com" and "alice@x.com" can coexist until merged.
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Names
    first_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(400), nullable=True)

    # Profile fields
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Relationship tracking
    relationship_type: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        default="contact",
    )
    relationship_strength: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    last_contacted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    next_followup_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Free-form key -> value mapping (CSV columns without a system field)
    custom_data: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)

    # Which imports/integrations produced this person, e.g. ["csv", "google"]
    sources: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # External system -> external id
    source_ids: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)

    # Semantic search vector, generated outside this service
    embedding: Mapped[Optional[list]] = mapped_column(JSONType, nullable=True)

    __table_args__ = (
        UniqueConstraint("workspace_id", "email", name="uq_people_workspace_email"),
    )


class SocialProfile(WorkspaceScopedModel):
    """Social profile owned by a person (one per platform after a merge)."""

    __tablename__ = "social_profiles"

    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("people.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    platform: Mapped[str] = mapped_column(String(50), nullable=False)
    profile_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    username: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "workspace_id", "person_id", "platform", "username",
            name="uq_social_profiles_person_platform_username",
        ),
    )
