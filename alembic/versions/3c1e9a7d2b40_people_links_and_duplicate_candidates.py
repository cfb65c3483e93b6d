"""people, link tables and duplicate candidates

Revision ID: 3c1e9a7d2b40
Revises:
Create Date: 2026-02-13 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c1e9a7d2b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql")


def _scoped_columns() -> list:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _scoped_constraints() -> list:
    return [
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["workspace_id"], ["workspaces.id"], ondelete="CASCADE"),
    ]


def upgrade() -> None:
    op.create_table(
        "workspaces",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "people",
        *_scoped_columns(),
        sa.Column("email", sa.String(length=320), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("first_name", sa.String(length=200), nullable=True),
        sa.Column("last_name", sa.String(length=200), nullable=True),
        sa.Column("display_name", sa.String(length=400), nullable=True),
        sa.Column("avatar_url", sa.Text(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("relationship_type", sa.String(length=50), nullable=True),
        sa.Column("relationship_strength", sa.Float(), nullable=True),
        sa.Column("last_contacted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_followup_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("custom_data", JSON_TYPE, nullable=False, server_default="{}"),
        sa.Column("sources", JSON_TYPE, nullable=False, server_default="[]"),
        sa.Column("source_ids", JSON_TYPE, nullable=False, server_default="{}"),
        sa.Column("embedding", JSON_TYPE, nullable=True),
        *_scoped_constraints(),
        sa.UniqueConstraint("workspace_id", "email", name="uq_people_workspace_email"),
    )
    op.create_index(op.f("ix_people_workspace_id"), "people", ["workspace_id"], unique=False)

    op.create_table(
        "companies",
        *_scoped_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("domain", sa.String(length=255), nullable=True),
        *_scoped_constraints(),
        sa.UniqueConstraint("workspace_id", "name", name="uq_companies_workspace_name"),
    )
    op.create_index(op.f("ix_companies_workspace_id"), "companies", ["workspace_id"], unique=False)

    op.create_table(
        "person_companies",
        *_scoped_columns(),
        sa.Column("person_id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.String(length=200), nullable=True),
        sa.Column("department", sa.String(length=200), nullable=True),
        sa.Column("is_current", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_scoped_constraints(),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("person_id", "company_id", "role", name="uq_person_companies_person_company_role"),
    )
    op.create_index(op.f("ix_person_companies_workspace_id"), "person_companies", ["workspace_id"], unique=False)
    op.create_index(op.f("ix_person_companies_person_id"), "person_companies", ["person_id"], unique=False)
    op.create_index(op.f("ix_person_companies_company_id"), "person_companies", ["company_id"], unique=False)

    op.create_table(
        "tags",
        *_scoped_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("color", sa.String(length=20), nullable=True),
        *_scoped_constraints(),
        sa.UniqueConstraint("workspace_id", "name", name="uq_tags_workspace_name"),
    )
    op.create_index(op.f("ix_tags_workspace_id"), "tags", ["workspace_id"], unique=False)

    op.create_table(
        "person_tags",
        *_scoped_columns(),
        sa.Column("person_id", sa.Uuid(), nullable=False),
        sa.Column("tag_id", sa.Uuid(), nullable=False),
        *_scoped_constraints(),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_id"], ["tags.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("person_id", "tag_id", name="uq_person_tags_person_tag"),
    )
    op.create_index(op.f("ix_person_tags_workspace_id"), "person_tags", ["workspace_id"], unique=False)
    op.create_index(op.f("ix_person_tags_person_id"), "person_tags", ["person_id"], unique=False)
    op.create_index(op.f("ix_person_tags_tag_id"), "person_tags", ["tag_id"], unique=False)

    op.create_table(
        "interactions",
        *_scoped_columns(),
        sa.Column("interaction_type", sa.String(length=50), nullable=False),
        sa.Column("subject", sa.Text(), nullable=True),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        *_scoped_constraints(),
    )
    op.create_index(op.f("ix_interactions_workspace_id"), "interactions", ["workspace_id"], unique=False)

    op.create_table(
        "interaction_people",
        *_scoped_columns(),
        sa.Column("interaction_id", sa.Uuid(), nullable=False),
        sa.Column("person_id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="participant"),
        *_scoped_constraints(),
        sa.ForeignKeyConstraint(["interaction_id"], ["interactions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "interaction_id", "person_id", "role",
            name="uq_interaction_people_interaction_person_role",
        ),
    )
    op.create_index(op.f("ix_interaction_people_workspace_id"), "interaction_people", ["workspace_id"], unique=False)
    op.create_index(op.f("ix_interaction_people_interaction_id"), "interaction_people", ["interaction_id"], unique=False)
    op.create_index(op.f("ix_interaction_people_person_id"), "interaction_people", ["person_id"], unique=False)

    op.create_table(
        "notes",
        *_scoped_columns(),
        sa.Column("person_id", sa.Uuid(), nullable=True),
        sa.Column("company_id", sa.Uuid(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        *_scoped_constraints(),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.CheckConstraint("person_id IS NOT NULL OR company_id IS NOT NULL", name="ck_notes_has_owner"),
    )
    op.create_index(op.f("ix_notes_workspace_id"), "notes", ["workspace_id"], unique=False)
    op.create_index(op.f("ix_notes_person_id"), "notes", ["person_id"], unique=False)
    op.create_index(op.f("ix_notes_company_id"), "notes", ["company_id"], unique=False)

    op.create_table(
        "social_profiles",
        *_scoped_columns(),
        sa.Column("person_id", sa.Uuid(), nullable=False),
        sa.Column("platform", sa.String(length=50), nullable=False),
        sa.Column("profile_url", sa.Text(), nullable=True),
        sa.Column("username", sa.String(length=255), nullable=True),
        *_scoped_constraints(),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "workspace_id", "person_id", "platform", "username",
            name="uq_social_profiles_person_platform_username",
        ),
    )
    op.create_index(op.f("ix_social_profiles_workspace_id"), "social_profiles", ["workspace_id"], unique=False)
    op.create_index(op.f("ix_social_profiles_person_id"), "social_profiles", ["person_id"], unique=False)

    op.create_table(
        "duplicate_candidates",
        *_scoped_columns(),
        sa.Column("person_a_id", sa.Uuid(), nullable=False),
        sa.Column("person_b_id", sa.Uuid(), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=False, server_default="0"),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("match_type", sa.String(length=20), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        *_scoped_constraints(),
    )
    op.create_index(op.f("ix_duplicate_candidates_workspace_id"), "duplicate_candidates", ["workspace_id"], unique=False)
    op.create_index(op.f("ix_duplicate_candidates_person_a_id"), "duplicate_candidates", ["person_a_id"], unique=False)
    op.create_index(op.f("ix_duplicate_candidates_person_b_id"), "duplicate_candidates", ["person_b_id"], unique=False)
    op.create_index(
        "ix_duplicate_candidates_workspace_status",
        "duplicate_candidates",
        ["workspace_id", "status"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_duplicate_candidates_workspace_status", table_name="duplicate_candidates")
    op.drop_table("duplicate_candidates")
    op.drop_table("social_profiles")
    op.drop_table("notes")
    op.drop_table("interaction_people")
    op.drop_table("interactions")
    op.drop_table("person_tags")
    op.drop_table("tags")
    op.drop_table("person_companies")
    op.drop_table("companies")
    op.drop_table("people")
    op.drop_table("workspaces")
