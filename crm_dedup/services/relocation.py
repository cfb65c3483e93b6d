"""
Relocation steps used by the merge engine.

Each step moves one dependent table's rows from the absorbed person onto the
kept person. A row whose natural key the kept person already holds is
deleted instead of re-pointed, so the move never trips a unique constraint.
Steps are idempotent: once the absorbed person owns no rows, re-running a
step changes nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from crm_dedup.models.company import PersonCompany
from crm_dedup.models.interaction import InteractionPerson
from crm_dedup.models.note import Note
from crm_dedup.models.person import SocialProfile
from crm_dedup.models.tag import PersonTag


@dataclass(frozen=True)
class RelocationOutcome:
    moved: int = 0
    dropped: int = 0


@dataclass(frozen=True)
class RelocationStep:
    """Re-point ``model.<person_column>`` from merge_id to keep_id, deduplicating on ``natural_key``."""

    name: str
    model: type
    natural_key: Tuple[str, ...] = ()
    person_column: str = "person_id"

    async def apply(
        self,
        db: AsyncSession,
        workspace_id: UUID,
        keep_id: UUID,
        merge_id: UUID,
    ) -> RelocationOutcome:
        person_col = getattr(self.model, self.person_column)
        scope = (self.model.workspace_id == workspace_id,)

        dropped_ids: List[UUID] = []
        if self.natural_key:
            key_cols = [getattr(self.model, col) for col in self.natural_key]

            keep_rows = await db.execute(select(*key_cols).where(person_col == keep_id, *scope))
            keep_keys = {tuple(row) for row in keep_rows.all()}

            merge_rows = await db.execute(select(self.model.id, *key_cols).where(person_col == merge_id, *scope))
            dropped_ids = [row[0] for row in merge_rows.all() if tuple(row[1:]) in keep_keys]

        if dropped_ids:
            await db.execute(
                delete(self.model)
                .where(self.model.id.in_(dropped_ids), *scope)
                .execution_options(synchronize_session=False)
            )

        moved = await db.execute(
            update(self.model)
            .where(person_col == merge_id, *scope)
            .values({self.person_column: keep_id})
            .execution_options(synchronize_session=False)
        )
        return RelocationOutcome(moved=moved.rowcount or 0, dropped=len(dropped_ids))


# Applied in this order by MergeService
RELOCATION_STEPS: Tuple[RelocationStep, ...] = (
    RelocationStep("person_companies", PersonCompany, natural_key=("company_id",)),
    RelocationStep("person_tags", PersonTag, natural_key=("tag_id",)),
    RelocationStep("interaction_people", InteractionPerson, natural_key=("interaction_id", "role")),
    RelocationStep("social_profiles", SocialProfile, natural_key=("platform",)),
    RelocationStep("notes", Note),
)
