"""
Merge engine: fold one person into another inside a single transaction.

The absorbed ("merge") person's links are relocated onto the kept person,
empty fields on the kept person are filled from the absorbed one, and the
absorbed row is deleted. Any failure rolls the whole session back.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from crm_dedup.errors import (
    AppError,
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    StoreUnavailableError,
)
from crm_dedup.models.person import Person
from crm_dedup.repositories.duplicate_candidate_repository import DuplicateCandidateRepository
from crm_dedup.repositories.person_repository import PersonRepository
from crm_dedup.schemas.duplicate import MergeResult
from crm_dedup.services.relocation import RELOCATION_STEPS, RelocationStep

logger = logging.getLogger(__name__)


# Scalar columns copied from the absorbed person only when empty on the kept one
FILLABLE_FIELDS = (
    "email",
    "phone",
    "first_name",
    "last_name",
    "display_name",
    "avatar_url",
    "bio",
    "location",
    "relationship_strength",
    "last_contacted_at",
    "next_followup_at",
    "embedding",
)


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def merge_custom_data(existing: Optional[dict], incoming: Optional[dict]) -> Tuple[dict, List[str]]:
    """
    Fill gaps in ``existing`` from ``incoming``; populated keys are never overwritten.

    Returns the merged mapping and the keys that were filled.
    """
    merged = dict(existing or {})
    filled: List[str] = []
    for key, value in (incoming or {}).items():
        if _is_empty(value) or not _is_empty(merged.get(key)):
            continue
        merged[key] = value
        filled.append(key)
    return merged, filled


def union_sources(existing: Optional[Iterable[str]], incoming: Optional[Iterable[str]]) -> List[str]:
    combined: List[str] = []
    for source in [*(existing or []), *(incoming or [])]:
        if source not in combined:
            combined.append(source)
    return combined


class MergeService:
    """Merges duplicate people within one workspace."""

    def __init__(self, db: AsyncSession, steps: Tuple[RelocationStep, ...] = RELOCATION_STEPS):
        self.db = db
        self.people = PersonRepository(db)
        self.candidates = DuplicateCandidateRepository(db)
        self.steps = steps

    async def merge(
        self,
        workspace_id: UUID,
        keep_id: UUID,
        merge_id: UUID,
        candidate_id: Optional[UUID] = None,
    ) -> MergeResult:
        if keep_id == merge_id:
            raise InvalidArgumentError(
                "Cannot merge a person with themselves",
                {"keep_id": str(keep_id), "merge_id": str(merge_id)},
            )

        try:
            result = await self._merge(workspace_id, keep_id, merge_id, candidate_id)
        except AppError:
            raise
        except IntegrityError as exc:
            await self.db.rollback()
            logger.warning("Merge %s -> %s hit an unexpected constraint: %s", merge_id, keep_id, exc.orig)
            raise ConflictError(
                "Merge conflicts with an existing record",
                {"keep_id": str(keep_id), "merge_id": str(merge_id)},
            ) from exc
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Merge %s -> %s failed talking to the store", merge_id, keep_id, exc_info=True)
            raise StoreUnavailableError("Could not complete merge, please retry") from exc

        logger.info(
            "Merged person %s into %s in workspace %s (relocated=%s)",
            merge_id,
            keep_id,
            workspace_id,
            result.relocated,
        )
        return result

    async def _merge(
        self,
        workspace_id: UUID,
        keep_id: UUID,
        merge_id: UUID,
        candidate_id: Optional[UUID],
    ) -> MergeResult:
        locked = await self.people.lock_pair(workspace_id, keep_id, merge_id)
        for person_id in (keep_id, merge_id):
            if person_id not in locked:
                raise NotFoundError("Person not found", {"person_id": str(person_id)})
        keep = locked[keep_id]
        merge = locked[merge_id]

        if candidate_id is not None:
            candidate = await self.candidates.get_by_id(workspace_id, candidate_id)
            if not candidate:
                raise NotFoundError("Duplicate candidate not found", {"candidate_id": str(candidate_id)})
            if {candidate.person_a_id, candidate.person_b_id} != {keep_id, merge_id}:
                raise InvalidArgumentError(
                    "Duplicate candidate does not reference these people",
                    {"candidate_id": str(candidate_id)},
                )

        relocated: Dict[str, int] = {}
        deduplicated: Dict[str, int] = {}
        for step in self.steps:
            outcome = await step.apply(self.db, workspace_id, keep_id, merge_id)
            relocated[step.name] = outcome.moved
            deduplicated[step.name] = outcome.dropped

        updates = self._collect_updates(keep, merge)

        # The absorbed row must be gone before keep can take over its email
        self.db.expunge(merge)
        await self.people.delete(workspace_id, merge_id)
        await self.db.flush()

        for field, value in updates.items():
            setattr(keep, field, value)
        keep.updated_at = func.now()
        await self.db.flush()

        if candidate_id is not None:
            await self.candidates.mark_merged(workspace_id, candidate_id)
        retired = await self.candidates.delete_pending_for_person(workspace_id, merge_id, exclude_id=candidate_id)

        return MergeResult(
            keep_id=keep_id,
            merged_id=merge_id,
            candidate_id=candidate_id,
            relocated=relocated,
            deduplicated=deduplicated,
            fields_filled=sorted(updates.keys()),
            stale_candidates_retired=retired,
        )

    def _collect_updates(self, keep: Person, merge: Person) -> Dict[str, Any]:
        updates: Dict[str, Any] = {}
        for field in FILLABLE_FIELDS:
            if _is_empty(getattr(keep, field)) and not _is_empty(getattr(merge, field)):
                updates[field] = getattr(merge, field)

        custom_data, filled_keys = merge_custom_data(keep.custom_data, merge.custom_data)
        if filled_keys:
            updates["custom_data"] = custom_data

        sources = union_sources(keep.sources, merge.sources)
        if sources != list(keep.sources or []):
            updates["sources"] = sources

        source_ids = {**(merge.source_ids or {}), **(keep.source_ids or {})}
        if source_ids != (keep.source_ids or {}):
            updates["source_ids"] = source_ids

        return updates
