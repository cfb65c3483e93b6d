"""
DuplicateCandidate repository - the candidate store.

Every query is scoped by workspace_id. Reads of the review queue inner-join
both people, so candidates whose person has since been deleted never show up.
"""

import uuid
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from crm_dedup.dedup.candidates import CandidatePair
from crm_dedup.models.duplicate_candidate import CandidateStatus, DuplicateCandidate
from crm_dedup.models.person import Person
from crm_dedup.utils.time import utc_now


PersonA = aliased(Person, name="person_a")
PersonB = aliased(Person, name="person_b")


class DuplicateCandidateRepository:
    """Repository for DuplicateCandidate database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_pending(
        self,
        workspace_id: UUID,
        limit: int = 50,
    ) -> List[Tuple[DuplicateCandidate, Person, Person]]:
        """Pending candidates joined with both people, highest confidence first."""
        query = (
            select(DuplicateCandidate, PersonA, PersonB)
            .join(
                PersonA,
                and_(
                    PersonA.id == DuplicateCandidate.person_a_id,
                    PersonA.workspace_id == DuplicateCandidate.workspace_id,
                ),
            )
            .join(
                PersonB,
                and_(
                    PersonB.id == DuplicateCandidate.person_b_id,
                    PersonB.workspace_id == DuplicateCandidate.workspace_id,
                ),
            )
            .where(
                DuplicateCandidate.workspace_id == workspace_id,
                DuplicateCandidate.status == CandidateStatus.PENDING,
            )
            .order_by(
                DuplicateCandidate.confidence.desc(),
                DuplicateCandidate.created_at.asc(),
                DuplicateCandidate.id.asc(),
            )
            .limit(limit)
        )
        result = await self.db.execute(query)
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def list_by_status(self, workspace_id: UUID, status: str) -> List[DuplicateCandidate]:
        result = await self.db.execute(
            select(DuplicateCandidate)
            .where(
                DuplicateCandidate.workspace_id == workspace_id,
                DuplicateCandidate.status == status,
            )
            .order_by(DuplicateCandidate.confidence.desc(), DuplicateCandidate.id.asc())
        )
        return list(result.scalars().all())

    async def get_by_id(self, workspace_id: UUID, candidate_id: UUID) -> Optional[DuplicateCandidate]:
        """Get a candidate by ID for a specific workspace."""
        result = await self.db.execute(
            select(DuplicateCandidate).where(
                DuplicateCandidate.id == candidate_id,
                DuplicateCandidate.workspace_id == workspace_id,
            )
        )
        return result.scalar_one_or_none()

    async def set_status(
        self,
        workspace_id: UUID,
        candidate_id: UUID,
        status: str,
    ) -> Optional[DuplicateCandidate]:
        """Transition a candidate; returns None when it is not in this workspace."""
        candidate = await self.get_by_id(workspace_id, candidate_id)
        if not candidate:
            return None

        candidate.status = status
        candidate.resolved_at = utc_now() if status != CandidateStatus.PENDING else None
        await self.db.flush()
        return candidate

    async def dismiss(self, workspace_id: UUID, candidate_id: UUID) -> Optional[DuplicateCandidate]:
        return await self.set_status(workspace_id, candidate_id, CandidateStatus.DISMISSED)

    async def mark_merged(self, workspace_id: UUID, candidate_id: UUID) -> Optional[DuplicateCandidate]:
        return await self.set_status(workspace_id, candidate_id, CandidateStatus.MERGED)

    async def replace_pending_batch(self, workspace_id: UUID, pairs: Sequence[CandidatePair]) -> int:
        """
        Swap the workspace's pending set for a fresh batch.

        Delete and insert run in the caller's transaction, so concurrent
        readers see either the old batch or the new one once it commits.
        """
        await self.db.execute(
            delete(DuplicateCandidate)
            .where(
                DuplicateCandidate.workspace_id == workspace_id,
                DuplicateCandidate.status == CandidateStatus.PENDING,
            )
            .execution_options(synchronize_session=False)
        )

        rows = [
            DuplicateCandidate(
                id=uuid.uuid4(),
                workspace_id=workspace_id,
                person_a_id=pair.person_a_id,
                person_b_id=pair.person_b_id,
                confidence=pair.confidence,
                reason=pair.reason,
                match_type=pair.match_type,
                status=CandidateStatus.PENDING,
            )
            for pair in pairs
        ]
        self.db.add_all(rows)
        await self.db.flush()
        return len(rows)

    async def delete_pending_for_person(
        self,
        workspace_id: UUID,
        person_id: UUID,
        exclude_id: Optional[UUID] = None,
    ) -> int:
        """Drop pending candidates that mention a person (used once that person is merged away)."""
        query = delete(DuplicateCandidate).where(
            DuplicateCandidate.workspace_id == workspace_id,
            DuplicateCandidate.status == CandidateStatus.PENDING,
            or_(
                DuplicateCandidate.person_a_id == person_id,
                DuplicateCandidate.person_b_id == person_id,
            ),
        )
        if exclude_id is not None:
            query = query.where(DuplicateCandidate.id != exclude_id)
        result = await self.db.execute(query.execution_options(synchronize_session=False))
        return result.rowcount or 0
