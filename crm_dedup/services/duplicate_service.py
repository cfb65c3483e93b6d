"""
Duplicate review service: scan orchestration and the candidate lifecycle.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from crm_dedup.core.config import settings
from crm_dedup.dedup import (
    MatchConfig,
    dedupe_pairs,
    find_deterministic_matches,
    find_fuzzy_matches,
    sort_by_confidence,
)
from crm_dedup.errors import InvalidArgumentError, NotFoundError, StoreUnavailableError
from crm_dedup.models.duplicate_candidate import CandidateStatus, DuplicateCandidate
from crm_dedup.repositories.duplicate_candidate_repository import DuplicateCandidateRepository
from crm_dedup.repositories.person_repository import PersonRepository
from crm_dedup.schemas.duplicate import DuplicateCandidateRead, PersonSummary, ScanSummary

logger = logging.getLogger(__name__)


class DuplicateService:
    """Finds duplicate people and manages the pending review queue."""

    def __init__(
        self,
        db: AsyncSession,
        config: Optional[MatchConfig] = None,
        page_size: Optional[int] = None,
    ):
        self.db = db
        self.people = PersonRepository(db)
        self.candidates = DuplicateCandidateRepository(db)
        self.config = config or MatchConfig.from_settings(settings)
        self.page_size = page_size or settings.DEDUP_PENDING_PAGE_SIZE

    async def scan(self, workspace_id: UUID) -> ScanSummary:
        """
        Rebuild the workspace's pending candidates from a fresh snapshot.

        Deterministic matches are listed before fuzzy ones, so when both
        matchers flag the same pair the exact match's confidence and reason win.
        Dismissed and merged candidates are left untouched, and dismissal
        history is not consulted: a dismissed pair that still looks duplicated
        comes back as pending.
        """
        try:
            people = await self.people.list_records(workspace_id)
            deterministic = find_deterministic_matches(people, self.config)
            fuzzy = find_fuzzy_matches(people, self.config)
            unique = sort_by_confidence(dedupe_pairs([*deterministic, *fuzzy]))
            await self.candidates.replace_pending_batch(workspace_id, unique)
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("Duplicate scan failed for workspace %s", workspace_id, exc_info=True)
            raise StoreUnavailableError("Could not complete duplicate scan, please retry") from exc

        summary = ScanSummary(total=len(unique), deterministic=len(deterministic), fuzzy=len(fuzzy))
        logger.info(
            "Duplicate scan for workspace %s: %d people, %d candidates (%d deterministic, %d fuzzy)",
            workspace_id,
            len(people),
            summary.total,
            summary.deterministic,
            summary.fuzzy,
        )
        return summary

    async def list_pending(self, workspace_id: UUID, limit: Optional[int] = None) -> List[DuplicateCandidateRead]:
        rows = await self.candidates.list_pending(workspace_id, limit=limit or self.page_size)
        return [
            DuplicateCandidateRead(
                id=candidate.id,
                workspace_id=candidate.workspace_id,
                created_at=candidate.created_at,
                confidence=candidate.confidence,
                reason=candidate.reason,
                match_type=candidate.match_type,
                status=candidate.status,
                person_a=PersonSummary.model_validate(person_a),
                person_b=PersonSummary.model_validate(person_b),
            )
            for candidate, person_a, person_b in rows
        ]

    async def dismiss(self, workspace_id: UUID, candidate_id: UUID) -> DuplicateCandidate:
        """Mark a candidate as not-a-duplicate. Dismissing twice is a no-op."""
        candidate = await self.candidates.get_by_id(workspace_id, candidate_id)
        if not candidate:
            raise NotFoundError("Duplicate candidate not found", {"candidate_id": str(candidate_id)})
        if candidate.status == CandidateStatus.MERGED:
            raise InvalidArgumentError(
                "Duplicate candidate was already merged",
                {"candidate_id": str(candidate_id)},
            )
        if candidate.status == CandidateStatus.DISMISSED:
            return candidate

        candidate = await self.candidates.dismiss(workspace_id, candidate_id)
        logger.info("Dismissed duplicate candidate %s in workspace %s", candidate_id, workspace_id)
        return candidate
