"""
Duplicates router - review, scan, dismiss and merge endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from crm_dedup.core.dependencies import get_db, get_workspace_id
from crm_dedup.db.session import commit_session
from crm_dedup.schemas.duplicate import (
    DismissResponse,
    DuplicateCandidateList,
    MergeRequest,
    MergeResult,
    ScanSummary,
)
from crm_dedup.services.duplicate_service import DuplicateService
from crm_dedup.services.merge_service import MergeService

router = APIRouter(prefix="/people", tags=["duplicates"])


@router.get("/duplicates", response_model=DuplicateCandidateList)
async def list_duplicates(
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
    limit: Optional[int] = Query(None, ge=1, le=200),
):
    """List pending duplicate candidates, highest confidence first."""
    service = DuplicateService(db)
    candidates = await service.list_pending(workspace_id, limit=limit)
    return {"data": candidates}


@router.post("/duplicates/scan", response_model=ScanSummary)
async def scan_duplicates(
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """Run a duplicate scan now and replace the pending queue."""
    service = DuplicateService(db)
    summary = await service.scan(workspace_id)
    await commit_session(db)
    return summary


@router.post("/duplicates/{candidate_id}/dismiss", response_model=DismissResponse)
async def dismiss_duplicate(
    candidate_id: UUID,
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """Mark a candidate as not a duplicate."""
    service = DuplicateService(db)
    await service.dismiss(workspace_id, candidate_id)
    await commit_session(db)
    return DismissResponse()


@router.post("/merge", response_model=MergeResult)
async def merge_people(
    request: MergeRequest,
    workspace_id: UUID = Depends(get_workspace_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Merge merge_id into keep_id.

    The absorbed person is deleted; its tags, companies, notes, interactions
    and social profiles move to the kept person.
    """
    service = MergeService(db)
    result = await service.merge(
        workspace_id,
        keep_id=request.keep_id,
        merge_id=request.merge_id,
        candidate_id=request.candidate_id,
    )
    await commit_session(db)
    return result
