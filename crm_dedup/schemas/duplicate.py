"""
Pydantic schemas for duplicate review, scans and merges.
"""

from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from crm_dedup.schemas.base import WorkspaceScopedRead


class PersonSummary(BaseModel):
    """Display fields for one side of a duplicate candidate."""
    id: UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DuplicateCandidateRead(WorkspaceScopedRead):
    confidence: float
    reason: Optional[str] = None
    match_type: Optional[str] = None
    status: str
    person_a: PersonSummary
    person_b: PersonSummary


class DuplicateCandidateList(BaseModel):
    data: List[DuplicateCandidateRead]


class ScanSummary(BaseModel):
    """Counts returned by a duplicate scan."""
    total: int
    deterministic: int
    fuzzy: int


class DismissResponse(BaseModel):
    ok: bool = True


class MergeRequest(BaseModel):
    """Fold merge_id into keep_id, optionally resolving the candidate that proposed it."""
    keep_id: UUID
    merge_id: UUID
    candidate_id: Optional[UUID] = None


class MergeResult(BaseModel):
    success: bool = True
    keep_id: UUID
    merged_id: UUID
    candidate_id: Optional[UUID] = None
    relocated: Dict[str, int] = {}
    deduplicated: Dict[str, int] = {}
    fields_filled: List[str] = []
    stale_candidates_retired: int = 0
