"""
Workspace repository - lookups used by the background scan runner.
"""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_dedup.models.workspace import Workspace


class WorkspaceRepository:
    """Repository for Workspace database operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_ids(self) -> List[UUID]:
        result = await self.db.execute(select(Workspace.id).order_by(Workspace.created_at.asc(), Workspace.id.asc()))
        return list(result.scalars().all())
