"""
Person repository - database operations for Person.
"""

from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from crm_dedup.dedup.candidates import PersonRecord
from crm_dedup.models.person import Person


class PersonRepository:
    """Repository for Person database operations."""
    
    def __init__(self, db: AsyncSession):
        self.db = db
    
    async def list_records(self, workspace_id: UUID) -> List[PersonRecord]:
        """Snapshot every person in a workspace, oldest first, for the matchers."""
        result = await self.db.execute(
            select(
                Person.id,
                Person.first_name,
                Person.last_name,
                Person.display_name,
                Person.email,
                Person.phone,
                Person.location,
                Person.created_at,
            )
            .where(Person.workspace_id == workspace_id)
            .order_by(Person.created_at.asc(), Person.id.asc())
        )
        return [PersonRecord.from_row(row) for row in result.all()]
    
    async def get_by_id(self, workspace_id: UUID, person_id: UUID) -> Optional[Person]:
        """Get a person by ID for a specific workspace."""
        result = await self.db.execute(
            select(Person).where(
                Person.id == person_id,
                Person.workspace_id == workspace_id,
            )
        )
        return result.scalar_one_or_none()
    
    async def lock_pair(self, workspace_id: UUID, first_id: UUID, second_id: UUID) -> Dict[UUID, Person]:
        """
        Load two people with row locks, in id order so concurrent merges cannot deadlock.

        People outside the workspace are simply absent from the result.
        """
        result = await self.db.execute(
            select(Person)
            .where(
                Person.id.in_([first_id, second_id]),
                Person.workspace_id == workspace_id,
            )
            .order_by(Person.id.asc())
            .with_for_update()
        )
        return {person.id: person for person in result.scalars().all()}

    async def delete(self, workspace_id: UUID, person_id: UUID) -> int:
        """Delete a person; link rows still pointing at it cascade in the database."""
        result = await self.db.execute(
            delete(Person)
            .where(Person.id == person_id, Person.workspace_id == workspace_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
