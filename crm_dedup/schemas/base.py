"""
Base Pydantic schemas with common fields.

These are templates that other schemas inherit from.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class WorkspaceScopedRead(BaseModel):
    """
    Base schema for reading workspace-scoped data.
    
    Includes the auto-generated id and workspace partition.
    """
    
    id: UUID
    workspace_id: UUID
    created_at: datetime
    
    # This tells Pydantic to work with SQLAlchemy models
    model_config = ConfigDict(from_attributes=True)
