"""
FastAPI dependencies for the application.
"""

from uuid import UUID

from fastapi import Header

from crm_dedup.db.session import get_db
from crm_dedup.errors import InvalidArgumentError

__all__ = ["get_db", "get_workspace_id"]


async def get_workspace_id(x_workspace_id: str = Header(None)) -> UUID:
    """
    Extract and validate the workspace id from the X-Workspace-ID header.

    Membership checks happen upstream in the auth layer; this only makes
    sure every request carries a well-formed tenant partition.
    """
    if not x_workspace_id:
        raise InvalidArgumentError("X-Workspace-ID header is required")
    try:
        return UUID(x_workspace_id)
    except ValueError:
        raise InvalidArgumentError("X-Workspace-ID header must be a UUID")
