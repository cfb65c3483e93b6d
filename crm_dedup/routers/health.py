"""Health check router: database reachability and schema revision."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from crm_dedup.core.dependencies import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

MIGRATIONS_DIR = Path(__file__).resolve().parents[2] / "alembic"


@lru_cache(maxsize=1)
def expected_schema_revision() -> Optional[str]:
    """Head revision shipped in alembic/versions; None when running without the migrations tree."""
    if not MIGRATIONS_DIR.is_dir():
        return None
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    return ScriptDirectory.from_config(config).get_current_head()


async def current_schema_revision(db: AsyncSession) -> Optional[str]:
    """Revision stamped in the database, or None before the first migration."""
    connection = await db.connection()
    return await connection.run_sync(
        lambda sync_conn: MigrationContext.configure(sync_conn).get_current_revision()
    )


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    database_ok = True
    schema_revision: Optional[str] = None
    try:
        await db.execute(text("SELECT 1"))
        schema_revision = await current_schema_revision(db)
    except SQLAlchemyError:
        database_ok = False
        logger.warning("Health check could not reach the database", exc_info=True)

    expected = expected_schema_revision()
    return {
        "api_ok": True,
        "db_ok": database_ok,
        "schema_revision": schema_revision,
        "expected_schema_revision": expected,
        "schema_up_to_date": bool(database_ok and expected and schema_revision == expected),
    }
