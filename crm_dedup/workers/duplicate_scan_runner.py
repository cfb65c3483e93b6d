"""Runner for duplicate scans triggered by the external job scheduler.

Each workspace is scanned in its own session and committed on its own, so a
failure in one workspace leaves the others' fresh candidates in place. The
scheduler owns timing and retries; a scan is idempotent, so retrying is safe.

Usage:
    python -m crm_dedup.workers.duplicate_scan_runner --workspace-id <uuid>
    python -m crm_dedup.workers.duplicate_scan_runner --all
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from crm_dedup.core.config import settings
from crm_dedup.db.session import async_session_maker, get_async_session_context
from crm_dedup.dedup import MatchConfig
from crm_dedup.errors import AppError
from crm_dedup.repositories.workspace_repository import WorkspaceRepository
from crm_dedup.schemas.duplicate import ScanSummary
from crm_dedup.services.duplicate_service import DuplicateService

logger = logging.getLogger(__name__)


class DuplicateScanRunner:
    """Execute duplicate scans for one workspace or for every workspace."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession] = async_session_maker,
        config: Optional[MatchConfig] = None,
    ) -> None:
        self.session_maker = session_maker
        self.config = config or MatchConfig.from_settings(settings)

    async def run_once(self, workspace_id: UUID) -> ScanSummary:
        """Scan a single workspace and commit its new pending set."""
        async with get_async_session_context(self.session_maker) as session:
            service = DuplicateService(session, config=self.config)
            return await service.scan(workspace_id)

    async def run_all(self) -> Dict[UUID, ScanSummary]:
        """Scan every workspace; failures are logged and skipped so the rest still run."""
        async with get_async_session_context(self.session_maker) as session:
            workspace_ids = await WorkspaceRepository(session).list_ids()

        summaries: Dict[UUID, ScanSummary] = {}
        for workspace_id in workspace_ids:
            try:
                summaries[workspace_id] = await self.run_once(workspace_id)
            except AppError as exc:
                logger.warning("Skipping workspace %s after scan failure: %s", workspace_id, exc.message)
        return summaries


def get_default_runner() -> DuplicateScanRunner:
    return DuplicateScanRunner()


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run duplicate-contact scans")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--workspace-id", type=UUID, action="append", dest="workspace_ids")
    target.add_argument("--all", action="store_true", help="Scan every workspace")
    return parser.parse_args(argv)


async def _main(args: argparse.Namespace) -> int:
    runner = get_default_runner()
    if args.all:
        summaries = await runner.run_all()
    else:
        summaries = {}
        for workspace_id in args.workspace_ids:
            summaries[workspace_id] = await runner.run_once(workspace_id)

    for workspace_id, summary in summaries.items():
        logger.info("Workspace %s: %s", workspace_id, summary.model_dump())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    args = _parse_args(argv)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
