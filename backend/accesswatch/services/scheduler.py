"""
Scheduled audits: find the pages that are due and audit each of them.
"""
import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from accesswatch.models.audit import Audit
from accesswatch.models.base import utc_now
from accesswatch.models.page import Page
from accesswatch.repositories import PageRepository
from accesswatch.services.audit_orchestrator import AuditOrchestrator

logger = logging.getLogger(__name__)


def is_due(page: Page, now: datetime) -> bool:
    """A page is due if it was never audited or its cadence has elapsed."""
    if page.last_audited_at is None:
        return True
    return now >= page.last_audited_at + page.cadence.interval


class Scheduler:
    """
    Drives AuditOrchestrator across every enabled page that is due.

    Pages are audited one at a time. Each run gets its own SAVEPOINT so an
    exception on one page rolls back only that page's writes; the page is
    skipped and the pass carries on.
    """

    def __init__(
        self,
        db: AsyncSession,
        orchestrator: AuditOrchestrator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.pages = PageRepository(db)
        self.orchestrator = orchestrator or AuditOrchestrator(db, clock=clock)
        self.clock = clock

    async def due_page_ids(self) -> list[int]:
        now = self.clock()
        pages = await self.pages.find_enabled()
        return [page.id for page in pages if is_due(page, now)]

    async def run(self) -> list[Audit]:
        page_ids = await self.due_page_ids()
        logger.info(f"[Scheduler] {len(page_ids)} page(s) due for audit")

        results = []
        for page_id in page_ids:
            try:
                async with self.db.begin_nested():
                    audit = await self.orchestrator.run_audit(page_id)
            except Exception:
                logger.exception(f"[Scheduler] Audit for page {page_id} raised, skipping")
                continue

            results.append(audit)
            logger.info(
                f"[Scheduler] Page {page_id}: score {audit.score} ({audit.status.label})"
            )

        logger.info(f"[Scheduler] Completed {len(results)} audit(s)")
        return results
