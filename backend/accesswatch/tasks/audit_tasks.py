"""
Audit Tasks

Background entry points for manual and scheduled accessibility audits.
"""

import asyncio
import logging
from typing import Any, Dict

from celery import shared_task

from accesswatch.database import get_db_context, get_sync_compatible_session_maker
from accesswatch.models.audit import Audit
from accesswatch.repositories import ComparisonRepository
from accesswatch.schemas.audit import AuditComparisonResponse, AuditResponse
from accesswatch.services.audit_orchestrator import AuditOrchestrator
from accesswatch.services.scheduler import Scheduler

logger = logging.getLogger(__name__)


def run_async(coro):
    """Helper to run async code in sync context."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@shared_task
def run_page_audit(page_id: int) -> Dict[str, Any]:
    """Audit a single page now ("run now" action)."""
    return run_async(_run_page_audit(page_id))


async def _run_page_audit(page_id: int) -> Dict[str, Any]:
    async with get_db_context(get_sync_compatible_session_maker()) as session:
        audit = await AuditOrchestrator(session).run_audit(page_id)
        comparison = await ComparisonRepository(session).find_by_current_audit_id(audit.id)

        result = _audit_result(audit)
        result["comparison"] = (
            AuditComparisonResponse.model_validate(comparison).model_dump(mode="json")
            if comparison
            else None
        )
        return result


@shared_task
def process_scheduled_audits() -> Dict[str, Any]:
    """Audit every enabled page whose cadence has elapsed."""
    return run_async(_process_scheduled_audits())


async def _process_scheduled_audits() -> Dict[str, Any]:
    async with get_db_context(get_sync_compatible_session_maker()) as session:
        audits = await Scheduler(session).run()

        logger.info(f"[Scheduler] Scheduled pass audited {len(audits)} page(s)")
        return {
            "audits_run": len(audits),
            "audits": [_audit_result(audit) for audit in audits],
        }


def _audit_result(audit: Audit) -> Dict[str, Any]:
    return AuditResponse.model_validate(audit).model_dump(mode="json")
