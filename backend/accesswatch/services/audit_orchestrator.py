"""
Audit orchestration: one scoring run for one page, start to finish.
"""
import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from accesswatch.core.exceptions import NotFoundError, RateLimitedError, ScoringApiError
from accesswatch.integrations.pagespeed import PageSpeedClient, ScoringResult
from accesswatch.models.audit import Audit, AuditComparison, AuditStatus, Issue
from accesswatch.models.base import utc_now
from accesswatch.repositories import (
    AuditRepository,
    ComparisonRepository,
    IssueRepository,
    PageRepository,
)
from accesswatch.services.comparison_service import ComparisonEngine
from accesswatch.services.issue_classifier import IssueClassifier
from accesswatch.services.retry_policy import RetryPolicy

logger = logging.getLogger(__name__)


class AuditOrchestrator:
    """
    Runs a single audit synchronously from the caller's point of view.

    Every call creates exactly one Audit row and returns it in a terminal
    state. Failures of the scoring API end up as FAILED audits; only a
    missing page or a storage fault raises.
    """

    def __init__(
        self,
        db: AsyncSession,
        client: PageSpeedClient | None = None,
        retry_policy: RetryPolicy | None = None,
        classifier: IssueClassifier | None = None,
        comparison_engine: ComparisonEngine | None = None,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.db = db
        self.pages = PageRepository(db)
        self.audits = AuditRepository(db)
        self.issues = IssueRepository(db)
        self.comparisons = ComparisonRepository(db)
        self.client = client or PageSpeedClient()
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self.classifier = classifier or IssueClassifier()
        self.comparison_engine = comparison_engine or ComparisonEngine()
        self.clock = clock
        self.sleep = sleep

    async def run_audit(self, page_id: int) -> Audit:
        page = await self.pages.find_by_id(page_id)
        if page is None:
            raise NotFoundError("Page")

        now = self.clock()
        audit = Audit(
            page_id=page.id,
            score=0,
            status=AuditStatus.IN_PROGRESS,
            audit_date=now,
            retry_count=0,
            created_at=now,
            issues=[],
        )
        await self.audits.save(audit)
        logger.info(f"[Audit] Started audit {audit.id} for page {page.id} ({page.url})")

        try:
            result = await self._execute_with_retry(page.url, audit)
        except ScoringApiError as e:
            audit.status = AuditStatus.FAILED
            audit.error_message = str(e)
            await self.audits.update(audit)
            logger.warning(
                f"[Audit] Audit {audit.id} failed after {audit.retry_count} retries: {e}"
            )
            return audit

        audit.score = result.score
        audit.status = AuditStatus.COMPLETED
        audit.raw_response = result.raw_json
        await self.audits.update(audit)

        issues = await self._save_issues(audit, result)
        comparison = await self._compare_with_previous(audit)

        page.last_audited_at = self.clock()
        await self.pages.update(page)

        logger.info(
            f"[Audit] Completed audit {audit.id}: score={audit.score}, "
            f"issues={len(issues)}, trend={comparison.trend.value if comparison else 'n/a'}"
        )
        return audit

    async def _execute_with_retry(self, url: str, audit: Audit) -> ScoringResult:
        """Call the scoring API, backing off on rate-limit answers only."""
        last_error: ScoringApiError | None = None

        while self.retry_policy.should_retry(audit.retry_count):
            try:
                return await self.client.run_audit(url)
            except RateLimitedError as e:
                last_error = e
                audit.increment_retry_count()
                delay = self.retry_policy.delay_seconds(audit.retry_count - 1)
                logger.info(
                    f"[Audit] Rate limited on audit {audit.id} "
                    f"(retry {audit.retry_count}), backing off {delay:.1f}s"
                )
                if delay > 0:
                    await self.sleep(delay)

        raise last_error or ScoringApiError("Max retries exceeded")

    async def _save_issues(self, audit: Audit, result: ScoringResult) -> list[Issue]:
        issues = self.classifier.build_issues(audit, result.failing_checks, created_at=self.clock())
        await self.issues.save_many(issues)
        set_committed_value(audit, "issues", issues)
        return issues

    async def _compare_with_previous(self, audit: Audit) -> AuditComparison | None:
        previous = await self.audits.find_latest_by_page_id(
            audit.page_id,
            status=AuditStatus.COMPLETED,
            exclude_audit_id=audit.id,
        )
        if previous is None:
            return None

        comparison = self.comparison_engine.compare(audit, previous, created_at=self.clock())
        await self.comparisons.save(comparison)
        return comparison
