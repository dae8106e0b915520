"""
Integration tests for the storage collaborators.
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from accesswatch.models.audit import (
    Audit,
    AuditComparison,
    AuditStatus,
    Issue,
    IssueCategory,
    IssueSeverity,
    Trend,
)
from accesswatch.models.page import AuditCadence
from accesswatch.repositories import (
    AuditRepository,
    ComparisonRepository,
    IssueRepository,
    PageRepository,
)
from accesswatch.services.comparison_service import ComparisonEngine

AUDIT_DATE = datetime(2024, 5, 20, 8, 15, 30, tzinfo=timezone.utc)


def make_issue(audit_id: int, description: str, **overrides) -> Issue:
    fields = dict(
        audit_id=audit_id,
        severity=IssueSeverity.SERIOUS,
        category=IssueCategory.ARIA,
        check_id="aria-required-attr",
        sub_score=0.2,
        title="ARIA attributes missing",
        description=description,
        element_selector="nav > ul",
        help_url="https://dequeuniversity.com/rules/axe/4.8/aria-required-attr",
        created_at=AUDIT_DATE,
    )
    fields.update(overrides)
    return Issue(**fields)


class TestRoundTrip:
    """Persisting and re-reading preserves every field."""

    @pytest.mark.asyncio
    async def test_audit_issue_comparison_round_trip(self, db_session, make_page):
        page = await make_page()
        audits = AuditRepository(db_session)

        previous = await audits.save(Audit(
            page_id=page.id,
            score=64,
            status=AuditStatus.COMPLETED,
            audit_date=AUDIT_DATE - timedelta(days=7),
            raw_response='{"lighthouseResult": {}}',
            retry_count=0,
            created_at=AUDIT_DATE - timedelta(days=7),
        ))
        failed = await audits.save(Audit(
            page_id=page.id,
            score=0,
            status=AuditStatus.FAILED,
            audit_date=AUDIT_DATE,
            error_message="Rate limit exceeded",
            retry_count=3,
            created_at=AUDIT_DATE,
        ))
        await IssueRepository(db_session).save_many([make_issue(previous.id, "Needs aria")])
        comparison = await ComparisonRepository(db_session).save(AuditComparison(
            current_audit_id=failed.id,
            previous_audit_id=previous.id,
            score_delta=-64,
            new_issues_count=0,
            resolved_issues_count=1,
            persistent_issues_count=0,
            trend=Trend.DEGRADING,
            created_at=AUDIT_DATE,
        ))
        await db_session.commit()
        db_session.expunge_all()

        loaded_failed = await audits.find_by_id(failed.id)
        assert loaded_failed is not failed
        assert loaded_failed.page_id == page.id
        assert loaded_failed.status == AuditStatus.FAILED
        assert loaded_failed.score == 0
        assert loaded_failed.retry_count == 3
        assert loaded_failed.error_message == "Rate limit exceeded"
        assert loaded_failed.raw_response is None
        assert loaded_failed.audit_date == AUDIT_DATE
        assert loaded_failed.created_at == AUDIT_DATE
        assert loaded_failed.issues == []

        loaded_previous = await audits.find_by_id(previous.id)
        assert loaded_previous.status == AuditStatus.COMPLETED
        assert loaded_previous.score == 64
        assert loaded_previous.raw_response == '{"lighthouseResult": {}}'

        (issue,) = await IssueRepository(db_session).find_by_audit_id(previous.id)
        assert issue.severity == IssueSeverity.SERIOUS
        assert issue.category == IssueCategory.ARIA
        assert issue.check_id == "aria-required-attr"
        assert issue.sub_score == 0.2
        assert issue.title == "ARIA attributes missing"
        assert issue.description == "Needs aria"
        assert issue.element_selector == "nav > ul"
        assert issue.help_url.endswith("aria-required-attr")
        assert issue.created_at == AUDIT_DATE

        loaded_comparison = await ComparisonRepository(db_session).find_by_current_audit_id(failed.id)
        assert loaded_comparison.id == comparison.id
        assert loaded_comparison.previous_audit_id == previous.id
        assert loaded_comparison.score_delta == -64
        assert loaded_comparison.resolved_issues_count == 1
        assert loaded_comparison.trend == Trend.DEGRADING
        assert loaded_comparison.delta.direction_label == "-64"

    @pytest.mark.asyncio
    async def test_page_round_trip(self, db_session, make_page):
        page = await make_page(
            url="https://example.com/contact",
            name="Contact",
            cadence=AuditCadence.BIWEEKLY,
            last_audited_at=AUDIT_DATE,
        )
        await db_session.commit()
        db_session.expunge_all()

        loaded = await PageRepository(db_session).find_by_id(page.id)
        assert loaded.url == "https://example.com/contact"
        assert loaded.name == "Contact"
        assert loaded.cadence == AuditCadence.BIWEEKLY
        assert loaded.enabled is True
        assert loaded.last_audited_at == AUDIT_DATE


class TestIssueBatch:
    """The issue batch is all-or-nothing."""

    @pytest.mark.asyncio
    async def test_failed_batch_leaves_no_rows(self, db_session, make_page):
        page = await make_page()
        audit = await AuditRepository(db_session).save(
            Audit(page_id=page.id, score=50, status=AuditStatus.COMPLETED, audit_date=AUDIT_DATE)
        )
        issues = IssueRepository(db_session)

        batch = [
            make_issue(audit.id, "First"),
            make_issue(audit.id, "Broken", title=None),
            make_issue(audit.id, "Third"),
        ]
        with pytest.raises(IntegrityError):
            await issues.save_many(batch)

        assert await issues.find_by_audit_id(audit.id) == []
        assert await AuditRepository(db_session).find_by_id(audit.id) is not None

    @pytest.mark.asyncio
    async def test_empty_batch(self, db_session):
        assert await IssueRepository(db_session).save_many([]) == []


class TestHistoryQueries:
    """History is returned newest first."""

    @pytest.mark.asyncio
    async def test_find_by_page_id_newest_first(self, db_session, make_page):
        page = await make_page()
        other = await make_page(url="https://example.org")
        audits = AuditRepository(db_session)
        for days_ago, score in [(3, 70), (1, 90), (2, 80)]:
            await audits.save(Audit(
                page_id=page.id,
                score=score,
                status=AuditStatus.COMPLETED,
                audit_date=AUDIT_DATE - timedelta(days=days_ago),
            ))
        await audits.save(Audit(page_id=other.id, score=10, status=AuditStatus.COMPLETED, audit_date=AUDIT_DATE))

        history = await audits.find_by_page_id(page.id)

        assert [audit.score for audit in history] == [90, 80, 70]

    @pytest.mark.asyncio
    async def test_find_latest_filters(self, db_session, make_page):
        page = await make_page()
        audits = AuditRepository(db_session)
        completed = await audits.save(Audit(
            page_id=page.id, score=75, status=AuditStatus.COMPLETED, audit_date=AUDIT_DATE - timedelta(days=1)
        ))
        failed = await audits.save(Audit(
            page_id=page.id, score=0, status=AuditStatus.FAILED, audit_date=AUDIT_DATE
        ))

        assert (await audits.find_latest_by_page_id(page.id)).id == failed.id
        latest_completed = await audits.find_latest_by_page_id(page.id, status=AuditStatus.COMPLETED)
        assert latest_completed.id == completed.id
        assert await audits.find_latest_by_page_id(
            page.id, status=AuditStatus.COMPLETED, exclude_audit_id=completed.id
        ) is None

    @pytest.mark.asyncio
    async def test_history_can_be_compared_after_reload(self, db_session, make_page):
        page = await make_page()
        audits = AuditRepository(db_session)
        issues = IssueRepository(db_session)
        older = await audits.save(Audit(
            page_id=page.id, score=70, status=AuditStatus.COMPLETED, audit_date=AUDIT_DATE - timedelta(days=1)
        ))
        newer = await audits.save(Audit(
            page_id=page.id, score=82, status=AuditStatus.COMPLETED, audit_date=AUDIT_DATE
        ))
        await issues.save_many([make_issue(older.id, "Low contrast"), make_issue(older.id, "Missing alt")])
        await issues.save_many([make_issue(newer.id, "Missing alt"), make_issue(newer.id, "Empty link")])
        await db_session.commit()
        db_session.expunge_all()

        history = await audits.find_by_page_id(page.id)
        comparison = ComparisonEngine().compare(*history[:2])

        assert comparison.current_audit_id == newer.id
        assert comparison.previous_audit_id == older.id
        assert comparison.score_delta == 12
        assert comparison.new_issues_count == 1
        assert comparison.resolved_issues_count == 1
        assert comparison.persistent_issues_count == 1
        assert comparison.trend == Trend.IMPROVING

    @pytest.mark.asyncio
    async def test_find_enabled(self, db_session, make_page):
        enabled = await make_page(url="https://example.com/a")
        await make_page(url="https://example.com/b", enabled=False)

        pages = await PageRepository(db_session).find_enabled()

        assert [page.id for page in pages] == [enabled.id]
