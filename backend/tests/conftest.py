"""
Pytest configuration and fixtures for AccessWatch tests.
"""
import json
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from accesswatch.database import create_engine
from accesswatch.integrations.pagespeed import FailingCheck, ScoringResult
from accesswatch.models.base import Base
from accesswatch.models.page import AuditCadence, Page

# Use SQLite for testing (in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_page(db_session: AsyncSession):
    """Factory that persists a page."""

    async def _make_page(
        url: str = "https://example.com",
        cadence: AuditCadence = AuditCadence.DAILY,
        enabled: bool = True,
        last_audited_at: datetime | None = None,
        name: str | None = None,
    ) -> Page:
        page = Page(
            url=url,
            name=name,
            cadence=cadence,
            enabled=enabled,
            last_audited_at=last_audited_at,
        )
        db_session.add(page)
        await db_session.flush()
        return page

    return _make_page


# ============================================================================
# Clock / Sleep Fixtures
# ============================================================================

class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Stand-in for asyncio.sleep that records requested delays."""
    return AsyncMock(return_value=None)


# ============================================================================
# Scoring API Fixtures
# ============================================================================

def make_scoring_result(score: int = 85, descriptions: list[str] | None = None) -> ScoringResult:
    """A ScoringResult whose failing checks carry the given descriptions."""
    descriptions = descriptions if descriptions is not None else []
    checks = [
        FailingCheck(
            id=f"check-{index}",
            title=f"Check {index}",
            description=description,
            sub_score=0.0,
        )
        for index, description in enumerate(descriptions)
    ]
    return ScoringResult(score=score, failing_checks=checks, raw_json=json.dumps({"score": score}))


@pytest.fixture
def scoring_result():
    return make_scoring_result


@pytest.fixture
def mock_scoring_client() -> MagicMock:
    """Mock PageSpeed client; configure run_audit per test."""
    mock = MagicMock()
    mock.run_audit = AsyncMock()
    return mock


@pytest.fixture
def psi_payload() -> dict:
    """Trimmed PageSpeed Insights response for the accessibility category."""
    return {
        "lighthouseResult": {
            "categories": {
                "accessibility": {"id": "accessibility", "score": 0.876},
            },
            "audits": {
                "color-contrast": {
                    "id": "color-contrast",
                    "title": "Background and foreground colors do not have a sufficient contrast ratio.",
                    "description": (
                        "Low-contrast text is difficult or impossible for many users to read. "
                        "[Learn how to provide sufficient color contrast]"
                        "(https://dequeuniversity.com/rules/axe/4.8/color-contrast)."
                    ),
                    "score": 0,
                    "scoreDisplayMode": "binary",
                    "details": {
                        "items": [
                            {"node": {"selector": "div.hero > p"}},
                            {"node": {"selector": "footer a"}},
                        ],
                    },
                },
                "image-alt": {
                    "id": "image-alt",
                    "title": "Image elements do not have `[alt]` attributes",
                    "description": "Informative elements should aim for short, descriptive alternate text.",
                    "score": 0.5,
                    "scoreDisplayMode": "binary",
                    "helpUrl": "https://dequeuniversity.com/rules/axe/4.8/image-alt",
                },
                "document-title": {
                    "id": "document-title",
                    "title": "Document has a `<title>` element",
                    "description": "The title gives screen reader users an overview of the page.",
                    "score": 1,
                    "scoreDisplayMode": "binary",
                },
                "accesskeys": {
                    "id": "accesskeys",
                    "title": "`[accesskey]` values are unique",
                    "description": "Access keys let users quickly focus a part of the page.",
                    "score": None,
                    "scoreDisplayMode": "notApplicable",
                },
                "logical-tab-order": {
                    "id": "logical-tab-order",
                    "title": "The page has a logical tab order",
                    "description": "Tabbing through the page follows the visual layout.",
                    "score": None,
                    "scoreDisplayMode": "manual",
                },
            },
        },
    }
