"""
Page storage.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from accesswatch.models.page import Page


class PageRepository:
    """Read access to pages plus the last-audited stamp."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, page_id: int) -> Page | None:
        """Get page by ID."""
        result = await self.db.execute(select(Page).where(Page.id == page_id))
        return result.scalar_one_or_none()

    async def find_enabled(self) -> list[Page]:
        """List pages that take part in scheduled audits."""
        result = await self.db.execute(
            select(Page).where(Page.enabled.is_(True)).order_by(Page.id)
        )
        return list(result.scalars().all())

    async def update(self, page: Page) -> Page:
        self.db.add(page)
        await self.db.flush()
        return page
