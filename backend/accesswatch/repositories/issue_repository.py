"""
Issue storage.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from accesswatch.models.audit import Issue


class IssueRepository:
    """Persistence for Issue rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save_many(self, issues: list[Issue]) -> list[Issue]:
        """
        Insert a batch of issues atomically.

        The batch is written inside a SAVEPOINT: if any row fails, none of
        them are kept and the error propagates.
        """
        if not issues:
            return []

        async with self.db.begin_nested():
            self.db.add_all(issues)
            await self.db.flush()

        return issues

    async def find_by_audit_id(self, audit_id: int) -> list[Issue]:
        result = await self.db.execute(
            select(Issue).where(Issue.audit_id == audit_id).order_by(Issue.id)
        )
        return list(result.scalars().all())
