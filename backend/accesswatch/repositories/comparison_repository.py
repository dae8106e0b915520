"""
Audit comparison storage.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from accesswatch.models.audit import Audit, AuditComparison


class ComparisonRepository:
    """Persistence for AuditComparison rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, comparison: AuditComparison) -> AuditComparison:
        self.db.add(comparison)
        await self.db.flush()
        return comparison

    async def find_by_current_audit_id(self, current_audit_id: int) -> AuditComparison | None:
        result = await self.db.execute(
            select(AuditComparison).where(
                AuditComparison.current_audit_id == current_audit_id
            )
        )
        return result.scalar_one_or_none()

    async def find_by_page_id(self, page_id: int) -> list[AuditComparison]:
        """List comparisons for a page, newest first."""
        result = await self.db.execute(
            select(AuditComparison)
            .join(Audit, AuditComparison.current_audit_id == Audit.id)
            .where(Audit.page_id == page_id)
            .order_by(AuditComparison.created_at.desc(), AuditComparison.id.desc())
        )
        return list(result.scalars().all())
