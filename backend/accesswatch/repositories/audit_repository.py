"""
Audit storage.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from accesswatch.models.audit import Audit, AuditStatus


class AuditRepository:
    """Persistence for Audit rows. History queries return newest first."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def save(self, audit: Audit) -> Audit:
        """Insert a new audit; the ID is assigned on flush."""
        self.db.add(audit)
        await self.db.flush()
        return audit

    async def update(self, audit: Audit) -> Audit:
        self.db.add(audit)
        await self.db.flush()
        return audit

    async def find_by_id(self, audit_id: int) -> Audit | None:
        """Get audit by ID, with its issues."""
        result = await self.db.execute(
            select(Audit)
            .where(Audit.id == audit_id)
            .options(selectinload(Audit.issues))
        )
        return result.scalar_one_or_none()

    async def find_by_page_id(
        self,
        page_id: int,
        status: AuditStatus | None = None,
        limit: int | None = None,
    ) -> list[Audit]:
        """List a page's audits, newest first, with their issues loaded."""
        query = (
            select(Audit)
            .where(Audit.page_id == page_id)
            .options(selectinload(Audit.issues))
        )
        if status:
            query = query.where(Audit.status == status)

        query = query.order_by(Audit.audit_date.desc(), Audit.id.desc())
        if limit:
            query = query.limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_latest_by_page_id(
        self,
        page_id: int,
        status: AuditStatus | None = None,
        exclude_audit_id: int | None = None,
    ) -> Audit | None:
        """Get the most recent audit for a page, with its issues loaded."""
        query = (
            select(Audit)
            .where(Audit.page_id == page_id)
            .options(selectinload(Audit.issues))
        )
        if status:
            query = query.where(Audit.status == status)
        if exclude_audit_id is not None:
            query = query.where(Audit.id != exclude_audit_id)

        query = query.order_by(Audit.audit_date.desc(), Audit.id.desc()).limit(1)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()
