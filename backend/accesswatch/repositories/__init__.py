"""
Storage collaborators for the audit engine.

Repositories flush but never commit; the caller owns the transaction.
"""
from accesswatch.repositories.page_repository import PageRepository
from accesswatch.repositories.audit_repository import AuditRepository
from accesswatch.repositories.issue_repository import IssueRepository
from accesswatch.repositories.comparison_repository import ComparisonRepository

__all__ = [
    "PageRepository",
    "AuditRepository",
    "IssueRepository",
    "ComparisonRepository",
]
