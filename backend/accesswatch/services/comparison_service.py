"""
Comparison of a completed audit against the page's previous audit.
"""
from dataclasses import dataclass
from datetime import datetime

from accesswatch.models.audit import Audit, AuditComparison, Trend
from accesswatch.models.base import utc_now


@dataclass
class IssueDiff:
    """Issue descriptions grouped by how they changed between two audits."""
    new: set[str]
    resolved: set[str]
    persistent: set[str]


class ComparisonEngine:
    """
    Diffs two audits of the same page.

    Issues are matched across audits by description text only; category,
    severity and selector do not take part in the match.
    """

    def diff_issues(self, current: Audit, previous: Audit) -> IssueDiff:
        current_descriptions = {issue.description for issue in current.issues}
        previous_descriptions = {issue.description for issue in previous.issues}

        return IssueDiff(
            new=current_descriptions - previous_descriptions,
            resolved=previous_descriptions - current_descriptions,
            persistent=current_descriptions & previous_descriptions,
        )

    def compare(
        self,
        current: Audit,
        previous: Audit,
        created_at: datetime | None = None,
    ) -> AuditComparison:
        delta = current.accessibility_score.delta(previous.accessibility_score)
        diff = self.diff_issues(current, previous)

        return AuditComparison(
            current_audit_id=current.id,
            previous_audit_id=previous.id,
            score_delta=delta,
            new_issues_count=len(diff.new),
            resolved_issues_count=len(diff.resolved),
            persistent_issues_count=len(diff.persistent),
            trend=Trend.from_delta(delta),
            created_at=created_at or utc_now(),
        )
