"""
Maps failing Lighthouse checks onto issue categories and severities.
"""
from datetime import datetime

from accesswatch.integrations.pagespeed import FailingCheck
from accesswatch.models.audit import Audit, Issue, IssueCategory, IssueSeverity
from accesswatch.models.base import utc_now

# Order matters: the first rule whose keywords appear in the check id wins.
CATEGORY_RULES: list[tuple[tuple[str, ...], IssueCategory]] = [
    (("color-contrast",), IssueCategory.COLOR_CONTRAST),
    (("aria",), IssueCategory.ARIA),
    (("label", "form"), IssueCategory.FORMS),
    (("image", "alt"), IssueCategory.IMAGES),
    (("tabindex", "focus", "link"), IssueCategory.NAVIGATION),
    (("table", "th", "td"), IssueCategory.TABLES),
]


class IssueClassifier:
    """Pure classification of failing checks."""

    def categorize(self, check_id: str) -> IssueCategory:
        for keywords, category in CATEGORY_RULES:
            if any(keyword in check_id for keyword in keywords):
                return category
        return IssueCategory.OTHER

    def severity(self, sub_score: float | None) -> IssueSeverity:
        if sub_score is None or sub_score == 0:
            return IssueSeverity.CRITICAL
        if sub_score < 0.25:
            return IssueSeverity.SERIOUS
        if sub_score < 0.75:
            return IssueSeverity.MODERATE
        return IssueSeverity.MINOR

    def classify(self, check: FailingCheck) -> tuple[IssueCategory, IssueSeverity]:
        return self.categorize(check.id), self.severity(check.sub_score)

    def build_issues(
        self,
        audit: Audit,
        checks: list[FailingCheck],
        created_at: datetime | None = None,
    ) -> list[Issue]:
        """Turn the failing checks of a completed audit into Issue rows."""
        created_at = created_at or utc_now()
        issues = []
        for check in checks:
            category, severity = self.classify(check)
            issues.append(Issue(
                audit_id=audit.id,
                category=category,
                severity=severity,
                check_id=check.id,
                sub_score=check.sub_score,
                title=check.title,
                description=check.description or check.title,
                element_selector=check.selectors[0] if check.selectors else None,
                help_url=check.help_url,
                created_at=created_at,
            ))
        return issues
