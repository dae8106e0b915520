"""
Read-side analytics over a page's audit history.

Every method expects audits ordered newest first, which is how
AuditRepository.find_by_page_id returns them.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator, Sequence

from accesswatch.models.audit import Audit, Trend
from accesswatch.schemas.audit import ScorePoint, TrendSummary


def round_half_up(total: int, count: int) -> int:
    """Integer mean rounded half away from zero."""
    return int((Decimal(total) / Decimal(count)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class TrendCalculator:
    """Trend direction, average and time series for an audit window."""

    def average(self, audits: Sequence[Audit]) -> int:
        if not audits:
            return 0
        return round_half_up(sum(audit.score for audit in audits), len(audits))

    def trend(self, audits: Sequence[Audit]) -> Trend:
        """Net direction between the oldest and newest audit of the window."""
        if len(audits) < 2:
            return Trend.STABLE

        newest, oldest = audits[0], audits[-1]
        return Trend.from_delta(newest.accessibility_score.delta(oldest.accessibility_score))

    def series(self, audits: Sequence[Audit]) -> Iterator[dict]:
        for audit in audits:
            yield {
                "score": audit.score,
                "date": audit.audit_date.strftime("%Y-%m-%d"),
            }

    def summarize(self, audits: Sequence[Audit]) -> TrendSummary:
        latest = audits[0] if audits else None
        return TrendSummary(
            total_audits=len(audits),
            latest_score=latest.score if latest else None,
            latest_grade=latest.accessibility_score.grade() if latest else None,
            average_score=self.average(audits),
            trend=self.trend(audits),
            series=[ScorePoint(**point) for point in self.series(audits)],
        )
