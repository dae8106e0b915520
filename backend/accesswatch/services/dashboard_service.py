"""
Dashboard statistics across all tracked pages.
"""
from typing import Mapping, Sequence

from accesswatch.models.audit import Audit
from accesswatch.models.page import Page
from accesswatch.schemas.dashboard import DashboardSummary, PageSummary, ScoreDistribution
from accesswatch.services.trend_calculator import round_half_up

NEEDS_ATTENTION_BELOW = 70


class DashboardStatistics:
    """Aggregates over pages and their audit histories (newest first)."""

    def calculate_summary(
        self,
        pages: Sequence[Page],
        audits_by_page: Mapping[int, Sequence[Audit]],
    ) -> DashboardSummary:
        total_audits = 0
        score_sum = 0
        scored_pages = 0
        needs_attention = 0
        distribution = ScoreDistribution()

        for page in pages:
            audits = audits_by_page.get(page.id, [])
            total_audits += len(audits)
            if not audits:
                continue

            latest = audits[0].accessibility_score
            score_sum += latest.value
            scored_pages += 1

            if latest.value < NEEDS_ATTENTION_BELOW:
                needs_attention += 1

            match latest.grade():
                case "Excellent":
                    distribution.excellent += 1
                case "Good":
                    distribution.good += 1
                case "Needs Improvement":
                    distribution.needs_work += 1
                case _:
                    distribution.poor += 1

        return DashboardSummary(
            total_pages=len(pages),
            total_audits=total_audits,
            average_score=round_half_up(score_sum, scored_pages) if scored_pages else 0,
            pages_needing_attention=needs_attention,
            score_distribution=distribution,
        )

    def page_summaries(
        self,
        pages: Sequence[Page],
        audits_by_page: Mapping[int, Sequence[Audit]],
    ) -> list[PageSummary]:
        summaries = []
        for page in pages:
            audits = audits_by_page.get(page.id, [])
            latest = audits[0] if audits else None
            summaries.append(PageSummary(
                page_id=page.id,
                name=page.name or page.url,
                url=page.url,
                latest_score=latest.score if latest else None,
                latest_audit_date=latest.audit_date if latest else None,
                total_audits=len(audits),
                cadence=page.cadence.label,
                enabled=page.enabled,
            ))
        return summaries
