"""
Google PageSpeed Insights API client.

Runs the Lighthouse accessibility category for a single URL and extracts
the overall score and the failing checks.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

import httpx

from accesswatch.config import settings
from accesswatch.core.exceptions import RateLimitedError, ScoringApiError
from accesswatch.models.audit import AccessibilityScore

logger = logging.getLogger(__name__)

LEARN_MORE_LINK = re.compile(r"\[[^\]]*\]\((https?://[^)\s]+)\)")


@dataclass
class FailingCheck:
    """A Lighthouse check that did not pass."""
    id: str
    title: str
    description: str
    sub_score: float | None
    help_url: str | None = None
    selectors: list[str] = field(default_factory=list)


@dataclass
class ScoringResult:
    """Parsed result of one accessibility scoring request."""
    score: int
    failing_checks: list[FailingCheck]
    raw_json: str


class PageSpeedClient:
    """HTTP client for the PageSpeed Insights accessibility audit."""

    BASE_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

    def __init__(
        self,
        api_key: str | None = None,
        strategy: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.PAGESPEED_API_KEY
        self.strategy = strategy or settings.PAGESPEED_STRATEGY
        self.timeout = timeout or settings.PAGESPEED_TIMEOUT
        self.transport = transport

    async def run_audit(self, url: str) -> ScoringResult:
        """
        Score a URL for accessibility.

        Raises:
            RateLimitedError: the API answered HTTP 429
            ScoringApiError: any other non-200 answer, transport error or
                unreadable body
        """
        params = {
            "url": url,
            "category": "accessibility",
            "strategy": self.strategy,
        }
        if self.api_key:
            params["key"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                logger.info(f"[PSI] Auditing {url} ({self.strategy})")
                response = await client.get(self.BASE_URL, params=params)
        except httpx.TimeoutException as e:
            logger.error(f"[PSI] Timeout auditing {url}")
            raise ScoringApiError("Request timeout") from e
        except httpx.HTTPError as e:
            logger.error(f"[PSI] Transport error auditing {url}: {e}")
            raise ScoringApiError(f"Request failed: {e}") from e

        if response.status_code == 429:
            logger.warning(f"[PSI] Rate limited while auditing {url}")
            raise RateLimitedError()

        if response.status_code != 200:
            logger.error(f"[PSI] Error auditing {url}: HTTP {response.status_code}")
            raise ScoringApiError(
                f"API request failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        return self.parse_response(response.text)

    @classmethod
    def parse_response(cls, body: str) -> ScoringResult:
        """Parse a PSI response body into a ScoringResult."""
        try:
            data = json.loads(body)
        except ValueError as e:
            raise ScoringApiError("Invalid JSON in API response") from e

        if not isinstance(data, dict):
            raise ScoringApiError("Unexpected API response shape")

        try:
            lighthouse = data.get("lighthouseResult") or {}
            accessibility = (lighthouse.get("categories") or {}).get("accessibility") or {}
            score = cls._to_score(accessibility.get("score"))

            audits = lighthouse.get("audits") or {}
            failing_checks = [
                cls._to_failing_check(audit)
                for audit in audits.values()
                if cls._is_failing(audit)
            ]
        except (InvalidOperation, TypeError, AttributeError, ValueError) as e:
            # InvalidScoreError is a ValueError
            raise ScoringApiError("Invalid API response") from e

        return ScoringResult(score=score, failing_checks=failing_checks, raw_json=body)

    @staticmethod
    def _to_score(raw_score: Any) -> int:
        """Convert the 0-1 category score to a validated 0-100 integer."""
        if raw_score is None:
            return 0
        if isinstance(raw_score, bool) or not isinstance(raw_score, (int, float)):
            raise TypeError(f"Category score is not a number: {raw_score!r}")

        value = int((Decimal(str(raw_score)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return AccessibilityScore(value).value

    @staticmethod
    def _is_failing(audit: dict[str, Any]) -> bool:
        """Only binary checks with a score below 1 count as findings."""
        if audit.get("scoreDisplayMode") != "binary" or audit.get("score") is None:
            return False
        if isinstance(audit["score"], bool) or not isinstance(audit["score"], (int, float)):
            raise TypeError(f"Check score is not a number: {audit['score']!r}")
        return audit["score"] < 1

    @staticmethod
    def _to_failing_check(audit: dict[str, Any]) -> FailingCheck:
        description = audit.get("description", "")

        help_url = audit.get("helpUrl")
        if not help_url:
            match = LEARN_MORE_LINK.search(description)
            if match:
                help_url = match.group(1)

        selectors = []
        details = audit.get("details") or {}
        for item in details.get("items") or []:
            selector = (item.get("node") or {}).get("selector")
            if selector:
                selectors.append(selector)

        return FailingCheck(
            id=audit.get("id", ""),
            title=audit.get("title", audit.get("id", "")),
            description=description,
            sub_score=float(audit["score"]),
            help_url=help_url,
            selectors=selectors,
        )
