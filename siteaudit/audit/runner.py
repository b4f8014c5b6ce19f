# siteaudit/audit/runner.py
import logging
from typing import Any, Optional

from siteaudit.audit.psi import PageSpeedClient, validate_url
from siteaudit.schemas import AuditReport, AuditResult
from siteaudit.services.ai_service import SuggestionService
from siteaudit.settings import Settings

logger = logging.getLogger(__name__)


class AuditOrchestrator:
    """
    One audit per call:
      - validate the URL (InvalidInput, no network)
      - run PageSpeed Insights (UpstreamAuditError propagates)
      - generate suggestions from the result (self-recovers, never raises)

    The two outbound calls are strictly sequential; the prompt needs the audit.
    Settings are injected so tests can point both clients at fakes.
    """

    def __init__(
        self,
        settings: Settings,
        psi: Optional[PageSpeedClient] = None,
        suggestions: Optional[SuggestionService] = None,
    ) -> None:
        self.settings = settings
        self.psi = psi or PageSpeedClient(settings)
        self.suggestions = suggestions or SuggestionService(settings)

    async def run_audit(self, url: str) -> AuditResult:
        return await self.psi.run_audit(url)

    async def generate_suggestions(self, result: AuditResult, url: str) -> str:
        return await self.suggestions.generate_suggestions(result, url)

    async def audit(self, url: Any) -> AuditReport:
        target = validate_url(url)
        result = await self.run_audit(target)
        suggestions = await self.generate_suggestions(result, target)
        logger.info("Audit completed for %s", target)
        return AuditReport.build(target, result, suggestions)
