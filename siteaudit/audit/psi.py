# siteaudit/audit/psi.py
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlparse

import aiohttp
from aiohttp import ClientTimeout
from aiohttp.client_exceptions import ClientError

from siteaudit.audit.errors import InvalidInput, UpstreamAuditError
from siteaudit.schemas import (
    AuditMetrics,
    AuditResult,
    CategoryScores,
    Diagnostic,
    Opportunity,
    PageInfo,
)
from siteaudit.settings import Settings

PAGESPEED_API = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
CATEGORIES = ["performance", "accessibility", "best-practices", "seo"]
MAX_ITEMS = 10

logger = logging.getLogger(__name__)


# ---------------------------
# URL validation
# ---------------------------
def validate_url(url: Any) -> str:
    """
    Accept only absolute URLs (scheme + host). Nothing is normalized:
    'example.com' is rejected rather than guessed as https.
    """
    # Any falsy value (None, "", 0, False, [], {}) counts as missing
    if not url:
        raise InvalidInput("URL is required")
    if not isinstance(url, str):
        raise InvalidInput("Invalid URL format")

    u = url.strip()
    if not u:
        raise InvalidInput("URL is required")
    # Stricter than a WHATWG URL parser: embedded whitespace and host-less URLs
    # such as mailto: are rejected since PageSpeed can only audit http(s) pages.
    if any(ch.isspace() for ch in u):
        raise InvalidInput("Invalid URL format")

    try:
        parsed = urlparse(u)
        parsed.port  # raises ValueError on a non-numeric or out-of-range port
    except ValueError:
        raise InvalidInput("Invalid URL format")

    if not parsed.scheme or not parsed.netloc or not parsed.hostname:
        raise InvalidInput("Invalid URL format")
    return u


# ---------------------------
# Lighthouse extraction
# ---------------------------
def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _num(v: Any) -> float:
    """Missing, null, zero or non-numeric all collapse to 0.0."""
    return float(v) if _is_number(v) and v else 0.0


def _text(v: Any, default: str) -> str:
    return v if isinstance(v, str) and v else default


def _audit(audits: Dict[str, Any], key: str) -> Dict[str, Any]:
    entry = audits.get(key)
    return entry if isinstance(entry, dict) else {}


def _category_score(categories: Dict[str, Any], key: str) -> float:
    entry = categories.get(key)
    return _num(entry.get("score")) if isinstance(entry, dict) else 0.0


def _entries(audits: Dict[str, Any]) -> Iterable[Tuple[str, Dict[str, Any]]]:
    # Upstream key order, unsorted
    for key, audit in audits.items():
        if isinstance(audit, dict):
            yield key, audit


def extract_opportunities(audits: Dict[str, Any]) -> List[Opportunity]:
    out: List[Opportunity] = []
    for key, audit in _entries(audits):
        details = audit.get("details")
        if not isinstance(details, dict) or details.get("type") != "opportunity":
            continue
        value = audit.get("numericValue")
        if not _is_number(value) or value <= 0:
            continue
        out.append(
            Opportunity(
                id=key,
                title=_text(audit.get("title"), ""),
                description=_text(audit.get("description"), ""),
                savings=float(value),
            )
        )
        if len(out) >= MAX_ITEMS:
            break
    return out


def extract_diagnostics(audits: Dict[str, Any]) -> List[Diagnostic]:
    out: List[Diagnostic] = []
    for key, audit in _entries(audits):
        if audit.get("scoreDisplayMode") != "binary":
            continue
        score = audit.get("score")
        if not _is_number(score) or score >= 1:
            continue
        out.append(
            Diagnostic(
                id=key,
                title=_text(audit.get("title"), ""),
                description=_text(audit.get("description"), ""),
                display_value=_text(audit.get("displayValue"), ""),
            )
        )
        if len(out) >= MAX_ITEMS:
            break
    return out


def parse_lighthouse(data: Dict[str, Any]) -> AuditResult:
    """
    Reshape a PSI v5 response into an AuditResult.
    Missing numbers default to 0, missing page text to fixed placeholders.
    """
    lighthouse = data.get("lighthouseResult") if isinstance(data, dict) else None
    if not isinstance(lighthouse, dict):
        raise UpstreamAuditError("PageSpeed response has no lighthouseResult")

    categories = lighthouse.get("categories") or {}
    audits = lighthouse.get("audits") or {}
    if not isinstance(categories, dict):
        categories = {}
    if not isinstance(audits, dict):
        audits = {}

    scores = CategoryScores(
        performance=_category_score(categories, "performance"),
        accessibility=_category_score(categories, "accessibility"),
        best_practices=_category_score(categories, "best-practices"),
        seo=_category_score(categories, "seo"),
    )

    metrics = AuditMetrics(
        first_contentful_paint=_num(_audit(audits, "first-contentful-paint").get("numericValue")),
        largest_contentful_paint=_num(_audit(audits, "largest-contentful-paint").get("numericValue")),
        first_input_delay=_num(_audit(audits, "max-potential-fid").get("numericValue")),
        cumulative_layout_shift=_num(_audit(audits, "cumulative-layout-shift").get("numericValue")),
        speed_index=_num(_audit(audits, "speed-index").get("numericValue")),
        total_blocking_time=_num(_audit(audits, "total-blocking-time").get("numericValue")),
    )

    screenshot = ((lighthouse.get("fullPageScreenshot") or {}).get("screenshot") or {}).get("data")
    page_info = PageInfo(
        title=_text(_audit(audits, "document-title").get("displayValue"), "No title"),
        description=_text(_audit(audits, "meta-description").get("displayValue"), "No description"),
        screenshot=_text(screenshot, ""),
    )

    return AuditResult(
        scores=scores,
        metrics=metrics,
        page_info=page_info,
        opportunities=extract_opportunities(audits),
        diagnostics=extract_diagnostics(audits),
    )


# ---------------------------
# PSI client
# ---------------------------
class PageSpeedClient:
    """
    Single-shot PageSpeed Insights client. No retries: a failed call is
    reported as UpstreamAuditError and the caller decides what to show.
    """

    def __init__(self, settings: Settings, session: Optional[aiohttp.ClientSession] = None) -> None:
        self.settings = settings
        self._session = session

    def _params(self, url: str) -> List[Tuple[str, str]]:
        params = [
            ("url", url),
            ("key", self.settings.GOOGLE_PAGESPEED_API_KEY),
        ] + [("category", c) for c in CATEGORIES]
        params += [
            ("strategy", self.settings.PSI_STRATEGY),
            ("locale", self.settings.PSI_LOCALE),
        ]
        return params

    async def _fetch(self, session: aiohttp.ClientSession, url: str) -> Dict[str, Any]:
        async with session.get(
            PAGESPEED_API,
            params=self._params(url),
            headers={"Accept": "application/json"},
        ) as resp:
            if not 200 <= resp.status < 300:
                text = await resp.text()
                logger.error("[PSI] HTTP %s for %s. Body: %s", resp.status, url, text[:500])
                raise UpstreamAuditError(
                    f"PageSpeed API error: {resp.status} {resp.reason or ''}".strip(),
                    status=resp.status,
                    body=text,
                )
            try:
                return await resp.json(content_type=None)
            except ValueError as e:
                raise UpstreamAuditError("PageSpeed API returned invalid JSON", status=resp.status) from e

    async def run_audit(self, url: str) -> AuditResult:
        target = validate_url(url)

        if not self.settings.has_pagespeed_key:
            raise UpstreamAuditError("Google PageSpeed API key not configured")

        logger.info("[PSI] Starting PageSpeed Insights audit for %s", target)
        try:
            if self._session is not None:
                data = await self._fetch(self._session, target)
            else:
                timeout = ClientTimeout(total=self.settings.PSI_TIMEOUT)
                async with aiohttp.ClientSession(timeout=timeout) as session:
                    data = await self._fetch(session, target)
        except asyncio.TimeoutError as e:
            logger.error("[PSI] Timed out after %.0fs for %s", self.settings.PSI_TIMEOUT, target)
            raise UpstreamAuditError("PageSpeed API timed out") from e
        except ClientError as e:
            logger.error("[PSI] ClientError for %s: %s", target, e)
            raise UpstreamAuditError(f"PageSpeed API unreachable: {e}") from e

        result = parse_lighthouse(data)
        logger.info(
            "[PSI] %s performance=%.2f opportunities=%d diagnostics=%d",
            target,
            result.scores.performance,
            len(result.opportunities),
            len(result.diagnostics),
        )
        return result
