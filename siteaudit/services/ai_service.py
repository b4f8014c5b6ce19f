# siteaudit/services/ai_service.py
import logging
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from siteaudit.audit.ai_recommendations import fallback_suggestions
from siteaudit.audit.errors import SuggestionGenerationError
from siteaudit.schemas import AuditResult
from siteaudit.settings import Settings
from siteaudit.utils.numbers import round_half_up, to_percent

OPENROUTER_API = "https://openrouter.ai/api/v1/chat/completions"
TEMPERATURE = 0.7
MAX_TOKENS = 2000
PROMPT_ITEMS = 5

logger = logging.getLogger("AIService")


def build_prompt(result: AuditResult, url: str) -> str:
    scores = result.scores
    m = result.metrics

    opportunities = "\n".join(
        f"- {o.title}: {o.description} (Potential savings: {round_half_up(o.savings)}ms)"
        for o in result.opportunities[:PROMPT_ITEMS]
    )
    issues = "\n".join(
        f"- {d.title}: {d.description}" for d in result.diagnostics[:PROMPT_ITEMS]
    )

    return (
        "Analyze this Lighthouse audit from Google PageSpeed Insights and give specific, "
        "actionable suggestions to improve the website.\n\n"
        f"Website: {url}\n\n"
        "**Lighthouse Scores:**\n"
        f"- Performance: {to_percent(scores.performance)}/100\n"
        f"- Accessibility: {to_percent(scores.accessibility)}/100\n"
        f"- Best Practices: {to_percent(scores.best_practices)}/100\n"
        f"- SEO: {to_percent(scores.seo)}/100\n\n"
        "**Core Web Vitals & Performance Metrics:**\n"
        f"- First Contentful Paint: {round_half_up(m.first_contentful_paint)}ms\n"
        f"- Largest Contentful Paint: {round_half_up(m.largest_contentful_paint)}ms\n"
        f"- Max Potential First Input Delay: {round_half_up(m.first_input_delay)}ms\n"
        f"- Cumulative Layout Shift: {m.cumulative_layout_shift:.3f}\n"
        f"- Total Blocking Time: {round_half_up(m.total_blocking_time)}ms\n"
        f"- Speed Index: {round_half_up(m.speed_index)}ms\n\n"
        "**Top Performance Opportunities:**\n"
        f"{opportunities or 'No major opportunities identified'}\n\n"
        "**Issues Detected:**\n"
        f"{issues or 'No major issues detected'}\n\n"
        "**Page Information:**\n"
        f'- Title: "{result.page_info.title}"\n'
        f'- Meta Description: "{result.page_info.description}"\n\n'
        "Organize the recommendations by priority and impact under these headings:\n\n"
        "1. **Performance Optimization** (High Impact)\n"
        "2. **SEO Improvements** (Quick Wins)\n"
        "3. **Accessibility Enhancements** (Compliance)\n"
        "4. **Best Practices** (Technical Excellence)\n"
        "5. **User Experience** (Beyond Code)\n"
        "6. **Content & Design** (Non-technical improvements)\n"
        "7. **Security** (Best practices)\n\n"
        "For each suggestion:\n"
        "- Explain WHY it matters\n"
        "- Explain HOW to implement it\n"
        "- Link tools or resources when helpful\n"
        "- Prioritize by impact vs effort\n"
        "- Tailor it to this audit; avoid generic advice\n"
        "- Call out quick wins that can be done immediately\n\n"
        "Use a friendly, professional tone with clear sections separated by blank lines "
        "and bullet points starting with '-'."
    )


def _extract_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise SuggestionGenerationError("Malformed completion response") from e
    if not isinstance(content, str) or not content.strip():
        raise SuggestionGenerationError("Completion response has no content")
    return content


class SuggestionService:
    """
    Turns an AuditResult into human-readable suggestions through OpenRouter.

    generate_suggestions() never raises: any failure of the remote call is logged
    and the offline generator in audit.ai_recommendations is used instead.
    """

    def __init__(self, settings: Settings, session: Optional[aiohttp.ClientSession] = None) -> None:
        self.settings = settings
        self._session = session

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.OPENROUTER_API_KEY}",
            "Content-Type": "application/json",
            "X-Title": self.settings.OPENROUTER_APP_TITLE,
        }

    def _payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.settings.OPENROUTER_MODEL,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    async def _post(self, session: aiohttp.ClientSession, prompt: str) -> str:
        async with session.post(OPENROUTER_API, json=self._payload(prompt), headers=self._headers()) as resp:
            if not 200 <= resp.status < 300:
                text = await resp.text()
                logger.error("OpenRouter API error: %s - %s", resp.status, text[:500])
                raise SuggestionGenerationError(f"OpenRouter API error: {resp.status}")
            try:
                data = await resp.json(content_type=None)
            except ValueError as e:
                raise SuggestionGenerationError("OpenRouter returned invalid JSON") from e
        return _extract_content(data)

    async def request_completion(self, prompt: str) -> str:
        """Raw call to the text-generation service. Raises on any failure."""
        if not self.settings.has_openrouter_key:
            raise SuggestionGenerationError("OpenRouter API key not configured")

        if self._session is not None:
            return await self._post(self._session, prompt)

        timeout = ClientTimeout(total=self.settings.LLM_TIMEOUT)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            return await self._post(session, prompt)

    async def generate_suggestions(self, result: AuditResult, url: str) -> str:
        try:
            prompt = build_prompt(result, url)
            return await self.request_completion(prompt)
        except Exception as e:
            logger.warning("AI suggestion error for %s, using offline suggestions: %s", url, e)
            return fallback_suggestions(result)
