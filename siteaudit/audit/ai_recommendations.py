# siteaudit/audit/ai_recommendations.py
from typing import List

from siteaudit.schemas import AuditResult
from siteaudit.utils.numbers import round_half_up

# Lighthouse "good" thresholds
SCORE_THRESHOLD = 0.9
LCP_THRESHOLD_MS = 2500
TBT_THRESHOLD_MS = 200


def fallback_suggestions(result: AuditResult) -> str:
    """
    Offline, deterministic suggestions used when the text-generation service is unavailable.

    Only the four category scores plus LCP/TBT are consulted; opportunities and
    diagnostics are not carried into this text.
    """
    scores = result.scores
    metrics = result.metrics

    parts: List[str] = ["# Website Audit Results\n\n"]

    if scores.performance < SCORE_THRESHOLD:
        parts.append("## 🚀 Performance Improvements\n\n")
        if metrics.largest_contentful_paint > LCP_THRESHOLD_MS:
            parts.append(
                f"- **Optimize Largest Contentful Paint**: Your LCP is "
                f"{round_half_up(metrics.largest_contentful_paint)}ms. "
                "Optimize your largest image or text block.\n"
            )
        if metrics.total_blocking_time > TBT_THRESHOLD_MS:
            parts.append(
                f"- **Reduce JavaScript Blocking**: {round_half_up(metrics.total_blocking_time)}ms "
                "of blocking time. Minimize and defer non-critical JS.\n"
            )
        parts.append("- Compress images and use modern formats (WebP, AVIF)\n")
        parts.append("- Enable browser caching and CDN\n\n")

    if scores.seo < SCORE_THRESHOLD:
        parts.append("## 🔍 SEO Enhancements\n\n")
        parts.append("- Optimize meta descriptions and title tags\n")
        parts.append("- Improve internal linking structure\n")
        parts.append("- Add structured data markup\n\n")

    if scores.accessibility < SCORE_THRESHOLD:
        parts.append("## ♿ Accessibility Improvements\n\n")
        parts.append("- Add alt text to all images\n")
        parts.append("- Ensure proper color contrast ratios\n")
        parts.append("- Make all interactive elements keyboard accessible\n\n")

    return "".join(parts)
