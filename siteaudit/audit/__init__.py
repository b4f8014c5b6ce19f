"""Audit Package

Modules:
- psi: PageSpeed Insights client and Lighthouse extraction.
- ai_recommendations: offline suggestion generator used when the AI call fails.
- runner: AuditOrchestrator, the validate -> audit -> suggest pipeline.
- errors: exception taxonomy mapped to HTTP responses by the API router.
"""
from siteaudit.audit.runner import AuditOrchestrator

__all__ = ["AuditOrchestrator"]
