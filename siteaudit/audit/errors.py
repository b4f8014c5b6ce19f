# siteaudit/audit/errors.py
from typing import Optional


class AuditError(Exception):
    """Base class for everything the audit pipeline raises."""


class InvalidInput(AuditError):
    """The submitted URL is missing or malformed. Raised before any network call."""


class UpstreamAuditError(AuditError):
    """
    PageSpeed Insights could not produce a result: unreachable, non-2xx,
    unusable body, or the API key is not configured.
    status/body are kept for server-side logs only.
    """

    def __init__(self, message: str, status: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class SuggestionGenerationError(AuditError):
    """The text-generation service failed. Always recovered by the offline generator."""
