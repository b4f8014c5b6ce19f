# siteaudit/api/router.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from siteaudit.audit.errors import InvalidInput
from siteaudit.audit.runner import AuditOrchestrator
from siteaudit.settings import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()

GENERIC_FAILURE = "Failed to audit website. Please try again."


def get_orchestrator(settings: Settings = Depends(get_settings)) -> AuditOrchestrator:
    return AuditOrchestrator(settings)


async def _read_json(request: Request) -> Dict[str, Any]:
    """Missing or non-JSON bodies are treated as an empty object."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except (ValueError, RecursionError):
        return {}
    return body if isinstance(body, dict) else {}


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("/api/audit")
async def audit_once(request: Request, orchestrator: AuditOrchestrator = Depends(get_orchestrator)):
    """
    Single-run audit returning final JSON
    Input: {"url": "https://example.com"}
    """
    url = None
    try:
        body = await _read_json(request)
        url = body.get("url")
        report = await orchestrator.audit(url)
    except InvalidInput as e:
        return error_response(str(e), 400)
    except Exception:
        logger.exception("Audit error for %r", url)
        return error_response(GENERIC_FAILURE, 500)

    return JSONResponse(report.to_json())
