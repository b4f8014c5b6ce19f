import re

import pytest
from aioresponses import aioresponses
from fastapi.testclient import TestClient

from siteaudit.api.router import get_orchestrator
from siteaudit.audit.runner import AuditOrchestrator
from siteaudit.settings import Settings

PSI_URL_RE = re.compile(r"^https://www\.googleapis\.com/pagespeedonline/v5/runPagespeed.*$")
OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"


def make_settings(**overrides) -> Settings:
    values = {
        "GOOGLE_PAGESPEED_API_KEY": "psi-test-key",
        "OPENROUTER_API_KEY": "or-test-key",
        "PSI_TIMEOUT": 5.0,
        "LLM_TIMEOUT": 5.0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_psi_payload(
    performance=0.55,
    accessibility=0.8,
    best_practices=0.92,
    seo=0.7,
    audits=None,
    screenshot=None,
):
    if audits is None:
        audits = {
            "first-contentful-paint": {"numericValue": 1200.4},
            "largest-contentful-paint": {"numericValue": 3100.6},
            "max-potential-fid": {"numericValue": 140.0},
            "cumulative-layout-shift": {"numericValue": 0.12345},
            "speed-index": {"numericValue": 2800.0},
            "total-blocking-time": {"numericValue": 350.0},
            "document-title": {"displayValue": "Example Domain"},
            "meta-description": {"displayValue": "An example page"},
            "render-blocking-resources": {
                "title": "Eliminate render-blocking resources",
                "description": "Resources are blocking the first paint.",
                "numericValue": 450.5,
                "details": {"type": "opportunity"},
            },
            "uses-text-compression": {
                "title": "Enable text compression",
                "description": "Serve text with gzip.",
                "numericValue": 0,
                "details": {"type": "opportunity"},
            },
            "image-alt": {
                "title": "Image elements do not have [alt] attributes",
                "description": "Informative elements should have alt text.",
                "score": 0,
                "scoreDisplayMode": "binary",
            },
            "html-has-lang": {
                "title": "<html> element has a [lang] attribute",
                "description": "Set a lang attribute.",
                "score": 1,
                "scoreDisplayMode": "binary",
            },
        }
    categories = {
        "performance": {"score": performance},
        "accessibility": {"score": accessibility},
        "best-practices": {"score": best_practices},
        "seo": {"score": seo},
    }
    lighthouse = {"categories": categories, "audits": audits}
    if screenshot is not None:
        lighthouse["fullPageScreenshot"] = {"screenshot": {"data": screenshot}}
    return {"lighthouseResult": lighthouse}


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def mock_http():
    with aioresponses() as m:
        yield m


@pytest.fixture
def client(settings):
    from siteaudit.main import app

    app.dependency_overrides[get_orchestrator] = lambda: AuditOrchestrator(settings)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def sent_requests(m, method):
    """All recorded aioresponses calls for an HTTP method, in call order."""
    calls = []
    for (meth, _url), items in m.requests.items():
        if meth == method:
            calls.extend(items)
    return calls
