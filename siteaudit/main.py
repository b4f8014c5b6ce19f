# siteaudit/main.py
import logging
import os
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from siteaudit.api.router import GENERIC_FAILURE, get_orchestrator, router
from siteaudit.audit.errors import InvalidInput
from siteaudit.audit.runner import AuditOrchestrator
from siteaudit.report.format import classify_score, format_suggestions
from siteaudit.services.logger import configure_logging
from siteaudit.settings import get_settings
from siteaudit.utils.numbers import to_percent

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# ---------------------------
# Paths & Templates
# ---------------------------
APP_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = APP_DIR / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


# ---------------------------
# FastAPI App
# ---------------------------
app = FastAPI(title=settings.APP_NAME, version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


SCORE_LABELS = [
    ("performance", "Performance"),
    ("accessibility", "Accessibility"),
    ("best_practices", "Best Practices"),
    ("seo", "SEO"),
]


def _score_cards(scores):
    cards = []
    for attr, label in SCORE_LABELS:
        value = to_percent(getattr(scores, attr))
        cards.append({"label": label, "score": value, "tier": classify_score(value)})
    return cards


# ---------------------------
# Routes
# ---------------------------
@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    return templates.TemplateResponse(request, "index.html", {"url": "", "error": None})


@app.get("/healthz")
async def healthz():
    return {"ok": True, "app": "siteaudit"}


@app.get("/report", response_class=HTMLResponse)
async def report(
    request: Request,
    url: Optional[str] = None,
    orchestrator: AuditOrchestrator = Depends(get_orchestrator),
):
    """
    Server-rendered results page: same pipeline as POST /api/audit.
    """
    try:
        result = await orchestrator.audit(url)
    except InvalidInput as e:
        return templates.TemplateResponse(
            request, "index.html", {"url": url or "", "error": str(e)}, status_code=400
        )
    except Exception:
        logger.exception("Audit error for %r", url)
        return templates.TemplateResponse(
            request, "index.html", {"url": url or "", "error": GENERIC_FAILURE}, status_code=500
        )

    return templates.TemplateResponse(
        request,
        "report.html",
        {
            "report": result,
            "cards": _score_cards(result.lighthouse),
            "sections": format_suggestions(result.suggestions),
        },
    )


# ---------------------------
# Run Uvicorn (local dev)
# ---------------------------
if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("siteaudit.main:app", host="0.0.0.0", port=port, reload=True)
