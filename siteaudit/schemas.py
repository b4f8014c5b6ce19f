from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    # Wire format is camelCase (bestPractices, pageInfo, ...); Python side stays snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CategoryScores(_CamelModel):
    performance: float = 0.0
    accessibility: float = 0.0
    best_practices: float = 0.0
    seo: float = 0.0


class AuditMetrics(_CamelModel):
    first_contentful_paint: float = 0.0
    largest_contentful_paint: float = 0.0
    first_input_delay: float = 0.0
    cumulative_layout_shift: float = 0.0
    speed_index: float = 0.0
    total_blocking_time: float = 0.0


class PageInfo(_CamelModel):
    title: str = "No title"
    description: str = "No description"
    screenshot: str = ""


class Opportunity(_CamelModel):
    id: str
    title: str = ""
    description: str = ""
    savings: float = 0.0


class Diagnostic(_CamelModel):
    id: str
    title: str = ""
    description: str = ""
    display_value: str = ""


class AuditResult(_CamelModel):
    """Normalized Lighthouse data for one audited page. Immutable once built."""

    scores: CategoryScores = CategoryScores()
    metrics: AuditMetrics = AuditMetrics()
    page_info: PageInfo = PageInfo()
    opportunities: List[Opportunity] = []
    diagnostics: List[Diagnostic] = []


class AuditReport(_CamelModel):
    """Combined result returned by POST /api/audit."""

    url: str
    lighthouse: CategoryScores
    metrics: AuditMetrics
    page_info: PageInfo
    opportunities: List[Opportunity]
    diagnostics: List[Diagnostic]
    suggestions: str

    @classmethod
    def build(cls, url: str, result: AuditResult, suggestions: str) -> "AuditReport":
        return cls(
            url=url,
            lighthouse=result.scores,
            metrics=result.metrics,
            page_info=result.page_info,
            opportunities=result.opportunities,
            diagnostics=result.diagnostics,
            suggestions=suggestions,
        )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)
