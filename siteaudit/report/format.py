# siteaudit/report/format.py
"""
Display helpers for audit results.

Suggestion text is untrusted free text (LLM or offline template). It is split
into sections with a few regexes, not parsed as markdown:
  - header markers and **bold** markers are stripped textually
  - blank lines separate sections
  - a line starting with '-' or '•' is a bullet, anything else a paragraph
  - [label](url) is pulled out as a link; no escaping, no nested brackets

Nothing here raises on odd input; at worst you get fewer sections.
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional

HEADER_RE = re.compile(r"#{1,6}\s*")
BOLD_RE = re.compile(r"\*{1,2}([^*]+)\*{1,2}")
BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
BULLET_PREFIX_RE = re.compile(r"^[-•]\s*")
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

BULLET_MARKERS = ("-", "•")


# ---------------------------
# Score tiers
# ---------------------------
@dataclass(frozen=True)
class ScoreTier:
    name: str
    color: str
    icon: str


GOOD = ScoreTier("good", "green", "check-circle")
FAIR = ScoreTier("fair", "yellow", "alert-circle")
POOR = ScoreTier("poor", "red", "x-circle")


def classify_score(score: float) -> ScoreTier:
    """0..100 score -> tier. Out-of-range values are classified, not rejected."""
    if score >= 90:
        return GOOD
    if score >= 70:
        return FAIR
    return POOR


# ---------------------------
# Suggestion sections
# ---------------------------
@dataclass(frozen=True)
class Segment:
    text: str
    href: Optional[str] = None

    @property
    def is_link(self) -> bool:
        return self.href is not None


@dataclass(frozen=True)
class Line:
    kind: str  # "bullet" | "paragraph"
    segments: List[Segment] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.segments)


@dataclass(frozen=True)
class Section:
    title: str
    icon: str
    color: str
    lines: List[Line] = field(default_factory=list)


def section_icon(title: str):
    """(icon, color) for a section heading, by keyword."""
    t = title.lower()
    if "performance" in t or "speed" in t:
        return "zap", "green"
    if "seo" in t or "search" in t:
        return "search", "blue"
    if "accessibility" in t or "access" in t:
        return "eye", "purple"
    if "user" in t or "ux" in t or "experience" in t:
        return "target", "pink"
    if "content" in t or "text" in t:
        return "globe", "orange"
    if "security" in t or "safe" in t:
        return "shield", "red"
    return "lightbulb", "indigo"


def split_links(text: str) -> List[Segment]:
    segments: List[Segment] = []
    last = 0
    for m in LINK_RE.finditer(text):
        if m.start() > last:
            segments.append(Segment(text[last:m.start()]))
        segments.append(Segment(m.group(1), href=m.group(2)))
        last = m.end()
    if last < len(text):
        segments.append(Segment(text[last:]))
    return segments


def _is_bullet(line: str) -> bool:
    return line.startswith(BULLET_MARKERS)


def _render_line(raw: str) -> Optional[Line]:
    line = raw.strip()
    if not line:
        return None
    if _is_bullet(line):
        return Line("bullet", split_links(BULLET_PREFIX_RE.sub("", line)))
    return Line("paragraph", split_links(line))


def clean_text(text: str) -> str:
    text = HEADER_RE.sub("", text)
    text = BOLD_RE.sub(r"\1", text)
    return text.strip()


def format_suggestions(text: Optional[str]) -> List[Section]:
    if not text:
        return []

    blocks = [b for b in BLOCK_SPLIT_RE.split(clean_text(text)) if b.strip()]

    sections: List[Section] = []
    for index, block in enumerate(blocks):
        lines = [ln for ln in block.split("\n") if ln.strip()]
        if not lines:
            continue

        title = lines[0].strip()
        body = lines[1:]
        if _is_bullet(title):
            title = f"Recommendations {index + 1}"
            body = lines

        icon, color = section_icon(title)
        rendered = [r for r in (_render_line(ln) for ln in body) if r is not None]
        sections.append(Section(title=title, icon=icon, color=color, lines=rendered))
    return sections
