import pytest

from siteaudit.audit.ai_recommendations import fallback_suggestions
from siteaudit.report.format import (
    Segment,
    classify_score,
    clean_text,
    format_suggestions,
    section_icon,
    split_links,
)
from siteaudit.schemas import AuditMetrics, AuditResult, CategoryScores
from siteaudit.utils.numbers import to_percent


@pytest.mark.parametrize(
    "score, tier",
    [(0, "poor"), (69, "poor"), (70, "fair"), (89, "fair"), (90, "good"), (100, "good"), (-5, "poor"), (250, "good"), (89.9, "fair")],
)
def test_classify_score(score, tier):
    assert classify_score(score).name == tier


def test_classify_score_is_monotonic():
    order = {"poor": 0, "fair": 1, "good": 2}
    ranks = [order[classify_score(s).name] for s in range(-10, 111)]
    assert ranks == sorted(ranks)


def test_to_percent_rounds_half_up():
    assert to_percent(0.555) == 56
    assert to_percent(0.9) == 90
    assert to_percent(1) == 100


def test_clean_text_strips_headers_and_bold():
    assert clean_text("## **Performance** tips\n*note*") == "Performance tips\nnote"


def test_two_blocks_yield_two_sections():
    sections = format_suggestions("Performance\n- Defer JS\n\nSecurity\nUse HTTPS everywhere.")

    assert [s.title for s in sections] == ["Performance", "Security"]
    assert sections[0].lines[0].kind == "bullet"
    assert sections[0].lines[0].text == "Defer JS"
    assert sections[1].lines[0].kind == "paragraph"
    assert sections[1].lines[0].text == "Use HTTPS everywhere."


def test_leading_bullet_synthesizes_heading():
    sections = format_suggestions("- Compress images\n• Lazy-load video\n\nContent\nWrite better copy")

    assert sections[0].title == "Recommendations 1"
    assert [line.text for line in sections[0].lines] == ["Compress images", "Lazy-load video"]
    assert all(line.kind == "bullet" for line in sections[0].lines)
    assert sections[1].title == "Content"


def test_blank_lines_with_whitespace_split_sections():
    sections = format_suggestions("A\nbody\n   \n\nB\nbody")
    assert [s.title for s in sections] == ["A", "B"]


@pytest.mark.parametrize("text", ["", None, "\n\n\n", "   ", "#####", "**", "[](", "- \n\n-"])
def test_malformed_input_never_raises(text):
    sections = format_suggestions(text)
    assert isinstance(sections, list)


def test_empty_text_has_no_sections():
    assert format_suggestions("") == []
    assert format_suggestions("\n \n") == []


def test_fallback_text_sections():
    result = AuditResult(
        scores=CategoryScores(performance=0.4, accessibility=0.95, best_practices=0.95, seo=0.95),
        metrics=AuditMetrics(largest_contentful_paint=3000, total_blocking_time=100),
    )
    sections = format_suggestions(fallback_suggestions(result))

    assert [s.title for s in sections] == [
        "Website Audit Results",
        "🚀 Performance Improvements",
        "Recommendations 3",
    ]
    assert sections[1].icon == "zap"
    assert sections[2].lines[0].text.startswith("Optimize Largest Contentful Paint: Your LCP is 3000ms")


@pytest.mark.parametrize(
    "title, icon",
    [
        ("Performance Optimization", "zap"),
        ("Page Speed", "zap"),
        ("SEO Improvements", "search"),
        ("Accessibility Enhancements", "eye"),
        ("User Experience", "target"),
        ("Content & Design", "globe"),
        ("Security", "shield"),
        ("Quick Wins", "lightbulb"),
    ],
)
def test_section_icon(title, icon):
    assert section_icon(title)[0] == icon


def test_split_links():
    assert split_links("See [docs](https://web.dev) and [MDN](https://developer.mozilla.org).") == [
        Segment("See "),
        Segment("docs", href="https://web.dev"),
        Segment(" and "),
        Segment("MDN", href="https://developer.mozilla.org"),
        Segment("."),
    ]
    assert split_links("no links here") == [Segment("no links here")]
    assert split_links("") == []


def test_bullet_link_keeps_label_and_target():
    sections = format_suggestions("Tools\n- Measure with [label](http://x) today")
    line = sections[0].lines[0]

    assert line.kind == "bullet"
    assert line.text == "Measure with label today"
    links = [s for s in line.segments if s.is_link]
    assert links == [Segment("label", href="http://x")]


def test_nested_brackets_are_not_supported():
    # single-pass scan: the label runs to the first ']' and the rest stays text
    assert split_links("[a [b](http://y)](http://z)") == [
        Segment("a [b", href="http://y"),
        Segment("](http://z)"),
    ]
