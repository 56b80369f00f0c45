"""Tests for cqc.rules.html."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cqc.extraction.facts import SourceUnit
from cqc.rules.html import AccessibilityRule, ImgAltRule, SEORule

if TYPE_CHECKING:
    from collections.abc import Callable

    from cqc.rules.base import RuleConfig


def _unit(content: str) -> SourceUnit:
    return SourceUnit.from_text("index.html", "html", content)


class TestImgAltRule:
    def test_missing_and_blank_alt(self, rule_config: Callable[..., RuleConfig]) -> None:
        content = (
            "<body>\n"
            '<img src="a.png">\n'
            '<img src="b.png" alt=" ">\n'
            '<img src="c.png" alt="Logo">\n'
            "</body>\n"
        )
        findings = ImgAltRule(rule_config("html-img-alt")).check(_unit(content))
        assert [(f.line, f.column) for f in findings] == [(2, 0), (3, 0)]
        assert findings[0].snippet == '<img src="a.png">'

    def test_wrong_facts(self, rule_config: Callable[..., RuleConfig]) -> None:
        unit = SourceUnit.from_text("a.css", "css", ".a { }")
        assert ImgAltRule(rule_config("html-img-alt")).check(unit) == []


class TestAccessibilityRule:
    def test_clickable_div(self, rule_config: Callable[..., RuleConfig]) -> None:
        content = '<div class="card" onClick="open()">Open</div>\n'
        findings = AccessibilityRule(rule_config("html-accessibility")).check(_unit(content))
        assert [f.message for f in findings] == ["div element uses onclick"]

    def test_buttons(self, rule_config: Callable[..., RuleConfig]) -> None:
        content = (
            "<button></button>\n"
            "<button>Save</button>\n"
            '<button aria-label="Close"></button>\n'
            "<button><span>OK</span></button>\n"
            '<button class="icon"><i class="x"></i></button>\n'
        )
        findings = AccessibilityRule(rule_config("html-accessibility")).check(_unit(content))
        assert [f.line for f in findings] == [1, 5]
        assert all(f.message == "button element has no accessible text" for f in findings)

    def test_inputs(self, rule_config: Callable[..., RuleConfig]) -> None:
        content = (
            '<input type="text" name="q">\n'
            '<input type="hidden" name="token">\n'
            '<label for="email">Email</label><input id="email" type="email">\n'
            '<input type="search" aria-labelledby="search-title">\n'
            '<input id="phone" type="tel">\n'
        )
        findings = AccessibilityRule(rule_config("html-accessibility")).check(_unit(content))
        assert [f.line for f in findings] == [1, 5]
        assert all(f.message == "input element has no associated label" for f in findings)


class TestSEORule:
    def test_empty_document(self, rule_config: Callable[..., RuleConfig]) -> None:
        findings = SEORule(rule_config("html-seo")).check(_unit("<html></html>\n"))
        assert [f.message for f in findings] == [
            "title tag is missing",
            "meta description is missing",
            "h1 tag is missing",
        ]
        assert all(f.line == 1 for f in findings)

    def test_complete_document(self, rule_config: Callable[..., RuleConfig]) -> None:
        content = (
            "<html><head>\n"
            "<title>Shop</title>\n"
            '<meta name="description" content="Everything for sale">\n'
            "</head><body>\n"
            "<h1>Shop</h1>\n"
            "</body></html>\n"
        )
        assert SEORule(rule_config("html-seo")).check(_unit(content)) == []

    def test_extra_headings_are_capped(self, rule_config: Callable[..., RuleConfig]) -> None:
        headings = "".join(f"<h1>Part {i}</h1>\n" for i in range(6))
        content = (
            '<title>T</title><meta name="description" content="d">\n' + headings
        )
        findings = SEORule(rule_config("html-seo")).check(_unit(content))
        assert [f.line for f in findings] == [3, 4, 5]
        assert all(f.message == "Multiple h1 tags are used" for f in findings)
