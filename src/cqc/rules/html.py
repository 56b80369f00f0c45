"""HTML rules: image alt text, accessibility of interactive elements, SEO basics."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from cqc.extraction.facts import MarkupFacts
from cqc.extraction.position import position_at
from cqc.rules.base import Finding, Rule

if TYPE_CHECKING:
    from cqc.extraction.facts import SourceUnit


class ImgAltRule(Rule):
    """Flag ``<img>`` tags whose ``alt`` attribute is missing or blank."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        if not isinstance(unit.facts, MarkupFacts):
            return []
        findings: list[Finding] = []
        for image in unit.facts.images:
            if image.alt is not None and image.alt.strip():
                continue
            findings.append(
                self.finding(
                    unit,
                    image.line or 1,
                    "img tag is missing a non-empty alt attribute",
                    column=0,
                    suggestion="Add a meaningful alt attribute to the img tag",
                    snippet=image.tag,
                )
            )
        return findings


# ---------------------------------------------------------------------------
# Accessibility
# ---------------------------------------------------------------------------

_CLICKABLE_DIV_RE = re.compile(r"<div[^>]*onclick[^>]*>", re.IGNORECASE)
_BUTTON_RE = re.compile(r"<button[^>]*>", re.IGNORECASE)
_BUTTON_CLOSE_RE = re.compile(r"</button\s*>", re.IGNORECASE)
_INPUT_RE = re.compile(r"<input[^>]*>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
_INPUT_TYPE_RE = re.compile(r"type\s*=\s*[\"']?(\w+)", re.IGNORECASE)
_ID_ATTR_RE = re.compile(r"\bid\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE)

# Input types that carry no user-entered value or label their own content.
_UNLABELLED_INPUT_TYPES: frozenset[str] = frozenset(
    {"hidden", "submit", "button", "reset", "image"}
)


def _button_text(content: str, tag_end: int) -> str:
    """Visible text between a button open tag ending at *tag_end* and its close tag."""
    close = _BUTTON_CLOSE_RE.search(content, tag_end)
    if close is None:
        return ""
    return _TAG_RE.sub("", content[tag_end : close.start()]).strip()


def _has_label_for(content: str, element_id: str) -> bool:
    pattern = re.compile(
        r"<label[^>]*\bfor\s*=\s*[\"']" + re.escape(element_id) + r"[\"']", re.IGNORECASE
    )
    return pattern.search(content) is not None


class AccessibilityRule(Rule):
    """Flag clickable ``div``s, unlabeled buttons and inputs without an accessible label."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        content = unit.content
        findings: list[Finding] = []

        for m in _CLICKABLE_DIV_RE.finditer(content):
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "div element uses onclick",
                    column=column,
                    suggestion="Use a button element or add a role and ARIA attributes",
                )
            )

        for m in _BUTTON_RE.finditer(content):
            tag = m.group(0)
            if "aria-label" in tag or _button_text(content, m.end()):
                continue
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "button element has no accessible text",
                    column=column,
                    suggestion="Add an aria-label attribute or visible button text",
                    snippet=tag,
                )
            )

        for m in _INPUT_RE.finditer(content):
            tag = m.group(0)
            if "aria-label" in tag:  # covers aria-labelledby
                continue
            input_type = _INPUT_TYPE_RE.search(tag)
            if input_type is not None and input_type.group(1).lower() in _UNLABELLED_INPUT_TYPES:
                continue
            element_id = _ID_ATTR_RE.search(tag)
            if element_id is not None and _has_label_for(content, element_id.group(1)):
                continue
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "input element has no associated label",
                    column=column,
                    suggestion="Use a label element or add an aria-label attribute",
                )
            )
        return findings


# ---------------------------------------------------------------------------
# SEO
# ---------------------------------------------------------------------------

_TITLE_RE = re.compile(r"<title[^>]*>[\s\S]*?</title>", re.IGNORECASE)
_META_DESCRIPTION_RE = re.compile(
    r"<meta[^>]*name\s*=\s*[\"']description[\"'][^>]*>", re.IGNORECASE
)
_H1_RE = re.compile(r"<h1[^>]*>", re.IGNORECASE)
_MAX_EXTRA_H1_REPORTS = 3


class SEORule(Rule):
    """Check for a title, a meta description and exactly one ``<h1>``."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        content = unit.content
        findings: list[Finding] = []

        if _TITLE_RE.search(content) is None:
            findings.append(
                self.finding(
                    unit,
                    1,
                    "title tag is missing",
                    suggestion="Add a <title> tag to the head section",
                    snippet="<title>Page title</title>",
                )
            )

        if _META_DESCRIPTION_RE.search(content) is None:
            findings.append(
                self.finding(
                    unit,
                    1,
                    "meta description is missing",
                    suggestion='Add <meta name="description" content="..."> to the head section',
                    snippet='<meta name="description" content="Page description">',
                )
            )

        headings = list(_H1_RE.finditer(content))
        if not headings:
            findings.append(
                self.finding(
                    unit,
                    1,
                    "h1 tag is missing",
                    suggestion="Use an h1 tag for the main page heading",
                    snippet="<h1>Main heading</h1>",
                )
            )
        for m in headings[1 : 1 + _MAX_EXTRA_H1_REPORTS]:
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "Multiple h1 tags are used",
                    column=column,
                    suggestion="Use h2, h3 and lower levels for secondary headings",
                )
            )
        return findings
