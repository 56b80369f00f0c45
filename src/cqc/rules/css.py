"""CSS rules: selector efficiency, duplicated declarations, responsive layout."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from cqc.extraction.facts import StyleFacts
from cqc.extraction.position import position_at
from cqc.rules.base import Finding, Rule, Severity

if TYPE_CHECKING:
    from cqc.extraction.facts import SourceUnit


def _find_line(unit: SourceUnit, text: str) -> int:
    """First 1-based line containing *text*, or 1."""
    for idx, line in enumerate(unit.lines, start=1):
        if text in line:
            return idx
    return 1


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------

_MAX_SELECTOR_DEPTH = 4
_TAG_NAME_RE = re.compile(r"^[a-z]+$")
_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_RULE_BLOCK_RE = re.compile(r"([^{}]+)\s*\{([^{}]*)\}")
_WHITESPACE_RE = re.compile(r"\s+")


def is_overly_nested(selector: str) -> bool:
    return len(selector.split()) > _MAX_SELECTOR_DEPTH


def is_inefficient_descendant(selector: str) -> bool:
    """Tag-led selectors with more than three compound parts."""
    parts = selector.split()
    return len(parts) > 3 and _TAG_NAME_RE.match(parts[0]) is not None


def normalize_declarations(block: str) -> str:
    """Collapse whitespace and drop empty declarations, preserving order."""
    block = _WHITESPACE_RE.sub(" ", block).strip().strip(";")
    return ";".join(p.strip() for p in block.split(";") if p.strip())


class SelectorsRule(Rule):
    """Flag deep, universal, tag-led and multi-ID selectors plus duplicated declaration blocks."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        if not isinstance(unit.facts, StyleFacts):
            return []
        findings: list[Finding] = []
        for selector in unit.facts.selectors:
            findings.extend(self._check_selector(unit, selector))
        findings.extend(self._duplicate_blocks(unit))
        return findings

    def _check_selector(self, unit: SourceUnit, selector: str) -> list[Finding]:
        line = _find_line(unit, selector)
        problems: list[tuple[str, str]] = []
        if is_overly_nested(selector):
            problems.append(
                ("CSS selector is nested too deeply", "Reduce selector nesting to three levels")
            )
        if "*" in selector:
            problems.append(("Universal selector (*) is used", "Use a more specific selector"))
        if is_inefficient_descendant(selector):
            problems.append(
                ("Inefficient descendant selector", "Start the selector with a class or an ID")
            )
        if selector.count("#") > 1:
            problems.append(
                ("Multiple ID selectors are combined", "Use a single ID or a class selector")
            )
        return [
            self.finding(unit, line, message, column=0, suggestion=suggestion, snippet=selector)
            for message, suggestion in problems
        ]

    def _duplicate_blocks(self, unit: SourceUnit) -> list[Finding]:
        blocks: dict[str, list[str]] = {}
        for m in _RULE_BLOCK_RE.finditer(_COMMENT_RE.sub("", unit.content)):
            declarations = normalize_declarations(m.group(2))
            if declarations:
                blocks.setdefault(declarations, []).append(m.group(1).strip())

        findings: list[Finding] = []
        for declarations, selectors in blocks.items():
            if len(selectors) < 2:
                continue
            findings.append(
                self.finding(
                    unit,
                    _find_line(unit, selectors[0]),
                    "Duplicate CSS declarations found",
                    column=0,
                    suggestion="Move the shared declarations into a common class",
                    severity=Severity.MEDIUM,
                    category="performance",
                    snippet=f"{', '.join(selectors)} {{ {declarations} }}",
                )
            )
        return findings


# ---------------------------------------------------------------------------
# Responsive design
# ---------------------------------------------------------------------------

_MEDIA_QUERY_RE = re.compile(r"@media\s*\([^)]+\)")
_FIXED_WIDTH_RE = re.compile(r"width\s*:\s*\d+px")
_FLEX_GRID_RE = re.compile(r"display\s*:\s*(flex|grid)")
_LAYOUT_PROPERTY_RE = re.compile(r"(width|height|margin|padding|position)\s*:")
_PX_VALUE_RE = re.compile(r":\s*\d+px")
_PX_VALUE_THRESHOLD = 10
_MAX_PX_REPORTS = 3


class ResponsiveDesignRule(Rule):
    """Flag fixed widths without media queries, heavy ``px`` usage and float-era layouts."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        content = unit.content
        findings: list[Finding] = []

        if _FIXED_WIDTH_RE.search(content) and not _MEDIA_QUERY_RE.search(content):
            findings.append(
                self.finding(
                    unit,
                    1,
                    "Fixed widths are used without any media query",
                    suggestion="Add @media queries for different screen sizes",
                    snippet="@media (max-width: 768px) { /* mobile styles */ }",
                )
            )

        px_values = list(_PX_VALUE_RE.finditer(content))
        if len(px_values) > _PX_VALUE_THRESHOLD:
            for m in px_values[:_MAX_PX_REPORTS]:
                line, column = position_at(content, m.start())
                findings.append(
                    self.finding(
                        unit,
                        line,
                        "px units are used excessively",
                        column=column,
                        suggestion="Consider relative units such as em, rem, %, vw or vh",
                        severity=Severity.LOW,
                    )
                )

        if not _FLEX_GRID_RE.search(content) and _LAYOUT_PROPERTY_RE.search(content):
            findings.append(
                self.finding(
                    unit,
                    1,
                    "No modern layout technique (flexbox or grid) is used",
                    suggestion="Consider display: flex or display: grid",
                    severity=Severity.LOW,
                    snippet="display: flex; /* or */ display: grid;",
                )
            )
        return findings
