"""JavaScript/TypeScript rules: XSS sinks, leaked listeners and timers, size, console, var."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from cqc.extraction.body import balanced_block
from cqc.extraction.facts import ScriptFacts
from cqc.extraction.position import position_at
from cqc.rules.base import Finding, Rule

if TYPE_CHECKING:
    from cqc.extraction.facts import FunctionFacts, SourceUnit


_INNER_HTML_RE = re.compile(r"\.innerHTML\s*=\s*[^;]+")
_SAFE_HTML_MARKERS = ("escapeHtml", "sanitize", "textContent", "createTextNode")

_ADD_LISTENER_RE = re.compile(r"addEventListener\s*\(\s*['\"][^'\"]+['\"]")
_REMOVE_LISTENER_RE = re.compile(r"removeEventListener\s*\(\s*['\"][^'\"]+['\"]")
_SET_INTERVAL_RE = re.compile(r"setInterval\s*\(")
_SET_TIMEOUT_RE = re.compile(r"setTimeout\s*\(")
_CLEAR_INTERVAL_RE = re.compile(r"clearInterval\s*\(")
_CLEAR_TIMEOUT_RE = re.compile(r"clearTimeout\s*\(")

_CONSOLE_RE = re.compile(r"console\.(log|warn|error|info|debug)")
_VAR_RE = re.compile(r"\bvar\s+\w+")


class InnerHTMLXSSRule(Rule):
    """Flag ``innerHTML`` assignments unless the line shows an escaping step."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for m in _INNER_HTML_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            text = unit.snippet(line)
            if any(marker in text for marker in _SAFE_HTML_MARKERS):
                continue
            findings.append(
                self.finding(
                    unit,
                    line,
                    "innerHTML assignment may allow XSS",
                    column=column,
                    suggestion="Use textContent or escape the value before assigning it",
                )
            )
        return findings


class MemoryLeakRule(Rule):
    """Compare listener and timer registrations against their removals.

    When listeners are added more often than removed, the surplus is reported
    on the first ``adds - removes`` registrations.  When timers outnumber
    clears, every ``setInterval`` call is reported.
    """

    def check(self, unit: SourceUnit) -> list[Finding]:
        content = unit.content
        findings: list[Finding] = []

        adds = list(_ADD_LISTENER_RE.finditer(content))
        removes = len(_REMOVE_LISTENER_RE.findall(content))
        for m in adds[: max(0, len(adds) - removes)]:
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "Event listener is never removed, which may leak memory",
                    column=column,
                    suggestion="Call removeEventListener when the component is torn down",
                )
            )

        intervals = list(_SET_INTERVAL_RE.finditer(content))
        timers = len(intervals) + len(_SET_TIMEOUT_RE.findall(content))
        clears = len(_CLEAR_INTERVAL_RE.findall(content)) + len(
            _CLEAR_TIMEOUT_RE.findall(content)
        )
        if timers > clears:
            for m in intervals:
                line, column = position_at(content, m.start())
                findings.append(
                    self.finding(
                        unit,
                        line,
                        "Timer is never cleared, which may leak memory",
                        column=column,
                        suggestion="Call clearInterval or clearTimeout on teardown",
                    )
                )
        return findings


def function_length(unit: SourceUnit, function: FunctionFacts) -> int:
    """Number of lines spanned by *function*'s body, 0 when it cannot be bounded."""
    body = balanced_block(unit.content, function.body_offset)
    return body.count("\n") + 1 if body else 0


class FunctionLengthRule(Rule):
    """Flag functions longer than ``max_lines`` (default 30)."""

    DEFAULT_MAX_LINES = 30

    def check(self, unit: SourceUnit) -> list[Finding]:
        if not isinstance(unit.facts, ScriptFacts):
            return []
        max_lines = self.config.custom_int("max_lines", self.DEFAULT_MAX_LINES)
        findings: list[Finding] = []
        for function in unit.facts.functions:
            length = function_length(unit, function)
            if length <= max_lines:
                continue
            findings.append(
                self.finding(
                    unit,
                    function.line,
                    f"Function is too long ({function.name}: {length} lines)",
                    column=function.column,
                    suggestion="Split the function into smaller units",
                )
            )
        return findings


class ConsoleLogRule(Rule):
    """Flag ``console.*`` output calls."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for m in _CONSOLE_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    f"console.{m.group(1)} usage found",
                    column=column,
                    suggestion="Use a logging library or remove the call for production",
                )
            )
        return findings


class VarUsageRule(Rule):
    """Flag ``var`` declarations outside line comments."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for m in _VAR_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            text = unit.lines[line - 1]
            comment = text.find("//")
            if comment != -1 and comment < column - 1:
                continue
            findings.append(
                self.finding(
                    unit,
                    line,
                    "var declaration found",
                    column=column,
                    suggestion="Use let or const instead",
                )
            )
        return findings
