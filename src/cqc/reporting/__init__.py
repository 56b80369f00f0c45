"""Reporting: text, JSON and HTML renderers for an analysis result."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cqc.reporting.html import format_html
from cqc.reporting.json_report import finding_to_dict, format_json, result_to_dict
from cqc.reporting.text import format_text

if TYPE_CHECKING:
    from cqc.analysis.result import AnalysisResult

FORMATS: tuple[str, ...] = ("text", "json", "html")


def render(result: AnalysisResult, fmt: str, *, color: bool = True) -> str:
    """Render *result* in one of :data:`FORMATS`."""
    if fmt == "json":
        return format_json(result)
    if fmt == "html":
        return format_html(result)
    if fmt == "text":
        return format_text(result, color=color)
    msg = f"Unknown report format '{fmt}', expected one of {list(FORMATS)}"
    raise ValueError(msg)


__all__ = [
    "FORMATS",
    "finding_to_dict",
    "format_html",
    "format_json",
    "format_text",
    "render",
    "result_to_dict",
]
