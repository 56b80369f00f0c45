"""Structured JSON report."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cqc.analysis.result import AnalysisResult
    from cqc.rules.base import Finding


def finding_to_dict(finding: Finding) -> dict[str, object]:
    """Serialize a :class:`Finding`; empty suggestion and snippet are omitted."""
    data: dict[str, object] = {
        "rule_id": finding.rule_id,
        "file": finding.file_path,
        "line": finding.line,
        "column": finding.column,
        "severity": finding.severity.label,
        "category": finding.category,
        "message": finding.message,
        "description": finding.description,
    }
    if finding.suggestion:
        data["suggestion"] = finding.suggestion
    if finding.snippet:
        data["code_snippet"] = finding.snippet
    return data


def result_to_dict(result: AnalysisResult) -> dict[str, Any]:
    """Serialize an :class:`AnalysisResult` to a JSON-safe dict.

    Returns a dict with keys ``summary``, ``findings``, ``warnings``,
    ``started_at``, ``finished_at`` and ``duration`` (seconds).
    """
    return {
        "summary": {
            "total_files": result.total_files,
            "total_findings": result.total_findings,
            "severity_count": {
                severity.label: count
                for severity, count in sorted(result.severity_counts.items(), reverse=True)
            },
            "category_count": dict(sorted(result.category_counts.items())),
            "language_count": dict(sorted(result.language_counts.items())),
        },
        "findings": [finding_to_dict(f) for f in result.sorted_findings()],
        "warnings": list(result.warnings),
        "started_at": result.started_at.isoformat(),
        "finished_at": result.finished_at.isoformat() if result.finished_at else None,
        "duration": round(result.duration, 3),
    }


def format_json(result: AnalysisResult) -> str:
    return json.dumps(result_to_dict(result), indent=2, ensure_ascii=False)
