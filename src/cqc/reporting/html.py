"""Self-contained HTML report with overview, rule, severity and file tabs."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

from cqc.rules.base import Severity

if TYPE_CHECKING:
    from cqc.analysis.result import AnalysisResult
    from cqc.rules.base import Finding

_STYLE = """
body { font-family: -apple-system, "Segoe UI", Roboto, sans-serif; margin: 0;
       background: #f5f5f5; color: #2c3e50; }
.container { max-width: 1200px; margin: 0 auto; padding: 20px; }
header { background: #2c3e50; color: white; padding: 20px; border-radius: 8px;
         margin-bottom: 20px; }
.tabs { background: white; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
.tab-buttons { display: flex; border-bottom: 1px solid #ddd; }
.tab-button { padding: 15px 20px; background: none; border: none; cursor: pointer;
              font-size: 16px; border-bottom: 3px solid transparent; }
.tab-button.active { background: #3498db; color: white; border-bottom-color: #2980b9; }
.tab-content { padding: 20px; min-height: 400px; }
.tab-pane { display: none; }
.tab-pane.active { display: block; }
.stats { display: flex; flex-wrap: wrap; gap: 16px; margin-bottom: 20px; }
.stat { background: #ecf0f1; border-radius: 8px; padding: 16px; min-width: 140px;
        text-align: center; }
.group { margin-bottom: 24px; }
.finding { border-left: 4px solid #bdc3c7; background: #fafafa; padding: 8px 12px;
           margin: 8px 0; }
.finding.critical { border-left-color: #c0392b; }
.finding.high { border-left-color: #e74c3c; }
.finding.medium { border-left-color: #f39c12; }
.finding.low { border-left-color: #3498db; }
.severity-badge { font-size: 12px; padding: 2px 8px; border-radius: 4px; color: white; }
.severity-badge.critical { background: #c0392b; }
.severity-badge.high { background: #e74c3c; }
.severity-badge.medium { background: #f39c12; }
.severity-badge.low { background: #3498db; }
.location { color: #7f8c8d; font-family: monospace; }
pre { background: #2c3e50; color: #ecf0f1; padding: 8px; border-radius: 4px;
      overflow-x: auto; }
"""

_SCRIPT = """
function showTab(name) {
  document.querySelectorAll('.tab-button').forEach(function (b) {
    b.classList.toggle('active', b.dataset.tab === name);
  });
  document.querySelectorAll('.tab-pane').forEach(function (p) {
    p.classList.toggle('active', p.id === name + '-tab');
  });
}
"""

_TABS: tuple[tuple[str, str], ...] = (
    ("overview", "Overview"),
    ("rules", "By Rule"),
    ("severity", "By Severity"),
    ("files", "By File"),
)


def _badge(severity: Severity) -> str:
    css = severity.name.lower()
    return f'<span class="severity-badge {css}">{severity.name}</span>'


def _stat(value: int | str, label: str) -> str:
    return f'<div class="stat"><h3>{escape(str(value))}</h3><p>{escape(label)}</p></div>'


def _finding_html(finding: Finding, *, show_file: bool = True) -> str:
    location = f"{finding.file_path}:{finding.line}:{finding.column}"
    if not show_file:
        location = f"line {finding.line}, column {finding.column}"
    parts = [
        f'<div class="finding {finding.severity.name.lower()}">',
        f"<h4>{escape(finding.message)} {_badge(finding.severity)}</h4>",
        f'<p class="location">{escape(location)} [{escape(finding.rule_id)}]</p>',
    ]
    if finding.description:
        parts.append(f"<p>{escape(finding.description)}</p>")
    if finding.suggestion:
        parts.append(f"<p><strong>Suggestion:</strong> {escape(finding.suggestion)}</p>")
    if finding.snippet:
        parts.append(f"<pre>{escape(finding.snippet)}</pre>")
    parts.append("</div>")
    return "\n".join(parts)


def _overview_tab(result: AnalysisResult) -> str:
    stats = [
        _stat(result.total_files, "Files analyzed"),
        _stat(result.total_findings, "Findings"),
        _stat(f"{result.duration:.2f}s", "Duration"),
    ]
    stats.extend(
        _stat(result.count(severity), severity.label) for severity in sorted(Severity, reverse=True)
    )
    parts = ['<div class="stats">', *stats, "</div>"]
    if result.language_counts:
        parts.append("<h3>Files by language</h3>")
        parts.append('<div class="stats">')
        parts.extend(_stat(count, lang) for lang, count in sorted(result.language_counts.items()))
        parts.append("</div>")
    if result.category_counts:
        parts.append("<h3>Findings by category</h3>")
        parts.append('<div class="stats">')
        parts.extend(
            _stat(count, cat or "uncategorized")
            for cat, count in sorted(result.category_counts.items())
        )
        parts.append("</div>")
    if result.warnings:
        parts.append("<h3>Skipped files</h3><ul>")
        parts.extend(f"<li>{escape(w)}</li>" for w in result.warnings)
        parts.append("</ul>")
    return "\n".join(parts)


def _grouped_tab(result: AnalysisResult, key: str) -> str:
    groups = result.group_by(key)
    if not groups:
        return "<p>No findings.</p>"
    parts: list[str] = []
    for name, findings in groups.items():
        heading = escape(name)
        if key == "severity":
            heading = _badge(findings[0].severity)
        parts.append('<div class="group">')
        parts.append(f"<h3>{heading} ({len(findings)})</h3>")
        parts.extend(_finding_html(f, show_file=key != "file") for f in findings)
        parts.append("</div>")
    return "\n".join(parts)


def format_html(result: AnalysisResult) -> str:
    """Render *result* as a standalone HTML page."""
    panes = {
        "overview": _overview_tab(result),
        "rules": _grouped_tab(result, "rule"),
        "severity": _grouped_tab(result, "severity"),
        "files": _grouped_tab(result, "file"),
    }
    buttons = "\n".join(
        f'<button class="tab-button{" active" if idx == 0 else ""}" data-tab="{name}" '
        f"onclick=\"showTab('{name}')\">{label}</button>"
        for idx, (name, label) in enumerate(_TABS)
    )
    content = "\n".join(
        f'<div id="{name}-tab" class="tab-pane{" active" if idx == 0 else ""}">'
        f"<h2>{label}</h2>\n{panes[name]}\n</div>"
        for idx, (name, label) in enumerate(_TABS)
    )
    generated = escape(result.started_at.strftime("%Y-%m-%d %H:%M:%S %Z"))
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Code Quality Report</title>
<style>{_STYLE}</style>
</head>
<body>
<div class="container">
<header><h1>Code Quality Report</h1>
<p>Generated {generated}</p></header>
<div class="tabs">
<div class="tab-buttons">
{buttons}
</div>
<div class="tab-content">
{content}
</div>
</div>
</div>
<script>{_SCRIPT}</script>
</body>
</html>
"""
