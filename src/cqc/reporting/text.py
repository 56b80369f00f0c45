"""Human-readable terminal report rendered with rich."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cqc.rules.base import Severity

if TYPE_CHECKING:
    from cqc.analysis.result import AnalysisResult
    from cqc.rules.base import Finding

# Findings listed per severity before the remainder is summarized.
MAX_FINDINGS_PER_SEVERITY = 10

_SEVERITY_STYLES: dict[Severity, tuple[str, str]] = {
    Severity.CRITICAL: ("\u2716", "red bold"),  # ✖
    Severity.HIGH: ("\u25c6", "red"),  # ◆
    Severity.MEDIUM: ("\u25b2", "yellow"),  # ▲
    Severity.LOW: ("\u25cf", "cyan"),  # ●
}

_ADVICE: dict[Severity, str] = {
    Severity.CRITICAL: "Critical findings need an immediate fix.",
    Severity.HIGH: "Fix High findings before the next release.",
    Severity.MEDIUM: "Improve Medium findings incrementally.",
}


def _finding_lines(finding: Finding) -> list[tuple[str, str]]:
    lines = [
        (f"  {finding.file_path}:{finding.line}:{finding.column}", "bold"),
        (f"     [{finding.rule_id}] {finding.message}", ""),
    ]
    if finding.suggestion:
        lines.append((f"     Suggestion: {finding.suggestion}", "green"))
    if finding.snippet:
        lines.append((f"     Code: {finding.snippet}", "dim"))
    return lines


def format_text(result: AnalysisResult, *, color: bool = True) -> str:
    """Render *result* as a terminal report.

    Produces output with:
    - Summary: files, findings and duration
    - Severity and category counts
    - Findings grouped Critical to Low, at most
      :data:`MAX_FINDINGS_PER_SEVERITY` per severity
    - File counts per language and severity-driven advice
    """
    from io import StringIO

    from rich.console import Console
    from rich.table import Table
    from rich.text import Text

    buf = StringIO()
    console = Console(file=buf, force_terminal=color, no_color=not color, width=100)

    # -- Header --
    console.print()
    console.rule("[bold]Code Quality Report[/bold]", style="blue")
    console.print()

    summary = Table(show_header=False, box=None, padding=(0, 1))
    summary.add_column("Label", style="bold")
    summary.add_column("Value", justify="right")
    summary.add_row("Files analyzed", str(result.total_files))
    summary.add_row("Findings", str(result.total_findings))
    summary.add_row("Duration", f"{result.duration:.2f}s")
    if result.warnings:
        summary.add_row("Skipped files", str(len(result.warnings)))
    console.print(summary)
    console.print()

    if not result.findings:
        console.print(Text("  No findings.", style="green bold"))
        console.print()
    else:
        # -- Counts --
        console.rule("By Severity", style="dim")
        for severity in sorted(Severity, reverse=True):
            count = result.count(severity)
            if count:
                indicator, style = _SEVERITY_STYLES[severity]
                console.print(Text(f"  {indicator} {severity.label}: {count}", style=style))
        console.print()

        console.rule("By Category", style="dim")
        for category, count in sorted(result.category_counts.items()):
            console.print(Text(f"  {category or 'uncategorized'}: {count}"))
        console.print()

        # -- Findings --
        console.rule("Findings", style="dim")
        console.print()
        grouped = result.group_by("severity")
        for severity in sorted(Severity, reverse=True):
            findings = grouped.get(severity.label, [])
            if not findings:
                continue
            indicator, style = _SEVERITY_STYLES[severity]
            console.print(
                Text(f"{indicator} {severity.name} ({len(findings)})", style=style)
            )
            for finding in findings[:MAX_FINDINGS_PER_SEVERITY]:
                for line, line_style in _finding_lines(finding):
                    console.print(Text(line, style=line_style))
                console.print()
            remaining = len(findings) - MAX_FINDINGS_PER_SEVERITY
            if remaining > 0:
                console.print(Text(f"  ... and {remaining} more", style="dim"))
                console.print()

    # -- Languages --
    if result.language_counts:
        console.rule("Files by Language", style="dim")
        for language, count in sorted(result.language_counts.items()):
            console.print(Text(f"  {language}: {count}"))
        console.print()

    # -- Warnings --
    if result.warnings:
        console.rule("Warnings", style="dim")
        for warning in result.warnings:
            console.print(Text(f"  {warning}", style="yellow"))
        console.print()

    # -- Advice --
    advice = [text for severity, text in _ADVICE.items() if result.count(severity)]
    if advice:
        console.rule("Recommendations", style="dim")
        for text in advice:
            console.print(Text(f"  {text}"))
        console.print()

    return buf.getvalue()
