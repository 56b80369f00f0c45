"""Run-level aggregation of findings and summary counts."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from cqc.rules.base import Severity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from cqc.rules.base import Finding

GROUP_KEYS: tuple[str, ...] = ("rule", "file", "severity")


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class AnalysisResult:
    """Findings of one run plus counts by severity, category and language.

    Mutated only by the thread that owns the run; workers hand their
    per-file findings back to it.
    """

    findings: list[Finding] = field(default_factory=list)
    total_files: int = 0  # files examined, unreadable ones included
    severity_counts: Counter[Severity] = field(default_factory=Counter)
    category_counts: Counter[str] = field(default_factory=Counter)
    language_counts: Counter[str] = field(default_factory=Counter)
    warnings: list[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=_now)
    finished_at: datetime | None = None

    # -- Mutation ----------------------------------------------------------

    def add_file(self, language: str | None, findings: Iterable[Finding]) -> None:
        """Fold one analyzed file's findings into the totals."""
        self.total_files += 1
        if language:
            self.language_counts[language] += 1
        for finding in findings:
            self.findings.append(finding)
            self.severity_counts[finding.severity] += 1
            self.category_counts[finding.category] += 1

    def add_warning(self, path: str, message: str) -> None:
        """Record a file that could not be analyzed."""
        self.total_files += 1
        self.warnings.append(f"{path}: {message}")

    def finalize(self) -> None:
        self.finished_at = _now()

    # -- Queries -----------------------------------------------------------

    @property
    def total_findings(self) -> int:
        return len(self.findings)

    @property
    def duration(self) -> float:
        """Elapsed seconds; measured up to now while the run is in progress."""
        end = self.finished_at or _now()
        return (end - self.started_at).total_seconds()

    def count(self, severity: Severity) -> int:
        return self.severity_counts.get(severity, 0)

    def has_critical(self) -> bool:
        return self.count(Severity.CRITICAL) > 0

    def sorted_findings(self) -> list[Finding]:
        """Findings from Critical down to Low, then by file and line."""
        return sorted(self.findings, key=lambda f: (-f.severity, f.file_path, f.line, f.column))

    def group_by(self, key: str) -> dict[str, list[Finding]]:
        """Group sorted findings by ``"rule"``, ``"file"`` or ``"severity"``.

        Groups keep the order in which their first finding appears in
        :meth:`sorted_findings`; severity groups are keyed by label.
        """
        getters: dict[str, Callable[[Finding], str]] = {
            "rule": lambda f: f.rule_id,
            "file": lambda f: f.file_path,
            "severity": lambda f: f.severity.label,
        }
        getter = getters.get(key)
        if getter is None:
            msg = f"Unknown group key '{key}', expected one of {list(GROUP_KEYS)}"
            raise ValueError(msg)
        groups: dict[str, list[Finding]] = {}
        for finding in self.sorted_findings():
            groups.setdefault(getter(finding), []).append(finding)
        return groups
