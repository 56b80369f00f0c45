"""Evaluation pipeline: read files, build facts, run rules, aggregate findings."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cqc.analysis.discovery import collect_files, detect_language
from cqc.analysis.result import AnalysisResult
from cqc.extraction.facts import SourceUnit
from cqc.rules.registry import RuleRegistry

if TYPE_CHECKING:
    import threading
    from collections.abc import Sequence
    from pathlib import Path

    from cqc.analysis.config import Config
    from cqc.rules.base import Finding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileReport:
    """Outcome of analyzing one file."""

    path: str
    language: str | None
    findings: tuple[Finding, ...] = ()
    error: str | None = None  # set when the file could not be read or analyzed


def analyze_source(
    path: str, language: str | None, content: str, registry: RuleRegistry
) -> list[Finding]:
    """Build facts for *content* and run every rule registered for *language*."""
    if language is None:
        return []
    unit = SourceUnit.from_text(path, language, content)
    return registry.check_file(unit)


def analyze_file(path: Path, registry: RuleRegistry) -> FileReport:
    """Read *path* once and evaluate it.

    Bytes that are not valid UTF-8 are replaced rather than rejected, so
    legacy-encoded sources are still analyzed.  Unreadable files, and files
    whose analysis fails, produce a report carrying ``error`` instead of
    raising.
    """
    language = detect_language(path)
    if language is None:
        logger.debug("Unsupported file type, skipped: %s", path)
        return FileReport(path=str(path), language=None)
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Cannot read file: %s", path)
        return FileReport(path=str(path), language=language, error=str(exc))
    try:
        findings = analyze_source(str(path), language, content, registry)
    except Exception as exc:
        logger.exception("Analysis failed: %s", path)
        return FileReport(path=str(path), language=language, error=f"analysis failed: {exc}")
    return FileReport(path=str(path), language=language, findings=tuple(findings))


def _default_jobs() -> int:
    return os.cpu_count() or 1


def analyze(
    paths: Sequence[Path],
    registry: RuleRegistry,
    *,
    jobs: int | None = None,
    cancel: threading.Event | None = None,
) -> AnalysisResult:
    """Evaluate *paths* in a bounded worker pool and aggregate the findings.

    Parameters
    ----------
    paths:
        Files to analyze, typically from :func:`collect_files`.
    registry:
        Rules to run, built once per run.
    jobs:
        Worker count; defaults to the number of CPUs.
    cancel:
        When set, files that have not started yet are skipped.  Files
        already in flight finish normally.

    Returns
    -------
    AnalysisResult
        Findings in input-file order, each file's findings in rule
        registration order.
    """
    result = AnalysisResult()
    workers = max(1, jobs if jobs is not None else _default_jobs())

    def work(path: Path) -> FileReport | None:
        if cancel is not None and cancel.is_set():
            return None
        return analyze_file(path, registry)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        reports = list(executor.map(work, paths))

    skipped = 0
    for report in reports:
        if report is None:
            skipped += 1
        elif report.error is not None:
            result.add_warning(report.path, report.error)
        else:
            result.add_file(report.language, report.findings)
    if skipped:
        logger.info("Analysis cancelled, %d files not analyzed", skipped)

    result.finalize()
    logger.debug(
        "Analyzed %d files with %d workers: %d findings, %d warnings",
        result.total_files,
        workers,
        result.total_findings,
        len(result.warnings),
    )
    return result


def scan(
    target: Path,
    config: Config,
    *,
    jobs: int | None = None,
    cancel: threading.Event | None = None,
) -> AnalysisResult:
    """Discover files under *target* and analyze them with *config*'s rules."""
    registry = RuleRegistry.from_config(config)
    return analyze(collect_files(target), registry, jobs=jobs, cancel=cancel)
