"""cqc CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from cqc import __version__

if TYPE_CHECKING:
    from cqc.analysis.config import Config

_SEVERITY_CHOICES = ["low", "medium", "high", "critical"]


@click.group()
@click.version_option(version=__version__, prog_name="cqc")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output (debug logging).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool) -> None:
    """cqc - regex-based code quality checker for Java/Spring, JS/TS, HTML and CSS."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(config_path: Path | None) -> Config:
    from cqc.analysis.config import load_config, load_default_config

    if config_path is None:
        return load_default_config()
    return load_config(config_path)


@main.command()
@click.argument(
    "path",
    type=click.Path(exists=True, path_type=Path),
    default=".",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Rule configuration YAML (default: built-in rules).",
)
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["text", "json", "html"]),
    default="text",
    help="Report format.",
)
@click.option(
    "--output",
    "-o",
    "output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the report to a file instead of stdout.",
)
@click.option(
    "--min-severity",
    "-s",
    type=click.Choice(_SEVERITY_CHOICES, case_sensitive=False),
    default="low",
    help="Only run rules at or above this severity.",
)
@click.option(
    "--rules",
    "-r",
    "categories",
    default="",
    help="Comma-separated rule categories to run (default: all).",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads (default: CPU count).",
)
@click.pass_context
def scan(
    ctx: click.Context,
    *,
    path: Path,
    config_path: Path | None,
    fmt: str,
    output: Path | None,
    min_severity: str,
    categories: str,
    jobs: int | None,
) -> None:
    """Scan PATH (a directory or a single file) for code quality problems.

    Exit codes: 0 = no Critical findings, 1 = Critical findings present,
    2 = configuration error.
    """
    from cqc.analysis.config import ConfigError, filter_by_categories, filter_by_severity
    from cqc.analysis.pipeline import scan as run_scan
    from cqc.reporting import render

    try:
        config = _load(config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    config = filter_by_severity(config, min_severity)
    config = filter_by_categories(config, categories.split(","))
    if ctx.obj.get("verbose"):
        click.echo(f"Config: {config.source}", err=True)
        click.echo(f"Target: {path}", err=True)

    result = run_scan(path, config, jobs=jobs)

    if output is not None:
        output.write_text(render(result, fmt, color=False), encoding="utf-8")
        click.echo(f"Report written to {output}")
    else:
        click.echo(render(result, fmt, color=sys.stdout.isatty()))

    if result.has_critical():
        sys.exit(1)


@main.command("rules")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Rule configuration YAML (default: built-in rules).",
)
@click.option("--language", "-l", default=None, help="Only list rules for this language.")
def list_rules(*, config_path: Path | None, language: str | None) -> None:
    """List configured rules with their severity, category and status."""
    from cqc.analysis.config import ConfigError
    from cqc.rules.registry import known_rule_ids

    try:
        config = _load(config_path)
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    known = set(known_rule_ids())
    for lang in config.languages:
        if language is not None and lang.language != language.lower():
            continue
        click.echo(f"{lang.language}:")
        for rule in lang.rules:
            status = "enabled" if rule.enabled else "disabled"
            if rule.id not in known:
                status = "unknown"
            click.echo(
                f"  {rule.id:<36} {rule.severity.label:<9} {rule.category or '-':<16} {status}"
            )
