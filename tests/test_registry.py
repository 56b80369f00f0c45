"""Tests for cqc.rules.registry: rule tables and the per-language registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from cqc.analysis.config import load_default_config, parse_config
from cqc.extraction.facts import SourceUnit
from cqc.rules.base import Rule
from cqc.rules.java import SystemOutRule
from cqc.rules.registry import RULE_TABLES, RuleRegistry, build_rules, known_rule_ids

if TYPE_CHECKING:
    from collections.abc import Callable

    from cqc.rules.base import Finding, RuleConfig


class _ExplodingRule(Rule):
    def check(self, unit: SourceUnit) -> list[Finding]:
        msg = "boom"
        raise RuntimeError(msg)


# ---------------------------------------------------------------------------
# build_rules
# ---------------------------------------------------------------------------


class TestBuildRules:
    def test_known_ids(self) -> None:
        ids = known_rule_ids()
        assert len(ids) == len(set(ids)) == 27
        assert "java-transactional-missing" in ids
        assert "css-responsive-design" in ids

    def test_unknown_id_dropped(
        self, rule_config: Callable[..., RuleConfig], caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="cqc.rules.registry"):
            configs = [rule_config("java-unknown"), rule_config("java-system-out")]
            rules = build_rules("java", configs)
        assert [r.id for r in rules] == ["java-system-out"]
        assert "java-unknown" in caplog.text

    def test_disabled_rules_skipped(self, rule_config: Callable[..., RuleConfig]) -> None:
        rules = build_rules("java", [rule_config("java-system-out", enabled=False)])
        assert rules == []

    def test_ids_are_language_scoped(self, rule_config: Callable[..., RuleConfig]) -> None:
        assert build_rules("css", [rule_config("java-system-out")]) == []

    def test_unknown_language(self, rule_config: Callable[..., RuleConfig]) -> None:
        assert build_rules("cobol", [rule_config("java-system-out")]) == []


# ---------------------------------------------------------------------------
# RuleRegistry
# ---------------------------------------------------------------------------


class TestRuleRegistry:
    def test_from_default_config(self) -> None:
        registry = RuleRegistry.from_config(load_default_config())
        assert registry.languages == ["css", "html", "java", "javascript", "typescript"]
        assert len(registry.rules_for("java")) == len(RULE_TABLES["java"])
        assert len(registry) == len(known_rule_ids())

    def test_typescript_shares_javascript_rules(self) -> None:
        registry = RuleRegistry.from_config(load_default_config())
        assert registry.rules_for("typescript") == registry.rules_for("javascript")
        assert registry.rules_for("typescript")[0] is registry.rules_for("javascript")[0]

    def test_unsupported_language(self) -> None:
        registry = RuleRegistry.from_config(load_default_config())
        assert registry.rules_for("python") == ()

    def test_order_follows_config(self) -> None:
        config = parse_config(
            {
                "version": "1.0",
                "languages": [
                    {
                        "language": "java",
                        "rules": [
                            {"id": "java-magic-number"},
                            {"id": "java-system-out"},
                        ],
                    }
                ],
            }
        )
        registry = RuleRegistry.from_config(config)
        ids = [r.id for r in registry.rules_for("java")]
        assert ids == ["java-magic-number", "java-system-out"]
        assert registry.rules_for("javascript") == ()

    def test_failing_rule_is_isolated(
        self, rule_config: Callable[..., RuleConfig], caplog: pytest.LogCaptureFixture
    ) -> None:
        registry = RuleRegistry(
            {
                "java": [
                    _ExplodingRule(rule_config("java-exploding")),
                    SystemOutRule(rule_config("java-system-out")),
                ]
            }
        )
        unit = SourceUnit.from_text("A.java", "java", 'System.out.println("x");')
        with caplog.at_level(logging.ERROR, logger="cqc.rules.registry"):
            findings = registry.check_file(unit)
        assert [f.rule_id for f in findings] == ["java-system-out"]
        assert "java-exploding" in caplog.text

    def test_check_file_unknown_language(self) -> None:
        registry = RuleRegistry({})
        unit = SourceUnit.from_text("a.py", "python", "print(1)")
        assert registry.check_file(unit) == []
