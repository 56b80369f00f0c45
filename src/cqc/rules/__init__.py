"""Rules: the rule interface, per-language rule catalogs and the registry."""

from cqc.rules.base import Finding, Rule, RuleConfig, Severity
from cqc.rules.registry import RULE_TABLES, RuleRegistry, build_rules, known_rule_ids

__all__ = [
    "RULE_TABLES",
    "Finding",
    "Rule",
    "RuleConfig",
    "RuleRegistry",
    "Severity",
    "build_rules",
    "known_rule_ids",
]
