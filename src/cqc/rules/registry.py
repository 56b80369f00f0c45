"""Rule registry: map configured rule ids to rule instances per language."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cqc.rules import css, html, java, javascript, spring

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from cqc.analysis.config import Config
    from cqc.extraction.facts import SourceUnit
    from cqc.rules.base import Finding, Rule, RuleConfig

    RuleFactory = Callable[[RuleConfig], Rule]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Identifier -> constructor tables
# ---------------------------------------------------------------------------

JAVA_RULES: dict[str, RuleFactory] = {
    "java-transactional-missing": java.TransactionalMissingRule,
    "java-system-out": java.SystemOutRule,
    "java-layer-architecture": java.LayerArchitectureRule,
    "java-exception-handling": java.ExceptionHandlingRule,
    "java-input-validation": java.InputValidationRule,
    "java-magic-number": java.MagicNumberRule,
    "java-method-length": java.MethodLengthRule,
    "java-cyclomatic-complexity": java.CyclomaticComplexityRule,
    "java-duplicate-code": java.DuplicateCodeRule,
    "java-coding-conventions": java.CodingConventionRule,
    "spring-validation-missing": spring.ValidationMissingRule,
    "spring-transactional-private": spring.TransactionalPrivateRule,
    "spring-transactional-rollback": spring.TransactionalRollbackRule,
    "spring-security-missing": spring.SecurityMissingRule,
    "spring-secured-deprecated": spring.SecuredDeprecatedRule,
    "spring-field-injection": spring.FieldInjectionRule,
    "spring-controller-advice-missing": spring.ControllerAdviceMissingRule,
}

JAVASCRIPT_RULES: dict[str, RuleFactory] = {
    "js-innerHTML-xss": javascript.InnerHTMLXSSRule,
    "js-memory-leak": javascript.MemoryLeakRule,
    "js-function-length": javascript.FunctionLengthRule,
    "js-console-log": javascript.ConsoleLogRule,
    "js-var-usage": javascript.VarUsageRule,
}

HTML_RULES: dict[str, RuleFactory] = {
    "html-img-alt": html.ImgAltRule,
    "html-accessibility": html.AccessibilityRule,
    "html-seo": html.SEORule,
}

CSS_RULES: dict[str, RuleFactory] = {
    "css-selectors": css.SelectorsRule,
    "css-responsive-design": css.ResponsiveDesignRule,
}

RULE_TABLES: dict[str, dict[str, RuleFactory]] = {
    "java": JAVA_RULES,
    "javascript": JAVASCRIPT_RULES,
    "html": HTML_RULES,
    "css": CSS_RULES,
}

# Languages that reuse another language's rule list.
SHARED_RULE_LISTS: dict[str, str] = {"typescript": "javascript"}


def known_rule_ids() -> list[str]:
    """Every rule id that can be instantiated, in table order."""
    return [rule_id for table in RULE_TABLES.values() for rule_id in table]


def build_rules(language: str, configs: Iterable[RuleConfig]) -> list[Rule]:
    """Instantiate enabled *configs* through *language*'s table, dropping unknown ids."""
    table = RULE_TABLES.get(language, {})
    rules: list[Rule] = []
    for cfg in configs:
        if not cfg.enabled:
            continue
        factory = table.get(cfg.id)
        if factory is None:
            logger.debug("Unknown rule id for %s, skipped: %s", language, cfg.id)
            continue
        rules.append(factory(cfg))
    return rules


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class RuleRegistry:
    """Read-only mapping of language tag to its ordered rule list."""

    def __init__(self, rules: Mapping[str, list[Rule]]) -> None:
        self._rules: dict[str, tuple[Rule, ...]] = {
            language: tuple(rule_list) for language, rule_list in rules.items()
        }
        for alias, source in SHARED_RULE_LISTS.items():
            if source in self._rules:
                self._rules[alias] = self._rules[source]

    @classmethod
    def from_config(cls, config: Config) -> RuleRegistry:
        """Build the registry once for a run from a loaded configuration."""
        rules = {
            language: build_rules(language, config.rules_for_language(language))
            for language in RULE_TABLES
        }
        registry = cls(rules)
        logger.debug(
            "Registered rules: %s",
            ", ".join(f"{lang}={len(r)}" for lang, r in registry._rules.items()),
        )
        return registry

    def rules_for(self, language: str) -> tuple[Rule, ...]:
        """Rules registered for *language*; empty for unsupported languages."""
        return self._rules.get(language, ())

    def check_file(self, unit: SourceUnit) -> list[Finding]:
        """Run every rule registered for *unit*'s language, in registration order.

        A rule that raises is logged and contributes no findings; the
        remaining rules still run.
        """
        findings: list[Finding] = []
        for rule in self.rules_for(unit.language):
            try:
                findings.extend(rule.check(unit))
            except Exception:
                logger.exception("Rule %s failed on %s", rule.id, unit.path)
        return findings

    @property
    def languages(self) -> list[str]:
        return sorted(self._rules)

    def all_rules(self) -> list[Rule]:
        """Every distinct rule instance, languages in sorted order."""
        seen: set[int] = set()
        result: list[Rule] = []
        for language in self.languages:
            for rule in self._rules[language]:
                if id(rule) not in seen:
                    seen.add(id(rule))
                    result.append(rule)
        return result

    def __len__(self) -> int:
        return len(self.all_rules())
