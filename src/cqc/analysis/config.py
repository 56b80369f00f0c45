"""Rule configuration: parse the YAML rule file, validate it, filter it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from importlib import resources as importlib_resources
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

from cqc.rules.base import RuleConfig, Severity

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_RESOURCE = ("data", "default_rules.yml")
SUPPORTED_LANGUAGES: frozenset[str] = frozenset(
    {"java", "javascript", "typescript", "html", "css"}
)
# Languages without their own section fall back to another language's rules.
LANGUAGE_FALLBACKS: dict[str, str] = {"typescript": "javascript"}


class ConfigError(ValueError):
    """Raised when a rule configuration cannot be read or fails validation."""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LanguageConfig:
    """Rule configurations for one language, in file order."""

    language: str
    rules: tuple[RuleConfig, ...] = ()


@dataclass(frozen=True)
class Config:
    """A loaded rule configuration."""

    version: str
    languages: tuple[LanguageConfig, ...] = ()
    source: str = ""  # path or resource name the config came from

    def language(self, name: str) -> LanguageConfig | None:
        for lang in self.languages:
            if lang.language == name:
                return lang
        return None

    def rules_for_language(self, name: str) -> tuple[RuleConfig, ...]:
        """Rule configs for *name*, using the fallback language when it has no section."""
        lang = self.language(name)
        if lang is None and name in LANGUAGE_FALLBACKS:
            lang = self.language(LANGUAGE_FALLBACKS[name])
        return lang.rules if lang is not None else ()

    def all_rules(self) -> list[RuleConfig]:
        return [rule for lang in self.languages for rule in lang.rules]

    def enabled_rules(self) -> list[RuleConfig]:
        return [rule for rule in self.all_rules() if rule.enabled]

    @property
    def categories(self) -> list[str]:
        """Sorted distinct categories across all rules."""
        return sorted({rule.category for rule in self.all_rules() if rule.category})


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _parse_custom(raw: Any, context: str) -> MappingProxyType[str, str]:
    if raw is None:
        return MappingProxyType({})
    if not isinstance(raw, dict):
        msg = f"{context}: 'custom' must be a mapping"
        raise ConfigError(msg)
    return MappingProxyType({str(key): str(value) for key, value in raw.items()})


def _parse_rule(data: Any, context: str) -> RuleConfig:
    if not isinstance(data, dict):
        msg = f"{context} must be a mapping"
        raise ConfigError(msg)

    rule_id = data.get("id")
    if not isinstance(rule_id, str) or not rule_id.strip():
        msg = f"{context}: missing required 'id' field"
        raise ConfigError(msg)
    rule_id = rule_id.strip()

    enabled = data.get("enabled", True)
    if not isinstance(enabled, bool):
        msg = f"Rule '{rule_id}': 'enabled' must be true or false"
        raise ConfigError(msg)

    severity_raw = data.get("severity")
    severity = Severity.parse(severity_raw)
    if severity_raw is not None and str(severity_raw).strip().upper() != severity.name:
        logger.debug("Rule %s: unknown severity %r, using Low", rule_id, severity_raw)

    return RuleConfig(
        id=rule_id,
        name=str(data.get("name") or ""),
        severity=severity,
        category=str(data.get("category") or ""),
        description=str(data.get("description") or ""),
        enabled=enabled,
        custom=_parse_custom(data.get("custom"), f"Rule '{rule_id}'"),
    )


def _parse_language(data: Any, idx: int, source: str) -> LanguageConfig:
    if not isinstance(data, dict):
        msg = f"{source}: language at index {idx} must be a mapping"
        raise ConfigError(msg)

    name = data.get("language")
    if not isinstance(name, str) or not name.strip():
        msg = f"{source}: language at index {idx} missing required 'language' field"
        raise ConfigError(msg)
    name = name.strip().lower()
    if name not in SUPPORTED_LANGUAGES:
        logger.debug("%s: unsupported language %r, its rules will never run", source, name)

    rules_data = data.get("rules") or []
    if not isinstance(rules_data, list):
        msg = f"{source}: '{name}.rules' must be a list"
        raise ConfigError(msg)

    seen_ids: set[str] = set()
    rules: list[RuleConfig] = []
    for rule_idx, rule_data in enumerate(rules_data):
        rule = _parse_rule(rule_data, f"{source}: {name} rule at index {rule_idx}")
        if rule.id in seen_ids:
            msg = f"{source}: duplicate rule id '{rule.id}' for language '{name}'"
            raise ConfigError(msg)
        seen_ids.add(rule.id)
        rules.append(rule)
    return LanguageConfig(language=name, rules=tuple(rules))


def parse_config(data: Any, source: str = "config") -> Config:
    """Validate an already-decoded YAML document and build a :class:`Config`.

    Raises :class:`ConfigError` on schema errors.
    """
    if not isinstance(data, dict):
        msg = f"{source} must be a YAML mapping"
        raise ConfigError(msg)

    version = data.get("version")
    if version is None:
        msg = f"{source}: missing required 'version' field"
        raise ConfigError(msg)

    languages_data = data.get("languages")
    if not isinstance(languages_data, list):
        msg = f"{source}: 'languages' must be a list"
        raise ConfigError(msg)

    languages: list[LanguageConfig] = []
    seen: set[str] = set()
    for idx, lang_data in enumerate(languages_data):
        lang = _parse_language(lang_data, idx, source)
        if lang.language in seen:
            msg = f"{source}: duplicate language section '{lang.language}'"
            raise ConfigError(msg)
        seen.add(lang.language)
        languages.append(lang)

    return Config(version=str(version), languages=tuple(languages), source=source)


def load_config(path: Path) -> Config:
    """Read and validate the YAML rule file at *path*."""
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as exc:
        msg = f"cannot read config file {path}: {exc}"
        raise ConfigError(msg) from exc
    except yaml.YAMLError as exc:
        msg = f"invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc
    config = parse_config(data, source=str(path))
    logger.debug("Loaded %d rule configs from %s", len(config.all_rules()), path)
    return config


def load_default_config() -> Config:
    """Load the rule configuration shipped with the package."""
    resource = importlib_resources.files("cqc").joinpath(*DEFAULT_CONFIG_RESOURCE)
    data = yaml.safe_load(resource.read_text(encoding="utf-8"))
    return parse_config(data, source="/".join(DEFAULT_CONFIG_RESOURCE))


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def filter_by_severity(config: Config, min_severity: Severity | str) -> Config:
    """Disable every rule whose severity is below *min_severity*."""
    threshold = Severity.parse(min_severity)
    return _with_enabled(config, lambda rule: rule.severity >= threshold)


def filter_by_categories(config: Config, categories: Iterable[str]) -> Config:
    """Disable every rule whose category is not in *categories*.

    Matching is case-insensitive.  An empty *categories* leaves the config
    unchanged.
    """
    wanted = {c.strip().lower() for c in categories if c.strip()}
    if not wanted:
        return config
    return _with_enabled(config, lambda rule: rule.category.lower() in wanted)


def _with_enabled(config: Config, predicate: Callable[[RuleConfig], bool]) -> Config:
    languages = tuple(
        replace(
            lang,
            rules=tuple(
                rule if rule.enabled and predicate(rule) else replace(rule, enabled=False)
                for rule in lang.rules
            ),
        )
        for lang in config.languages
    )
    return replace(config, languages=languages)
