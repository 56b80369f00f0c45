"""Rule interface, severities, rule configuration and findings."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cqc.extraction.facts import SourceUnit


# ---------------------------------------------------------------------------
# Severity
# ---------------------------------------------------------------------------


class Severity(enum.IntEnum):
    """Ordered finding severity: LOW < MEDIUM < HIGH < CRITICAL."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @classmethod
    def parse(cls, value: str | Severity | None) -> Severity:
        """Parse a case-insensitive severity name; unknown names become LOW."""
        if isinstance(value, Severity):
            return value
        if value is None:
            return cls.LOW
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            return cls.LOW

    @property
    def label(self) -> str:
        """Display name, e.g. ``"Critical"``."""
        return self.name.capitalize()


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleConfig:
    """Configuration of one rule as loaded from YAML."""

    id: str
    name: str = ""
    severity: Severity = Severity.MEDIUM
    category: str = ""
    description: str = ""
    enabled: bool = True
    custom: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def custom_int(self, key: str, default: int) -> int:
        """Read an integer custom parameter, falling back to *default*."""
        raw = self.custom.get(key)
        if raw is None:
            return default
        try:
            return int(str(raw).strip())
        except ValueError:
            return default


@dataclass(frozen=True)
class Finding:
    """A single reported quality problem."""

    rule_id: str
    file_path: str
    line: int  # 1-based; 0 when not computable
    column: int  # 1-based; 0 when not computable
    severity: Severity
    category: str
    message: str
    description: str = ""
    suggestion: str = ""
    snippet: str = ""


# ---------------------------------------------------------------------------
# Rule interface
# ---------------------------------------------------------------------------


class Rule(ABC):
    """A self-contained check over one file's facts and text.

    Subclasses implement :meth:`check`.  Metadata comes from the
    :class:`RuleConfig` captured at construction.
    """

    def __init__(self, config: RuleConfig) -> None:
        self._config = config

    @property
    def config(self) -> RuleConfig:
        return self._config

    @property
    def id(self) -> str:
        return self._config.id

    @property
    def name(self) -> str:
        return self._config.name or self._config.id

    @property
    def severity(self) -> Severity:
        return self._config.severity

    @property
    def category(self) -> str:
        return self._config.category

    @property
    def description(self) -> str:
        return self._config.description

    @abstractmethod
    def check(self, unit: SourceUnit) -> list[Finding]:
        """Evaluate the rule and return its findings (possibly empty)."""

    def finding(
        self,
        unit: SourceUnit,
        line: int,
        message: str,
        *,
        column: int = 1,
        suggestion: str = "",
        severity: Severity | None = None,
        category: str | None = None,
        description: str | None = None,
        snippet: str | None = None,
    ) -> Finding:
        """Build a finding stamped with this rule's metadata and the line snippet."""
        return Finding(
            rule_id=self.id,
            file_path=unit.path,
            line=line,
            column=column,
            severity=severity if severity is not None else self.severity,
            category=category if category is not None else self.category,
            message=message,
            description=description if description is not None else self.description,
            suggestion=suggestion,
            snippet=snippet if snippet is not None else unit.snippet(line),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
