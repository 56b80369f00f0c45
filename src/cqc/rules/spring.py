"""Spring rules: request validation, transactional proxies, method security, injection, advice."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from cqc.extraction.position import position_at
from cqc.rules.base import Finding, Rule

if TYPE_CHECKING:
    from cqc.extraction.facts import SourceUnit


_CONTROLLER_RE = re.compile(r"@(?:Rest)?Controller\b")
_CONTROLLER_ADVICE_RE = re.compile(r"@(?:Rest)?ControllerAdvice\b")

_REQUEST_BODY_RE = re.compile(r"@RequestBody\s+(\w+\s+\w+)")
_PRIVATE_TRANSACTIONAL_RE = re.compile(r"@Transactional[^\n]*\n[^\n]*private\s+\w+\s+(\w+)\s*\(")
_TRANSACTIONAL_RE = re.compile(r"@Transactional\b")
_SENSITIVE_METHOD_RE = re.compile(
    r"public\s+\w+\s+((?:delete|remove|admin|update|modify|create|add)\w*)\s*\([^)]*\)\s*"
    r"(?:throws[^{]*)?\{"
)
_SECURED_RE = re.compile(r"@Secured\b")
_FIELD_INJECTION_RE = re.compile(r"@Autowired\s+private\s+\w+\s+(\w+);")
_THROWS_EXCEPTION_METHOD_RE = re.compile(
    r"public\s+\w+\s+\w+\s*\([^)]*\)\s+throws\s+Exception\b"
)

_SECURITY_ANNOTATIONS = ("@PreAuthorize", "@PostAuthorize", "@Secured", "@RolesAllowed")


def is_controller_source(content: str) -> bool:
    """True when the file declares a ``@Controller`` or ``@RestController``."""
    return _CONTROLLER_RE.search(content) is not None


def _window(lines: tuple[str, ...], first: int, last: int) -> tuple[str, ...]:
    """Return 1-based lines ``first..last`` inclusive, clamped to the file."""
    return lines[max(0, first - 1) : min(len(lines), last)]


class ValidationMissingRule(Rule):
    """Flag ``@RequestBody`` parameters without ``@Valid`` on the same or adjacent lines."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        if not is_controller_source(unit.content):
            return []
        findings: list[Finding] = []
        for m in _REQUEST_BODY_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            if any("@Valid" in text for text in _window(unit.lines, line - 1, line + 1)):
                continue
            findings.append(
                self.finding(
                    unit,
                    line,
                    f"@RequestBody parameter '{m.group(1)}' is missing @Valid",
                    column=column,
                    suggestion="Add @Valid to validate the request body",
                )
            )
        return findings


class TransactionalPrivateRule(Rule):
    """Flag ``@Transactional`` on private methods, where the proxy never applies."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for m in _PRIVATE_TRANSACTIONAL_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    f"@Transactional is used on private method '{m.group(1)}'",
                    column=column,
                    suggestion="Make the method public or annotate the class with @Transactional",
                )
            )
        return findings


class TransactionalRollbackRule(Rule):
    """Flag ``@Transactional`` without ``rollbackFor`` near a ``throws Exception`` signature."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for m in _TRANSACTIONAL_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            text = unit.lines[line - 1] if line <= len(unit.lines) else ""
            if "rollbackFor" in text:
                continue
            if not any("throws Exception" in t for t in _window(unit.lines, line, line + 4)):
                continue
            findings.append(
                self.finding(
                    unit,
                    line,
                    "@Transactional is missing a rollbackFor setting",
                    column=column,
                    suggestion="Use @Transactional(rollbackFor = Exception.class)",
                )
            )
        return findings


class SecurityMissingRule(Rule):
    """Flag sensitive public controller methods without a method security annotation."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        if not is_controller_source(unit.content):
            return []
        findings: list[Finding] = []
        for m in _SENSITIVE_METHOD_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            preceding = _window(unit.lines, line - 4, line)
            if any(a in text for text in preceding for a in _SECURITY_ANNOTATIONS):
                continue
            findings.append(
                self.finding(
                    unit,
                    line,
                    f"Sensitive method is missing a security annotation: {m.group(1)}",
                    column=column,
                    suggestion="Add @PreAuthorize or another method security annotation",
                )
            )
        return findings


class SecuredDeprecatedRule(Rule):
    """Recommend ``@PreAuthorize`` over ``@Secured``."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for m in _SECURED_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "Prefer @PreAuthorize over @Secured",
                    column=column,
                    suggestion="Replace with @PreAuthorize(\"hasRole('ROLE_NAME')\")",
                )
            )
        return findings


class FieldInjectionRule(Rule):
    """Flag ``@Autowired`` private fields; constructor injection is preferred."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for m in _FIELD_INJECTION_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    f"Use constructor injection instead of field injection: {m.group(1)}",
                    column=column,
                    suggestion="Use final fields with a constructor or @RequiredArgsConstructor",
                )
            )
        return findings


class ControllerAdviceMissingRule(Rule):
    """Flag controllers throwing ``Exception`` when the file has no controller advice.

    Only the first offending method is reported.
    """

    def check(self, unit: SourceUnit) -> list[Finding]:
        content = unit.content
        if not is_controller_source(content) or _CONTROLLER_ADVICE_RE.search(content):
            return []
        m = _THROWS_EXCEPTION_METHOD_RE.search(content)
        if m is None:
            return []
        line, column = position_at(content, m.start())
        return [
            self.finding(
                unit,
                line,
                "No global exception handler (@ControllerAdvice) found",
                column=column,
                suggestion="Create a @ControllerAdvice class for global exception handling",
            )
        ]

