"""Java rules: transactions, layering, exceptions, size, complexity, duplication, style."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from cqc.extraction.body import extract_body
from cqc.extraction.facts import ClassFacts
from cqc.extraction.position import position_at
from cqc.rules.base import Finding, Rule, Severity

if TYPE_CHECKING:
    from cqc.extraction.facts import MethodFacts, SourceUnit


def _class_facts(unit: SourceUnit) -> ClassFacts | None:
    return unit.facts if isinstance(unit.facts, ClassFacts) else None


def _method_body(unit: SourceUnit, method: MethodFacts) -> str:
    return extract_body(unit.content, method.name, method.offset)


# ---------------------------------------------------------------------------
# Transaction-need heuristic
# ---------------------------------------------------------------------------

_MUTATION_NAME_WORDS = (
    "insert",
    "update",
    "delete",
    "save",
    "modify",
    "remove",
    "create",
    "add",
    "set",
)
_MUTATION_CALL_VERBS = ("save", "update", "delete", "insert", "remove")

_REPOSITORY_CALL_RES = (
    re.compile(r"\w+Repository\.\w+\("),
    re.compile(r"\w+DAO\.\w+\("),
    re.compile(r"\w+Mapper\.\w+\("),
)
_CONDITIONAL_MUTATION_RE = re.compile(
    r"if\s*\([^)]+\)\s*\{[^}]*(?:save|update|delete|insert|remove)\([^}]*\}"
)
_MUTATION_VERB_RES = tuple(
    (verb, re.compile(rf"\w*{verb}\w*\(", re.IGNORECASE)) for verb in _MUTATION_CALL_VERBS
)
_EXTERNAL_CALL_RES = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"restTemplate\.\w+\(",
        r"webClient\.\w+\(",
        r"\w*Client\.\w+\(",
        r"\w*Service\.\w+\(.*http",
        r"@FeignClient",
        r"kafka\w*\.\w+\(",
        r"jms\w*\.\w+\(",
    )
)


def count_repository_calls(body: str) -> int:
    """Number of repository/DAO/mapper call sites in *body*."""
    return sum(len(p.findall(body)) for p in _REPOSITORY_CALL_RES)


def mutation_verbs(body: str) -> set[str]:
    """Distinct mutation verbs (save, update, ...) called in *body*."""
    return {verb for verb, pattern in _MUTATION_VERB_RES if pattern.search(body)}


def has_external_call(body: str) -> bool:
    return any(p.search(body) for p in _EXTERNAL_CALL_RES)


def transaction_reasons(body: str) -> list[str]:
    """Return the reasons *body* needs a transaction; empty when it does not.

    Four independent signals are combined and every one that fires is
    reported:

    * two or more repository/DAO/mapper calls,
    * an ``if`` block that contains a mutation call,
    * two or more distinct mutation verbs,
    * an external-system call together with at least one repository call.
    """
    reasons: list[str] = []
    repo_calls = count_repository_calls(body)
    if repo_calls >= 2:
        reasons.append(f"multiple table operations ({repo_calls} repository calls)")
    if _CONDITIONAL_MUTATION_RE.search(body):
        reasons.append("conditional data modification")
    if len(mutation_verbs(body)) >= 2:
        reasons.append("compound data operations (create/update/delete)")
    if repo_calls > 0 and has_external_call(body):
        reasons.append("external system call combined with repository call")
    return reasons


class TransactionalMissingRule(Rule):
    """Flag data-changing ``@Service`` methods that need ``@Transactional``."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        facts = _class_facts(unit)
        if facts is None or not facts.has_annotation("@Service"):
            return []

        findings: list[Finding] = []
        for method in facts.methods:
            lowered = method.name.lower()
            if not any(word in lowered for word in _MUTATION_NAME_WORDS):
                continue
            if method.has_annotation("@Transactional"):
                continue
            reasons = transaction_reasons(_method_body(unit, method))
            if not reasons:
                continue
            findings.append(
                self.finding(
                    unit,
                    method.line,
                    f"Method '{method.name}' requires @Transactional: {', '.join(reasons)}",
                    column=method.column,
                    suggestion="Add the @Transactional annotation to the method",
                )
            )
        return findings


# ---------------------------------------------------------------------------
# Simple pattern rules
# ---------------------------------------------------------------------------

_SYSTEM_OUT_RE = re.compile(r"System\.out\.(print|println)")
_PRINT_STACK_TRACE_RE = re.compile(r"\.printStackTrace\(\)")
_GENERIC_THROW_RE = re.compile(r"throw\s+new\s+Exception\s*\([^)]*\)")
_CUSTOM_VALIDATION_RE = re.compile(r"BenefitValidation\.(isEmpty|isNull|isValid)")
_MAGIC_NUMBER_RE = re.compile(r"\b((?:[1-9]\d{2,})|(?:\d+\.\d+))\b")
_ALLOWED_NUMBERS: frozenset[str] = frozenset({"0", "1", "2", "10", "100", "1000"})


class SystemOutRule(Rule):
    """Flag ``System.out.print``/``println`` calls."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for m in _SYSTEM_OUT_RE.finditer(unit.content):
            line, column = position_at(unit.content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "System.out.println usage found",
                    column=column,
                    suggestion="Use a logger instead of standard output",
                )
            )
        return findings


class LayerArchitectureRule(Rule):
    """Flag controllers that depend on DAO/repository/mapper types directly."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        facts = _class_facts(unit)
        if facts is None or not facts.is_controller:
            return []
        findings: list[Finding] = []
        for field in facts.fields:
            type_lower = field.type_name.lower()
            if not any(word in type_lower for word in ("dao", "repository", "mapper")):
                continue
            findings.append(
                self.finding(
                    unit,
                    field.line,
                    f"Controller depends directly on data access type {field.type_name}",
                    column=0,
                    suggestion="Access data through the service layer",
                )
            )
        return findings


def _has_global_exception_handler(content: str) -> bool:
    return "@ControllerAdvice" in content or "@RestControllerAdvice" in content


class ExceptionHandlingRule(Rule):
    """Flag ``printStackTrace``, generic ``Exception`` throws and controllers without advice."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        content = unit.content
        findings: list[Finding] = []

        for m in _PRINT_STACK_TRACE_RE.finditer(content):
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "printStackTrace() usage found",
                    column=column,
                    suggestion="Log the exception with a logger",
                )
            )

        for m in _GENERIC_THROW_RE.finditer(content):
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "Generic Exception type is thrown",
                    column=column,
                    suggestion="Throw a specific exception class such as BusinessException",
                )
            )

        facts = _class_facts(unit)
        if facts is not None and facts.is_controller and not _has_global_exception_handler(content):
            findings.append(
                self.finding(
                    unit,
                    1,
                    "No global exception handler (@ControllerAdvice) found",
                    suggestion="Create a @ControllerAdvice class for global exception handling",
                    snippet="",
                )
            )
        return findings


_MAPPING_ANNOTATIONS = (
    "@RequestMapping",
    "@GetMapping",
    "@PostMapping",
    "@PutMapping",
    "@DeleteMapping",
    "@PatchMapping",
)
_PARAMETER_LOOKBEHIND = 100


def _parameter_context(content: str, parameter: str, start: int) -> str:
    """Return *parameter* at or after *start* with up to 100 preceding characters."""
    idx = content.find(parameter, start)
    if idx == -1:
        return ""
    return content[max(0, idx - _PARAMETER_LOOKBEHIND) : idx + len(parameter)]


class InputValidationRule(Rule):
    """Flag custom validation helpers and unvalidated ``@RequestBody`` parameters in controllers."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        facts = _class_facts(unit)
        if facts is None or not facts.is_controller:
            return []
        content = unit.content
        findings: list[Finding] = []

        for m in _CUSTOM_VALIDATION_RE.finditer(content):
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "Use Bean Validation instead of custom validation logic",
                    column=column,
                    suggestion="Use Bean Validation annotations such as @Valid and @NotNull",
                )
            )

        for method in facts.methods:
            if not any(method.has_annotation(a) for a in _MAPPING_ANNOTATIONS):
                continue
            contexts = [_parameter_context(content, p, method.offset) for p in method.parameters]
            if any("@Valid" in ctx for ctx in contexts):
                continue
            if not any("@RequestBody" in ctx for ctx in contexts):
                continue
            findings.append(
                self.finding(
                    unit,
                    method.line,
                    "@RequestBody parameter is missing @Valid",
                    column=method.column,
                    suggestion="Use @RequestBody @Valid to apply automatic validation",
                )
            )
        return findings


class MagicNumberRule(Rule):
    """Flag numeric literals of three or more digits and decimals."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        for m in _MAGIC_NUMBER_RE.finditer(unit.content):
            number = m.group(1)
            if number in _ALLOWED_NUMBERS:
                continue
            line, column = position_at(unit.content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    f"Magic number found: {number}",
                    column=column,
                    suggestion="Extract the value into a named constant",
                )
            )
        return findings


class MethodLengthRule(Rule):
    """Flag methods longer than ``max_lines`` (default 100)."""

    DEFAULT_MAX_LINES = 100

    def check(self, unit: SourceUnit) -> list[Finding]:
        facts = _class_facts(unit)
        if facts is None:
            return []
        max_lines = self.config.custom_int("max_lines", self.DEFAULT_MAX_LINES)
        if max_lines <= 0:
            max_lines = self.DEFAULT_MAX_LINES

        findings: list[Finding] = []
        for method in facts.methods:
            body = _method_body(unit, method)
            if not body:
                continue
            length = body.count("\n") + 1
            if length <= max_lines:
                continue
            findings.append(
                self.finding(
                    unit,
                    method.line,
                    f"Method is too long ({method.name}: {length} lines, limit: {max_lines})",
                    column=method.column,
                    suggestion="Split the method into smaller units",
                )
            )
        return findings


# ---------------------------------------------------------------------------
# Cyclomatic complexity
# ---------------------------------------------------------------------------

_BRANCH_RES = tuple(
    re.compile(p)
    for p in (
        r"\bif\s*\(",
        r"\belse\s+if\s*\(",
        r"\belse\b",
        r"\bwhile\s*\(",
        r"\bfor\s*\(",
        r"\bdo\s*\{",
        r"\bswitch\s*\(",
        r"\bcase\s+",
        r"\bcatch\s*\(",
        r"\?\s*[^:]+\s*:",
        r"&&",
        r"\|\|",
    )
)


def cyclomatic_complexity(body: str) -> int:
    """Score *body*: 1 plus one per branch construct match.

    Each construct is counted independently, so ``else if`` adds to the
    ``if``, ``else if`` and ``else`` counts.  An empty body scores 1.
    """
    if not body:
        return 1
    return 1 + sum(len(p.findall(body)) for p in _BRANCH_RES)


class CyclomaticComplexityRule(Rule):
    """Flag methods whose cyclomatic complexity exceeds ``threshold`` (default 10)."""

    DEFAULT_THRESHOLD = 10

    def check(self, unit: SourceUnit) -> list[Finding]:
        facts = _class_facts(unit)
        if facts is None:
            return []
        threshold = self.config.custom_int("threshold", self.DEFAULT_THRESHOLD)

        findings: list[Finding] = []
        for method in facts.methods:
            complexity = cyclomatic_complexity(_method_body(unit, method))
            if complexity <= threshold:
                continue
            findings.append(
                self.finding(
                    unit,
                    method.line,
                    f"Method '{method.name}' has too high cyclomatic complexity "
                    f"(complexity: {complexity})",
                    column=method.column,
                    suggestion="Split the method into smaller units to reduce complexity",
                )
            )
        return findings


# ---------------------------------------------------------------------------
# Duplicate code
# ---------------------------------------------------------------------------

# (pattern, description, suggestion)
_DUPLICATE_PATTERNS: tuple[tuple[re.Pattern[str], str, str], ...] = (
    (
        re.compile(r"responseBody\.put\(.*?\);"),
        "API response building pattern is duplicated",
        "Introduce a common response class (e.g. ApiResponse)",
    ),
    (
        re.compile(r"cdService\.selectCdList\([^)]+\)"),
        "Code list lookup is repeated",
        "Cache the lookup or extract it into a shared method",
    ),
    (
        re.compile(r"if\s*\([^)]*==\s*null[^)]*\)\s*\{[^}]*throw[^}]*\}"),
        "Null check followed by throw is duplicated",
        "Extract a shared validation method",
    ),
    (
        re.compile(r"logger\.(info|debug|error)\([^)]*\);\s*return"),
        "Log-then-return pattern is repeated",
        "Extract a shared logging helper",
    ),
)
_PATTERN_REPEAT_THRESHOLD = 3

BLOCK_SIZE = 5
_MIN_BLOCK_LINES = 3
_COMMENT_PREFIXES = ("//", "/*", "*")

_STRING_LITERAL_RE = re.compile(r'"[^"]*"')
_NUMBER_RE = re.compile(r"\b\d+\b")
_IDENTIFIER_RE = re.compile(r"\b[a-zA-Z_][a-zA-Z0-9_]*\b")


def normalize_line(line: str) -> str:
    """Replace string literals, integers and identifiers with placeholder tokens."""
    line = _STRING_LITERAL_RE.sub('"STRING"', line)
    line = _NUMBER_RE.sub("NUM", line)
    return _IDENTIFIER_RE.sub("VAR", line)


def normalize_block(lines: list[str] | tuple[str, ...]) -> str:
    """Build the duplicate-detection key of a window, or ``""`` when too sparse.

    Blank and comment lines are dropped; fewer than three remaining lines
    yield an empty key.
    """
    normalized: list[str] = []
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        normalized.append(normalize_line(line))
    if len(normalized) < _MIN_BLOCK_LINES:
        return ""
    return "\n".join(normalized)


def duplicate_blocks(lines: list[str] | tuple[str, ...]) -> dict[str, list[int]]:
    """Group 1-based window start lines by normalized key, keeping only repeated keys."""
    groups: dict[str, list[int]] = {}
    for i in range(len(lines) - BLOCK_SIZE + 1):
        key = normalize_block(lines[i : i + BLOCK_SIZE])
        if key:
            groups.setdefault(key, []).append(i + 1)
    return {key: starts for key, starts in groups.items() if len(starts) >= 2}


class DuplicateCodeRule(Rule):
    """Detect repeated risky patterns and structurally identical 5-line blocks."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        content = unit.content
        findings: list[Finding] = []

        for pattern, description, suggestion in _DUPLICATE_PATTERNS:
            matches = list(pattern.finditer(content))
            if len(matches) < _PATTERN_REPEAT_THRESHOLD:
                continue
            for m in matches:
                line, column = position_at(content, m.start())
                findings.append(
                    self.finding(
                        unit,
                        line,
                        f"Duplicate code pattern found (repeated {len(matches)} times)",
                        column=column,
                        suggestion=suggestion,
                        description=description,
                    )
                )

        block_findings: list[Finding] = []
        for starts in duplicate_blocks(unit.lines).values():
            for start in starts:
                block_findings.append(
                    self.finding(
                        unit,
                        start,
                        f"Duplicate code block found (repeated in {len(starts)} locations)",
                        suggestion="Extract the block into a shared method",
                    )
                )
        block_findings.sort(key=lambda f: f.line)
        findings.extend(block_findings)
        return findings


# ---------------------------------------------------------------------------
# Coding conventions
# ---------------------------------------------------------------------------

_SPECIAL_METHODS: frozenset[str] = frozenset({"toString", "hashCode", "equals", "main"})
_ACCESSOR_PREFIXES = ("get", "set", "is")
_SPACE_INDENT_RE = re.compile(r"^ {4,}\S", re.MULTILINE)
_TAB_INDENT_RE = re.compile(r"^\t+\S", re.MULTILINE)
_MAX_LINE_LENGTH = 120


def is_pascal_case(name: str) -> bool:
    return bool(name) and "A" <= name[0] <= "Z" and "_" not in name


def is_camel_case(name: str) -> bool:
    return bool(name) and "a" <= name[0] <= "z" and "_" not in name


class CodingConventionRule(Rule):
    """Check injection annotation consistency, naming, indentation and line length."""

    def check(self, unit: SourceUnit) -> list[Finding]:
        facts = _class_facts(unit)
        if facts is None:
            return []
        findings: list[Finding] = []
        findings.extend(self._injection_consistency(unit))
        findings.extend(self._naming(unit, facts))
        findings.extend(self._style(unit))
        return findings

    def _injection_consistency(self, unit: SourceUnit) -> list[Finding]:
        content = unit.content
        if "@Resource" not in content or "@Autowired" not in content:
            return []
        findings: list[Finding] = []
        for m in re.finditer(r"@Resource", content):
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "@Resource and @Autowired are mixed",
                    column=column,
                    suggestion="Use @Autowired consistently",
                )
            )
        for m in re.finditer(r"@Autowired", content):
            line, column = position_at(content, m.start())
            findings.append(
                self.finding(
                    unit,
                    line,
                    "@Resource and @Autowired are mixed in the same class",
                    column=column,
                    suggestion="Standardize on @Autowired across the project",
                    severity=Severity.LOW,
                )
            )
        return findings

    def _naming(self, unit: SourceUnit, facts: ClassFacts) -> list[Finding]:
        findings: list[Finding] = []
        if facts.name and not is_pascal_case(facts.name):
            findings.append(
                self.finding(
                    unit,
                    1,
                    f"Class name does not follow PascalCase: {facts.name}",
                    suggestion="Rename the class using PascalCase",
                    snippet=f"class {facts.name}",
                )
            )

        for method in facts.methods:
            if method.name == facts.name or method.name in _SPECIAL_METHODS:
                continue
            if method.name.startswith(_ACCESSOR_PREFIXES) or is_camel_case(method.name):
                continue
            findings.append(
                self.finding(
                    unit,
                    method.line,
                    f"Method name does not follow camelCase: {method.name}",
                    column=method.column,
                    suggestion="Rename the method using camelCase",
                )
            )

        for field in facts.fields:
            if (field.is_static and field.is_final) or is_camel_case(field.name):
                continue
            findings.append(
                self.finding(
                    unit,
                    field.line,
                    f"Field name does not follow camelCase: {field.name}",
                    suggestion="Rename the field using camelCase",
                )
            )
        return findings

    def _style(self, unit: SourceUnit) -> list[Finding]:
        findings: list[Finding] = []
        if _TAB_INDENT_RE.search(unit.content) and _SPACE_INDENT_RE.search(unit.content):
            findings.append(
                self.finding(
                    unit,
                    1,
                    "Tabs and spaces are mixed for indentation",
                    suggestion="Use either tabs or spaces consistently",
                    snippet="",
                )
            )
        for idx, line in enumerate(unit.lines, start=1):
            if len(line) <= _MAX_LINE_LENGTH:
                continue
            findings.append(
                self.finding(
                    unit,
                    idx,
                    f"Line is too long ({len(line)} characters)",
                    column=_MAX_LINE_LENGTH + 1,
                    suggestion=f"Wrap the line at {_MAX_LINE_LENGTH} characters",
                    severity=Severity.LOW,
                )
            )
        return findings
