"""Tests for cqc.rules.java: duplicate code normalization and detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cqc.extraction.facts import SourceUnit
from cqc.rules.java import (
    BLOCK_SIZE,
    DuplicateCodeRule,
    duplicate_blocks,
    normalize_block,
    normalize_line,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from cqc.rules.base import RuleConfig


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

BLOCK = [
    "int total = price * count;",
    "total = total + tax;",
    "log(total);",
    'send(total, "mail");',
    "store(total);",
]

# Separators with shapes that appear nowhere else.
SEPARATOR_1 = "counter++;"
SEPARATOR_2 = "flag = !flag && ready;"


def _three_blocks() -> list[str]:
    return [*BLOCK, SEPARATOR_1, *BLOCK, SEPARATOR_2, *BLOCK]


def _unit(lines: list[str]) -> SourceUnit:
    return SourceUnit.from_text("Dup.java", "java", "\n".join(lines) + "\n")


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalize:
    def test_line_tokens(self) -> None:
        # Placeholder words are identifiers themselves and collapse to VAR.
        assert normalize_line('String s = "hello" + 42;') == 'VAR VAR = "VAR" + VAR;'

    def test_literal_values_do_not_matter(self) -> None:
        assert normalize_line('f("a", 1);') == normalize_line('f("other text", 99);')

    def test_renamed_identifiers_share_a_key(self) -> None:
        a = ["int a = b + 1;", "call(a);", "return a;"]
        b = ["int x = y + 7;", "call(x);", "return x;"]
        assert normalize_block(a) == normalize_block(b) != ""

    def test_blank_and_comment_lines_dropped(self) -> None:
        lines = ["// note", "a();", "", "b();", " * doc"]
        assert normalize_block(lines) == ""

    def test_three_substantive_lines_required(self) -> None:
        assert normalize_block(["a();", "b();", "", "// x", "c();"]) == "VAR();\nVAR();\nVAR();"


class TestDuplicateBlocks:
    def test_three_occurrences(self) -> None:
        groups = duplicate_blocks(_three_blocks())
        assert list(groups.values()) == [[1, 7, 13]]

    def test_no_duplicates(self) -> None:
        assert duplicate_blocks(BLOCK) == {}

    def test_short_input(self) -> None:
        assert duplicate_blocks(BLOCK[: BLOCK_SIZE - 1]) == {}


# ---------------------------------------------------------------------------
# Rule
# ---------------------------------------------------------------------------


class TestDuplicateCodeRule:
    def test_three_blocks_three_findings(self, rule_config: Callable[..., RuleConfig]) -> None:
        rule = DuplicateCodeRule(rule_config("java-duplicate-code"))
        findings = rule.check(_unit(_three_blocks()))
        assert [f.line for f in findings] == [1, 7, 13]
        assert {f.message for f in findings} == {
            "Duplicate code block found (repeated in 3 locations)"
        }

    def test_pattern_repeated_three_times(self, rule_config: Callable[..., RuleConfig]) -> None:
        lines = [
            'responseBody.put("a", a);',
            "first();",
            'responseBody.put("b", b);',
            "second(1, 2);",
            'responseBody.put("c", c);',
        ]
        rule = DuplicateCodeRule(rule_config("java-duplicate-code"))
        findings = rule.check(_unit(lines))
        pattern_findings = [f for f in findings if "pattern" in f.message]
        assert [f.line for f in pattern_findings] == [1, 3, 5]
        assert all("repeated 3 times" in f.message for f in pattern_findings)
        assert pattern_findings[0].description == "API response building pattern is duplicated"

    def test_pattern_below_threshold(self, rule_config: Callable[..., RuleConfig]) -> None:
        lines = ['responseBody.put("a", a);', 'responseBody.put("b", b);']
        rule = DuplicateCodeRule(rule_config("java-duplicate-code"))
        assert rule.check(_unit(lines)) == []
