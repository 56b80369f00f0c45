"""Tests for cqc.extraction.annotations: annotation back-scan."""

from __future__ import annotations

import pytest

from cqc.extraction.annotations import collect_annotations


def _before(content: str, marker: str) -> int:
    return content.index(marker)


class TestCollectAnnotations:
    def test_order_is_top_to_bottom(self) -> None:
        content = "@Service\n@Slf4j\npublic class A {}"
        assert collect_annotations(content, _before(content, "public")) == ["@Service", "@Slf4j"]

    def test_stops_at_code_line(self) -> None:
        content = "@Deprecated\nint x = 1;\n@Override\npublic String toString() {"
        assert collect_annotations(content, _before(content, "public")) == ["@Override"]

    def test_skips_blank_and_comment_lines(self) -> None:
        content = (
            "@Transactional\n"
            "\n"
            "/**\n"
            " * Saves the user.\n"
            " */\n"
            "// inline note\n"
            "public void save(User u) {"
        )
        assert collect_annotations(content, _before(content, "public")) == ["@Transactional"]

    def test_no_annotations(self) -> None:
        content = "int a;\npublic void run() {"
        assert collect_annotations(content, _before(content, "public")) == []

    def test_offset_zero(self) -> None:
        assert collect_annotations("@Service\nclass A {}", 0) == []

    def test_annotation_arguments_kept(self) -> None:
        content = '    @PostMapping("/users")\n    public User create() {'
        before = _before(content, "public")
        assert collect_annotations(content, before) == ['@PostMapping("/users")']

    def test_text_after_offset_is_ignored(self) -> None:
        content = "class A {}\n@Late\n"
        assert collect_annotations(content, _before(content, "@Late")) == []

    @pytest.mark.parametrize("extra", [1, 2, 7])
    def test_extra_blank_lines_do_not_change_result(self, extra: int) -> None:
        base = "int a;\n@Service\n@Slf4j\npublic class A {}"
        padded = base.replace("@Slf4j\n", "@Slf4j\n" + "\n" * extra)
        padded = padded.replace("@Service\n", "@Service\n" + "   \n" * extra)
        expected = collect_annotations(base, _before(base, "public"))
        assert collect_annotations(padded, _before(padded, "public")) == expected
        assert expected == ["@Service", "@Slf4j"]

    def test_annotation_on_first_line(self) -> None:
        content = "@Entity\n\npublic class A {}"
        assert collect_annotations(content, _before(content, "public")) == ["@Entity"]

    def test_scan_ends_at_nearest_code_line(self) -> None:
        statements = "    int v = f(x);\n" * 5000
        content = "@Ignored\n" + statements + "    @Override\n    public void run() {"
        assert collect_annotations(content, _before(content, "public")) == ["@Override"]

    def test_offset_past_end(self) -> None:
        assert collect_annotations("@Service\n", 100) == ["@Service"]
