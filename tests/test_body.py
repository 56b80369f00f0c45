"""Tests for cqc.extraction.body: brace-balanced body extraction."""

from __future__ import annotations

from cqc.extraction.body import balanced_block, extract_body, find_body


class TestExtractBody:
    def test_simple_body(self) -> None:
        content = "void run() {\n    go();\n}\n"
        assert extract_body(content, "run") == "{\n    go();\n}"

    def test_nested_braces(self) -> None:
        content = "void run() { if (a) { b(); } else { c(); } }"
        body = extract_body(content, "run")
        assert body.startswith("{") and body.endswith("}")
        assert body.count("{") == body.count("}") == 3

    def test_throws_clause(self) -> None:
        content = "public void load(String p) throws IOException, SQLException {\n  read(p);\n}"
        assert extract_body(content, "load") == "{\n  read(p);\n}"

    def test_unbalanced_returns_empty(self) -> None:
        assert extract_body("void run() { if (a) { b();", "run") == ""

    def test_missing_signature_returns_empty(self) -> None:
        assert extract_body("void other() { }", "run") == ""

    def test_name_is_word_bounded(self) -> None:
        content = "void rerun() { a(); }\nvoid run() { b(); }"
        assert extract_body(content, "run") == "{ b(); }"

    def test_call_site_is_not_a_signature(self) -> None:
        content = "void caller() {\n    save(u);\n}\nvoid save(User u) {\n    store(u);\n}"
        assert extract_body(content, "save") == "{\n    store(u);\n}"

    def test_start_offset_selects_overload(self) -> None:
        content = "void put(int a) { one(); }\nvoid put(String s) { two(); }"
        second = content.index("void put(String")
        assert extract_body(content, "put") == "{ one(); }"
        assert extract_body(content, "put", second) == "{ two(); }"

    def test_braces_in_strings_are_counted(self) -> None:
        content = 'void run() { String s = "}"; x(); }'
        assert extract_body(content, "run") == '{ String s = "}'

    def test_name_with_regex_metacharacters(self) -> None:
        assert extract_body("void a$b() { }", "a$b") == "{ }"


class TestFindBody:
    def test_offset_points_at_opening_brace(self) -> None:
        content = "int size() {\n  return n;\n}"
        offset, body = find_body(content, "size")
        assert content[offset] == "{"
        assert body == content[offset:]

    def test_not_found(self) -> None:
        assert find_body("", "size") == (-1, "")


class TestBalancedBlock:
    def test_not_a_brace(self) -> None:
        assert balanced_block("abc", 0) == ""

    def test_out_of_range(self) -> None:
        assert balanced_block("{}", 5) == ""
        assert balanced_block("{}", -1) == ""

    def test_inner_block(self) -> None:
        content = "{ a { b } c }"
        assert balanced_block(content, content.index("{ b")) == "{ b }"
