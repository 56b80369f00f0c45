"""Language-specific fact builders: regex extraction of classes, functions, tags, selectors."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from cqc.extraction.annotations import collect_annotations
from cqc.extraction.facts import (
    ClassFacts,
    FieldFacts,
    FunctionFacts,
    ImageTag,
    MarkupFacts,
    MethodFacts,
    ScriptFacts,
    StyleFacts,
)
from cqc.extraction.position import LineIndex

if TYPE_CHECKING:
    from collections.abc import Callable

    from cqc.extraction.facts import StructuralFacts

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Regex patterns (compiled once)
# ---------------------------------------------------------------------------

# -- Java --
_PACKAGE_RE = re.compile(r"package\s+([a-zA-Z0-9_.]+)\s*;")
_IMPORT_RE = re.compile(r"import\s+(?:static\s+)?([a-zA-Z0-9_.*]+)\s*;")
# Annotations may share the declaration line: ``@Service public class A {``.
_CLASS_RE = re.compile(
    r"^[ \t]*(?P<inline>(?:@\w+(?:\([^)\n]*\))?[ \t]+)*)"
    r"(?P<decl>(?:(?:public|protected|private|abstract|final|static)\s+)*"
    r"class\s+(?P<name>\w+))",
    re.MULTILINE,
)
_INLINE_ANNOTATION_RE = re.compile(r"@\w+(?:\([^)\n]*\))?")

_TYPE = r"\w+(?:<[^>]+>)?(?:\[\])*"

_METHOD_RE = re.compile(
    r"^[ \t]*(?P<sig>"
    r"(?:(?P<vis>public|private|protected)\s+)?"
    r"(?P<mods>(?:(?:static|final|abstract|synchronized)\s+)*)"
    rf"(?P<type>{_TYPE})\s+(?P<name>\w+)\s*\((?P<params>[^)]*)\)\s*"
    r"(?:throws\s+[^{;]+)?\s*\{)",
    re.MULTILINE,
)

_FIELD_RE = re.compile(
    r"^[ \t]*(?P<sig>"
    r"(?:(?P<vis>public|private|protected)\s+)?"
    r"(?P<mods>(?:(?:static|final|transient|volatile)\s+)*)"
    rf"(?P<type>{_TYPE})\s+(?P<name>\w+)\s*(?:=\s*[^;]+)?;)",
    re.MULTILINE,
)

# Statement keywords that the signature regexes would otherwise accept as a
# method name or a type.
_NON_METHOD_NAMES: frozenset[str] = frozenset(
    {"if", "for", "while", "switch", "catch", "synchronized", "return", "new", "throw", "else"}
)
_NON_TYPE_WORDS: frozenset[str] = frozenset(
    {
        "return",
        "new",
        "else",
        "throw",
        "package",
        "import",
        "break",
        "continue",
        "case",
        "assert",
        "goto",
        "yield",
    }
)
_VISIBILITY_WORDS: frozenset[str] = frozenset({"public", "private", "protected"})

# -- JavaScript / TypeScript --
_JS_PARAMS = r"\((?P<params>[^)]*)\)"

# (pattern, is_arrow)
_JS_FUNCTION_PATTERNS: tuple[tuple[re.Pattern[str], bool], ...] = (
    (re.compile(rf"function\s+(?P<name>\w+)\s*{_JS_PARAMS}\s*\{{"), False),
    (re.compile(rf"(?P<name>\w+)\s*:\s*(?:async\s+)?function\s*{_JS_PARAMS}\s*\{{"), False),
    (re.compile(rf"(?P<name>\w+)\s*=\s*(?:async\s+)?function\s*{_JS_PARAMS}\s*\{{"), False),
    (re.compile(rf"(?P<name>\w+)\s*=\s*(?:async\s*)?{_JS_PARAMS}\s*=>\s*\{{"), True),
    (re.compile(rf"const\s+(?P<name>\w+)\s*=\s*(?:async\s*)?{_JS_PARAMS}\s*=>\s*\{{"), True),
    (re.compile(rf"let\s+(?P<name>\w+)\s*=\s*(?:async\s*)?{_JS_PARAMS}\s*=>\s*\{{"), True),
)
_ASYNC_PREFIX_RE = re.compile(r"\basync\s+$")
_ASYNC_INLINE_RE = re.compile(r"[=:]\s*async\b")

# -- HTML --
_IMG_RE = re.compile(r"<img[^>]*>", re.IGNORECASE)
_SRC_ATTR_RE = re.compile(r"src\s*=\s*[\"']([^\"']*)[\"']", re.IGNORECASE)
_ALT_ATTR_RE = re.compile(r"alt\s*=\s*[\"']([^\"']*)[\"']", re.IGNORECASE)
_FORM_RE = re.compile(r"<form[^>]*>", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script[^>]*>[\s\S]*?</script>", re.IGNORECASE)

# -- CSS --
_CSS_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_SELECTOR_RE = re.compile(r"([^{}]+)\s*\{")


# ---------------------------------------------------------------------------
# Java
# ---------------------------------------------------------------------------


def _split_parameters(raw: str) -> tuple[str, ...]:
    """Split a parameter list on top-level commas (generic arguments kept intact)."""
    params: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in raw:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth = max(0, depth - 1)
        if ch == "," and depth == 0:
            params.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    params.append("".join(current).strip())
    return tuple(p for p in params if p)


def _methods(content: str, class_name: str, index: LineIndex) -> list[MethodFacts]:
    methods: list[MethodFacts] = []
    for m in _METHOD_RE.finditer(content):
        name = m.group("name")
        type_name = m.group("type")
        if name in _NON_METHOD_NAMES or type_name in _NON_TYPE_WORDS:
            continue
        visibility = m.group("vis") or "package"
        # Constructors match with the visibility keyword in the type slot.
        if type_name in _VISIBILITY_WORDS:
            if name != class_name:
                continue
            visibility = type_name
            type_name = ""
        mods = m.group("mods").split()
        start = m.start("sig")
        line, column = index.position(start)
        methods.append(
            MethodFacts(
                name=name,
                return_type=type_name,
                parameters=_split_parameters(m.group("params")),
                annotations=tuple(collect_annotations(content, start)),
                visibility=visibility,
                is_static="static" in mods,
                is_final="final" in mods,
                line=line,
                column=column,
                offset=start,
            )
        )
    return methods


def _fields(content: str, index: LineIndex) -> list[FieldFacts]:
    fields: list[FieldFacts] = []
    for m in _FIELD_RE.finditer(content):
        name = m.group("name")
        type_name = m.group("type")
        if type_name in _NON_TYPE_WORDS or type_name in _VISIBILITY_WORDS:
            continue
        mods = m.group("mods").split()
        start = m.start("sig")
        line, column = index.position(start)
        fields.append(
            FieldFacts(
                name=name,
                type_name=type_name,
                annotations=tuple(collect_annotations(content, start)),
                visibility=m.group("vis") or "package",
                is_static="static" in mods,
                is_final="final" in mods,
                line=line,
                column=column,
            )
        )
    return fields


def build_class_facts(content: str) -> ClassFacts:
    """Extract package, imports, the first class and its members from Java source.

    Class annotations are collected backwards from the ``class`` declaration
    line, followed by any written on that line itself; member annotations
    backwards from each member signature.  Malformed input produces partial
    facts, never an exception.
    """
    index = LineIndex(content)
    package_match = _PACKAGE_RE.search(content)
    class_match = _CLASS_RE.search(content)
    class_name = class_match.group("name") if class_match else ""
    class_annotations: tuple[str, ...] = ()
    if class_match is not None:
        class_annotations = (
            *collect_annotations(content, class_match.start("inline")),
            *_INLINE_ANNOTATION_RE.findall(class_match.group("inline")),
        )

    return ClassFacts(
        name=class_name,
        package=package_match.group(1) if package_match else "",
        imports=frozenset(m.group(1) for m in _IMPORT_RE.finditer(content)),
        annotations=class_annotations,
        methods=tuple(_methods(content, class_name, index)),
        fields=tuple(_fields(content, index)),
    )


# ---------------------------------------------------------------------------
# JavaScript / TypeScript
# ---------------------------------------------------------------------------


def build_script_facts(content: str) -> ScriptFacts:
    """Collect function declarations from every supported idiom, in source order.

    A declaration matched by several idioms (``x = () => {`` and
    ``const x = () => {``) is reported once per name and line.
    """
    index = LineIndex(content)
    found: dict[tuple[str, int], tuple[int, FunctionFacts]] = {}
    for pattern, is_arrow in _JS_FUNCTION_PATTERNS:
        for m in pattern.finditer(content):
            name = m.group("name")
            line, column = index.position(m.start())
            key = (name, line)
            if key in found:
                continue
            line_start = content.rfind("\n", 0, m.start()) + 1
            is_async = bool(
                _ASYNC_PREFIX_RE.search(content[line_start : m.start()])
                or _ASYNC_INLINE_RE.search(m.group(0))
            )
            params = tuple(p.strip() for p in m.group("params").split(",") if p.strip())
            found[key] = (
                m.start(),
                FunctionFacts(
                    name=name,
                    parameters=params,
                    line=line,
                    column=column,
                    is_arrow=is_arrow,
                    is_async=is_async,
                    body_offset=m.end() - 1,
                ),
            )
    ordered = sorted(found.values(), key=lambda item: item[0])
    return ScriptFacts(functions=tuple(fn for _, fn in ordered))


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------


def build_markup_facts(content: str) -> MarkupFacts:
    """Extract ``<img>``, ``<form>`` and inline ``<script>`` occurrences."""
    index = LineIndex(content)
    images: list[ImageTag] = []
    for m in _IMG_RE.finditer(content):
        tag = m.group(0)
        src = _SRC_ATTR_RE.search(tag)
        alt = _ALT_ATTR_RE.search(tag)
        images.append(
            ImageTag(
                tag=tag,
                src=src.group(1) if src else None,
                alt=alt.group(1) if alt else None,
                line=index.position(m.start())[0],
            )
        )
    return MarkupFacts(
        images=tuple(images),
        forms=tuple(m.group(0) for m in _FORM_RE.finditer(content)),
        scripts=tuple(m.group(0) for m in _SCRIPT_RE.finditer(content)),
    )


# ---------------------------------------------------------------------------
# CSS
# ---------------------------------------------------------------------------


def build_style_facts(content: str) -> StyleFacts:
    """Extract selector clauses (the text before each ``{``), skipping at-rules."""
    stripped = _CSS_COMMENT_RE.sub("", content)
    selectors: list[str] = []
    for m in _SELECTOR_RE.finditer(stripped):
        selector = m.group(1).strip()
        if not selector or selector.startswith("@"):
            continue
        selectors.append(selector)
    return StyleFacts(selectors=tuple(selectors))


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

_BUILDERS: dict[str, Callable[[str], StructuralFacts]] = {
    "java": build_class_facts,
    "javascript": build_script_facts,
    "typescript": build_script_facts,
    "html": build_markup_facts,
    "css": build_style_facts,
}


def build_facts(language: str, content: str) -> StructuralFacts:
    """Run the fact builder for *language*; unsupported languages yield ``None``."""
    builder = _BUILDERS.get(language)
    if builder is None:
        logger.debug("No fact builder for language: %s", language)
        return None
    return builder(content)
