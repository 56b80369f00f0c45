"""Structural fact model shared by the builders and the rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from cqc.extraction.position import line_snippet

# ---------------------------------------------------------------------------
# Class-oriented facts (Java)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MethodFacts:
    """A method signature found in a class body."""

    name: str
    return_type: str
    parameters: tuple[str, ...]
    annotations: tuple[str, ...]
    visibility: str  # public, private, protected, package
    is_static: bool
    is_final: bool
    line: int  # 1-based line of the signature
    column: int  # 1-based column of the signature
    offset: int = 0  # character offset of the signature

    @property
    def is_public(self) -> bool:
        return self.visibility == "public"

    @property
    def is_private(self) -> bool:
        return self.visibility == "private"

    @property
    def is_protected(self) -> bool:
        return self.visibility == "protected"

    def has_annotation(self, marker: str) -> bool:
        """Return True when any annotation line contains *marker*."""
        return any(marker in a for a in self.annotations)


@dataclass(frozen=True)
class FieldFacts:
    """A field declaration found in a class body."""

    name: str
    type_name: str
    annotations: tuple[str, ...]
    visibility: str
    is_static: bool
    is_final: bool
    line: int
    column: int

    @property
    def is_public(self) -> bool:
        return self.visibility == "public"

    @property
    def is_private(self) -> bool:
        return self.visibility == "private"

    @property
    def is_protected(self) -> bool:
        return self.visibility == "protected"

    def has_annotation(self, marker: str) -> bool:
        return any(marker in a for a in self.annotations)


@dataclass(frozen=True)
class ClassFacts:
    """Facts for one Java compilation unit (first class only)."""

    name: str = ""
    package: str = ""
    imports: frozenset[str] = frozenset()
    annotations: tuple[str, ...] = ()
    methods: tuple[MethodFacts, ...] = ()
    fields: tuple[FieldFacts, ...] = ()

    def has_annotation(self, marker: str) -> bool:
        return any(marker in a for a in self.annotations)

    @property
    def is_controller(self) -> bool:
        """True for ``@Controller``/``@RestController`` classes or ``*Controller`` names."""
        if self.has_annotation("@Controller") or self.has_annotation("@RestController"):
            return True
        return "controller" in self.name.lower()


# ---------------------------------------------------------------------------
# Function-oriented facts (JavaScript / TypeScript)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FunctionFacts:
    """A function declaration in one of the supported script idioms."""

    name: str
    parameters: tuple[str, ...]
    line: int
    column: int
    is_arrow: bool = False
    is_async: bool = False
    body_offset: int = -1  # offset of the opening brace


@dataclass(frozen=True)
class ScriptFacts:
    """All function declarations of a script, in source order."""

    functions: tuple[FunctionFacts, ...] = ()


# ---------------------------------------------------------------------------
# Markup and style facts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImageTag:
    """An ``<img>`` tag with its optional ``src``/``alt`` attribute values."""

    tag: str
    src: str | None = None
    alt: str | None = None
    line: int = 0


@dataclass(frozen=True)
class MarkupFacts:
    """Tag occurrences extracted from an HTML document."""

    images: tuple[ImageTag, ...] = ()
    forms: tuple[str, ...] = ()
    scripts: tuple[str, ...] = ()


@dataclass(frozen=True)
class StyleFacts:
    """Selector clauses of a stylesheet, at-rules excluded."""

    selectors: tuple[str, ...] = ()


StructuralFacts = Union[ClassFacts, ScriptFacts, MarkupFacts, StyleFacts, None]


# ---------------------------------------------------------------------------
# Source unit
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceUnit:
    """One file's text and the facts derived from it."""

    path: str
    language: str
    content: str
    lines: tuple[str, ...] = field(default=())
    facts: StructuralFacts = None

    @classmethod
    def from_text(cls, path: str, language: str, content: str) -> SourceUnit:
        """Build a unit, splitting lines and running the language's fact builder."""
        from cqc.extraction.builders import build_facts

        return cls(
            path=path,
            language=language,
            content=content,
            lines=tuple(content.split("\n")),
            facts=build_facts(language, content),
        )

    def snippet(self, line: int) -> str:
        """Stripped text of 1-based *line*, empty when out of range."""
        return line_snippet(self.lines, line)
