"""Extraction: positional index, body and annotation scanning, per-language fact builders."""

from cqc.extraction.annotations import collect_annotations
from cqc.extraction.body import balanced_block, extract_body, find_body
from cqc.extraction.builders import (
    build_class_facts,
    build_facts,
    build_markup_facts,
    build_script_facts,
    build_style_facts,
)
from cqc.extraction.facts import (
    ClassFacts,
    FieldFacts,
    FunctionFacts,
    ImageTag,
    MarkupFacts,
    MethodFacts,
    ScriptFacts,
    SourceUnit,
    StructuralFacts,
    StyleFacts,
)
from cqc.extraction.position import LineIndex, column_at, line_at, line_snippet, position_at

__all__ = [
    "ClassFacts",
    "FieldFacts",
    "FunctionFacts",
    "ImageTag",
    "LineIndex",
    "MarkupFacts",
    "MethodFacts",
    "ScriptFacts",
    "SourceUnit",
    "StructuralFacts",
    "StyleFacts",
    "balanced_block",
    "build_class_facts",
    "build_facts",
    "build_markup_facts",
    "build_script_facts",
    "build_style_facts",
    "collect_annotations",
    "column_at",
    "extract_body",
    "find_body",
    "line_at",
    "line_snippet",
    "position_at",
]
