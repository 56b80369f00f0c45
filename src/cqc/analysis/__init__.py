"""Analysis: configuration, file discovery, the evaluation pipeline and its result."""

from cqc.analysis.config import (
    Config,
    ConfigError,
    LanguageConfig,
    filter_by_categories,
    filter_by_severity,
    load_config,
    load_default_config,
    parse_config,
)
from cqc.analysis.discovery import LANGUAGE_BY_EXTENSION, SKIP_DIRS, collect_files, detect_language
from cqc.analysis.pipeline import FileReport, analyze, analyze_file, analyze_source, scan
from cqc.analysis.result import AnalysisResult

__all__ = [
    "LANGUAGE_BY_EXTENSION",
    "SKIP_DIRS",
    "AnalysisResult",
    "Config",
    "ConfigError",
    "FileReport",
    "LanguageConfig",
    "analyze",
    "analyze_file",
    "analyze_source",
    "collect_files",
    "detect_language",
    "filter_by_categories",
    "filter_by_severity",
    "load_config",
    "load_default_config",
    "parse_config",
    "scan",
]
