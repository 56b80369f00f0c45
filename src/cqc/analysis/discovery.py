"""Source file discovery and extension-based language detection."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Directories never descended into.
SKIP_DIRS: frozenset[str] = frozenset({
    ".git", ".svn", ".hg", "node_modules", "vendor", "target", "build", "dist",
    ".gradle", "__pycache__", ".pytest_cache", ".idea", ".vscode",
})

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".java": "java",
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "css",
    ".less": "css",
}


def detect_language(path: Path | str) -> str | None:
    """Language tag for *path* from its extension, or None when unsupported."""
    return LANGUAGE_BY_EXTENSION.get(Path(path).suffix.lower())


def _is_skipped(path: Path, root: Path) -> bool:
    return any(part in SKIP_DIRS for part in path.relative_to(root).parts[:-1])


def collect_files(root: Path) -> list[Path]:
    """Supported source files under *root*, sorted.

    *root* may also be a single file, which is returned when its language
    is supported.
    """
    if root.is_file():
        return [root] if detect_language(root) is not None else []
    if not root.is_dir():
        logger.warning("Scan path does not exist: %s", root)
        return []

    files: list[Path] = []
    for file_path in sorted(root.rglob("*")):
        if detect_language(file_path) is None:
            continue
        if _is_skipped(file_path, root) or not file_path.is_file():
            continue
        files.append(file_path)
    logger.debug("Discovered %d source files under %s", len(files), root)
    return files
