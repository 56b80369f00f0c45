"""Positional index: character offsets to 1-based line/column, line snippets."""

from __future__ import annotations

from bisect import bisect_right


def line_at(content: str, offset: int) -> int:
    """Return the 1-based line containing *offset*.

    Offsets past the end of *content* are clamped to the last position.
    """
    offset = max(0, min(offset, len(content)))
    return content.count("\n", 0, offset) + 1


def column_at(content: str, offset: int) -> int:
    """Return the 1-based column of *offset* within its line."""
    offset = max(0, min(offset, len(content)))
    line_start = content.rfind("\n", 0, offset) + 1
    return offset - line_start + 1


def position_at(content: str, offset: int) -> tuple[int, int]:
    """Return ``(line, column)`` for *offset*."""
    return line_at(content, offset), column_at(content, offset)


class LineIndex:
    """Line-start table for resolving many offsets in one text.

    Built once per text; each lookup is a binary search instead of a scan
    from the start of the text.
    """

    def __init__(self, content: str) -> None:
        self._length = len(content)
        starts = [0]
        pos = content.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = content.find("\n", pos + 1)
        self._starts = starts

    def position(self, offset: int) -> tuple[int, int]:
        """Return ``(line, column)`` for *offset*, clamped like :func:`position_at`."""
        offset = max(0, min(offset, self._length))
        line = bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1


def line_snippet(lines: list[str] | tuple[str, ...], line: int) -> str:
    """Return the stripped text of 1-based *line*, or ``""`` when out of range."""
    if line < 1 or line > len(lines):
        return ""
    return lines[line - 1].strip()
