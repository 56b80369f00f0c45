"""Annotation back-scan: attribute ``@Marker`` lines to the declaration that follows them."""

from __future__ import annotations

_ANNOTATION_MARKER = "@"
_COMMENT_PREFIXES = ("//", "/*", "*")


def collect_annotations(content: str, before: int) -> list[str]:
    """Collect annotation lines immediately preceding offset *before*.

    Lines of ``content[:before]`` are walked from the last one backwards,
    one ``rfind`` at a time, so only the lines actually inspected are touched.
    Annotation lines are kept in top-to-bottom order.  Blank lines and comment
    lines (``//``, ``/*``, ``*``) are skipped without ending the scan, so a
    Javadoc block between annotations and the declaration is tolerated.  Any
    other non-empty line ends the scan.

    Parameters
    ----------
    content:
        Full source text.
    before:
        Offset of the declaration start.  Text at or after this offset is
        never inspected.

    Returns
    -------
    list[str]
        Stripped annotation lines, e.g. ``["@Service", "@Slf4j"]``.
    """
    if before <= 0:
        return []

    annotations: list[str] = []
    end = min(before, len(content))
    while end >= 0:
        start = content.rfind("\n", 0, end) + 1
        line = content[start:end].strip()
        end = start - 1
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        if line.startswith(_ANNOTATION_MARKER):
            annotations.append(line)
            continue
        break
    annotations.reverse()
    return annotations
