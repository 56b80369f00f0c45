"""Balanced-body extraction for brace-delimited method and function bodies."""

from __future__ import annotations

import re

# Optional ``throws`` clause between the parameter list and the opening brace.
_THROWS_CLAUSE = r"(?:throws\s+[\w.,\s<>]+?)?"


def _signature_re(name: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(name) + r"\s*\([^)]*\)\s*" + _THROWS_CLAUSE + r"\s*\{")


def balanced_block(content: str, brace: int) -> str:
    """Return the block opening at offset *brace* up to its matching ``}`` inclusive.

    Returns ``""`` when *brace* is not an opening brace or the block never closes.
    """
    if brace < 0 or brace >= len(content) or content[brace] != "{":
        return ""
    depth = 0
    for i in range(brace, len(content)):
        ch = content[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return content[brace : i + 1]
    return ""


def find_body(content: str, name: str, start: int = 0) -> tuple[int, str]:
    """Locate the body of the first callable named *name* at or after *start*.

    Returns ``(offset, body)`` where *offset* is the position of the opening
    brace and *body* spans from the opening brace to its matching closing brace
    inclusive.  When no signature matches, or the braces never balance, the
    result is ``(-1, "")``.

    Braces inside string literals and comments are counted like any other
    brace.
    """
    match = _signature_re(name).search(content, start)
    if match is None:
        return -1, ""

    brace = match.end() - 1
    body = balanced_block(content, brace)
    return (brace, body) if body else (-1, "")


def extract_body(content: str, name: str, start: int = 0) -> str:
    """Return the brace-balanced body of the first callable named *name*.

    Returns ``""`` when the signature is absent or the body is unbalanced.
    """
    return find_body(content, name, start)[1]
