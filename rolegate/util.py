"""Text helpers for model definitions and policy files."""

from __future__ import annotations

import re
from collections.abc import Iterator

_ESC_A = re.compile(r"\b(r\d*|p\d*)\.")
_ESC_G = re.compile(
    r"\b(g\d*)\(((?:\s*[r|p]\d*\.\w+\s*,\s*){1,2}\s*[r|p]\d*\.\w+\s*)\)"
)
_ESC_C = re.compile(r'(\s*"[^"]*"?|\s*[^,]*)')
ESC_E = re.compile(r"\beval\(([^)]*)\)")


def escape_assertion(s: str) -> str:
    """Turn ``r.sub`` / ``p2.obj`` style references into ``r_sub`` / ``p2_obj``."""
    return _ESC_A.sub(r"\1_", s)


def remove_comment(s: str) -> str:
    """Drop everything from the first ``#`` on and strip trailing whitespace."""
    return s.split("#", 1)[0].rstrip()


def escape_eval(m: str) -> str:
    """Wrap the argument of every ``eval(...)`` call in ``escape_assertion``."""
    return ESC_E.sub(r"eval(escape_assertion(\1))", m)


def _find_all(pattern: re.Pattern[str], text: str) -> Iterator[str]:
    """Yield successive matches, never an empty one right after a previous match."""
    pos = 0
    last_end: int | None = None
    while pos <= len(text):
        match = pattern.search(text, pos)
        if match is None:
            return
        start, end = match.span()
        if start == end:
            pos = end + 1
            if end == last_end:
                continue
        else:
            pos = end
        last_end = end
        yield match.group()


def parse_csv_line(line: str) -> list[str] | None:
    """Split one policy line into fields; ``None`` for blank or comment lines."""
    line = line.strip()
    if not line or line.startswith("#"):
        return None

    fields = []
    for raw in _find_all(_ESC_C, line):
        col = raw.strip()
        if len(col) >= 2 and col.startswith('"') and col.endswith('"'):
            col = col[1:-1]
        fields.append(col)
    return fields or None