"""Helpers for extracting clean JSON from noisy WP-CLI output.

Single-responsibility: text processing only. Callers run commands.
"""

from __future__ import annotations

from typing import Any, Optional


def extract_json_blob(s: str) -> Optional[str]:
    """Return the first balanced JSON object/array found in text.

    Scans for the earliest '[' or '{' and returns the substring spanning
    the matching bracket/brace, tolerating strings and escapes.
    Returns None if no balanced JSON is found.
    """
    if not s:
        return None
    starts = [i for i in (s.find("["), s.find("{")) if i != -1]
    if not starts:
        return None
    start = min(starts)
    open_c = s[start]
    close_c = "]" if open_c == "[" else "}"

    depth = 0
    in_str = False
    esc = False
    for i in range(start, len(s)):
        ch = s[i]
        if in_str:
            if esc:
                esc = False
            elif ch == "\\":
                esc = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"':
            in_str = True
        elif ch == open_c:
            depth += 1
        elif ch == close_c:
            depth -= 1
            if depth == 0:
                return s[start : i + 1]
    return None


def rows_by(rows: Any, key: str) -> dict[str, dict]:
    """Index a WP-CLI JSON table (list of dicts) by one column.

    Non-dict rows and rows without the column are skipped.
    """
    out: dict[str, dict] = {}
    if not isinstance(rows, list):
        return out
    for row in rows:
        if not isinstance(row, dict):
            continue
        value = str(row.get(key, "")).strip()
        if value:
            out[value] = row
    return out
