"""
Isolate the JSON object a model wrapped in prose, code fences or commentary.
"""

import json
from typing import Optional


def _balanced_end(text: str, start: int) -> int:
    """Index of the `}` closing the object opened at `start`, or -1."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _parses(span: str) -> bool:
    try:
        json.loads(span)
    except ValueError:
        return False
    return True


def find_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced `{...}` span in `text` that parses as JSON.

    Balanced spans that are not JSON (e.g. "{high protein}" in the prose) are
    skipped. If none parses, the first balanced span is returned so the
    decoder can report why. When the braces never balance (truncated output,
    stray quotes), fall back to the widest span from the first `{` to the
    last `}`. Returns None if the text holds no `{...}` span at all.
    """
    if not text:
        return None
    first = text.find("{")
    if first == -1:
        return None

    first_balanced: Optional[str] = None
    start = first
    while start != -1:
        end = _balanced_end(text, start)
        if end == -1:
            break
        span = text[start:end + 1]
        if _parses(span):
            return span
        if first_balanced is None:
            first_balanced = span
        start = text.find("{", start + 1)

    if first_balanced is not None:
        return first_balanced

    last = text.rfind("}")
    if last > first:
        return text[first:last + 1]
    return None


def extract_json(text: str) -> str:
    """Candidate JSON substring of `text`, or `text` unchanged if none is found."""
    candidate = find_json_object(text)
    return candidate if candidate is not None else text
