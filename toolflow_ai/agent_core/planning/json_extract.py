"""Locate JSON objects inside free-form model output.

Models frequently wrap the requested JSON in prose or markdown fences.
``extract_json_object`` tries a direct parse first and otherwise walks every
``{`` in the text, scanning for a well-balanced ``{...}`` span that starts
there. String literals and escapes are tracked so that braces inside strings
do not affect the depth count. The first span that parses as JSON wins; prose
braces before it (balanced or not) are skipped and trailing text is ignored.
"""

from __future__ import annotations

import json
from typing import Any, Optional


def find_balanced_object(text: str, start: int = 0) -> Optional[str]:
    """Return the balanced ``{...}`` substring opening at the first ``{`` at or after ``start``.

    Returns ``None`` when there is no ``{`` or the one found is never closed.
    """
    start = text.find("{", start)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for pos in range(start, len(text)):
        ch = text[pos]
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
                return text[start : pos + 1]
    return None


def extract_json_object(text: str) -> Any:
    """Parse ``text`` as JSON, falling back to its first embedded JSON object.

    Raises:
        ValueError: When neither the whole text nor any embedded object parses.
    """
    stripped = text.strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    first_error: Optional[json.JSONDecodeError] = None
    pos = stripped.find("{")
    while pos != -1:
        candidate = find_balanced_object(stripped, pos)
        if candidate is not None:
            try:
                return json.loads(candidate)
            except json.JSONDecodeError as e:
                first_error = first_error or e
        pos = stripped.find("{", pos + 1)

    if first_error is None:
        raise ValueError("No JSON object found in response")
    raise ValueError(f"Invalid JSON in response: {first_error.msg}")
