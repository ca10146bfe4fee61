"""Lenient JSON object extraction from language-model output."""

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", flags=re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers, keeping the fenced content."""
    return _FENCE_RE.sub("", text or "").strip()


def first_json_object(text: str) -> str | None:
    """
    Return the first balanced top-level `{...}` block in text.

    Braces inside JSON string literals are ignored, so a summary containing
    "{" does not end the match early.
    """
    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return None


def parse_json_object(text: str) -> dict[str, Any] | None:
    """Strip fences, extract the first object and parse it; None on any failure."""
    candidate = first_json_object(strip_code_fences(text))
    if candidate is None:
        return None
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None
