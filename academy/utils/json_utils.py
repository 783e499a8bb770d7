# File: academy/utils/json_utils.py

from __future__ import annotations
import json
from typing import Optional

def _strip_code_fences(s: str) -> str:
    """Remove a surrounding ```...``` fence (e.g. ```json ... ```)."""
    s = s.strip()
    if s.startswith("```"):
        # Drop the opening line (```[lang]?)
        nl = s.find("\n")
        inner = s[nl + 1 :] if nl != -1 else s
        end = inner.rfind("```")
        if end != -1:
            inner = inner[:end]
        return inner.strip()
    return s

def _extract_balanced(s: str, openers: str = "{[") -> Optional[str]:
    """
    Return the first balanced JSON object/array found in ``s``, ignoring
    braces inside string literals. ``None`` when nothing is found.
    """
    start = None
    opener = None
    for i, ch in enumerate(s):
        if ch in openers:
            start = i
            opener = ch
            break
    if start is None:
        return None

    closer = "}" if opener == "{" else "]"
    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(s)):
        c = s[i]
        if escape:
            escape = False
            continue
        if c == "\\" and in_string:
            escape = True
            continue
        if c == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if c == opener:
            depth += 1
        elif c == closer:
            depth -= 1
            if depth == 0:
                return s[start : i + 1]
    return None

def extract_json_object(raw: str) -> dict:
    """
    Pull the first JSON *object* out of free-form model output
    (prose before/after, code fences). Raises ``ValueError`` when the text
    carries no parseable object.
    """
    if not raw:
        raise ValueError("Invalid AI response format")

    text = _strip_code_fences(str(raw))
    candidate = _extract_balanced(text, openers="{")
    if candidate is None:
        raise ValueError("Invalid AI response format")
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid AI response format: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Invalid AI response format")
    return data
