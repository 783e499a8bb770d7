# File: academy/core/prompt_manager.py

import os
import re
from functools import lru_cache
from typing import Any, Dict

# --- Location of the .md prompts ---
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PROMPTS_DIR = os.path.join(BASE_DIR, 'prompts')

# --- Regex for {{ var }} and {{ var|default(...) }} ---
PLACEHOLDER_RE = re.compile(r"{{\s*([a-zA-Z_][\w\.]*)\s*(?:\|default\(([^)]*)\))?\s*}}")

def _coerce_literal(s: str) -> Any:
    """Turn 'true'/'false'/numbers/'null' into Python literals; otherwise an unquoted string."""
    t = s.strip()
    if t.lower() in ("true", "false"):
        return t.lower() == "true"
    if t.lower() == "null":
        return None
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        pass
    if (t.startswith("'") and t.endswith("'")) or (t.startswith('"') and t.endswith('"')):
        return t[1:-1]
    return t

def _lookup(context: Dict[str, Any], dotted: str) -> Any:
    """
    Looks up a dotted path in a nested context of dicts and objects.
    """
    cur: Any = context
    for part in dotted.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        elif hasattr(cur, part):
            cur = getattr(cur, part)
        else:
            return None
    return cur

def _render_template_jinja_like(template: str, context: Dict[str, Any]) -> str:
    def repl(m: re.Match):
        var = m.group(1)
        default_raw = m.group(2)
        val = _lookup(context, var)

        if val is None and default_raw is not None:
            val = _coerce_literal(default_raw)

        if isinstance(val, bool):
            return "true" if val else "false"
        if val is None:
            return ""
        return str(val)

    return PLACEHOLDER_RE.sub(repl, template)

JSON_GUARDRAIL = (
    "\n\n[OUTPUT CONSTRAINT]\n"
    "- Answer ONLY with a single valid JSON object.\n"
    "- No backticks, no text outside the JSON."
)

@lru_cache(maxsize=64)
def get_prompt_template(path: str) -> str:
    """
    Load a prompt template from a .md file; ``"functions.coach"`` maps to
    ``prompts/functions/coach.md``.
    """
    parts = path.split('.')
    file_name = f"{parts[-1]}.md"
    full_path = os.path.join(PROMPTS_DIR, *parts[:-1], file_name)

    with open(full_path, 'r', encoding='utf-8') as f:
        return f.read()

def render(template: str, ensure_json: bool = False, **kwargs) -> str:
    """Render an in-memory template with the same placeholder rules as prompt files."""
    rendered = _render_template_jinja_like(template, kwargs)
    if ensure_json:
        rendered = rendered + JSON_GUARDRAIL
    return rendered

def get_prompt(path: str, ensure_json: bool = False, **kwargs) -> str:
    """
    Fetch a template and inject variables.
    - Supports {{ var }} and {{ var|default(...) }}.
    - ``ensure_json`` appends a 'JSON only' guard.
    """
    return render(get_prompt_template(path), ensure_json=ensure_json, **kwargs)
