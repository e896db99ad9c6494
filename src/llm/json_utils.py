# src/llm/json_utils.py — v1
"""Tolerant JSON extraction from generated text.

Tries, in order: the whole text, a fenced ```json block, then the first
balanced object or array in the text.
"""

from __future__ import annotations

import json
import re
from typing import Any

from mpfscore.llm.errors import LLMInvalidJSONError

_FENCED_RE = re.compile(
    r"```(?:json)?\s*(\{[\s\S]*?\}|\[[\s\S]*?\])\s*```", re.IGNORECASE
)


def parse_json(content: str, default: str | None = None) -> Any:
    """Parse model output as JSON.

    Args:
        content: Raw generated text.
        default: JSON text to parse instead when ``content`` is blank.

    Raises:
        LLMInvalidJSONError: If no JSON value can be extracted.
    """
    text = (content or "").strip()
    if not text and default is not None:
        text = default

    for candidate in (text, extract_fenced_json(text), extract_first_json_value(text)):
        if candidate is None:
            continue
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue

    raise LLMInvalidJSONError(f"Model output is not valid JSON: {text[:80]!r}")


def extract_fenced_json(text: str) -> str | None:
    m = _FENCED_RE.search(text)
    if m:
        return m.group(1).strip()
    return None


def extract_first_json_value(text: str) -> str | None:
    """Return the first balanced ``{...}`` or ``[...]`` span, string-aware."""
    starts = [(text.find(ch), ch) for ch in "{["]
    starts = [(pos, ch) for pos, ch in starts if pos != -1]
    if not starts:
        return None

    pos, opening = min(starts)
    closing = "}" if opening == "{" else "]"

    depth = 0
    in_str = False
    esc = False
    for i in range(pos, len(text)):
        c = text[i]
        if in_str:
            if esc:
                esc = False
            elif c == "\\":
                esc = True
            elif c == '"':
                in_str = False
            continue

        if c == '"':
            in_str = True
        elif c == opening:
            depth += 1
        elif c == closing:
            depth -= 1
            if depth == 0:
                return text[pos : i + 1]

    return None
