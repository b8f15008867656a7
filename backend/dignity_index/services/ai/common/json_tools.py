"""Tolerant JSON extraction from LLM replies (fences, prose around the payload)."""

from __future__ import annotations

import json
from typing import Any

_OPENERS = {"{": "}", "[": "]"}


def extract_json(text: str) -> dict | list | None:
    """Return the first valid JSON object or array found in *text*.

    The whole reply is tried first; after that every ``{`` / ``[`` is tried
    as the start of a brace-balanced candidate. ``None`` if nothing parses.
    """
    if not text or not text.strip():
        return None

    stripped = text.strip()
    try:
        return json.loads(stripped)
    except ValueError:
        pass

    for i, ch in enumerate(stripped):
        if ch in _OPENERS:
            found = _parse_balanced(stripped, i, ch, _OPENERS[ch])
            if found is not None:
                return found

    return None


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Like ``extract_json`` but only accepts a top-level object."""
    found = extract_json(text)
    return found if isinstance(found, dict) else None


def _parse_balanced(text: str, start: int, open_ch: str, close_ch: str) -> dict | list | None:
    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(text)):
        ch = text[i]

        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = in_string
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                try:
                    return json.loads(text[start : i + 1])
                except ValueError:
                    return None

    return None
