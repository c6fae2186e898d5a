"""
Entity IDs - Template Tokens
==============================
Placeholder extraction and substitution for display-ID templates.

A placeholder is any `{NAME}` in the template. Token names may be
configured with or without the surrounding braces; both spellings refer
to the same logical token.
"""

from __future__ import annotations

import re
from typing import Mapping

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def normalize_token_name(token: str) -> str:
    """Return the bare token name: "{ LOCATION_CODE }" -> "LOCATION_CODE"."""
    if not isinstance(token, str):
        return ""
    name = token.strip()
    if name.startswith("{") and name.endswith("}"):
        name = name[1:-1]
    return name.strip()


def extract_tokens(format_string: str) -> tuple[str, ...]:
    """
    Return the placeholder names used in `format_string`.

    First-occurrence order, duplicates collapsed:
        "AST-{A}-{B}-{A}" -> ("A", "B")
    """
    if not format_string:
        return ()
    seen: dict[str, None] = {}
    for match in _PLACEHOLDER.finditer(format_string):
        name = normalize_token_name(match.group(1))
        if name:
            seen.setdefault(name, None)
    return tuple(seen)


def substitute_tokens(format_string: str, values: Mapping[str, str]) -> str:
    """
    Replace every placeholder with its value from `values` (keyed by bare
    name). Placeholders with no value are left as they are.
    """

    def _replace(match: re.Match) -> str:
        name = normalize_token_name(match.group(1))
        if name in values:
            return str(values[name])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, format_string)
