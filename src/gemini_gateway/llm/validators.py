"""Validation of classification replies."""

import re

NOT_FOUND = "N/A"

_COLOR_CODE = re.compile(r"^#(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})$")


def is_valid_color_code(value: object) -> bool:
    """True for "#" followed by exactly 3 or 6 hex digits (surrounding whitespace ignored)."""
    return isinstance(value, str) and bool(_COLOR_CODE.match(value.strip()))


def normalize_color_reply(reply: str | None) -> str:
    """Trimmed color code, or the NOT_FOUND sentinel for anything else."""
    candidate = (reply or "").strip()
    if is_valid_color_code(candidate):
        return candidate
    return NOT_FOUND
