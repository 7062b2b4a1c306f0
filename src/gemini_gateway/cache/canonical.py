"""Label canonicalization for cache keys."""

import re

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_SEPARATORS = re.compile(r"[\s-]+")


def canonicalize(label: str | None) -> str:
    """
    Map a free-form label to its equivalence-class key.
    
    Lowercases, replaces anything outside [a-z0-9], whitespace and "-" with a
    space, splits into tokens on whitespace and hyphens, and sorts the tokens.
    "Sky Blue", "blue, sky!!" and "SKY-BLUE" all map to "blue sky".
    
    Args:
        label: Raw label (None is treated as empty)
    
    Returns:
        Space-joined sorted tokens ("" when nothing remains)
    """
    lowered = (label or "").lower()
    cleaned = _DISALLOWED.sub(" ", lowered)
    tokens = [token for token in _SEPARATORS.split(cleaned) if token]
    return " ".join(sorted(tokens))
