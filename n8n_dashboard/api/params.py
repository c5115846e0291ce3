import re
from typing import Optional

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_positive_int(value: Optional[str], default: int) -> int:
    """
    Parse a numeric query parameter leniently.

    Accepts a leading integer ("25", "25abc", " 7") and falls back to the
    default for anything else, including zero and negative numbers.
    """
    if value is None:
        return default
    match = _LEADING_INT_RE.match(value)
    if not match:
        return default
    parsed = int(match.group(1))
    return parsed if parsed > 0 else default
