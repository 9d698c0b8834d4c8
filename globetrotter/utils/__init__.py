"""Lenient number parsing for form-style payloads.

Admin and itinerary forms send numbers as strings, blanks or garbage.
These helpers turn them into numbers or None without raising.
"""


def safe_int(v):
    """Parse an int ("12", "12.7", 12) or return None. Booleans are rejected."""
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(float(v)) if isinstance(v, str) and "." in v else int(v)
    except (ValueError, TypeError, OverflowError):
        return None


def safe_float(v):
    """Parse a float or return None. Booleans are rejected."""
    if v is None or isinstance(v, bool):
        return None
    try:
        return float(v)
    except (ValueError, TypeError):
        return None


def int_or_default(v, default: int) -> int:
    """Parsed int, or default when missing, unparseable or zero."""
    return safe_int(v) or default
