"""
Input validation and normalization.

Trims and bounds field lengths, filters suspicious characters while allowing
natural punctuation, and parses the numeric query/form values used by the
API (months, limits, coordinates).
"""

from __future__ import annotations
import re
from typing import Any, Tuple

from wildscout.utils.errors import InvalidArgument

# Allowlist regex: we REMOVE anything NOT in this set.
# Includes letters/numbers/space and common lightweight punctuation used in names.
_SAFE_CHARS_PATTERN = re.compile(r"[^a-zA-Z0-9\s\-\.,'()/&]+")

# UUID validation pattern (RFC 4122 compliant)
_UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE
)

MAX_NAME_LEN = 120
MAX_NOTES_LEN = 1000
MAX_QUERY_LEN = 80


def _require_text(value: Any) -> str:
    # JSON bodies can carry numbers, lists or objects where text is expected
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidArgument(f"expected text, got {type(value).__name__}")
    return value


def soft_sanitize(text: str, max_len: int) -> str:
    """
    Normalizes names/locations:
    - strip whitespace
    - bound length
    - remove dangerous HTML event handlers and keywords
    - remove disallowed characters via allowlist
    - collapse double spaces
    """
    t = _require_text(text).strip()
    if not t:
        return ""
    t = t[:max_len]

    # Remove HTML event handlers and dangerous keywords (XSS protection)
    dangerous_keywords = [
        'onerror', 'onload', 'onclick', 'onmouseover', 'onmouseout',
        'onmousemove', 'onmousedown', 'onmouseup', 'onfocus', 'onblur',
        'onchange', 'onsubmit', 'javascript:', 'data:', 'vbscript:'
    ]
    for keyword in dangerous_keywords:
        t = re.sub(keyword, '', t, flags=re.IGNORECASE)

    t = _SAFE_CHARS_PATTERN.sub("", t)
    t = re.sub(r"\s{2,}", " ", t)
    return t.strip()


def sanitize_text(text: str, max_len: int) -> str:
    """
    Free-text fields (notes) are a bit more permissive:
    - strip & bound length
    - remove control chars only; keep reasonable punctuation
    - normalize repeated tabs/spaces
    """
    t = _require_text(text).strip()
    if not t:
        return ""
    t = t[:max_len]
    t = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", t)
    t = re.sub(r"[ \t]{2,}", " ", t)
    return t


def is_valid_uuid(value: str | None) -> bool:
    """
    Check if a string is a valid UUID (RFC 4122 format).

    Example:
        >>> is_valid_uuid("550e8400-e29b-41d4-a716-446655440000")
        True
        >>> is_valid_uuid("invalid")
        False
    """
    if not value or not isinstance(value, str):
        return False
    return bool(_UUID_PATTERN.match(value))


def parse_int(value: Any, field: str) -> int:
    """Parse an integer query/form value, raising InvalidArgument on junk."""
    if isinstance(value, bool):
        raise InvalidArgument(f"{field} must be an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidArgument(f"{field} must be an integer, got {value!r}")


def parse_coordinates(lat: Any, lng: Any) -> Tuple[float, float]:
    """
    Parse and range-check a latitude/longitude pair.

    Raises:
        InvalidArgument: If either value is missing, not numeric or out of range
    """
    try:
        latitude = float(lat)
        longitude = float(lng)
    except (TypeError, ValueError):
        raise InvalidArgument("latitude and longitude must be numbers")

    if not -90 <= latitude <= 90:
        raise InvalidArgument(f"latitude must be between -90 and 90, got {latitude}")
    if not -180 <= longitude <= 180:
        raise InvalidArgument(f"longitude must be between -180 and 180, got {longitude}")

    return latitude, longitude
