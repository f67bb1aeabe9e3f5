from __future__ import annotations
from typing import Any, Optional
import re

_NON_DIGITS = re.compile(r"\D")


def digits_only(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return _NON_DIGITS.sub("", value)


def mask_phone(value: Optional[str]) -> str:
    """
    Format whatever the guest typed as `(DD) DDDDD-DDDD`, progressively:
      "11"          -> "11"
      "119123"      -> "(11) 9123"
      "11912345678" -> "(11) 91234-5678"
    Extra digits beyond the eleventh are dropped.
    """
    if not value:
        return ""
    digits = digits_only(value)
    if len(digits) < 3:
        return digits
    if len(digits) < 7:
        return f"({digits[:2]}) {digits[2:]}"
    return f"({digits[:2]}) {digits[2:7]}-{digits[7:11]}"


def first_name(name: Optional[str]) -> str:
    """First word of a display name, used in greetings."""
    if not isinstance(name, str):
        return ""
    parts = name.split()
    return parts[0] if parts else ""


def safe_int(value: Any, default: int = 0) -> int:
    """Convert to int safely."""
    try:
        return int(str(value).strip())
    except Exception:
        return default


def coalesce_str(*vals: Any) -> Optional[str]:
    """Return the first non-empty string among vals."""
    for v in vals:
        if isinstance(v, str) and v.strip():
            return v.strip()
    return None
