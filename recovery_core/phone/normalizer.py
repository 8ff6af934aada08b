"""
Phone Normalizer
================
Functions for normalizing Sri Lanka phone numbers.

Accepts any of the common formats (0771234567, 771234567, 94771234567,
+94771234567, with or without spaces/dashes) and reduces them to a
canonical base or to the full set of equivalent lookup variants.
"""

import re
from typing import Any, List

SRI_LANKA_COUNTRY_CODE = "94"
MIN_DIGITS = 9
MAX_DIGITS = 12

# Single combined leading run of "94" and/or "0" tokens
_LEADING_PREFIX = re.compile(r"^(?:94|0)+")
_PUNCTUATION = re.compile(r"[\s\-()]")


def digits_only(value: Any) -> str:
    """Strip every non-digit character. Non-strings yield an empty string."""
    if not isinstance(value, str):
        return ""
    return re.sub(r"\D", "", value)


def is_phone_like(value: Any) -> bool:
    """True if the value carries enough digits to be a phone number."""
    return len(digits_only(value)) >= MIN_DIGITS


def _strip_prefix(digits: str) -> str:
    return _LEADING_PREFIX.sub("", digits) or digits


def normalize_base(value: Any) -> str:
    """
    Normalize a phone number to its base digits.
    
    Examples:
        0771234567, +94771234567, 771234567 -> "771234567"
    
    Args:
        value: Raw phone number in any format
        
    Returns:
        9-12 digit base number, or "" if the input is not a usable phone
    """
    digits = digits_only(value)
    if len(digits) < MIN_DIGITS:
        return ""
    
    base = _strip_prefix(digits)
    if len(base) < MIN_DIGITS or len(base) > MAX_DIGITS:
        return ""
    return base


def variants(value: Any) -> List[str]:
    """
    Get all equivalent representations of a phone number for lookups.
    
    Args:
        value: Raw phone number in any format
        
    Returns:
        Unique variants in order, e.g.
        ["771234567", "0771234567", "94771234567", "+94771234567"]
    """
    digits = digits_only(value)
    if len(digits) < MIN_DIGITS:
        return []
    
    base = _strip_prefix(digits)
    if len(base) < MIN_DIGITS:
        return []
    
    candidates = [
        base,
        "0" + base,
        SRI_LANKA_COUNTRY_CODE + base,
        "+" + SRI_LANKA_COUNTRY_CODE + base,
    ]
    return list(dict.fromkeys(candidates))


def to_canonical_storage(value: Any) -> str:
    """Normalize for storage and SMS delivery, e.g. "94771234567"."""
    base = normalize_base(value)
    if not base:
        return ""
    return SRI_LANKA_COUNTRY_CODE + base


def strip_punctuation(value: Any) -> str:
    """Remove whitespace, dashes and parentheses, keeping a leading '+'."""
    if value is None:
        return ""
    return _PUNCTUATION.sub("", str(value)).strip()
