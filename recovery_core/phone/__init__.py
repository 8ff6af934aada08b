"""
Phone Normalization
===================
Sri Lanka (+94) phone normalization and lookup variants.
"""

from .normalizer import (
    SRI_LANKA_COUNTRY_CODE,
    MIN_DIGITS,
    MAX_DIGITS,
    digits_only,
    is_phone_like,
    normalize_base,
    variants,
    to_canonical_storage,
    strip_punctuation,
)

__all__ = [
    # Constants
    "SRI_LANKA_COUNTRY_CODE",
    "MIN_DIGITS",
    "MAX_DIGITS",
    # Normalization
    "digits_only",
    "is_phone_like",
    "normalize_base",
    "variants",
    "to_canonical_storage",
    "strip_punctuation",
]
