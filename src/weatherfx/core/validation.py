"""
Input validation utilities for weatherfx.

Provides validation for currency codes, symbol lists, and city names before
they are used to build cache keys or upstream URLs.
"""

import re
from urllib.parse import quote

from weatherfx.core.exceptions import ValidationError

# ISO 4217 alphabetic code
_CURRENCY_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")

# Longest city name we forward to the geocoder
MAX_CITY_LENGTH = 100


def validate_currency_code(code: str) -> str:
    """Validate and normalize an ISO 4217 currency code.

    Args:
        code: Currency code, any case, surrounding whitespace allowed.

    Returns:
        Upper-case three letter code.

    Raises:
        ValidationError: If the code is not three letters.
    """
    normalized = (code or "").strip().upper()
    if not _CURRENCY_CODE_PATTERN.match(normalized):
        raise ValidationError(
            "currency", code or "", "Currency code must be three letters (ISO 4217)"
        )
    return normalized


def parse_symbols(symbols: str | None) -> list[str]:
    """Split a CSV symbol list into upper-case codes, dropping blanks.

    Order is preserved and duplicates removed.
    """
    if not symbols:
        return []

    result: list[str] = []
    for raw in symbols.split(","):
        code = raw.strip().upper()
        if code and code not in result:
            result.append(code)
    return result


def validate_city(city: str) -> str:
    """Validate a city name.

    Args:
        city: City name as entered by the user.

    Returns:
        The city name with surrounding whitespace removed.

    Raises:
        ValidationError: If the name is empty, too long, or contains
            control characters.
    """
    stripped = (city or "").strip()
    if not stripped:
        raise ValidationError("city", city or "", "City name cannot be empty")

    if len(stripped) > MAX_CITY_LENGTH:
        raise ValidationError(
            "city", stripped[:50] + "...", f"City name exceeds {MAX_CITY_LENGTH} characters"
        )

    if any(ord(c) < 32 or ord(c) == 127 for c in stripped):
        raise ValidationError("city", repr(stripped), "City name contains control characters")

    return stripped


def encode_path_segment(value: str) -> str:
    """URL-encode a value for use as a single path segment."""
    return quote(value, safe="")
