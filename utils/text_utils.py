"""
Text utilities for sheet headers and cells.

Developer sheets mix Arabic transliterations, accented Latin and stray
whitespace in headers; matching works on a normalized form.
"""

import math
import re
import unicodedata
from typing import Any, Optional


def normalize_header(name: Optional[str]) -> str:
    """
    Normalize a header for comparison.

    - "  Área (sqm) " → "area (sqm)"
    - "Unit\\nNo." → "unit no."

    Args:
        name: Raw header text

    Returns:
        Lowercase ASCII string with collapsed whitespace ("" for empty input)
    """
    if not name:
        return ""

    # NFD separates base chars from accents
    normalized = unicodedata.normalize('NFD', str(name))
    ascii_name = ''.join(
        c for c in normalized
        if unicodedata.category(c) != 'Mn'
    )

    return re.sub(r"\s+", " ", ascii_name).strip().lower()


def custom_field_id(name: str) -> str:
    """
    Build the field id for a user-defined custom field.

    "Sea View Premium" → "custom_sea_view_premium"
    """
    return "custom_" + re.sub(r"\s+", "_", name.strip().lower())


def cell_to_str(value: Any) -> str:
    """
    Render a raw cell as text.

    None and NaN become "". Integral floats lose the trailing ".0" so a
    spreadsheet "3" read as 3.0 stays "3".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def parse_number(value: Optional[str]) -> Optional[float]:
    """
    Lenient numeric parse for sheet cells.

    Strips thousands separators, currency labels and units:
    "EGP 1,250,000" → 1250000.0, "117 m²" → 117.0. Returns None when no
    number is present.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    match = re.search(r"-?\d+(?:\.\d+)?", text.replace(",", ""))
    if not match:
        return None
    return float(match.group(0))
