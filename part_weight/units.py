"""Unit normalization: find a mass expression in free text and convert it to pounds.

Policy:
1. Scan left to right for a number followed by a mass unit token.
2. The first (value, unit) pair wins; later pairs are ignored.
3. No unit token means no weight. The magnitude alone is never used to guess a unit.

Pounds are the reference unit for every weight the service reports.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import re
from typing import Optional

from part_weight.models import GRAMS_PER_POUND, CanonicalWeight, RawWeightExpression

# Decimal places kept after conversion. 1e-10 lb is about 45 nanograms.
PRECISION_DIGITS = 10

# Longest spellings first so "mg" is never read as "m" + "g".
UNIT_TOKEN_PATTERN = (
    r"milligrams?|mg|kilograms?|kg|grams?|g|ounces?|oz|pounds?|lbs?"
)

_NUMBER_PATTERN = r"[-+]?(?:\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?"

# A number glued to "<digit>," is the tail of a decimal comma ("0,55 g"), never a fresh value.
MASS_PATTERN = re.compile(
    rf"(?<![\w.])(?<!\d,)(?P<value>{_NUMBER_PATTERN})[\s,]*(?P<unit>{UNIT_TOKEN_PATTERN})(?![a-z])",
    re.IGNORECASE,
)

_UNIT_ALIASES = {
    "mg": "mg",
    "milligram": "mg",
    "milligrams": "mg",
    "g": "g",
    "gram": "g",
    "grams": "g",
    "kg": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "lb": "lb",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
}


@dataclass(frozen=True)
class MassReading:
    value: float
    unit: str  # mg | g | kg | oz | lb
    matched_text: str


def canonical_unit(token: str) -> Optional[str]:
    return _UNIT_ALIASES.get((token or "").strip().lower())


def find_mass(text: Optional[str]) -> Optional[MassReading]:
    """Return the first number + unit pair in ``text``.

    Negative or non-finite magnitudes are rejected rather than clamped, so
    ``"-5 g"`` yields ``None``.
    """
    if not isinstance(text, str) or not text:
        return None

    match = MASS_PATTERN.search(text)
    if not match:
        return None

    try:
        value = float(match.group("value").replace(",", ""))
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None

    unit = canonical_unit(match.group("unit"))
    if unit is None:
        return None
    return MassReading(value=value, unit=unit, matched_text=match.group(0).strip())


def convert_to_pounds(value: float, unit: str) -> float:
    """Convert ``value`` in ``unit`` to pounds, rounded to ``PRECISION_DIGITS``."""
    normalized = canonical_unit(unit)
    if normalized == "mg":
        lbs = value / 1000 / GRAMS_PER_POUND
    elif normalized == "g":
        lbs = value / GRAMS_PER_POUND
    elif normalized == "kg":
        lbs = value * 1000 / GRAMS_PER_POUND
    elif normalized == "oz":
        lbs = value / 16
    elif normalized == "lb":
        lbs = value
    else:
        raise ValueError(f"Unknown mass unit: {unit!r}")
    return round(lbs, PRECISION_DIGITS)


def format_mass(value: float, unit: str) -> str:
    return f"{value!r} {unit}"


def normalize_weight(text: Optional[str]) -> Optional[float]:
    reading = find_mass(text)
    if reading is None:
        return None
    return convert_to_pounds(reading.value, reading.unit)


def canonicalize(expression: Optional[RawWeightExpression]) -> Optional[CanonicalWeight]:
    """Hand a stage's raw text to the normalizer, keeping the expression as provenance."""
    if expression is None:
        return None
    lbs = normalize_weight(expression.text)
    if lbs is None:
        return None
    return CanonicalWeight(value_lbs=lbs, source=expression)
