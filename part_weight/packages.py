"""Typical unit masses for standard SMD package size codes.

This is the last-resort estimator. It runs only after vendor fields, vendor
attributes and the product page have all failed to produce a weight.
"""

from __future__ import annotations

import re
from typing import Dict, Optional, Sequence

from part_weight.models import RawWeightExpression, Stage

# Search order. Earlier codes win when a text mentions several.
PACKAGE_CODES: Sequence[str] = (
    "01005",
    "0201",
    "0402",
    "0603",
    "0805",
    "1008",
    "1206",
    "1210",
    "1806",
    "1812",
    "2010",
    "2512",
)

# Grams per piece for a typical thick-film chip resistor or MLCC in each
# imperial case size. Calibration constants: tune per customer mix.
TYPICAL_PACKAGE_MASS_G: Dict[str, float] = {
    "01005": 0.00004,  # 0.4 x 0.2 mm
    "0201": 0.00015,  # 0.6 x 0.3 mm
    "0402": 0.0006,  # 1.0 x 0.5 mm
    "0603": 0.002,  # 1.6 x 0.8 mm
    "0805": 0.0055,  # 2.0 x 1.25 mm
    "1008": 0.008,  # 2.5 x 2.0 mm, mostly chip inductors
    "1206": 0.01,  # 3.2 x 1.6 mm
    "1210": 0.016,  # 3.2 x 2.5 mm
    "1806": 0.018,  # 4.5 x 1.6 mm
    "1812": 0.03,  # 4.5 x 3.2 mm
    "2010": 0.025,  # 5.0 x 2.5 mm
    "2512": 0.04,  # 6.4 x 3.2 mm
}

_BOUNDED_PATTERNS = {code: re.compile(rf"\b{code}\b") for code in PACKAGE_CODES}


def detect_package_code(text: Optional[str]) -> Optional[str]:
    """Return the first known package code in ``text``.

    A code standing alone as a token ("... 1% 0603") beats one buried in a part
    number ("RC0603FR-0710KL"). Only when no code appears as a token does the
    plain substring match over the same ordered list apply.
    """
    if not text:
        return None
    for code in PACKAGE_CODES:
        if _BOUNDED_PATTERNS[code].search(text):
            return code
    for code in PACKAGE_CODES:
        if code in text:
            return code
    return None


def typical_mass_grams(code: str) -> Optional[float]:
    return TYPICAL_PACKAGE_MASS_G.get(code)


def infer_weight_expression(*texts: Optional[str]) -> Optional[RawWeightExpression]:
    """Estimate a weight expression from identifier, part numbers and description."""
    haystack = " ".join(t.strip() for t in texts if t and t.strip())
    code = detect_package_code(haystack)
    if code is None:
        return None
    grams = typical_mass_grams(code)
    if grams is None:
        return None
    return RawWeightExpression(
        text=f"{grams!r} g",
        provenance=Stage.PACKAGE_INFERENCE,
        detail=code,
    )
