"""Request-scoped value types for part weight resolution."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
import math
from typing import Dict, Optional, Sequence

from part_weight.errors import InvalidInput

GRAMS_PER_POUND = 453.59237

# Largest order quantity accepted; keeps unit weight * qty well inside float range.
MAX_QUANTITY = 1_000_000_000


class Stage(str, Enum):
    DIRECT_FIELD = "direct_field"
    NAMED_ATTRIBUTE = "named_attribute"
    HTML_SCRAPE = "html_scrape"
    PACKAGE_INFERENCE = "package_inference"
    UNRESOLVED = "unresolved"

    @property
    def is_estimate(self) -> bool:
        return self is Stage.PACKAGE_INFERENCE


@dataclass(frozen=True)
class PartQuery:
    identifier: str
    quantity: int = 1

    def __post_init__(self) -> None:
        if not isinstance(self.identifier, str) or not self.identifier.strip():
            raise InvalidInput("Missing ?part=...")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidInput(f"qty must be a positive integer, got {self.quantity!r}")
        if not 1 <= self.quantity <= MAX_QUANTITY:
            raise InvalidInput(f"qty must be between 1 and {MAX_QUANTITY}, got {self.quantity!r}")
        object.__setattr__(self, "identifier", self.identifier.strip())


@dataclass(frozen=True)
class RawWeightExpression:
    text: str
    provenance: Stage
    detail: Optional[str] = None  # field name | attribute name | page URL | package code

    def label(self) -> str:
        if self.detail:
            return f"{self.provenance.value}:{self.detail}"
        return self.provenance.value


@dataclass(frozen=True)
class CanonicalWeight:
    """A mass in pounds, the single reference unit used for comparison and output."""

    value_lbs: float
    source: Optional[RawWeightExpression] = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.value_lbs) or self.value_lbs < 0:
            raise ValueError(f"Canonical weight must be finite and non-negative, got {self.value_lbs!r}")

    @property
    def value_grams(self) -> float:
        return self.value_lbs * GRAMS_PER_POUND

    def scaled(self, quantity: int) -> "CanonicalWeight":
        return replace(self, value_lbs=self.value_lbs * quantity)


@dataclass(frozen=True)
class PartMetadata:
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    manufacturer_part_number: Optional[str] = None
    vendor_part_number: Optional[str] = None
    product_url: Optional[str] = None
    datasheet_url: Optional[str] = None


@dataclass(frozen=True)
class ResolutionResult:
    query: PartQuery
    status: str  # resolved | unresolved | not_found | vendor_error
    stage_used: Stage = Stage.UNRESOLVED
    unit_weight: Optional[CanonicalWeight] = None
    total_weight: Optional[CanonicalWeight] = None
    metadata: PartMetadata = field(default_factory=PartMetadata)
    error: Optional[str] = None
    attempted: Sequence[Stage] = field(default_factory=tuple)
    trace: Dict[str, str] = field(default_factory=dict)
    vendor_status: Optional[int] = None

    @property
    def weight(self) -> Optional[CanonicalWeight]:
        return self.total_weight

    @property
    def is_resolved(self) -> bool:
        return self.status == "resolved"

    @property
    def raw_expression(self) -> Optional[RawWeightExpression]:
        if self.unit_weight is None:
            return None
        return self.unit_weight.source
