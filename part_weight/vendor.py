"""Vendor search records and the structured-field weight extractor."""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Any, Dict, List, Mapping, Optional, Pattern, Sequence, Tuple

from part_weight.errors import VendorUnavailable
from part_weight.models import PartMetadata, RawWeightExpression, Stage

# Direct weight-bearing string fields, checked in order.
DIRECT_WEIGHT_FIELDS: Sequence[str] = ("UnitWeight", "Weight", "NetWeight", "PackageWeight")

# Mouser reports a numeric kilogram value under {"UnitWeightKg": {"UnitWeight": n}}.
NUMERIC_KG_FIELD = "UnitWeightKg"

# Attribute name patterns, most specific first. Priority is by pattern, not by
# the attribute's position in the record.
ATTRIBUTE_NAME_PATTERNS: Sequence[Tuple[str, Pattern[str]]] = (
    ("unit weight", re.compile(r"unit\s*weight", re.IGNORECASE)),
    ("net weight", re.compile(r"net\s*weight", re.IGNORECASE)),
    ("package weight", re.compile(r"package\s*weight", re.IGNORECASE)),
    ("weight", re.compile(r"weight", re.IGNORECASE)),
    ("mass", re.compile(r"mass", re.IGNORECASE)),
)

_ATTRIBUTE_LIST_KEYS: Sequence[str] = ("ProductAttributes", "Attributes")
_ATTRIBUTE_WRAPPER_KEYS: Sequence[str] = ("ProductAttribute", "Attribute", "Items", "items")


@dataclass(frozen=True)
class VendorAttribute:
    name: str
    value: str


@dataclass(frozen=True)
class VendorRecord:
    description: Optional[str] = None
    manufacturer: Optional[str] = None
    manufacturer_part_number: Optional[str] = None
    vendor_part_number: Optional[str] = None
    product_url: Optional[str] = None
    datasheet_url: Optional[str] = None
    attributes: Sequence[VendorAttribute] = field(default_factory=tuple)
    weight_fields: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, part: Mapping[str, Any]) -> "VendorRecord":
        """Build a record from one Mouser ``Parts`` entry of unknown exact shape."""
        return cls(
            description=_text(part.get("Description")),
            manufacturer=_text(part.get("Manufacturer")),
            manufacturer_part_number=_text(part.get("ManufacturerPartNumber")),
            vendor_part_number=_text(part.get("MouserPartNumber")),
            product_url=_text(part.get("ProductDetailUrl")),
            datasheet_url=_text(part.get("DataSheetUrl")),
            attributes=tuple(normalize_attributes(part)),
            weight_fields=_collect_weight_fields(part),
        )

    def metadata(self) -> PartMetadata:
        return PartMetadata(
            description=self.description,
            manufacturer=self.manufacturer,
            manufacturer_part_number=self.manufacturer_part_number,
            vendor_part_number=self.vendor_part_number,
            product_url=self.product_url,
            datasheet_url=self.datasheet_url,
        )


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = repr(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _norm(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def normalize_attributes(part: Mapping[str, Any]) -> List[VendorAttribute]:
    """Flatten the attribute collection into one list.

    Accepted shapes:
      {"ProductAttributes": [{"AttributeName": ..., "AttributeValue": ...}, ...]}
      {"ProductAttributes": {"ProductAttribute": [...]}}
    """
    raw: Any = None
    for key in _ATTRIBUTE_LIST_KEYS:
        if key in part:
            raw = part[key]
            break

    if isinstance(raw, Mapping):
        wrapped = None
        for key in _ATTRIBUTE_WRAPPER_KEYS:
            if isinstance(raw.get(key), list):
                wrapped = raw[key]
                break
        raw = wrapped
    if not isinstance(raw, list):
        return []

    attributes: List[VendorAttribute] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        name = _text(item.get("AttributeName") or item.get("Name"))
        value = _text(item.get("AttributeValue") or item.get("Value"))
        if name and value:
            attributes.append(VendorAttribute(name=name, value=value))
    return attributes


def _collect_weight_fields(part: Mapping[str, Any]) -> Dict[str, str]:
    lowered = {_norm(k): v for k, v in part.items() if isinstance(k, str)}
    fields: Dict[str, str] = {}
    for name in DIRECT_WEIGHT_FIELDS:
        value = lowered.get(name.lower())
        if isinstance(value, str) and value.strip():
            fields[name] = value.strip()

    kg = part.get(NUMERIC_KG_FIELD)
    if isinstance(kg, Mapping):
        kg = kg.get("UnitWeight")
    if isinstance(kg, (int, float)) and not isinstance(kg, bool) and kg > 0:
        fields[NUMERIC_KG_FIELD] = f"{kg!r} kg"
    return fields


def extract_weight_expression(record: VendorRecord) -> Optional[RawWeightExpression]:
    """Find a raw weight expression in the record's structured data.

    Direct fields are checked first, in ``DIRECT_WEIGHT_FIELDS`` order with the
    numeric kilogram field last. Then attributes, by ``ATTRIBUTE_NAME_PATTERNS``
    priority.
    """
    for name in tuple(DIRECT_WEIGHT_FIELDS) + (NUMERIC_KG_FIELD,):
        value = record.weight_fields.get(name)
        if value:
            return RawWeightExpression(text=value, provenance=Stage.DIRECT_FIELD, detail=name)

    for _label, pattern in ATTRIBUTE_NAME_PATTERNS:
        for attribute in record.attributes:
            if pattern.search(attribute.name) and attribute.value.strip():
                return RawWeightExpression(
                    text=attribute.value.strip(),
                    provenance=Stage.NAMED_ATTRIBUTE,
                    detail=attribute.name,
                )
    return None


def parse_search_payload(payload: Any) -> List[VendorRecord]:
    """Turn a Mouser search response body into records.

    An empty result list is a valid answer. Anything we cannot read is a vendor error.
    """
    if not isinstance(payload, Mapping):
        raise VendorUnavailable("Malformed vendor response", details=type(payload).__name__)

    errors = payload.get("Errors")
    if isinstance(errors, list) and errors:
        messages = [
            _text(e.get("Message")) or _text(e.get("Code")) or "unknown error"
            for e in errors
            if isinstance(e, Mapping)
        ]
        raise VendorUnavailable("Vendor search returned errors", details=messages or errors)

    if "SearchResults" not in payload:
        raise VendorUnavailable("Malformed vendor response", details="missing SearchResults")
    results = payload["SearchResults"]
    if results is None:
        return []
    if not isinstance(results, Mapping):
        raise VendorUnavailable("Malformed vendor response", details="SearchResults")
    parts = results.get("Parts") or []
    if not isinstance(parts, list):
        raise VendorUnavailable("Malformed vendor response", details="SearchResults.Parts")
    return [VendorRecord.from_payload(p) for p in parts if isinstance(p, Mapping)]


def select_record(records: Sequence[VendorRecord], identifier: str) -> Optional[VendorRecord]:
    """Prefer an exact manufacturer part number match, else trust the vendor's ordering."""
    if not records:
        return None
    wanted = _norm(identifier)
    for record in records:
        if _norm(record.manufacturer_part_number) == wanted:
            return record
    return records[0]
