"""Request boundary: parameters in, status code and JSON-ready body out."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import logging
from typing import Any, Dict, Mapping, Optional

from part_weight.config import WeightServiceConfig
from part_weight.errors import InvalidInput, PartWeightError, VendorUnavailable
from part_weight.models import PartQuery, ResolutionResult, Stage
from part_weight.resolver import PartWeightResolver

logger = logging.getLogger(__name__)

VENDOR_NAME = "Mouser"
GRAMS_DECIMALS = 6


@dataclass(frozen=True)
class WeightResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.body)


def parse_part_query(params: Mapping[str, Any]) -> PartQuery:
    part = params.get("part")
    if isinstance(part, int) and not isinstance(part, bool):
        part = str(part)
    if not isinstance(part, str) or not part.strip():
        raise InvalidInput("Missing ?part=...")
    return PartQuery(identifier=part.strip(), quantity=_parse_quantity(params.get("qty")))


def _parse_quantity(raw: Any) -> int:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return 1
    if isinstance(raw, bool):
        raise InvalidInput("qty must be a positive integer")

    if isinstance(raw, int):
        qty = raw
    elif isinstance(raw, float) and raw.is_integer():
        qty = int(raw)
    elif isinstance(raw, str):
        try:
            qty = int(raw.strip())
        except ValueError as e:
            raise InvalidInput(f"qty must be a positive integer, got {raw!r}") from e
    else:
        raise InvalidInput(f"qty must be a positive integer, got {raw!r}")

    return qty


def source_label(result: ResolutionResult) -> Optional[str]:
    if result.status in {"not_found", "vendor_error"}:
        return None
    expression = result.raw_expression
    if expression is None:
        return f"{VENDOR_NAME} (No Weight)"
    if expression.provenance is Stage.DIRECT_FIELD:
        return f"{VENDOR_NAME} API ({expression.detail})"
    if expression.provenance is Stage.NAMED_ATTRIBUTE:
        return f"{VENDOR_NAME} API attribute ({expression.detail})"
    if expression.provenance is Stage.HTML_SCRAPE:
        return f"{VENDOR_NAME} HTML"
    return f"Package estimate ({expression.detail})"


def build_response_body(result: ResolutionResult) -> Dict[str, Any]:
    unit = result.unit_weight
    total = result.total_weight
    expression = result.raw_expression
    meta = result.metadata
    body: Dict[str, Any] = {
        "part": result.query.identifier,
        "weight": total.value_lbs if total else None,
        "unitWeightLbs": unit.value_lbs if unit else None,
        "unitWeightG": round(unit.value_grams, GRAMS_DECIMALS) if unit else None,
        "qty": result.query.quantity,
        "totalWeightLbs": total.value_lbs if total else None,
        "source": source_label(result),
        "stage": result.stage_used.value,
        "estimated": result.stage_used.is_estimate,
        "attemptedStages": [s.value for s in result.attempted],
        "description": meta.description,
        "manufacturer": meta.manufacturer,
        "manufacturerPartNumber": meta.manufacturer_part_number,
        "vendorPartNumber": meta.vendor_part_number,
        "mouserPartNumber": meta.vendor_part_number,
        "productUrl": meta.product_url,
        "datasheetUrl": meta.datasheet_url,
        "rawWeight": expression.text if expression else None,
        "parsedFrom": expression.label() if expression else None,
        "scrapedFromHtml": (
            expression.detail if expression and expression.provenance is Stage.HTML_SCRAPE else None
        ),
        "error": result.error,
    }
    if result.status == "vendor_error":
        body["errorCode"] = result.trace.get("error_code", VendorUnavailable.code)
        body["vendorStatus"] = result.vendor_status
        body["details"] = result.trace.get("details")
    return body


def handle_weight_request(
    params: Mapping[str, Any],
    config: Optional[WeightServiceConfig] = None,
    resolver: Optional[PartWeightResolver] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> WeightResponse:
    """Resolve one part's shipping weight.

    Configuration is checked before the input so a missing API key always
    yields the same configuration error. A vendor failure maps to 502; a part
    that cannot be found or weighed is still a 200 with ``error`` set.
    """
    try:
        if resolver is None:
            config = config or WeightServiceConfig.from_env(environ)
            resolver = PartWeightResolver.from_config(config)
        query = parse_part_query(params)
        result = resolver.resolve(query)
        status_code = VendorUnavailable.status_code if result.status == "vendor_error" else 200
        return WeightResponse(status_code=status_code, body=build_response_body(result))
    except PartWeightError as e:
        logger.warning("Rejected weight request: %s", e.message)
        return WeightResponse(status_code=e.status_code, body=e.to_body())
    except Exception:
        logger.exception("Unhandled error resolving part weight")
        return WeightResponse(status_code=500, body={"error": "Server error"})
