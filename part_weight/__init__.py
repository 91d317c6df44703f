"""Part weight package exports."""

__version__ = "0.1.0"

from part_weight.clients import (
    HttpPageFetcher,
    InMemoryPageFetcher,
    InMemoryVendorSearch,
    MouserSearchClient,
    PageFetcher,
    VendorSearch,
)
from part_weight.config import WeightServiceConfig
from part_weight.errors import ConfigurationError, InvalidInput, PartWeightError, VendorUnavailable
from part_weight.handler import WeightResponse, build_response_body, handle_weight_request, parse_part_query
from part_weight.models import (
    CanonicalWeight,
    PartMetadata,
    PartQuery,
    RawWeightExpression,
    ResolutionResult,
    Stage,
)
from part_weight.packages import detect_package_code, infer_weight_expression
from part_weight.resolver import PartWeightResolver
from part_weight.scraper import HtmlWeightScraper, find_weight_text
from part_weight.units import canonicalize, convert_to_pounds, find_mass, normalize_weight
from part_weight.vendor import (
    VendorAttribute,
    VendorRecord,
    extract_weight_expression,
    normalize_attributes,
    parse_search_payload,
    select_record,
)

__all__ = [
    "CanonicalWeight",
    "ConfigurationError",
    "HtmlWeightScraper",
    "HttpPageFetcher",
    "InMemoryPageFetcher",
    "InMemoryVendorSearch",
    "InvalidInput",
    "MouserSearchClient",
    "PageFetcher",
    "PartMetadata",
    "PartQuery",
    "PartWeightError",
    "PartWeightResolver",
    "RawWeightExpression",
    "ResolutionResult",
    "Stage",
    "VendorAttribute",
    "VendorRecord",
    "VendorSearch",
    "VendorUnavailable",
    "WeightResponse",
    "WeightServiceConfig",
    "build_response_body",
    "canonicalize",
    "convert_to_pounds",
    "detect_package_code",
    "extract_weight_expression",
    "find_mass",
    "find_weight_text",
    "handle_weight_request",
    "infer_weight_expression",
    "normalize_attributes",
    "normalize_weight",
    "parse_part_query",
    "parse_search_payload",
    "select_record",
]
