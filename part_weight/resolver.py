"""Weight resolution pipeline: vendor lookup -> record fields -> page scrape -> package estimate."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from part_weight.clients import HttpPageFetcher, MouserSearchClient, PageFetcher, VendorSearch
from part_weight.config import WeightServiceConfig
from part_weight.errors import InvalidInput, VendorUnavailable
from part_weight.models import (
    CanonicalWeight,
    PartQuery,
    RawWeightExpression,
    ResolutionResult,
    Stage,
)
from part_weight.packages import infer_weight_expression
from part_weight.scraper import HtmlWeightScraper
from part_weight.units import canonicalize
from part_weight.vendor import VendorRecord, extract_weight_expression, select_record

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "not found"

STAGE_DESCRIPTIONS: Dict[Stage, str] = {
    Stage.DIRECT_FIELD: "vendor fields",
    Stage.NAMED_ATTRIBUTE: "vendor attributes",
    Stage.HTML_SCRAPE: "html scrape",
    Stage.PACKAGE_INFERENCE: "package inference",
}


class PartWeightResolver:
    def __init__(
        self,
        vendor_search: VendorSearch,
        page_fetcher: Optional[PageFetcher] = None,
        enable_html_scrape: bool = True,
        enable_package_inference: bool = True,
    ) -> None:
        self.vendor_search = vendor_search
        self.scraper = HtmlWeightScraper(page_fetcher) if page_fetcher is not None else None
        self.enable_html_scrape = enable_html_scrape
        self.enable_package_inference = enable_package_inference

    @classmethod
    def from_config(cls, config: WeightServiceConfig, session: Optional[Any] = None) -> "PartWeightResolver":
        return cls(
            vendor_search=MouserSearchClient.from_config(config, session=session),
            page_fetcher=HttpPageFetcher.from_config(config, session=session),
            enable_html_scrape=config.enable_html_scrape,
            enable_package_inference=config.enable_package_inference,
        )

    def resolve(self, query: PartQuery) -> ResolutionResult:
        try:
            records = self.vendor_search.search(query.identifier)
        except VendorUnavailable as e:
            logger.warning("Vendor search failed for %r: %s (status=%s)", query.identifier, e.message, e.vendor_status)
            trace = {"error_code": e.code}
            if e.details is not None:
                trace["details"] = str(e.details)
            return ResolutionResult(
                query=query,
                status="vendor_error",
                error=e.message,
                trace=trace,
                vendor_status=e.vendor_status,
            )

        record = select_record(records, query.identifier)
        if record is None:
            logger.info("No vendor record for %r", query.identifier)
            return ResolutionResult(query=query, status="not_found", error=NOT_FOUND_MESSAGE)

        trace: Dict[str, str] = {
            "candidates": str(len(records)),
            "record_selection": (
                "exact_mpn"
                if (record.manufacturer_part_number or "").lower() == query.identifier.lower()
                else "first_result"
            ),
        }
        expression = extract_weight_expression(record)
        attempted: List[Stage] = [Stage.DIRECT_FIELD]
        if expression is None or expression.provenance is Stage.NAMED_ATTRIBUTE:
            attempted.append(Stage.NAMED_ATTRIBUTE)
        unit_weight = self._accept(expression, trace)

        if unit_weight is None and self.enable_html_scrape and self.scraper and record.product_url:
            attempted.append(Stage.HTML_SCRAPE)
            unit_weight = self._accept(self.scraper.scrape(record.product_url), trace)

        if unit_weight is None and self.enable_package_inference:
            attempted.append(Stage.PACKAGE_INFERENCE)
            expression = infer_weight_expression(
                query.identifier,
                record.manufacturer_part_number,
                record.vendor_part_number,
                record.description,
            )
            unit_weight = self._accept(expression, trace)

        return self._finish(query, record, unit_weight, attempted, trace)

    def _accept(
        self, expression: Optional[RawWeightExpression], trace: Dict[str, str]
    ) -> Optional[CanonicalWeight]:
        if expression is None:
            return None
        weight = canonicalize(expression)
        if weight is None:
            logger.debug("Unparseable weight %r from %s", expression.text, expression.label())
            trace[f"unparsed:{expression.provenance.value}"] = expression.text
        return weight

    def _finish(
        self,
        query: PartQuery,
        record: VendorRecord,
        unit_weight: Optional[CanonicalWeight],
        attempted: List[Stage],
        trace: Dict[str, str],
    ) -> ResolutionResult:
        if unit_weight is None or unit_weight.source is None:
            tried = ", ".join(STAGE_DESCRIPTIONS[s] for s in attempted)
            return ResolutionResult(
                query=query,
                status="unresolved",
                metadata=record.metadata(),
                error=f"Weight not found (tried: {tried})",
                attempted=tuple(attempted),
                trace=trace,
            )

        try:
            total_weight = unit_weight.scaled(query.quantity)
        except (OverflowError, ValueError) as e:
            raise InvalidInput(
                f"qty {query.quantity} is too large for a unit weight of {unit_weight.value_lbs!r} lb"
            ) from e

        source = unit_weight.source
        trace["raw_expression"] = source.text
        trace["parsed_from"] = source.label()
        logger.info(
            "Resolved %r via %s: %.10f lb/unit", query.identifier, source.provenance.value, unit_weight.value_lbs
        )
        return ResolutionResult(
            query=query,
            status="resolved",
            stage_used=source.provenance,
            unit_weight=unit_weight,
            total_weight=total_weight,
            metadata=record.metadata(),
            attempted=tuple(attempted),
            trace=trace,
        )
