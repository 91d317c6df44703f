"""Best-effort weight extraction from an unstructured product page.

Vendor page layouts change without notice. Every pattern below may stop matching
one day; a miss is a normal outcome and sends the pipeline to its next stage.
"""

from __future__ import annotations

from dataclasses import dataclass
import html
import logging
import re
from typing import Optional, Pattern, Sequence

from part_weight.clients import PageFetcher
from part_weight.models import RawWeightExpression, Stage
from part_weight.units import UNIT_TOKEN_PATTERN

logger = logging.getLogger(__name__)

_VALUE = rf"(?P<value>\d[\d,]*(?:\.\d+)?\s*(?:{UNIT_TOKEN_PATTERN}))(?![a-z])"
_TAGS = r"(?:\s*<[^>]+>)*\s*"
_LABEL_END = r"(?:\s*:|\s*<[^>]+>)*\s*"


def _table_cell_pattern(label: str) -> Pattern[str]:
    return re.compile(
        rf"{label}{_LABEL_END}</t[dh]>\s*<t[dh][^>]*>{_TAGS}{_VALUE}",
        re.IGNORECASE,
    )


@dataclass(frozen=True)
class ScrapePattern:
    name: str
    regex: Pattern[str]


@dataclass(frozen=True)
class ScrapeMatch:
    pattern: str
    text: str


# Most specific first. The first match short-circuits the rest.
SCRAPE_PATTERNS: Sequence[ScrapePattern] = (
    ScrapePattern("table:unit_weight", _table_cell_pattern(r"Unit\s*Weight")),
    ScrapePattern("table:net_weight", _table_cell_pattern(r"Net\s*Weight")),
    ScrapePattern(
        "text:unit_weight",
        re.compile(rf"Unit\s*Weight\s*:\s*{_VALUE}", re.IGNORECASE),
    ),
    ScrapePattern(
        "json:unit_weight",
        re.compile(
            rf"[\"'](?:Unit\s*Weight|unit_?weight)[\"']\s*:\s*[\"']\s*{_VALUE}",
            re.IGNORECASE,
        ),
    ),
)


def clean_weight_text(text: str) -> str:
    # Only thousands groups lose their comma; "0,55 g" stays ambiguous and will not parse.
    text = re.sub(r"(?<=\d),(?=\d{3}(?!\d))", "", text)
    return re.sub(r"\s+", " ", text).strip()


def find_weight_text(page: Optional[str]) -> Optional[ScrapeMatch]:
    if not page:
        return None
    text = html.unescape(page)
    for pattern in SCRAPE_PATTERNS:
        match = pattern.regex.search(text)
        if match:
            return ScrapeMatch(pattern=pattern.name, text=clean_weight_text(match.group("value")))
    return None


class HtmlWeightScraper:
    def __init__(self, fetcher: PageFetcher) -> None:
        self.fetcher = fetcher

    def scrape(self, url: Optional[str]) -> Optional[RawWeightExpression]:
        """Fetch ``url`` and look for a weight. Never raises."""
        if not url:
            return None
        try:
            page = self.fetcher.fetch(url)
            found = find_weight_text(page)
        except Exception:
            logger.debug("Scrape of %s failed", url, exc_info=True)
            return None
        if found is None:
            logger.debug("No weight pattern matched on %s", url)
            return None
        logger.debug("Scraped %r from %s via %s", found.text, url, found.pattern)
        return RawWeightExpression(text=found.text, provenance=Stage.HTML_SCRAPE, detail=url)
