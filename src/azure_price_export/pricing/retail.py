from __future__ import annotations

from urllib.parse import quote as url_quote
from typing import Any, Iterator, List, Optional

import logging

import requests

from ..config import SourceConfig
from ..errors import FetchFailed, UnsupportedFormat
from ..helpers.http import get_session, http_get_json
from ..models import PriceRecord, PricingDocument, PricingPage

log = logging.getLogger(__name__)

# =============================================================================
# Payload parsing
# =============================================================================

def page_from_payload(data: Any) -> PricingPage:
    """
    Turn one decoded JSON response into a PricingPage.

    Two shapes are accepted:
      - {"Items": [...], "NextPageLink": "..."}   (Retail API page)
      - [...]                                     (bare array, e.g. a static dump)
    Anything else raises UnsupportedFormat.
    """
    if isinstance(data, dict) and "Items" in data:
        items = data.get("Items") or []
        next_link = data.get("NextPageLink") or None
    elif isinstance(data, list):
        items, next_link = data, None
    else:
        raise UnsupportedFormat(
            "Unsupported JSON structure: expected an object with 'Items' or a top-level array"
        )

    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise UnsupportedFormat("Unsupported JSON structure: 'Items' must be an array of objects")
    if next_link is not None and not isinstance(next_link, str):
        raise UnsupportedFormat("Unsupported JSON structure: 'NextPageLink' must be a string")

    return PricingPage([PriceRecord.from_item(i) for i in items], next_link)


def build_filter(product: Optional[str] = None, region: Optional[str] = None) -> str:
    """OData equality clauses ANDed together; '' when nothing to filter on."""
    clauses: List[str] = []
    if product:
        clauses.append(f"productName eq '{product}'")
    if region:
        clauses.append(f"armRegionName eq '{region}'")
    return " and ".join(clauses)


# =============================================================================
# Live reader: Retail API → PricingDocument
# =============================================================================

class RetailPriceReader:
    """Follows NextPageLink through the Retail Prices API, one page at a time."""

    def __init__(self, config: SourceConfig, session: Optional[requests.Session] = None) -> None:
        self.base_url = config.base_url
        self.max_pages = config.max_pages
        self.timeout = config.timeout
        self.session = session or get_session()

    def build_url(self, product: Optional[str] = None, region: Optional[str] = None) -> str:
        url = self.base_url
        filter_expr = build_filter(product, region)
        if filter_expr:
            url += f"{'&' if '?' in url else '?'}$filter={url_quote(filter_expr)}"
        return url

    def _get_page(self, url: str) -> PricingPage:
        try:
            data = http_get_json(self.session, url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchFailed(f"Failed to fetch Azure retail prices from {url}: {e}") from e
        except ValueError as e:
            raise FetchFailed(f"Invalid JSON from {url}: {e}") from e
        return page_from_payload(data)

    def iter_pages(
            self,
            product: Optional[str] = None,
            region: Optional[str] = None,
            start_url: Optional[str] = None,
            max_pages: Optional[int] = None,
    ) -> Iterator[PricingPage]:
        """
        Yield pages in NextPageLink order.

        - start_url is used verbatim when given; otherwise the filtered base URL.
        - max_pages None uses the configured cap; 0 means no cap.
        - A link that was already visited ends the walk.
        """
        url: Optional[str] = start_url or self.build_url(product, region)
        cap = self.max_pages if max_pages is None else max_pages
        seen_urls: set[str] = set()
        page_no = 0

        while url:
            if cap and page_no >= cap:
                log.info("Stopping after %d page(s) (cap reached)", page_no)
                break
            # Avoid loops if Azure returns a repeated link
            if url in seen_urls:
                log.warning("NextPageLink repeats %s; stopping", url)
                break
            seen_urls.add(url)

            page = self._get_page(url)
            page_no += 1
            log.info("[page %d] items=%d", page_no, len(page.records))
            yield page
            url = page.next_page_link

    def fetch(
            self,
            product: Optional[str] = None,
            region: Optional[str] = None,
            start_url: Optional[str] = None,
            max_pages: Optional[int] = None,
    ) -> PricingDocument:
        """All pages aggregated in fetch order. Any failure discards what was read so far."""
        doc = PricingDocument()
        for page in self.iter_pages(product, region, start_url, max_pages):
            doc.extend(page)
        return doc
