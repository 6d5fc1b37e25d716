"""Cheapest-price estimates and product / region listings."""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from .config import SourceConfig
from .errors import PricingError
from .helpers.math import decimal
from .models import Estimate, NoData, PriceRecord
from .pricing.retail import RetailPriceReader
from .pricing.static import StaticPriceSource, filter_records

log = logging.getLogger(__name__)


def cheapest(records: List[PriceRecord]) -> Optional[PriceRecord]:
    """Lowest strictly positive price; ties go to the first one seen."""
    positive = [r for r in records if r.retail_price > 0]
    return min(positive, key=lambda r: r.retail_price) if positive else None


class PriceEstimator:
    def __init__(
            self,
            config: SourceConfig,
            reader: RetailPriceReader,
            static_source: Optional[StaticPriceSource] = None,
    ) -> None:
        self.config = config
        self.reader = reader
        self.static_source = static_source

    def fetch(self, product: Optional[str] = None, region: Optional[str] = None) -> List[PriceRecord]:
        """
        Matching records. In static mode the snapshot is tried first and any
        failure falls back to the live API.
        """
        if self.config.uses_static and self.static_source is not None:
            try:
                doc = self.static_source.load()
                return filter_records(doc.records, product, region)
            except PricingError as e:
                log.warning("Static source failed (%s); falling back to Azure API", e)

        return self.reader.fetch(product, region, max_pages=self.config.max_pages).records

    def estimate(
            self,
            product_name: Optional[str],
            region: Optional[str],
            quantity,
    ) -> Union[Estimate, NoData]:
        best = cheapest(self.fetch(product_name, region))
        if best is None:
            return NoData()

        qty = decimal(quantity)
        return Estimate(
            product=best.product_name,
            region=best.region_name,
            unit_price=best.retail_price,
            quantity=qty,
            currency=best.currency_code,
            estimated_cost=best.retail_price * qty,
        )

    def list_products(self) -> List[str]:
        return sorted({r.product_name for r in self.fetch() if r.product_name is not None})

    def list_regions(self, product: str) -> List[str]:
        return sorted({r.region_name for r in self.fetch(product) if r.region_name is not None})
