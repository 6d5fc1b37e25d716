"""Data model for one export / query run.

A ``PriceRecord`` is built once from one raw page item and never mutated.
Derived text fields live in a separate ``DerivedFields`` value so the record
itself stays exactly what the source said.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional

from .helpers.csv import STATIC_CSV_COLUMNS, column, pick_first_dict
from .helpers.derive import compute_descriptor, deployment_option, replication_code
from .helpers.math import optional_decimal, price

NO_DATA_MESSAGE = "No pricing data available for this selection."


def _str(v: Any) -> Optional[str]:
    # Non-string scalars (ids sent as numbers) are kept as their text form
    return None if v is None else str(v)


@dataclass(frozen=True)
class PriceRecord:
    """One normalised retail price row."""

    meter_id: Optional[str] = None
    product_name: Optional[str] = None
    sku_name: Optional[str] = None
    region_name: Optional[str] = None
    location: Optional[str] = None
    retail_price: Decimal = Decimal(0)
    currency_code: Optional[str] = None
    service_family: Optional[str] = None
    unit_of_measure: Optional[str] = None
    effective_start_date: Optional[str] = None
    type: Optional[str] = None
    sku_id: Optional[str] = None
    tier_minimum_units: Optional[Decimal] = None
    tier_maximum_units: Optional[Decimal] = None

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "PriceRecord":
        """
        Build a record from one Retail API item.

        Unknown keys are ignored, missing keys stay None, and retailPrice falls
        back to 0 when it is missing or not a number.
        """
        return cls(
            meter_id=_str(pick_first_dict(item, "meterId", "MeterId")),
            product_name=_str(pick_first_dict(item, "productName", "ProductName")),
            sku_name=_str(pick_first_dict(item, "skuName", "SkuName")),
            region_name=_str(pick_first_dict(item, "armRegionName", "ArmRegionName")),
            location=_str(pick_first_dict(item, "location", "Location")),
            retail_price=price(pick_first_dict(item, "retailPrice", "RetailPrice")),
            currency_code=_str(pick_first_dict(item, "currencyCode", "CurrencyCode")),
            service_family=_str(pick_first_dict(item, "serviceFamily", "ServiceFamily")),
            unit_of_measure=_str(pick_first_dict(item, "unitOfMeasure", "UnitOfMeasure")),
            effective_start_date=_str(pick_first_dict(item, "effectiveStartDate", "EffectiveStartDate")),
            type=_str(pick_first_dict(item, "type", "Type")),
            sku_id=_str(pick_first_dict(item, "skuId", "SkuId")),
            tier_minimum_units=optional_decimal(pick_first_dict(item, "tierMinimumUnits", "TierMinimumUnits")),
            tier_maximum_units=optional_decimal(pick_first_dict(item, "tierMaximumUnits", "TierMaximumUnits")),
        )

    @classmethod
    def from_csv_columns(cls, cols: List[str]) -> "PriceRecord":
        """Positional mapping used by static CSV sources. Short rows default to ''/0."""
        values = {name: column(cols, i) for i, name in enumerate(STATIC_CSV_COLUMNS)}
        return cls(
            meter_id=values["meterId"],
            product_name=values["productName"],
            sku_name=values["skuName"],
            region_name=values["armRegionName"],
            location=values["location"],
            retail_price=price(values["retailPrice"]),
            currency_code=values["currencyCode"],
            service_family=values["serviceFamily"],
            unit_of_measure=values["unitOfMeasure"],
            effective_start_date=values["effectiveStartDate"],
            type=values["type"],
        )


@dataclass(frozen=True)
class DerivedFields:
    deployment_option: str = ""
    compute_descriptor: str = ""
    replication_code: str = ""

    @classmethod
    def derive(cls, record: PriceRecord) -> "DerivedFields":
        return cls(
            deployment_option=deployment_option(record.product_name),
            compute_descriptor=compute_descriptor(record.product_name),
            replication_code=replication_code(record.sku_name),
        )


@dataclass(frozen=True)
class PricingPage:
    records: List[PriceRecord]
    next_page_link: Optional[str] = None


@dataclass
class PricingDocument:
    """Records of one run, in page order then in-page order."""

    records: List[PriceRecord] = field(default_factory=list)

    def extend(self, page: PricingPage) -> None:
        self.records.extend(page.records)

    def __iter__(self) -> Iterator[PriceRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class ExportSummary:
    message: str
    destination_uri: str
    record_count: int


@dataclass(frozen=True)
class Estimate:
    product: Optional[str]
    region: Optional[str]
    unit_price: Decimal
    quantity: Decimal
    currency: Optional[str]
    estimated_cost: Decimal


@dataclass(frozen=True)
class NoData:
    """Valid empty outcome of an estimate: nothing had a positive price."""

    message: str = NO_DATA_MESSAGE
