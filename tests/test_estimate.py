"""Tests for cheapest-price estimates and product / region listings."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from azure_price_export.config import SOURCE_STATIC, SourceConfig
from azure_price_export.errors import FetchFailed
from azure_price_export.estimate import PriceEstimator, cheapest
from azure_price_export.models import NO_DATA_MESSAGE, Estimate, NoData, PriceRecord, PricingDocument
from azure_price_export.pricing.retail import RetailPriceReader
from azure_price_export.pricing.static import StaticPriceSource

from .fakes import BASE_URL, FakeSession, item, page


def _estimator(responses, mode="azure", static_source=None, max_pages=3):
    config = SourceConfig(base_url=BASE_URL, mode=mode, max_pages=max_pages)
    session = FakeSession(responses)
    return PriceEstimator(config, RetailPriceReader(config, session=session), static_source), session


def _stub_reader(records):
    reader = MagicMock()
    reader.fetch.return_value = PricingDocument(list(records))
    return reader


class TestCheapest:
    def test_ties_go_to_first_seen(self):
        a = PriceRecord(meter_id="a", retail_price=Decimal(2))
        b = PriceRecord(meter_id="b", retail_price=Decimal(2))

        assert cheapest([a, b]) is a

    def test_none_positive(self):
        assert cheapest([PriceRecord(), PriceRecord(retail_price=Decimal(0))]) is None


class TestEstimate:
    def test_minimum_positive_price_times_quantity(self):
        records = [
            PriceRecord(product_name="P", region_name="eastus", retail_price=Decimal(5), currency_code="USD"),
            PriceRecord(product_name="P", region_name="eastus", retail_price=Decimal(0), currency_code="USD"),
            PriceRecord(product_name="P", region_name="eastus", retail_price=Decimal(3), currency_code="USD"),
        ]
        estimator = PriceEstimator(SourceConfig(), _stub_reader(records))

        result = estimator.estimate("P", "eastus", 4)

        assert result == Estimate(
            product="P",
            region="eastus",
            unit_price=Decimal(3),
            quantity=Decimal(4),
            currency="USD",
            estimated_cost=Decimal(12),
        )

    def test_all_zero_is_no_data(self):
        estimator = PriceEstimator(SourceConfig(), _stub_reader([PriceRecord(), PriceRecord(retail_price=Decimal(0))]))

        result = estimator.estimate("P", "eastus", 4)

        assert isinstance(result, NoData)
        assert result.message == NO_DATA_MESSAGE

    def test_empty_is_no_data(self):
        estimator = PriceEstimator(SourceConfig(), _stub_reader([]))
        assert isinstance(estimator.estimate("P", "eastus", 1), NoData)

    def test_queries_api_with_filter_and_page_cap(self):
        url = BASE_URL + "?$filter=productName%20eq%20%27P%27%20and%20armRegionName%20eq%20%27eastus%27"
        p2 = BASE_URL + "?page=2"
        estimator, session = _estimator({
            url: page([item(productName="P", retailPrice=2.5)], p2),
            p2: page([item(productName="P", retailPrice=1.5)], BASE_URL + "?page=3"),
        }, max_pages=2)

        result = estimator.estimate("P", "eastus", 2)

        assert result.unit_price == Decimal("1.5")
        assert result.estimated_cost == Decimal("3.0")
        assert session.calls == [url, p2]


class TestListings:
    def test_products_sorted_and_distinct(self):
        records = [PriceRecord(product_name=n) for n in ("Storage", "Bandwidth", "Storage", None, "App Service")]
        estimator = PriceEstimator(SourceConfig(), _stub_reader(records))

        assert estimator.list_products() == ["App Service", "Bandwidth", "Storage"]

    def test_regions_sorted_and_distinct(self):
        records = [PriceRecord(region_name=r) for r in ("westus", "eastus", "westus", None, "centralus")]
        reader = _stub_reader(records)
        estimator = PriceEstimator(SourceConfig(), reader)

        assert estimator.list_regions("Storage") == ["centralus", "eastus", "westus"]
        reader.fetch.assert_called_once_with("Storage", None, max_pages=3)


class TestStaticMode:
    def test_static_snapshot_filtered_locally(self):
        static = MagicMock(spec=StaticPriceSource)
        static.load.return_value = PricingDocument([
            PriceRecord(product_name="Storage", region_name="eastus", retail_price=Decimal(4)),
            PriceRecord(product_name="Storage", region_name="westus", retail_price=Decimal(1)),
            PriceRecord(product_name="Bandwidth", region_name="eastus", retail_price=Decimal(1)),
        ])
        estimator, session = _estimator({}, mode=SOURCE_STATIC, static_source=static)

        result = estimator.estimate("Storage", "eastus", 1)

        assert result.unit_price == Decimal(4)
        assert session.calls == []

    def test_static_failure_falls_back_to_api(self):
        static = MagicMock(spec=StaticPriceSource)
        static.load.side_effect = FetchFailed("gone")
        estimator, session = _estimator({BASE_URL: page([item(productName="Storage")])},
                                        mode=SOURCE_STATIC, static_source=static)

        assert estimator.list_products() == ["Storage"]
        assert session.calls == [BASE_URL]

    def test_api_failure_propagates(self):
        estimator, _ = _estimator({})  # every URL -> 404

        with pytest.raises(FetchFailed):
            estimator.list_products()
