"""Tests for the paginated Retail API reader."""

import pytest
import requests

from azure_price_export.config import SourceConfig
from azure_price_export.errors import FetchFailed, UnsupportedFormat
from azure_price_export.pricing.retail import RetailPriceReader, build_filter, page_from_payload

from .fakes import BASE_URL, FakeSession, item, page

P2 = BASE_URL + "?$skip=100"
P3 = BASE_URL + "?$skip=200"


def _reader(responses, max_pages=3, base_url=BASE_URL):
    session = FakeSession(responses)
    return RetailPriceReader(SourceConfig(base_url=base_url, max_pages=max_pages), session=session), session


class TestBuildUrl:
    def test_no_filters(self):
        reader, _ = _reader({})
        assert reader.build_url() == BASE_URL

    def test_product_and_region(self):
        reader, _ = _reader({})
        url = reader.build_url("Virtual Machines", "eastus")

        assert url == (
            BASE_URL + "?$filter=productName%20eq%20%27Virtual%20Machines%27"
            "%20and%20armRegionName%20eq%20%27eastus%27"
        )

    def test_appends_to_existing_query(self):
        reader, _ = _reader({}, base_url=BASE_URL + "?api-version=2023-01-01-preview")
        assert reader.build_url(region="eastus").startswith(BASE_URL + "?api-version=2023-01-01-preview&$filter=")

    def test_build_filter(self):
        assert build_filter() == ""
        assert build_filter(product="Storage") == "productName eq 'Storage'"
        assert build_filter(region="eastus") == "armRegionName eq 'eastus'"


class TestFetch:
    def test_follows_next_page_link_in_order(self):
        reader, session = _reader({
            BASE_URL: page([item(meterId="a"), item(meterId="b")], P2),
            P2: page([item(meterId="c")], None),
        })

        doc = reader.fetch(max_pages=0)

        assert [r.meter_id for r in doc] == ["a", "b", "c"]
        assert session.calls == [BASE_URL, P2]

    def test_stops_at_page_cap(self):
        reader, session = _reader({
            BASE_URL: page([item(meterId="a")], P2),
            P2: page([item(meterId="b")], P3),
            P3: page([item(meterId="c")], None),
        }, max_pages=2)

        doc = reader.fetch()

        assert len(doc) == 2
        assert session.calls == [BASE_URL, P2]

    def test_explicit_cap_overrides_config(self):
        reader, session = _reader({
            BASE_URL: page([item()], P2),
            P2: page([item()], None),
        }, max_pages=3)

        assert len(reader.fetch(max_pages=1)) == 1
        assert session.calls == [BASE_URL]

    def test_start_url_used_verbatim(self):
        reader, session = _reader({P3: page([item(meterId="z")])})

        doc = reader.fetch(product="ignored", start_url=P3)

        assert [r.meter_id for r in doc] == ["z"]
        assert session.calls == [P3]

    def test_repeated_link_stops(self):
        reader, session = _reader({BASE_URL: page([item()], BASE_URL)}, max_pages=0)

        assert len(reader.fetch()) == 1
        assert session.calls == [BASE_URL]

    def test_empty_next_link_stops(self):
        reader, _ = _reader({BASE_URL: page([item()], "")})
        assert len(reader.fetch()) == 1

    def test_bare_array_payload(self):
        reader, _ = _reader({BASE_URL: [item(meterId="a"), item(meterId="b")]})
        assert [r.meter_id for r in reader.fetch()] == ["a", "b"]


class TestFetchErrors:
    def test_http_error_is_fetch_failed(self):
        reader, _ = _reader({BASE_URL: page([item()], P2)})  # P2 -> 404

        with pytest.raises(FetchFailed) as exc_info:
            reader.fetch()

        assert isinstance(exc_info.value.__cause__, requests.HTTPError)

    def test_connection_error_is_fetch_failed(self):
        reader, _ = _reader({BASE_URL: requests.ConnectionError("boom")})

        with pytest.raises(FetchFailed):
            reader.fetch()

    def test_malformed_json_is_fetch_failed(self):
        reader, _ = _reader({BASE_URL: "{not json"})

        with pytest.raises(FetchFailed):
            reader.fetch()

    def test_unrecognised_shape_is_unsupported_format(self):
        reader, _ = _reader({BASE_URL: {"value": []}})

        with pytest.raises(UnsupportedFormat):
            reader.fetch()

    def test_unsupported_format_is_a_fetch_failure(self):
        with pytest.raises(FetchFailed):
            page_from_payload("just a string")

    def test_items_must_be_objects(self):
        with pytest.raises(UnsupportedFormat):
            page_from_payload({"Items": [1, 2]})
