"""Wires the components together from one AppConfig."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from .config import AppConfig
from .estimate import PriceEstimator
from .helpers.http import get_session
from .pipeline import PricingPipeline
from .pricing.retail import RetailPriceReader
from .pricing.static import StaticPriceSource
from .storage import BlobStore, build_blob_store


@dataclass
class Services:
    config: AppConfig
    pipeline: PricingPipeline
    estimator: PriceEstimator


def build_services(
        config: AppConfig,
        session: Optional[requests.Session] = None,
        blob_store: Optional[BlobStore] = None,
) -> Services:
    session = session or get_session()
    store = blob_store or build_blob_store(config)
    reader = RetailPriceReader(config.source, session=session)
    static_source = StaticPriceSource(
        config.source.static_url,
        session=session,
        blob_store=store,
    )
    return Services(
        config=config,
        pipeline=PricingPipeline(config, reader, static_source, store),
        estimator=PriceEstimator(config.source, reader, static_source),
    )
