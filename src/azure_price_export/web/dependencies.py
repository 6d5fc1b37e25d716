"""Shared dependencies for the web routes.

The app keeps one ``Services`` bundle on ``app.state``; routes pull the piece
they need through ``Depends``.
"""

from fastapi import Request

from ..estimate import PriceEstimator
from ..pipeline import PricingPipeline


def get_pipeline(request: Request) -> PricingPipeline:
    return request.app.state.services.pipeline


def get_estimator(request: Request) -> PriceEstimator:
    return request.app.state.services.estimator
