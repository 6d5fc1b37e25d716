"""Pytest configuration and fixtures.

HTTP is replaced by ``tests.fakes.FakeSession``; object storage by a
``LocalBlobStore`` rooted in the test's tmp_path.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from azure_price_export.config import AppConfig, CacheConfig, SourceConfig, StorageConfig

from .fakes import BASE_URL


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 5, 1, 9, 30, 15, tzinfo=timezone.utc)


@pytest.fixture
def config(tmp_path) -> AppConfig:
    """Local-storage config rooted in tmp_path, no environment involved."""
    return AppConfig(
        source=SourceConfig(base_url=BASE_URL, start_url=BASE_URL, max_pages=3, export_max_pages=0),
        storage=StorageConfig(
            backend="local",
            output_folder="raw",
            processed_folder="processed",
            local_root=str(tmp_path / "store"),
        ),
        cache=CacheConfig(file_path=str(tmp_path / "cache" / "azure_prices_cache.json"), min_bytes=1000),
    )
