"""Configuration management.

Loads configuration from environment variables (and a ``.env`` file if
present) with sensible defaults. The resulting ``AppConfig`` is passed
explicitly to every component; nothing reads the environment after startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

RETAIL_API = "https://prices.azure.com/api/retail/prices"

SOURCE_AZURE = "azure"
SOURCE_STATIC = "static"


def _bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SourceConfig:
    """Where prices are read from.

    max_pages caps the estimate lookups against the live API. The raw export
    is deliberately uncapped (export_max_pages=0): it follows every
    NextPageLink so the file holds the full catalogue, and the reader stops
    on a link it has already visited, so a looping API cannot spin forever.
    Set EXPORT_MAX_PAGES to bound it.
    """

    base_url: str = RETAIL_API
    start_url: str = RETAIL_API
    mode: str = SOURCE_AZURE  # azure or static
    static_url: Optional[str] = None
    max_pages: int = 3
    export_max_pages: int = 0  # 0 = follow every NextPageLink
    timeout: float = 60.0

    @property
    def uses_static(self) -> bool:
        return self.mode == SOURCE_STATIC


@dataclass
class StorageConfig:
    """Object store layout."""

    backend: str = "s3"  # s3 or local
    bucket: str = ""
    output_folder: str = "azure-prices"
    processed_folder: str = "azure-prices-processed"
    local_root: str = "storage"
    region: Optional[str] = None


@dataclass
class CacheConfig:
    file_path: str = "cache/azure_prices_cache.json"
    min_bytes: int = 1000


@dataclass
class ScheduleConfig:
    enabled: bool = False
    interval_seconds: float = 7 * 24 * 60 * 60


@dataclass
class AppConfig:
    """Root application configuration."""

    source: SourceConfig = field(default_factory=SourceConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> AppConfig:
        """Load configuration from environment variables.

        Required environment variables:
        - S3_BUCKET_NAME: only when STORAGE_BACKEND is "s3" (the default)

        Raises:
            KeyError: If required environment variables are missing
            ValueError: If a numeric variable is not a number
        """
        if dotenv:
            load_dotenv()

        backend = os.getenv("STORAGE_BACKEND", "s3").strip().lower()
        bucket = os.getenv("S3_BUCKET_NAME", "")
        if backend == "s3" and not bucket:
            raise KeyError(
                "S3_BUCKET_NAME environment variable is required when STORAGE_BACKEND=s3. "
                "Use STORAGE_BACKEND=local to write exports to disk instead."
            )

        mode = os.getenv("AZURE_RETAIL_SOURCE", SOURCE_AZURE).strip().lower()
        if mode == "s3":
            mode = SOURCE_STATIC

        base_url = os.getenv("AZURE_RETAIL_URL", RETAIL_API)
        return cls(
            source=SourceConfig(
                base_url=base_url,
                start_url=os.getenv("AZURE_PRICING_START_URL", base_url),
                mode=mode,
                static_url=os.getenv("STATIC_SOURCE_URL") or os.getenv("AWS_S3_OFFLINE_URL") or None,
                max_pages=int(os.getenv("AZURE_API_MAX_PAGES", "3")),
                export_max_pages=int(os.getenv("EXPORT_MAX_PAGES", "0")),
                timeout=float(os.getenv("HTTP_TIMEOUT", "60")),
            ),
            storage=StorageConfig(
                backend=backend,
                bucket=bucket,
                output_folder=os.getenv("S3_OUTPUT_FOLDER", "azure-prices"),
                processed_folder=os.getenv("S3_PROCESSED_FOLDER", "azure-prices-processed"),
                local_root=os.getenv("LOCAL_STORAGE_ROOT", "storage"),
                region=os.getenv("AWS_REGION") or None,
            ),
            cache=CacheConfig(
                file_path=os.getenv("LOCAL_CACHE_FILE", "cache/azure_prices_cache.json"),
                min_bytes=int(os.getenv("CACHE_MIN_BYTES", "1000")),
            ),
            schedule=ScheduleConfig(
                enabled=_bool("SCHEDULE_ENABLED"),
                interval_seconds=float(os.getenv("SCHEDULE_INTERVAL_SECONDS", str(7 * 24 * 60 * 60))),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
