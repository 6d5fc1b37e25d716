"""Fetch → CSV → object store.

Two flows share this orchestrator:

``run``            live Retail API pages, raw export, epoch-millis file name.
``run_processed``  static snapshot (through a local cache file), derived
                   columns, processed export, minute-precision file name.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from .config import AppConfig
from .export import PROCESSED_EXPORT, RAW_EXPORT, write_csv
from .helpers.file import filesize
from .models import ExportSummary, PriceRecord
from .pricing.retail import RetailPriceReader
from .pricing.static import StaticPriceSource, parse_file
from .storage import BlobStore

log = logging.getLogger(__name__)

UPLOAD_MESSAGE = "Successfully uploaded CSV to S3"


class PricingPipeline:
    def __init__(
            self,
            config: AppConfig,
            reader: RetailPriceReader,
            static_source: StaticPriceSource,
            blob_store: BlobStore,
            clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config
        self.reader = reader
        self.static_source = static_source
        self.blob_store = blob_store
        self.clock = clock

    # ------------------------------------------------------------------
    # Raw export
    # ------------------------------------------------------------------
    def raw_export_path(self) -> str:
        millis = int(self.clock().timestamp() * 1000)
        return f"{self.config.storage.output_folder}/azure_prices_{millis}.csv"

    def run(self, start_url: Optional[str] = None) -> ExportSummary:
        """
        Fetch every page (from start_url, or the configured start URL), write the
        raw export and upload it. Nothing is uploaded unless the fetch completed.
        """
        url = start_url or self.config.source.start_url
        log.info("Fetching Azure retail prices from %s", url)
        doc = self.reader.fetch(start_url=url, max_pages=self.config.source.export_max_pages)

        data = write_csv(doc, RAW_EXPORT)
        uri = self.blob_store.put(self.raw_export_path(), data)
        log.info("Raw export: %d records uploaded to %s", len(doc), uri)
        return ExportSummary(UPLOAD_MESSAGE, uri, len(doc))

    # ------------------------------------------------------------------
    # Processed export
    # ------------------------------------------------------------------
    def processed_export_path(self) -> str:
        stamp = self.clock().strftime("%Y%m%d_%H%M")
        return f"{self.config.storage.processed_folder}/azure_prices_processed_{stamp}.csv"

    def cache_path(self) -> str:
        """Configured cache file with its .json extension swapped for the static source's."""
        path = self.config.cache.file_path
        ext = self.static_source.extension
        if path.endswith(".json"):
            return path[: -len(".json")] + "." + ext
        return path

    def _usable(self, path: str) -> bool:
        return filesize(path) > self.config.cache.min_bytes

    def load_cached(self) -> List[PriceRecord]:
        """
        Parse the cache file if it looks usable (exists and is bigger than the
        configured minimum); otherwise refresh it from the static source first.
        Freshness is size-only; there is no TTL.

        The configured path is checked first, so a pre-seeded cache works
        without a static source URL. The URL is only needed to refresh.
        """
        configured = self.config.cache.file_path
        if self._usable(configured):
            log.info("Using local cache file: %s", configured)
            return parse_file(configured)

        # Without a static URL this raises FetchFailed: nothing to refresh from.
        path = self.cache_path()
        if path != configured and self._usable(path):
            log.info("Using local cache file: %s", path)
            return parse_file(path)

        log.info("Refreshing cache %s from %s", path, self.static_source.url)
        self.static_source.download(path)
        return parse_file(path)

    def run_processed(self) -> str:
        records = self.load_cached()
        data = write_csv(records, PROCESSED_EXPORT)
        uri = self.blob_store.put(self.processed_export_path(), data)
        log.info("Processed export: %d records uploaded to %s", len(records), uri)
        return uri
