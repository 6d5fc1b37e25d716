from __future__ import annotations

from typing import List, Optional
from urllib.parse import urlparse

import json
import logging
import os
import shutil

import requests

from ..errors import FetchFailed, UnsupportedFormat
from ..helpers.csv import split_csv_line
from ..helpers.file import ensure_parent, extension
from ..helpers.http import get_session, http_get
from ..helpers.string import same_text
from ..models import PriceRecord, PricingDocument
from .retail import page_from_payload

log = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("json", "csv")


# =============================================================================
# Parsing
# =============================================================================

def parse_json_bytes(data: bytes) -> List[PriceRecord]:
    try:
        payload = json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, ValueError) as e:
        raise FetchFailed(f"Malformed JSON price document: {e}") from e
    return page_from_payload(payload).records


def parse_csv_bytes(data: bytes) -> List[PriceRecord]:
    """
    First line is a header and is skipped. Columns are positional
    (see helpers.csv.STATIC_CSV_COLUMNS); blank lines are ignored.
    """
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FetchFailed(f"CSV price document is not UTF-8: {e}") from e

    records: List[PriceRecord] = []
    for line in text.splitlines()[1:]:
        if not line.strip():
            continue
        records.append(PriceRecord.from_csv_columns(split_csv_line(line)))
    return records


def parse_bytes(data: bytes, ext: str) -> List[PriceRecord]:
    if ext == "json":
        return parse_json_bytes(data)
    if ext == "csv":
        return parse_csv_bytes(data)
    raise UnsupportedFormat(f"Unsupported file format: .{ext}")


def parse_file(path: str) -> List[PriceRecord]:
    """Parse a local JSON or CSV price file, chosen by its extension."""
    ext = extension(path)
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormat(f"Unsupported file format: {path}")
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise FetchFailed(f"Failed to read {path}: {e}") from e
    return parse_bytes(data, ext)


def filter_records(
        records: List[PriceRecord],
        product: Optional[str] = None,
        region: Optional[str] = None,
) -> List[PriceRecord]:
    """
    Local stand-in for the API's $filter: case-insensitive equality on
    productName / armRegionName. Blank criteria match everything.
    """
    out = records
    if product:
        out = [r for r in out if same_text(r.product_name, product)]
    if region:
        out = [r for r in out if same_text(r.region_name, region)]
    return out


# =============================================================================
# Static source: one fixed blob instead of paginated API calls
# =============================================================================

class StaticPriceSource:
    """
    A single JSON or CSV snapshot of retail prices.

    The locator may be http(s)://, s3:// (read through the blob store) or a
    local path.
    """

    def __init__(
            self,
            url: Optional[str],
            session: Optional[requests.Session] = None,
            blob_store=None,
            timeout: float = 300,
    ) -> None:
        self.url = url
        self.session = session or get_session()
        self.blob_store = blob_store
        self.timeout = timeout

    @property
    def extension(self) -> str:
        return extension(self._require_url())

    def _require_url(self) -> str:
        if not self.url:
            raise FetchFailed("No static source URL configured")
        return self.url

    def _check_extension(self) -> str:
        ext = self.extension
        if ext not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFormat(f"Unsupported file format: {self.url}")
        return ext

    def _scheme(self) -> str:
        return urlparse(self._require_url()).scheme.lower()

    def read_bytes(self) -> bytes:
        url = self._require_url()
        scheme = self._scheme()
        try:
            if scheme in ("http", "https"):
                return http_get(self.session, url, timeout=self.timeout).content
            if scheme == "s3":
                if self.blob_store is None:
                    raise FetchFailed(f"No blob store available to read {url}")
                return self.blob_store.get(url)
            with open(urlparse(url).path if scheme == "file" else url, "rb") as f:
                return f.read()
        except requests.RequestException as e:
            raise FetchFailed(f"Failed to download static source {url}: {e}") from e
        except OSError as e:
            raise FetchFailed(f"Failed to read static source {url}: {e}") from e

    def load(self) -> PricingDocument:
        ext = self._check_extension()
        log.info("Loading static price source %s", self.url)
        return PricingDocument(parse_bytes(self.read_bytes(), ext))

    def download(self, dest: str) -> str:
        """
        Copy the blob to dest (parent directories created). Written to a
        temporary file first and renamed, so dest is never left half-written
        by a failed download.
        """
        self._check_extension()
        url = self._require_url()
        scheme = self._scheme()
        tmp = f"{dest}.part"
        try:
            ensure_parent(dest)
            if scheme in ("http", "https"):
                with http_get(self.session, url, timeout=self.timeout) as resp, open(tmp, "wb") as f:
                    for chunk in resp.iter_content(chunk_size=1 << 16):
                        f.write(chunk)
            elif scheme == "s3":
                data = self.read_bytes()
                with open(tmp, "wb") as f:
                    f.write(data)
            else:
                shutil.copyfile(urlparse(url).path if scheme == "file" else url, tmp)
            os.replace(tmp, dest)
        except requests.RequestException as e:
            raise FetchFailed(f"Failed to download static source {url}: {e}") from e
        except OSError as e:
            raise FetchFailed(f"Failed to cache static source {url} at {dest}: {e}") from e
        finally:
            if os.path.exists(tmp):
                os.remove(tmp)
        log.info("Cached static source %s at %s", url, dest)
        return dest
