"""Object store used to publish CSV exports.

Only two operations are needed: ``put(path, data) -> uri`` and ``get(uri)``.
S3 is the production backend; ``LocalBlobStore`` mirrors the same layout on
disk for development and tests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Tuple
from urllib.parse import urlparse

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .config import AppConfig
from .errors import FetchFailed, UploadFailed
from .helpers.file import ensure_parent

log = logging.getLogger(__name__)


class BlobStore(Protocol):
    def put(self, path: str, data: bytes) -> str: ...

    def get(self, uri: str) -> bytes: ...


def _split_s3_uri(uri: str) -> Tuple[str, str]:
    """'s3://bucket/a/b.csv' -> ('bucket', 'a/b.csv')."""
    parsed = urlparse(uri)
    if parsed.scheme != "s3" or not parsed.netloc:
        raise FetchFailed(f"Not an s3:// URI: {uri}")
    return parsed.netloc, parsed.path.lstrip("/")


class S3BlobStore:
    def __init__(self, bucket: str, client=None, region: Optional[str] = None) -> None:
        self.bucket = bucket
        self.client = client or boto3.client("s3", region_name=region)

    def put(self, path: str, data: bytes) -> str:
        key = path.lstrip("/")
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType="text/csv")
        except (BotoCoreError, ClientError) as e:
            raise UploadFailed(f"Failed to upload s3://{self.bucket}/{key}: {e}") from e
        uri = f"s3://{self.bucket}/{key}"
        log.info("Uploaded %d bytes to %s", len(data), uri)
        return uri

    def get(self, uri: str) -> bytes:
        bucket, key = _split_s3_uri(uri)
        try:
            resp = self.client.get_object(Bucket=bucket, Key=key)
            return resp["Body"].read()
        except (BotoCoreError, ClientError) as e:
            raise FetchFailed(f"Failed to read {uri}: {e}") from e


class LocalBlobStore:
    """Filesystem stand-in for S3: ``put('a/b.csv')`` writes ``<root>/a/b.csv``."""

    def __init__(self, root: str) -> None:
        self.root = Path(root)

    def put(self, path: str, data: bytes) -> str:
        target = self.root / path.lstrip("/")
        try:
            ensure_parent(str(target))
            target.write_bytes(data)
        except OSError as e:
            raise UploadFailed(f"Failed to write {target}: {e}") from e
        uri = target.resolve().as_uri()
        log.info("Wrote %d bytes to %s", len(data), uri)
        return uri

    def get(self, uri: str) -> bytes:
        parsed = urlparse(uri)
        path = Path(parsed.path) if parsed.scheme == "file" else self.root / uri.lstrip("/")
        try:
            return path.read_bytes()
        except OSError as e:
            raise FetchFailed(f"Failed to read {uri}: {e}") from e


def build_blob_store(config: AppConfig) -> BlobStore:
    if config.storage.backend == "local":
        return LocalBlobStore(config.storage.local_root)
    return S3BlobStore(config.storage.bucket, region=config.storage.region)
