import os
from urllib.parse import urlparse
from pathlib import Path


def filesize(p: str) -> int:
    """Return file size in bytes, 0 if missing."""
    try:
        return os.path.getsize(p)
    except OSError:
        return 0


def ensure_parent(p: str) -> Path:
    """Create the parent directory of p (if any) and return p as a Path."""
    path = Path(p)
    if path.parent and str(path.parent) not in ("", "."):
        path.parent.mkdir(parents=True, exist_ok=True)
    return path


def extension(locator: str, default: str = "json") -> str:
    """
    Lower-cased extension of a path or URL ('.../prices.CSV?sig=x' -> 'csv').
    Query strings and fragments are ignored; no dot in the last segment -> default.
    """
    path = urlparse(locator).path if "://" in locator else locator
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return default
    return name.rsplit(".", 1)[-1].lower() or default
