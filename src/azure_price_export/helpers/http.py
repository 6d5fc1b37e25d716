from typing import Optional, Dict

import requests

DEFAULT_TIMEOUT = 60


# ---------- HTTP helpers ----------
def get_session(headers: Optional[Dict[str, str]] = None) -> requests.Session:
    """New Session that asks for JSON unless told otherwise."""
    s = requests.Session()
    s.headers.update({"Accept": "application/json"})
    if headers:
        s.headers.update(headers)
    return s


def http_get_json(session: requests.Session, url: str, timeout: float = DEFAULT_TIMEOUT):
    """HTTP GET a JSON endpoint and return the decoded JSON.

    Raises:
        requests.HTTPError on non-2xx responses.
        ValueError if the body is not valid JSON.
    """
    r = session.get(url, timeout=timeout)
    r.raise_for_status()
    return r.json()


def http_get(session: requests.Session, url: str, timeout: float = 300) -> requests.Response:
    """HTTP GET a resource and return the raw Response (stream enabled).

    Useful for large payloads/files. Use the Response as a context manager
    so the connection is released once the body is consumed.

    Raises:
        requests.HTTPError on non-2xx responses.
    """
    r = session.get(url, timeout=timeout, stream=True)
    try:
        r.raise_for_status()
    except requests.HTTPError:
        r.close()
        raise
    return r
