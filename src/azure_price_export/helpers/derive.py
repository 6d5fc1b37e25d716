from __future__ import annotations

from typing import Optional
import re

# "Azure Database for MySQL Flexible Server - Compute" -> "Flexible Server"
_DEPLOYMENT_RE = re.compile(r"MySQL\s+(\w+\s+\w+)")
# "... Compute Gen5, ..." -> "Compute Gen5"
_COMPUTE_RE = re.compile(r"(Compute[^,]*)")
_COMPUTE_LOOSE_RE = re.compile(r"([\w\s]*Compute[\w\s]*)")

# Checked in this order; first hit wins
_REPLICATION_CODES = ("LRS", "ZRS", "GRS")


def deployment_option(product_name: Optional[str]) -> str:
    """Two words following 'MySQL', or ''."""
    if not product_name:
        return ""
    m = _DEPLOYMENT_RE.search(product_name)
    return m.group(1).strip() if m else ""


def compute_descriptor(product_name: Optional[str]) -> str:
    """
    Text from 'Compute' up to the next comma; failing that, the run of
    words/spaces around 'Compute'. Case-sensitive on 'Compute'.
    """
    if not product_name:
        return ""
    m = _COMPUTE_RE.search(product_name) or _COMPUTE_LOOSE_RE.search(product_name)
    return m.group(1).strip() if m else ""


def replication_code(sku_name: Optional[str]) -> str:
    """Storage redundancy tag (LRS/ZRS/GRS) embedded in a SKU name, or ''."""
    if not sku_name:
        return ""
    s = sku_name.upper()
    for code in _REPLICATION_CODES:
        if code in s:
            return code
    return ""
