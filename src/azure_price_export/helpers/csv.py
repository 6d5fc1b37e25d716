from __future__ import annotations

from typing import Any, Dict, List, Optional
import re

# -------------------------------------------------------------------
# Header literals for the two exports
# -------------------------------------------------------------------
RAW_EXPORT_HEADER = (
    "MeterId", "ProductName", "SKU", "Region", "Location", "Price",
    "Currency", "ServiceFamily", "Unit", "EffectiveDate", "Type",
)

PROCESSED_EXPORT_HEADER = (
    "MeterId", "ProductName", "DeploymentOption", "Compute", "SKU", "VCore",
    "Region", "Location", "Price", "Currency", "ServiceFamily", "Unit",
    "EffectiveDate", "Type",
)

# Positional layout of a static CSV source (same order as the raw export)
STATIC_CSV_COLUMNS = (
    "meterId", "productName", "skuName", "armRegionName", "location",
    "retailPrice", "currencyCode", "serviceFamily", "unitOfMeasure",
    "effectiveStartDate", "type",
)

# A comma followed by an even number of quotes up to end of line is outside quotes
_SPLIT_RE = re.compile(r',(?=(?:[^"]*"[^"]*")*[^"]*$)')


# -------------------------------------------------------------------
# Reading
# -------------------------------------------------------------------
def pick_first_dict(d: Dict[str, Any], *keys: str) -> Optional[Any]:
    """Return the first key in *keys* that exists in dict d and is not blank."""
    for k in keys:
        v = d.get(k)
        if v not in (None, ""):
            return v
    return None


def split_csv_line(line: str) -> List[str]:
    """
    Split one CSV line on commas that are not inside a quoted segment.
    Quotes are kept; the caller strips them.
    """
    return _SPLIT_RE.split(line)


def column(cols: List[str], i: int) -> str:
    """Column i with quotes removed and trimmed; '' when the row is short."""
    return cols[i].replace('"', "").strip() if i < len(cols) else ""


# -------------------------------------------------------------------
# Writing
# -------------------------------------------------------------------
def raw_cell(v: Any) -> str:
    """Raw export cell: None -> '', commas become spaces, never quoted."""
    return "" if v is None else str(v).replace(",", " ")


def quoted_cell(v: Any) -> str:
    """Processed export cell: always wrapped in quotes, embedded quotes doubled."""
    s = "" if v is None else str(v)
    return '"' + s.replace('"', '""') + '"'
