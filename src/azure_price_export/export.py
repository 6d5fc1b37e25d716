"""CSV rendering for the raw and processed exports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from .helpers.csv import PROCESSED_EXPORT_HEADER, RAW_EXPORT_HEADER, quoted_cell, raw_cell
from .models import DerivedFields, PriceRecord


@dataclass(frozen=True)
class ColumnSet:
    """A fixed header plus how one record becomes the matching list of cells."""

    name: str
    header: Tuple[str, ...]
    cells: Callable[[PriceRecord], List[str]]


def _raw_cells(r: PriceRecord) -> List[str]:
    return [
        raw_cell(r.meter_id),
        raw_cell(r.product_name),
        raw_cell(r.sku_name),
        raw_cell(r.region_name),
        raw_cell(r.location),
        str(r.retail_price),
        raw_cell(r.currency_code),
        raw_cell(r.service_family),
        raw_cell(r.unit_of_measure),
        raw_cell(r.effective_start_date),
        raw_cell(r.type),
    ]


def _processed_cells(r: PriceRecord) -> List[str]:
    d = DerivedFields.derive(r)
    return [
        quoted_cell(v)
        for v in (
            r.meter_id,
            r.product_name,
            d.deployment_option,
            d.compute_descriptor,
            r.sku_name,
            d.replication_code,
            r.region_name,
            r.location,
            r.retail_price,
            r.currency_code,
            r.service_family,
            r.unit_of_measure,
            r.effective_start_date,
            r.type,
        )
    ]


RAW_EXPORT = ColumnSet("raw", RAW_EXPORT_HEADER, _raw_cells)
PROCESSED_EXPORT = ColumnSet("processed", PROCESSED_EXPORT_HEADER, _processed_cells)


def render_csv(records: Iterable[PriceRecord], columns: ColumnSet) -> str:
    """Header line, then one line per record in input order; every line ends in '\\n'."""
    lines = [",".join(columns.header)]
    lines.extend(",".join(columns.cells(r)) for r in records)
    return "\n".join(lines) + "\n"


def write_csv(records: Iterable[PriceRecord], columns: ColumnSet) -> bytes:
    return render_csv(records, columns).encode("utf-8")
