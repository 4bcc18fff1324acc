from __future__ import annotations

import csv
from datetime import datetime
from io import StringIO
from typing import Any, Iterable

from formintake.core.datetime_utils import isoformat_utc
from formintake.core.errors import NotFound
from formintake.services.kinds import KindSpec

CSV_DELIMITER = ";"
UTF8_BOM = "\ufeff"


def _csv_safe(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return isoformat_utc(value)
    text = str(value)
    if text and text[0] in "=+-@\t":
        return f"'{text}"
    return text


def export_csv(spec: KindSpec, rows: Iterable[Any]) -> bytes:
    """
    Serializes rows (already ordered newest first) into a semicolon-delimited
    UTF-8 CSV with a byte-order mark so spreadsheet apps pick up the encoding.
    Raises NotFound when there is nothing to export.
    """
    rows = list(rows)
    if not rows:
        raise NotFound(f"No hay {spec.report_name} registradas.")

    buffer = StringIO()
    writer = csv.writer(buffer, delimiter=CSV_DELIMITER, lineterminator="\r\n")
    writer.writerow([header for _, header in spec.report_columns])
    for row in rows:
        writer.writerow([_csv_safe(getattr(row, attr, None)) for attr, _ in spec.report_columns])
    return (UTF8_BOM + buffer.getvalue()).encode("utf-8")


def report_filename(spec: KindSpec, now: datetime) -> str:
    return f"{spec.report_name}_{now.strftime('%Y%m%d_%H%M%S')}.csv"
