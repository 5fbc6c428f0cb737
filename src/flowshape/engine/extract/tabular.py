"""Normalise tabular payloads into a list of column -> value rows.

Accepted inputs:
- CSV text (str or bytes), parsed with the ``CsvReadOptions`` of the config
- a single mapping or any iterable of mappings
- a DB-API cursor (anything exposing ``description`` and ``fetchall``)
- a ``pandas.DataFrame`` or ``polars.DataFrame``
"""

from __future__ import annotations

import csv
import io
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd
import polars as pl

from flowshape.errors import ConversionError
from flowshape.schemas import CsvReadOptions

Row = Dict[str, Any]


def _column_name(index: int) -> str:
    return f"column{index + 1}"


def read_csv_rows(text: str, options: Optional[CsvReadOptions] = None) -> List[Row]:
    options = options or CsvReadOptions()
    reader = csv.reader(
        io.StringIO(text.lstrip("\ufeff"), newline=""),
        delimiter=options.delimiter,
        quotechar=options.quote_char,
    )

    header: Optional[List[str]] = None
    rows: List[Row] = []
    try:
        for raw in reader:
            if options.skip_blank_lines and not any(cell.strip() for cell in raw):
                continue
            cells = [cell.strip() for cell in raw] if options.trim_values else raw
            if options.has_header and header is None:
                header = [cell.strip() for cell in raw]
                continue
            names = header or []
            row: Row = {}
            for i, cell in enumerate(cells):
                name = names[i] if i < len(names) and names[i] else _column_name(i)
                row[name] = cell
            rows.append(row)
    except csv.Error as e:
        raise ConversionError("Failed to parse CSV input", e) from e
    return rows


def _frame_rows(frame: pd.DataFrame) -> List[Row]:
    # object dtype turns numpy scalars into python ones; missing values -> None
    cleaned = frame.astype(object).where(frame.notna(), None)
    return [{str(k): v for k, v in rec.items()} for rec in cleaned.to_dict(orient="records")]


def _cursor_rows(cursor: Any) -> List[Row]:
    columns = [str(desc[0]) for desc in cursor.description]
    return [dict(zip(columns, values)) for values in cursor.fetchall()]


def _is_cursor(data: Any) -> bool:
    return getattr(data, "description", None) is not None and hasattr(data, "fetchall")


def iter_rows(data: Any, csv_options: Optional[CsvReadOptions] = None) -> List[Row]:
    if isinstance(data, bytes):
        data = data.decode("utf-8-sig")
    if isinstance(data, str):
        return read_csv_rows(data, csv_options)
    if isinstance(data, pd.DataFrame):
        return _frame_rows(data)
    if isinstance(data, pl.DataFrame):
        return [dict(r) for r in data.iter_rows(named=True)]
    if _is_cursor(data):
        return _cursor_rows(data)
    if isinstance(data, Mapping):
        return [dict(data)]
    if isinstance(data, Iterable):
        rows = []
        for item in data:
            if not isinstance(item, Mapping):
                raise ConversionError(
                    f"Tabular rows must be mappings, got {type(item).__name__}"
                )
            rows.append(dict(item))
        return rows
    raise ConversionError(f"Unsupported tabular input type: {type(data).__name__}")
