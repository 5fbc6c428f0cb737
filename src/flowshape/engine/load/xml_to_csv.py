#!/usr/bin/env python3
"""
xml_to_csv.py

Render an XML document as CSV.

Behavior:
- Rows come from the record extractor: the first repeating child of the root,
  flattened to dotted paths (or resolved through ``field_mappings``).
- Columns: ``column_order`` when given, else every key in first-seen order.
- Each field (the header included) goes through: optional trim, NUL removal,
  optional ``\\uxxxx`` escaping of non-ASCII, line-break folding (unless
  preserved), optional number reformatting, optional date reformatting.
- A field is quoted when ``quote_all_fields`` is set or it contains the
  delimiter, the quote character, CR or LF, has a leading or trailing space,
  or starts with one of ``= + - @`` (spreadsheet formula prefixes). Quote
  characters inside quoted fields are doubled.

Usage (CLI):
    python -m flowshape.engine.load.xml_to_csv input.xml [output.csv]
"""
from __future__ import annotations

import argparse
import re
from pathlib import Path
from typing import List, Optional

from dateutil import parser as date_parser

from flowshape.constants import FILE_ENCODING
from flowshape.engine.extract.records import FlatRecord, extract_records
from flowshape.engine.tree import parse_xml
from flowshape.engine.values import parse_double
from flowshape.logging_setup import get_logger
from flowshape.schemas import CsvConfig

LOG = get_logger("flowshape.xml_to_csv")

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")
_DAY_FIRST_DATE = re.compile(r"\d{2}/\d{2}/\d{4}")
_FORMULA_PREFIXES = ("=", "+", "-", "@")


def escape_non_ascii(value: str) -> str:
    """Replace every non-ASCII UTF-16 code unit with a lowercase ``\\uxxxx``."""
    out = []
    for ch in value:
        if ord(ch) < 128:
            out.append(ch)
            continue
        units = ch.encode("utf-16-be")
        for i in range(0, len(units), 2):
            out.append("\\u%04x" % int.from_bytes(units[i:i + 2], "big"))
    return "".join(out)


def format_number(value: str, decimal_format: Optional[str] = None) -> str:
    number = parse_double(value)
    if number is None:
        return value
    if decimal_format:
        return format(number, decimal_format)
    if number.is_integer():
        return str(int(number))
    return value


def format_date(value: str, date_format: str) -> str:
    if _ISO_DATE.match(value):
        day_first = False
    elif _DAY_FIRST_DATE.match(value):
        day_first = True
    else:
        return value
    try:
        parsed = date_parser.parse(value, dayfirst=day_first)
    except (ValueError, OverflowError):
        return value
    return parsed.strftime(date_format)


def _clean(value: Optional[str], config: CsvConfig) -> str:
    value = value or ""
    if config.trim_whitespace:
        value = value.strip()
    value = value.replace("\0", "")
    if config.escape_unicode:
        value = escape_non_ascii(value)
    if not config.preserve_line_breaks:
        value = value.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    if config.format_numbers:
        value = format_number(value, config.decimal_format)
    if config.date_format:
        value = format_date(value, config.date_format)
    return value


def needs_quoting(value: str, config: CsvConfig) -> bool:
    return (
        config.quote_all_fields
        or config.delimiter in value
        or config.quote_char in value
        or "\n" in value
        or "\r" in value
        or value.startswith(" ")
        or value.endswith(" ")
        or value.startswith(_FORMULA_PREFIXES)
    )


def format_field(value: Optional[str], config: CsvConfig) -> str:
    value = _clean(value, config)
    if needs_quoting(value, config):
        q = config.quote_char
        return q + value.replace(q, q + q) + q
    return value


def _columns(records: List[FlatRecord], config: CsvConfig) -> List[str]:
    if config.column_order:
        return list(config.column_order)
    seen: dict = {}
    for record in records:
        for key in record:
            seen.setdefault(key, None)
    return list(seen)


def records_to_csv(records: List[FlatRecord], config: CsvConfig) -> str:
    if not records:
        return ""
    columns = _columns(records, config)

    lines = []
    if config.include_headers:
        lines.append(config.delimiter.join(format_field(c, config) for c in columns))
    for record in records:
        lines.append(config.delimiter.join(format_field(record.get(c), config) for c in columns))
    return "".join(line + config.line_terminator for line in lines)


def xml_to_csv(xml: str, config: CsvConfig | None = None) -> str:
    config = config or CsvConfig()
    records = extract_records(parse_xml(xml), config.field_mappings or None)
    LOG.debug("csv.rendered", rows=len(records))
    return records_to_csv(records, config)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Convert XML to CSV")
    p.add_argument("input", help="Input XML file")
    p.add_argument("output", nargs="?", help="Optional output CSV file")
    p.add_argument("--delimiter", default=",", help="Field delimiter (default ',')")
    p.add_argument("--quote-all", action="store_true", help="Quote every field")
    p.add_argument("--no-header", action="store_true", help="Omit the header row")
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    inp = Path(args.input)
    if not inp.exists():
        raise SystemExit(f"Input XML not found: {inp}")

    with open(inp, "r", encoding=FILE_ENCODING) as fh:
        xml = fh.read()

    config = CsvConfig(
        delimiter=args.delimiter,
        quote_all_fields=args.quote_all,
        include_headers=not args.no_header,
    )
    text = xml_to_csv(xml, config)

    outp = Path(args.output) if args.output else inp.with_suffix(".csv")
    outp.parent.mkdir(parents=True, exist_ok=True)
    with open(outp, "w", encoding=FILE_ENCODING, newline="") as fh:
        fh.write(text)
    print(str(outp))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
