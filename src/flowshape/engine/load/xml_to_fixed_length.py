"""
xml_to_fixed_length.py

Render an XML document as fixed-width records: one line per detected row,
each field cut or padded to its configured length, no separators.
"""
from __future__ import annotations

from typing import List, Optional

from flowshape.engine.extract.records import FlatRecord, extract_records
from flowshape.engine.tree import parse_xml
from flowshape.errors import ConversionError
from flowshape.logging_setup import get_logger
from flowshape.schemas import FixedLengthConfig, PadDirection

LOG = get_logger("flowshape.xml_to_fixed_length")


def pad_field(
    value: Optional[str],
    length: int,
    pad_character: str = " ",
    direction: PadDirection = PadDirection.RIGHT,
) -> str:
    value = value or ""
    if len(value) >= length:
        return value[:length]
    padding = pad_character * (length - len(value))
    if direction is PadDirection.LEFT:
        return padding + value
    return value + padding


def _field_order(config: FixedLengthConfig) -> List[str]:
    names = config.field_order or list(config.field_lengths)
    # fields without a length are skipped
    return [n for n in names if n in config.field_lengths]


def format_record(record: FlatRecord, config: FixedLengthConfig) -> str:
    return "".join(
        pad_field(record.get(name), config.field_lengths[name], config.pad_character, config.pad_direction)
        for name in _field_order(config)
    )


def xml_to_fixed_length(xml: str, config: FixedLengthConfig) -> str:
    if not config.field_lengths:
        raise ConversionError("Field lengths must be specified for fixed-length format")

    records = extract_records(parse_xml(xml), config.field_mappings or None)
    LOG.debug("fixed_length.rendered", rows=len(records), fields=len(config.field_lengths))
    return "".join(format_record(r, config) + config.line_terminator for r in records)
