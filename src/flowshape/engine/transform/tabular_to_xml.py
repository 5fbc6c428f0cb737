"""
tabular_to_xml.py

Build the canonical tree from flat rows: CSV text, mappings, DB-API result
sets or data frames (see ``extract.tabular``). One row element per row, one
child element per column holding a value.
"""
from __future__ import annotations

import datetime
from typing import Any, Iterable, Mapping, Optional

import pandas as pd
from dateutil import parser as date_parser

from flowshape.engine.extract.tabular import iter_rows
from flowshape.engine.naming import sanitize_element_name
from flowshape.engine.transform.json_to_xml import new_element
from flowshape.engine.tree import TreeNode, serialize
from flowshape.engine.values import scalar_to_text
from flowshape.logging_setup import get_logger
from flowshape.schemas import FieldType, TabularXmlConfig

LOG = get_logger("flowshape.tabular_to_xml")

_TRUE_WORDS = {"true", "1", "yes", "y"}
_FALSE_WORDS = {"false", "0", "no", "n"}


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    # NaN, pd.NA and NaT; containers are never "missing"
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


def _declared_boolean(text: str) -> str:
    lowered = text.strip().lower()
    if lowered in _TRUE_WORDS:
        return "true"
    if lowered in _FALSE_WORDS:
        return "false"
    return text


def _declared_date(text: str) -> str:
    try:
        parsed = date_parser.parse(text)
    except (ValueError, OverflowError):
        return text
    return parsed.date().isoformat()


def render_value(value: Any, field_type: Optional[FieldType] = None) -> str:
    """Text for one cell, honouring the column's declared type when known."""
    if isinstance(value, (bool, datetime.date, datetime.time)):
        return scalar_to_text(value)
    if isinstance(value, str):
        if field_type is FieldType.BOOLEAN:
            return _declared_boolean(value)
        if field_type is FieldType.DATE:
            return _declared_date(value)
        return value
    if field_type is FieldType.INTEGER and isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def rows_to_tree(rows: Iterable[Mapping[str, Any]], config: TabularXmlConfig) -> TreeNode:
    root = new_element(config.root_element_name, config)
    root.namespaces = dict(config.additional_namespaces)

    count = 0
    for row in rows:
        record = root.add_child(new_element(config.row_element_name, config))
        for column, value in row.items():
            if _is_missing(value):
                continue
            field_type = config.field_types.get(column)
            text = render_value(value, field_type)
            if text == "":
                continue
            name = config.field_mappings.get(column) or sanitize_element_name(str(column))
            child = record.add_child(new_element(name, config))
            child.text = text
            if field_type is not None:
                child.set_attribute("type", field_type.value)
        count += 1

    LOG.debug("tabular.built", rows=count, root=root.qualified_name)
    return root


def tabular_to_xml(data: Any, config: TabularXmlConfig | None = None) -> str:
    """Convert CSV text, rows, a cursor or a data frame to an XML string."""
    config = config or TabularXmlConfig()
    rows = iter_rows(data, config.csv)
    root = rows_to_tree(rows, config)
    return serialize(
        root,
        include_declaration=config.include_xml_declaration,
        encoding=config.encoding,
        pretty_print=config.pretty_print,
    )
