"""
xml_to_sql.py

Generate one textual SQL statement per detected row.

Values are rendered inline, never bound as parameters: ``NULL`` for missing
values, numbers and TRUE/FALSE bare, everything else single-quoted with
embedded quotes doubled. Callers own injection safety for table names and
WHERE clauses.
"""
from __future__ import annotations

import re
from typing import List, Optional

from flowshape.engine.extract.records import FlatRecord, extract_records
from flowshape.engine.tree import parse_xml
from flowshape.engine.values import is_numeric
from flowshape.logging_setup import get_logger
from flowshape.schemas import SqlConfig, SqlOperation

LOG = get_logger("flowshape.xml_to_sql")

_COLUMN_UNSAFE = re.compile(r"[^A-Za-z0-9_]")


def clean_column_name(name: str) -> str:
    return _COLUMN_UNSAFE.sub("_", name)


def format_value(value: Optional[str]) -> str:
    if value is None:
        return "NULL"
    if is_numeric(value):
        return value
    if value.lower() in ("true", "false"):
        return value.upper()
    return "'" + value.replace("'", "''") + "'"


def _where(config: SqlConfig) -> str:
    return f" WHERE {config.where_clause}" if config.where_clause else ""


def generate_statement(record: FlatRecord, config: SqlConfig) -> Optional[str]:
    """One statement for one row; None for an empty row."""
    if not record:
        return None

    table = config.table_name
    op = config.operation
    if op is SqlOperation.INSERT:
        columns = ", ".join(record)
        values = ", ".join(format_value(v) for v in record.values())
        return f"INSERT INTO {table}({columns}) VALUES({values})"
    if op is SqlOperation.UPDATE:
        sets = ", ".join(f"{k} = {format_value(v)}" for k, v in record.items())
        return f"UPDATE {table} SET {sets}{_where(config)}"
    if op is SqlOperation.DELETE:
        return f"DELETE FROM {table}{_where(config)}"
    columns = ", ".join(record) or "*"
    return f"SELECT {columns} FROM {table}{_where(config)}"


def _clean_keys(record: FlatRecord) -> FlatRecord:
    return {clean_column_name(k): v for k, v in record.items()}


def xml_to_sql(xml: str, config: SqlConfig) -> List[str]:
    mappings = config.field_mappings or None
    records = extract_records(parse_xml(xml), mappings)
    if mappings is None and config.sanitize_column_names:
        records = [_clean_keys(r) for r in records]

    statements = []
    for record in records:
        statement = generate_statement(record, config)
        if statement is not None:
            statements.append(statement)
    LOG.debug("sql.generated", operation=config.operation.value, count=len(statements))
    return statements
