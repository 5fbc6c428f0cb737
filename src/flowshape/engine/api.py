"""
Public conversion entry points.

Every function takes the payload plus one configuration model and returns the
converted value. Failures surface as ``ConversionError`` and are logged once
here, at the boundary.
"""
from __future__ import annotations

from functools import wraps
from typing import Any, List

from flowshape.engine.load.xml_to_csv import xml_to_csv
from flowshape.engine.load.xml_to_fixed_length import xml_to_fixed_length
from flowshape.engine.load.xml_to_sql import xml_to_sql
from flowshape.engine.transform.json_to_xml import json_to_xml
from flowshape.engine.transform.tabular_to_xml import tabular_to_xml
from flowshape.engine.transform.xml_to_json import xml_to_json
from flowshape.errors import ConversionError
from flowshape.logging_setup import get_logger
from flowshape.schemas import (
    AdapterConfig,
    CsvConfig,
    FixedLengthConfig,
    JsonXmlConfig,
    SqlConfig,
    TabularXmlConfig,
)

LOG = get_logger("flowshape.api")


def _boundary(target: str):
    """Log failures once and make sure only ConversionError escapes."""

    def decorate(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except ConversionError as e:
                LOG.warning("conversion.failed", target=target, error=str(e))
                raise
            except Exception as e:
                LOG.warning("conversion.failed", target=target, error=str(e), unexpected=True)
                raise ConversionError(f"Conversion to {target} failed", e) from e

        return wrapper

    return decorate


def _require(config: Any, expected: type, target: str) -> None:
    if not isinstance(config, expected):
        raise ConversionError(
            f"{target} conversion needs a {expected.__name__}, got {type(config).__name__}"
        )


@_boundary("xml")
def to_xml(data: Any, config: JsonXmlConfig | TabularXmlConfig) -> str:
    """JSON (text or decoded value) or tabular input to canonical XML."""
    if isinstance(config, JsonXmlConfig):
        return json_to_xml(data, config)
    if isinstance(config, TabularXmlConfig):
        return tabular_to_xml(data, config)
    raise ConversionError(f"Unsupported configuration for XML output: {type(config).__name__}")


@_boundary("json")
def from_xml_to_json(xml: str, remove_root_wrapper: bool = True) -> str:
    return xml_to_json(xml, remove_root_wrapper=remove_root_wrapper)


@_boundary("csv")
def from_xml_to_csv(xml: str, config: CsvConfig) -> str:
    _require(config, CsvConfig, "CSV")
    return xml_to_csv(xml, config)


@_boundary("fixed_length")
def from_xml_to_fixed_length(xml: str, config: FixedLengthConfig) -> str:
    _require(config, FixedLengthConfig, "Fixed-length")
    return xml_to_fixed_length(xml, config)


@_boundary("sql")
def from_xml_to_sql(xml: str, config: SqlConfig) -> List[str]:
    _require(config, SqlConfig, "SQL")
    return xml_to_sql(xml, config)


def from_xml(xml: str, config: AdapterConfig):
    """Convert XML with whichever converter matches the configuration type.

    Returns a string for JSON, CSV and fixed-length output and a list of
    statements for SQL.
    """
    if isinstance(config, JsonXmlConfig):
        return from_xml_to_json(xml, remove_root_wrapper=config.remove_root_element)
    if isinstance(config, CsvConfig):
        return from_xml_to_csv(xml, config)
    if isinstance(config, FixedLengthConfig):
        return from_xml_to_fixed_length(xml, config)
    if isinstance(config, SqlConfig):
        return from_xml_to_sql(xml, config)
    LOG.warning("conversion.failed", target="unknown", config=type(config).__name__)
    raise ConversionError(f"Cannot convert XML with a {type(config).__name__}")
