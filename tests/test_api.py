"""Public conversion entry points."""

import json

import pytest

from flowshape.engine import api
from flowshape.errors import ConversionError
from flowshape.schemas import (
    CsvConfig,
    FixedLengthConfig,
    JsonXmlConfig,
    SqlConfig,
    TabularXmlConfig,
)

XML = "<r><i><a>1</a></i><i><a>2</a></i></r>"


def test_to_xml_picks_converter_by_config():
    json_out = api.to_xml('{"a": 1}', JsonXmlConfig(include_xml_declaration=False, pretty_print=False))
    assert json_out == "<root><a>1</a></root>"

    csv_out = api.to_xml("a\n1\n", TabularXmlConfig(include_xml_declaration=False, pretty_print=False))
    assert csv_out == "<records><record><a>1</a></record></records>"


def test_to_xml_rejects_other_configs():
    with pytest.raises(ConversionError):
        api.to_xml("{}", CsvConfig())


def test_from_xml_dispatches_over_every_config_type():
    assert json.loads(api.from_xml(XML, JsonXmlConfig())) == {"i": [{"a": 1}, {"a": 2}]}
    assert api.from_xml(XML, CsvConfig()) == "a\n1\n2\n"
    assert api.from_xml(XML, FixedLengthConfig(field_lengths={"a": 2})) == "1 \n2 \n"
    assert api.from_xml(XML, SqlConfig(table_name="t")) == [
        "INSERT INTO t(a) VALUES(1)",
        "INSERT INTO t(a) VALUES(2)",
    ]


def test_from_xml_keeps_root_when_asked():
    out = api.from_xml("<r><a>1</a></r>", JsonXmlConfig(remove_root_element=False))
    assert json.loads(out) == {"r": {"a": 1}}


def test_from_xml_rejects_tabular_config():
    with pytest.raises(ConversionError):
        api.from_xml(XML, TabularXmlConfig())


def test_wrong_config_type_is_a_conversion_error():
    with pytest.raises(ConversionError, match="CsvConfig"):
        api.from_xml_to_csv(XML, SqlConfig(table_name="t"))
    with pytest.raises(ConversionError):
        api.from_xml_to_sql(XML, CsvConfig())
    with pytest.raises(ConversionError):
        api.from_xml_to_fixed_length(XML, CsvConfig())


def test_parse_failures_surface_as_conversion_errors():
    with pytest.raises(ConversionError):
        api.from_xml_to_json("<broken")
    with pytest.raises(ConversionError):
        api.to_xml("{broken", JsonXmlConfig())
