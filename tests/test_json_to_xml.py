"""JSON -> XML projection."""

import pytest

from flowshape.engine.transform.json_to_xml import json_to_tree, json_to_xml
from flowshape.engine.tree import parse_xml
from flowshape.errors import ConversionError
from flowshape.schemas import JsonXmlConfig

BARE = JsonXmlConfig(include_xml_declaration=False)


def test_flat_object():
    out = json_to_xml('{"name": "Ann", "age": 30, "active": true, "ratio": 0.5}', BARE)
    assert out == (
        "<root>\n"
        "  <name>Ann</name>\n"
        "  <age>30</age>\n"
        "  <active>true</active>\n"
        "  <ratio>0.5</ratio>\n"
        "</root>"
    )


def test_declaration_is_included_by_default():
    assert json_to_xml({"a": 1}).startswith('<?xml version="1.0" encoding="UTF-8"?>\n<root>')


def test_array_items_are_singular_siblings():
    root = parse_xml(json_to_xml('{"orders": [{"id": 1}, {"id": 2}]}', BARE))
    assert [c.name for c in root.children] == ["order", "order"]
    assert [c.child("id").text for c in root.children] == ["1", "2"]


def test_array_element_name_override():
    config = JsonXmlConfig(array_element_names={"tags": "label", "a.bs": "bee"})
    root = json_to_tree({"tags": ["x", "y"], "a": {"bs": [1]}}, config)
    assert [c.name for c in root.children] == ["label", "label", "a"]
    assert root.child("a").child("bee").text == "1"


def test_top_level_array_uses_row_element_name():
    root = parse_xml(json_to_xml("[1, 2]", BARE))
    assert [(c.name, c.text) for c in root.children] == [("item", "1"), ("item", "2")]

    config = JsonXmlConfig(array_element_names={"": "entry"})
    root = json_to_tree([1], config)
    assert root.children[0].name == "entry"


def test_nested_arrays_repeat_the_rule_per_level():
    root = json_to_tree({"rows": [[1, 2], [3]]}, JsonXmlConfig())
    assert [c.name for c in root.children] == ["row", "row"]
    first, second = root.children
    assert [(c.name, c.text) for c in first.children] == [("row", "1"), ("row", "2")]
    assert [(c.name, c.text) for c in second.children] == [("row", "3")]


def test_nulls_are_dropped_by_default():
    root = json_to_tree({"a": None, "b": 1, "c": [None, 2]}, JsonXmlConfig())
    assert [c.name for c in root.children] == ["b", "c"]
    assert root.child("c").text == "2"


def test_nulls_preserved_as_empty_elements():
    config = JsonXmlConfig(preserve_null_values=True, include_xml_declaration=False)
    root = parse_xml(json_to_xml({"a": None, "b": [None]}, config))
    assert root.child("a") is not None
    assert root.child("a").text is None
    assert root.child("b") is not None


def test_property_names_converted_to_camel_case():
    root = json_to_tree({"first_name": "Ann", "order-id": 5}, JsonXmlConfig(convert_property_names=True))
    assert [c.name for c in root.children] == ["firstName", "orderId"]


def test_keys_are_sanitized():
    root = json_to_tree({"1st place": "x", "unit price": 2}, JsonXmlConfig())
    assert [c.name for c in root.children] == ["_1st_place", "unit_price"]


def test_namespace_prefix_on_root_and_children():
    config = JsonXmlConfig(namespace_uri="urn:x", namespace_prefix="ns", include_xml_declaration=False)
    out = json_to_xml({"a": 1}, config)
    assert out.startswith('<ns:root xmlns:ns="urn:x">')
    assert "<ns:a>1</ns:a>" in out


def test_additional_namespaces_are_declared():
    config = JsonXmlConfig(additional_namespaces={"xsi": "http://www.w3.org/2001/XMLSchema-instance"})
    out = json_to_xml({"a": 1}, config)
    assert 'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"' in out


def test_compact_output():
    config = JsonXmlConfig(include_xml_declaration=False, pretty_print=False, root_element_name="Message")
    assert json_to_xml({"a": {"b": "c"}}, config) == "<Message><a><b>c</b></a></Message>"


def test_bytes_input_with_bom():
    root = parse_xml(json_to_xml('\ufeff{"a": 1}'.encode("utf-8"), BARE))
    assert root.child("a").text == "1"


@pytest.mark.parametrize("bad", ["{", "{'a': 1}", ""])
def test_malformed_json_raises(bad):
    with pytest.raises(ConversionError):
        json_to_xml(bad)
