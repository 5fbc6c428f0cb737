"""Canonical tree: parsing and serialization."""

import xml.etree.ElementTree as ET

import pytest

from flowshape.engine.tree import TreeNode, parse_xml, serialize
from flowshape.errors import ConversionError


def test_serialize_with_declaration():
    assert serialize(TreeNode("a", text="1")) == '<?xml version="1.0" encoding="UTF-8"?>\n<a>1</a>'


def test_serialize_custom_encoding_only_changes_declaration():
    out = serialize(TreeNode("a", text="ü"), encoding="ISO-8859-1")
    assert out.startswith('<?xml version="1.0" encoding="ISO-8859-1"?>')
    assert out.endswith("<a>ü</a>")


def test_pretty_print_uses_two_spaces():
    root = TreeNode("r")
    root.add_text_child("a", "1")
    root.add_text_child("b", "2")
    assert serialize(root, include_declaration=False) == "<r>\n  <a>1</a>\n  <b>2</b>\n</r>"


def test_compact_output():
    root = TreeNode("r")
    root.add_text_child("a", "1")
    assert serialize(root, include_declaration=False, pretty_print=False) == "<r><a>1</a></r>"


def test_prefixed_namespace_declared_once_on_root():
    root = TreeNode("root", namespace_uri="urn:x", namespace_prefix="ns")
    root.add_text_child("a", "1", namespace_uri="urn:x", namespace_prefix="ns")
    out = serialize(root, include_declaration=False, pretty_print=False)
    assert out == '<ns:root xmlns:ns="urn:x"><ns:a>1</ns:a></ns:root>'


def test_default_namespace():
    root = TreeNode("root", namespace_uri="urn:x")
    root.add_text_child("a", "1", namespace_uri="urn:x")
    out = serialize(root, include_declaration=False, pretty_print=False)
    assert out == '<root xmlns="urn:x"><a>1</a></root>'


def test_additional_namespaces_follow_the_root_namespace():
    root = TreeNode("root", namespace_uri="urn:x", namespace_prefix="ns")
    out = serialize(
        root,
        include_declaration=False,
        additional_namespaces={"xsi": "http://www.w3.org/2001/XMLSchema-instance"},
    )
    assert out.index('xmlns:ns="urn:x"') < out.index("xmlns:xsi=")


def test_special_characters_are_escaped():
    root = TreeNode("r")
    root.add_text_child("a", "x < y & z")
    out = serialize(root, include_declaration=False, pretty_print=False)
    assert out == "<r><a>x &lt; y &amp; z</a></r>"
    assert parse_xml(out).child("a").text == "x < y & z"


def test_parse_recovers_prefixes():
    root = parse_xml('<ns:root xmlns:ns="urn:x"><ns:item id="1">v</ns:item></ns:root>')
    assert root.name == "root"
    assert root.namespace_uri == "urn:x"
    assert root.namespace_prefix == "ns"
    assert root.namespaces == {"ns": "urn:x"}
    item = root.child("item")
    assert item.qualified_name == "ns:item"
    assert item.attributes == {"id": "1"}
    assert item.text == "v"


def test_parse_then_serialize_keeps_prefixes():
    xml = '<ns:root xmlns:ns="urn:x"><ns:item>1</ns:item></ns:root>'
    assert serialize(parse_xml(xml), include_declaration=False, pretty_print=False) == xml


def test_parse_ignores_bom_and_declaration():
    root = parse_xml('\ufeff<?xml version="1.0" encoding="UTF-8"?>\n<a>1</a>')
    assert root.name == "a"
    assert root.text == "1"


def test_mixed_content_is_joined_into_text():
    root = parse_xml("<a>hello <b>x</b> world</a>")
    assert root.text == "hello  world"
    assert root.child("b").text == "x"


def test_text_content_concatenates_descendants():
    root = parse_xml("<a><b>x</b><c><d>y</d></c></a>")
    assert root.text_content() == "xy"


def test_whitespace_between_children_is_not_text():
    root = parse_xml("<a>\n  <b>1</b>\n</a>")
    assert root.text is None
    assert root.has_element_children
    assert [c.name for c in root.children] == ["b"]


@pytest.mark.parametrize("bad", ["", "   ", "<a>", "not xml", "<a></b>"])
def test_unparsable_input_raises(bad):
    with pytest.raises(ConversionError):
        parse_xml(bad)


def test_parse_error_keeps_cause():
    with pytest.raises(ConversionError) as info:
        parse_xml("<a>")
    assert isinstance(info.value.cause, ET.ParseError)
    assert info.value.__cause__ is info.value.cause
