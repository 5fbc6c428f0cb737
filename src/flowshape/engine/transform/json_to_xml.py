"""
json_to_xml.py

Project a JSON value onto the canonical tree.

Conventions:

- Object keys are cleaned with ``sanitize_field_name`` and, when
  ``convert_property_names`` is set, camel-cased (re-sanitized afterwards).
- An array under key ``K`` becomes one sibling element per item, named by
  ``array_element_names[path]`` or the singular of ``K``. There is no wrapper
  element; the reverse converter re-detects arrays from repeated tags.
- A top-level array uses ``array_element_names[""]`` or the row element name.
- An array nested directly in an array repeats the rule one level down.
- ``null`` is dropped unless ``preserve_null_values``; then it is an empty
  element.
"""
from __future__ import annotations

import json
from typing import Any, List, Mapping

from flowshape.engine.naming import (
    sanitize_element_name,
    sanitize_field_name,
    singularize,
    to_camel_case,
)
from flowshape.engine.tree import TreeNode, serialize
from flowshape.engine.values import scalar_to_text
from flowshape.errors import ConversionError
from flowshape.logging_setup import get_logger
from flowshape.schemas import JsonXmlConfig, XmlOutputOptions

LOG = get_logger("flowshape.json_to_xml")


def new_element(name: str, config: XmlOutputOptions) -> TreeNode:
    """Element named `name` (sanitized) in the configured namespace, if any."""
    valid = sanitize_element_name(name)
    if config.namespace_uri:
        return TreeNode(
            valid,
            namespace_uri=config.namespace_uri,
            namespace_prefix=config.namespace_prefix or None,
        )
    return TreeNode(valid)


def _convert_key(key: str, config: JsonXmlConfig) -> str:
    name = sanitize_field_name(key)
    if config.convert_property_names:
        name = to_camel_case(name)
    return name


def _item_name(path: str, config: JsonXmlConfig) -> str:
    name = config.array_element_names.get(path)
    if name is None:
        if path:
            name = singularize(path.rsplit(".", 1)[-1])
        else:
            name = config.row_element_name
    return sanitize_element_name(name)


def _project_value(parent: TreeNode, value: Any, config: JsonXmlConfig, path: str) -> None:
    if isinstance(value, Mapping):
        _project_object(parent, value, config, path)
    elif isinstance(value, (list, tuple)):
        _project_array(parent, value, config, path)
    elif value is not None:
        parent.text = scalar_to_text(value)


def _project_object(
    parent: TreeNode, obj: Mapping[str, Any], config: JsonXmlConfig, path: str
) -> None:
    for key, value in obj.items():
        name = _convert_key(str(key), config)
        current = f"{path}.{name}" if path else name

        if isinstance(value, (list, tuple)):
            _project_array(parent, value, config, current)
            continue
        if value is None and not config.preserve_null_values:
            continue
        child = parent.add_child(new_element(name, config))
        _project_value(child, value, config, current)


def _project_array(
    parent: TreeNode, items: List[Any], config: JsonXmlConfig, path: str
) -> None:
    name = _item_name(path, config)
    for item in items:
        if item is None and not config.preserve_null_values:
            continue
        child = parent.add_child(new_element(name, config))
        _project_value(child, item, config, path)


def json_to_tree(value: Any, config: JsonXmlConfig) -> TreeNode:
    """Build the tree for an already-decoded JSON value."""
    root = new_element(config.root_element_name, config)
    root.namespaces = dict(config.additional_namespaces)
    _project_value(root, value, config, "")
    return root


def load_json(data: Any) -> Any:
    if isinstance(data, bytes):
        data = data.decode("utf-8-sig")
    if not isinstance(data, str):
        return data
    try:
        return json.loads(data.lstrip("\ufeff"))
    except ValueError as e:
        raise ConversionError("Failed to parse JSON input", e) from e


def json_to_xml(data: Any, config: JsonXmlConfig | None = None) -> str:
    """Convert JSON text (or a decoded JSON value) to an XML string."""
    config = config or JsonXmlConfig()
    root = json_to_tree(load_json(data), config)
    LOG.debug("json.projected", root=root.qualified_name, children=len(root.children))
    return serialize(
        root,
        include_declaration=config.include_xml_declaration,
        encoding=config.encoding,
        pretty_print=config.pretty_print,
    )
