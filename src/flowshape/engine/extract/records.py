"""
records.py

Infer a table from an untyped tree. Shared by the CSV, fixed-length and SQL
serializers.

Row detection ("first repeating tag wins"):
- Group the root's direct children by local name, in document order.
- The first group with more than one member supplies the rows; every other
  child of the root is ignored.
- With no repeating group the root itself is the only row.

Flattening, without explicit mappings:
- Attributes -> 'prefix.@name' ('@name' on the row element itself)
- Leaf children -> 'prefix.child' with trimmed text, attributes as
  'prefix.child.@name'
- Children with element children recurse with an extended prefix
- A row element holding only text -> '_text'

With explicit mappings each dotted path (element names or a final
'@attribute') is resolved against the row; a path that does not resolve adds
nothing.
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from flowshape.constants import ATTRIBUTE_PREFIX, PATH_SEPARATOR, TEXT_KEY
from flowshape.engine.tree import TreeNode
from flowshape.logging_setup import get_logger

LOG = get_logger("flowshape.records")

FlatRecord = Dict[str, str]


def find_record_elements(root: TreeNode) -> List[TreeNode]:
    groups: Dict[str, List[TreeNode]] = {}
    for child in root.children:
        groups.setdefault(child.name, []).append(child)

    for tag, members in groups.items():
        if len(members) > 1:
            LOG.debug("records.detected", row_tag=tag, count=len(members))
            return list(members)

    return [root]


def _join(prefix: str, name: str) -> str:
    return f"{prefix}{PATH_SEPARATOR}{name}" if prefix else name


def _is_declaration(attr_name: str) -> bool:
    return attr_name == "xmlns" or attr_name.startswith("xmlns:")


def _add_attributes(node: TreeNode, prefix: str, values: FlatRecord) -> None:
    for name, value in node.attributes.items():
        if _is_declaration(name):
            continue
        values[_join(prefix, ATTRIBUTE_PREFIX + name)] = value


def _extract_leaf_values(node: TreeNode, prefix: str, values: FlatRecord) -> None:
    _add_attributes(node, prefix, values)

    for child in node.children:
        child_path = _join(prefix, child.name)
        if child.has_element_children:
            _extract_leaf_values(child, child_path, values)
            continue
        _add_attributes(child, child_path, values)
        text = (child.text or "").strip()
        if text:
            values[child_path] = text

    if not node.has_element_children:
        text = (node.text or "").strip()
        if text:
            values[prefix or TEXT_KEY] = text


def resolve_path(node: TreeNode, path: str) -> Optional[str]:
    """Walk a dotted path from ``node``; None when any segment is missing."""
    current = node
    for part in path.split(PATH_SEPARATOR):
        if part.startswith(ATTRIBUTE_PREFIX):
            return current.attributes.get(part[len(ATTRIBUTE_PREFIX):])
        found = current.child(part)
        if found is None:
            return None
        current = found
    return current.text_content().strip()


def flatten_record(
    element: TreeNode, field_mappings: Optional[Mapping[str, str]] = None
) -> FlatRecord:
    record: FlatRecord = {}
    if field_mappings:
        for path, column in field_mappings.items():
            value = resolve_path(element, path)
            if value is not None:
                record[column] = value
    else:
        _extract_leaf_values(element, "", record)
    return record


def extract_records(
    root: TreeNode, field_mappings: Optional[Mapping[str, str]] = None
) -> List[FlatRecord]:
    """Return one FlatRecord per detected row, skipping rows that flatten to
    nothing."""
    records = []
    for element in find_record_elements(root):
        record = flatten_record(element, field_mappings)
        if record:
            records.append(record)
    LOG.debug("records.extracted", count=len(records), mapped=bool(field_mappings))
    return records
