"""
tree.py

The canonical tree every converter reads or builds. Converters never talk XML
syntax to each other: JSON and tabular inputs are projected onto ``TreeNode``
graphs, and the flat serializers read ``TreeNode`` graphs parsed from XML.

Conventions:

- ``name`` is always the local name; the namespace lives in
  ``namespace_uri`` / ``namespace_prefix``.
- A node carries either element children or text. Text kept on a node that
  also has children is stray mixed content (leading text plus child tails).
- Namespace declarations are written once, on the root element.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import xml.etree.ElementTree as ET

from flowshape.constants import DEFAULT_XML_ENCODING, INDENT
from flowshape.errors import ConversionError

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"


@dataclass
class TreeNode:
    name: str
    namespace_uri: Optional[str] = None
    namespace_prefix: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["TreeNode"] = field(default_factory=list)
    text: Optional[str] = None
    # extra prefix -> uri declarations, only honoured on the root
    namespaces: Dict[str, str] = field(default_factory=dict)

    @property
    def qualified_name(self) -> str:
        if self.namespace_uri and self.namespace_prefix:
            return f"{self.namespace_prefix}:{self.name}"
        return self.name

    def add_child(self, child: "TreeNode") -> "TreeNode":
        self.children.append(child)
        return child

    def add_text_child(self, name: str, text: Optional[str], **kwargs) -> "TreeNode":
        return self.add_child(TreeNode(name, text=text, **kwargs))

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    @property
    def has_element_children(self) -> bool:
        return bool(self.children)

    def child(self, local_name: str) -> Optional["TreeNode"]:
        for child in self.children:
            if child.name == local_name:
                return child
        return None

    def text_content(self) -> str:
        """Concatenated text of this node and all descendants."""
        parts = [self.text or ""]
        parts.extend(child.text_content() for child in self.children)
        return "".join(parts)

    def iter(self) -> Iterator["TreeNode"]:
        yield self
        for child in self.children:
            yield from child.iter()


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def _split_tag(tag: str) -> Tuple[Optional[str], str]:
    if tag.startswith("{"):
        uri, _, local = tag[1:].partition("}")
        return uri, local
    return None, tag


def _from_element(elem: ET.Element, prefixes: Dict[str, str]) -> TreeNode:
    uri, local = _split_tag(elem.tag)
    node = TreeNode(local, namespace_uri=uri, namespace_prefix=prefixes.get(uri) or None)

    for key, value in elem.attrib.items():
        attr_uri, attr_local = _split_tag(key)
        prefix = prefixes.get(attr_uri) if attr_uri else None
        node.attributes[f"{prefix}:{attr_local}" if prefix else attr_local] = value

    children = list(elem)
    if children:
        pieces = [elem.text or ""]
        for child in children:
            node.children.append(_from_element(child, prefixes))
            pieces.append(child.tail or "")
        mixed = "".join(pieces)
        node.text = mixed if mixed.strip() else None
    else:
        node.text = elem.text
    return node


def parse_xml(xml: str) -> TreeNode:
    """Parse an XML string into a ``TreeNode`` tree.

    Prefixes are recovered from the document's own ``xmlns`` declarations;
    when a URI is bound to several prefixes the first one wins.
    """
    if xml is not None and not isinstance(xml, str):
        raise ConversionError(f"XML input must be a string, got {type(xml).__name__}")
    if not xml or not xml.strip():
        raise ConversionError("XML input is empty")

    parser = ET.XMLPullParser(events=("start-ns", "start"))
    prefixes: Dict[str, str] = {XML_NAMESPACE: "xml"}
    declared: Dict[str, str] = {}
    root: Optional[ET.Element] = None

    def drain() -> None:
        nonlocal root
        for event, payload in parser.read_events():
            if event == "start-ns":
                prefix, uri = payload
                prefixes.setdefault(uri, prefix)
                declared.setdefault(prefix, uri)
            elif root is None:
                root = payload

    try:
        parser.feed(xml.lstrip("\ufeff"))
        drain()
        parser.close()
        drain()
    except ET.ParseError as e:
        raise ConversionError("Failed to parse XML", e) from e

    if root is None:
        raise ConversionError("XML input has no root element")

    node = _from_element(root, prefixes)
    node.namespaces = {p: u for p, u in declared.items() if p}
    return node


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _declaration_key(prefix: Optional[str]) -> str:
    return f"xmlns:{prefix}" if prefix else "xmlns"


def _collect_declarations(
    root: TreeNode, additional: Optional[Dict[str, str]]
) -> Dict[str, str]:
    decls: Dict[str, str] = {}
    for node in root.iter():
        if node.namespace_uri:
            decls.setdefault(_declaration_key(node.namespace_prefix), node.namespace_uri)
    for prefix, uri in root.namespaces.items():
        decls.setdefault(_declaration_key(prefix), uri)
    for prefix, uri in (additional or {}).items():
        decls.setdefault(_declaration_key(prefix), uri)
    return decls


def _to_element(node: TreeNode) -> ET.Element:
    elem = ET.Element(node.qualified_name, dict(node.attributes))
    if node.children:
        for child in node.children:
            elem.append(_to_element(child))
    elif node.text is not None:
        elem.text = node.text
    return elem


def to_etree(root: TreeNode, additional_namespaces: Optional[Dict[str, str]] = None) -> ET.Element:
    elem = _to_element(root)
    decls = _collect_declarations(root, additional_namespaces)
    if decls:
        attrib = {k: v for k, v in decls.items() if k not in elem.attrib}
        attrib.update(elem.attrib)
        elem.attrib = attrib
    return elem


def serialize(
    root: TreeNode,
    include_declaration: bool = True,
    encoding: str = DEFAULT_XML_ENCODING,
    pretty_print: bool = True,
    additional_namespaces: Optional[Dict[str, str]] = None,
) -> str:
    """Render a tree as an XML string.

    ``encoding`` only appears in the declaration; the return value is text.
    """
    elem = to_etree(root, additional_namespaces)
    if pretty_print:
        ET.indent(elem, space=INDENT)
    body = ET.tostring(elem, encoding="unicode")
    if include_declaration:
        return f'<?xml version="1.0" encoding="{encoding}"?>\n{body}'
    return body
