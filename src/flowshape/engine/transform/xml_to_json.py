#!/usr/bin/env python3
"""
xml_to_json.py

Rebuild JSON values from an XML document. Conventions:

- Attributes become keys prefixed with '@' (namespace declarations dropped)
- Child elements are keyed by local name; a name that repeats becomes a list
- Leaf text is typed: true/false, then numbers, else the trimmed string;
  empty text is null
- Stray text next to child elements or attributes is kept under '_text'

Arrays are only recognised by repetition, so a one-item array written by
json_to_xml comes back as a plain value.

Usage (CLI):
    python -m flowshape.engine.transform.xml_to_json input.xml [output.json]
"""
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List

from flowshape.constants import ATTRIBUTE_PREFIX, FILE_ENCODING, TEXT_KEY
from flowshape.engine.tree import TreeNode, parse_xml
from flowshape.engine.values import infer_scalar


def _is_declaration(name: str) -> bool:
    return name == "xmlns" or name.startswith("xmlns:")


def _attributes(node: TreeNode) -> Dict[str, str]:
    return {k: v for k, v in node.attributes.items() if not _is_declaration(k)}


def tree_to_json(node: TreeNode) -> Any:
    """Recursively convert a TreeNode into JSON-compatible Python values."""
    attributes = _attributes(node)
    if not node.has_element_children and not attributes:
        return infer_scalar(node.text)

    obj: Dict[str, Any] = {}
    for k, v in attributes.items():
        obj[f"{ATTRIBUTE_PREFIX}{k}"] = v

    groups: Dict[str, List[Any]] = {}
    for child in node.children:
        groups.setdefault(child.name, []).append(tree_to_json(child))

    for name, items in groups.items():
        obj[name] = items[0] if len(items) == 1 else items

    text = (node.text or "").strip()
    if text and obj:
        obj[TEXT_KEY] = infer_scalar(text)
    return obj


def xml_to_json(xml: str, remove_root_wrapper: bool = True, indent: int = 2) -> str:
    root = parse_xml(xml)
    value = tree_to_json(root)
    if not remove_root_wrapper:
        value = {root.name: value}
    return json.dumps(value, ensure_ascii=False, indent=indent)


def xml_file_to_json(input_path: Path, remove_root_wrapper: bool = True, indent: int = 2) -> str:
    with open(input_path, "r", encoding=FILE_ENCODING) as fh:
        return xml_to_json(fh.read(), remove_root_wrapper=remove_root_wrapper, indent=indent)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Convert XML to JSON")
    p.add_argument("input", help="Input XML file path")
    p.add_argument("output", nargs="?", help="Optional output JSON file path")
    p.add_argument("--indent", type=int, default=2, help="JSON indent spaces (default 2)")
    p.add_argument(
        "--keep-root",
        action="store_true",
        help="Wrap the result in an object keyed by the root element name",
    )
    return p.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    inp = Path(args.input)
    if not inp.exists():
        raise SystemExit(f"Input file not found: {inp}")

    text = xml_file_to_json(inp, remove_root_wrapper=not args.keep_root, indent=args.indent)

    # Default: write JSON next to the input XML with the same base name
    outp = Path(args.output) if args.output else inp.with_suffix(".json")
    outp.parent.mkdir(parents=True, exist_ok=True)
    with open(outp, "w", encoding=FILE_ENCODING) as fh:
        fh.write(text)
    print(str(outp))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
