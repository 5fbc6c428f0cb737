"""Format conversion engine: XML <-> JSON, tabular rows, CSV, fixed-length and SQL."""

from flowshape.engine.api import (
    from_xml,
    from_xml_to_csv,
    from_xml_to_fixed_length,
    from_xml_to_json,
    from_xml_to_sql,
    to_xml,
)
from flowshape.engine.tree import TreeNode, parse_xml, serialize

__all__ = [
    "TreeNode",
    "from_xml",
    "from_xml_to_csv",
    "from_xml_to_fixed_length",
    "from_xml_to_json",
    "from_xml_to_sql",
    "parse_xml",
    "serialize",
    "to_xml",
]
