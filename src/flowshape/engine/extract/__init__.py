"""
Readers that turn trees and tabular payloads into flat rows.

Only the row-level helpers are exported; the serializers import from the
submodules directly.
"""

from .records import FlatRecord, extract_records, find_record_elements, flatten_record
from .tabular import iter_rows

__all__ = [
    "FlatRecord",
    "extract_records",
    "find_record_elements",
    "flatten_record",
    "iter_rows",
]
