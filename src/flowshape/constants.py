"""Central constants for the flowshape project."""

# Encoding used by the file-level converters (UTF-8 with BOM)
FILE_ENCODING = "utf-8-sig"

DEFAULT_XML_ENCODING = "UTF-8"
INDENT = "  "

# Fallback names produced by the identifier sanitizer
ELEMENT_FALLBACK = "_element"
FIELD_FALLBACK = "_field"

# Keys used when flattening or reconstructing trees
ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "_text"
PATH_SEPARATOR = "."
