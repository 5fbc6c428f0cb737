"""
Conversion configuration models for the flowshape engine.

Each converter direction takes one immutable pydantic model. The five shapes
form a closed union discriminated on the literal ``format`` field, so a plain
dict loaded from YAML or JSON validates straight into the right model:

    JsonXmlConfig       format="json"          JSON <-> XML
    TabularXmlConfig    format="tabular"       CSV text / rows / result sets -> XML
    CsvConfig           format="csv"           XML -> CSV
    FixedLengthConfig   format="fixed_length"  XML -> fixed-width records
    SqlConfig           format="sql"           XML -> SQL statements
"""

from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flowshape.constants import DEFAULT_XML_ENCODING


class FieldType(str, Enum):
    DATE = "date"
    BOOLEAN = "boolean"
    NUMBER = "number"
    INTEGER = "integer"
    DECIMAL = "decimal"
    STRING = "string"


class PadDirection(str, Enum):
    LEFT = "LEFT"
    RIGHT = "RIGHT"


class SqlOperation(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SELECT = "SELECT"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class XmlOutputOptions(_FrozenModel):
    """Fields shared by every configuration that produces XML."""

    root_element_name: str = "root"
    row_element_name: str = "item"
    namespace_uri: Optional[str] = None
    namespace_prefix: Optional[str] = None
    additional_namespaces: Dict[str, str] = Field(default_factory=dict)
    include_xml_declaration: bool = True
    encoding: str = DEFAULT_XML_ENCODING
    pretty_print: bool = True


class JsonXmlConfig(XmlOutputOptions):
    format: Literal["json"] = "json"
    # dotted JSON path -> element name used for the items of that array
    array_element_names: Dict[str, str] = Field(default_factory=dict)
    convert_property_names: bool = False
    preserve_null_values: bool = False
    # only read when converting back to JSON
    remove_root_element: bool = True


class CsvReadOptions(_FrozenModel):
    delimiter: str = ","
    quote_char: str = '"'
    has_header: bool = True
    skip_blank_lines: bool = True
    trim_values: bool = False


class TabularXmlConfig(XmlOutputOptions):
    format: Literal["tabular"] = "tabular"
    root_element_name: str = "records"
    row_element_name: str = "record"
    # column name -> element name; unmapped columns pass through sanitized
    field_mappings: Dict[str, str] = Field(default_factory=dict)
    field_types: Dict[str, FieldType] = Field(default_factory=dict)
    csv: CsvReadOptions = Field(default_factory=CsvReadOptions)


class CsvConfig(_FrozenModel):
    format: Literal["csv"] = "csv"
    delimiter: str = ","
    quote_char: str = '"'
    line_terminator: str = "\n"
    include_headers: bool = True
    quote_all_fields: bool = False
    # XML path -> CSV column
    field_mappings: Dict[str, str] = Field(default_factory=dict)
    column_order: List[str] = Field(default_factory=list)
    trim_whitespace: bool = False
    escape_unicode: bool = False
    preserve_line_breaks: bool = False
    format_numbers: bool = False
    decimal_format: Optional[str] = None  # python format spec, e.g. ".2f"
    date_format: Optional[str] = None  # strftime pattern

    @field_validator("delimiter", "quote_char")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("must not be empty")
        return v


class FixedLengthConfig(_FrozenModel):
    format: Literal["fixed_length"] = "fixed_length"
    # emptiness is checked at conversion time, see xml_to_fixed_length
    field_lengths: Dict[str, int] = Field(default_factory=dict)
    pad_character: str = " "
    pad_direction: PadDirection = PadDirection.RIGHT
    line_terminator: str = "\n"
    field_mappings: Dict[str, str] = Field(default_factory=dict)
    field_order: List[str] = Field(default_factory=list)

    @field_validator("pad_character")
    @classmethod
    def _single_character(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("pad_character must be exactly one character")
        return v

    @field_validator("pad_direction", mode="before")
    @classmethod
    def _upper_direction(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator("field_lengths")
    @classmethod
    def _non_negative(cls, v: Dict[str, int]) -> Dict[str, int]:
        for name, length in v.items():
            if length < 0:
                raise ValueError(f"length for field '{name}' must not be negative")
        return v


class SqlConfig(_FrozenModel):
    format: Literal["sql"] = "sql"
    table_name: str
    operation: SqlOperation = SqlOperation.INSERT
    where_clause: Optional[str] = None
    # XML path -> DB column
    field_mappings: Dict[str, str] = Field(default_factory=dict)
    # replace characters outside [A-Za-z0-9_] in auto-extracted column names
    sanitize_column_names: bool = True

    @field_validator("operation", mode="before")
    @classmethod
    def _upper_operation(cls, v):
        return v.upper() if isinstance(v, str) else v


AdapterConfig = Annotated[
    Union[JsonXmlConfig, TabularXmlConfig, CsvConfig, FixedLengthConfig, SqlConfig],
    Field(discriminator="format"),
]
