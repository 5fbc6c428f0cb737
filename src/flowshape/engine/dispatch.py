"""
Adapter-level routing.

Inbound payloads are normalised to canonical XML according to the kind of
adapter that produced them; outbound XML is rendered for the kind of adapter
that consumes it. Adapters without an explicit conversion config fall back to
the defaults in ``Settings.conversion``.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import TypeAdapter, ValidationError

from flowshape.engine import api
from flowshape.errors import ConversionError
from flowshape.logging_setup import get_logger
from flowshape.schemas import AdapterConfig, JsonXmlConfig, SqlConfig, TabularXmlConfig
from flowshape.settings import ConversionDefaults, get_conversion_defaults

LOG = get_logger("flowshape.dispatch")

_CONFIG_ADAPTER = TypeAdapter(AdapterConfig)


class AdapterType(str, Enum):
    REST = "REST"
    HTTP = "HTTP"
    HTTP_REST = "HTTP_REST"
    SOAP = "SOAP"
    SOAP_WS = "SOAP_WS"
    JDBC = "JDBC"
    FILE = "FILE"
    FTP = "FTP"
    SFTP = "SFTP"
    JMS = "JMS"
    KAFKA = "KAFKA"


_WEB = {AdapterType.REST, AdapterType.HTTP, AdapterType.HTTP_REST}
_SOAP = {AdapterType.SOAP, AdapterType.SOAP_WS}
_FILES = {AdapterType.FILE, AdapterType.FTP, AdapterType.SFTP}
_QUEUES = {AdapterType.JMS, AdapterType.KAFKA}


def _coerce_type(adapter_type: Union[AdapterType, str, None]) -> Optional[AdapterType]:
    if adapter_type is None or isinstance(adapter_type, AdapterType):
        return adapter_type
    try:
        return AdapterType(str(adapter_type).strip().upper())
    except ValueError:
        LOG.debug("dispatch.unknown_adapter", adapter_type=adapter_type)
        return None


def _as_text(payload: Any) -> Any:
    if isinstance(payload, bytes):
        try:
            return payload.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ConversionError("Payload is not valid UTF-8", e) from e
    return payload


def sniff_payload(payload: Union[str, bytes]) -> str:
    """'json', 'xml' or 'csv' from the first non-whitespace character."""
    text = _as_text(payload).lstrip("\ufeff").lstrip()
    if text.startswith(("{", "[")):
        return "json"
    if text.startswith("<"):
        return "xml"
    return "csv"


def _payload_kind(payload: Any) -> str:
    payload = _as_text(payload)
    if isinstance(payload, str):
        return sniff_payload(payload)
    if isinstance(payload, (Mapping, list, tuple)):
        return "json"
    # cursors and data frames
    return "csv"


def _by_shape(payload: Any, config: Optional[AdapterConfig], defaults: ConversionDefaults) -> str:
    kind = _payload_kind(payload)
    if kind == "xml":
        return _as_text(payload)
    if kind == "json":
        cfg = config if isinstance(config, JsonXmlConfig) else defaults.json_config()
        return api.to_xml(payload, cfg)
    cfg = config if isinstance(config, TabularXmlConfig) else defaults.file_config()
    return api.to_xml(payload, cfg)


def convert_inbound(
    payload: Any,
    adapter_type: Union[AdapterType, str, None] = None,
    config: Optional[AdapterConfig] = None,
    defaults: Optional[ConversionDefaults] = None,
) -> str:
    """Normalise an adapter payload to a canonical XML string.

    Adapters without a matching ``config`` use ``defaults``, or the
    configured defaults of the current environment when none are passed.
    """
    kind = _coerce_type(adapter_type)
    if defaults is None:
        defaults = get_conversion_defaults()
    LOG.debug("dispatch.inbound", adapter_type=kind.value if kind else None)

    if kind in _SOAP:
        if _payload_kind(payload) != "xml":
            raise ConversionError(f"{kind.value} payload is not XML")
        return _as_text(payload)
    if kind is AdapterType.JDBC:
        cfg = config if isinstance(config, TabularXmlConfig) else defaults.jdbc_config()
        return api.to_xml(payload, cfg)
    if adapter_type is None or kind in _FILES:
        return _by_shape(payload, config, defaults)
    # web APIs and everything else are treated as JSON
    cfg = config if isinstance(config, (JsonXmlConfig, TabularXmlConfig)) else defaults.json_config()
    return api.to_xml(payload, cfg)


def convert_outbound(
    xml: str,
    adapter_type: Union[AdapterType, str, None],
    config: Optional[AdapterConfig] = None,
    defaults: Optional[ConversionDefaults] = None,
):
    """Render canonical XML for an outbound adapter.

    Returns XML or JSON/CSV/fixed-length text, or a list of SQL statements
    for JDBC targets.
    """
    kind = _coerce_type(adapter_type)
    if defaults is None:
        defaults = get_conversion_defaults()
    LOG.debug("dispatch.outbound", adapter_type=kind.value if kind else None)

    if kind in _WEB:
        if isinstance(config, JsonXmlConfig):
            remove_root = config.remove_root_element
        else:
            remove_root = defaults.remove_root_element
        return api.from_xml_to_json(xml, remove_root_wrapper=remove_root)
    if kind is AdapterType.JDBC:
        if not isinstance(config, SqlConfig):
            raise ConversionError("JDBC targets need a SqlConfig")
        return api.from_xml_to_sql(xml, config)
    if (kind in _FILES or kind in _QUEUES) and config is not None:
        return api.from_xml(xml, config)
    return xml


def load_adapter_config(mapping: Mapping[str, Any]) -> AdapterConfig:
    """Validate a plain dict (from YAML or JSON) into one of the config models."""
    try:
        return _CONFIG_ADAPTER.validate_python(dict(mapping))
    except ValidationError as e:
        raise ConversionError("Invalid adapter configuration", e) from e
