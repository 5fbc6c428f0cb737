# src/flowshape/settings.py
from functools import lru_cache
import os
from typing import Dict, Optional

import yaml
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from flowshape.constants import DEFAULT_XML_ENCODING
from flowshape.paths import Paths
from flowshape.schemas import AdapterConfig, JsonXmlConfig, TabularXmlConfig


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"  # "json" or "human"
    structured: bool = True


class ConversionDefaults(BaseModel):
    """Defaults applied when an adapter hands over a payload without a
    conversion profile of its own."""

    json_root_element: str = "Message"
    file_root_element: str = "fileContent"
    file_row_element: str = "row"
    jdbc_root_element: str = "records"
    jdbc_row_element: str = "record"
    include_xml_declaration: bool = True
    pretty_print: bool = True
    encoding: str = DEFAULT_XML_ENCODING
    convert_property_names: bool = True
    remove_root_element: bool = True

    def json_config(self, **overrides) -> JsonXmlConfig:
        values = dict(
            root_element_name=self.json_root_element,
            include_xml_declaration=self.include_xml_declaration,
            pretty_print=self.pretty_print,
            encoding=self.encoding,
            convert_property_names=self.convert_property_names,
            remove_root_element=self.remove_root_element,
        )
        values.update(overrides)
        return JsonXmlConfig(**values)

    def file_config(self, **overrides) -> TabularXmlConfig:
        values = dict(
            root_element_name=self.file_root_element,
            row_element_name=self.file_row_element,
            include_xml_declaration=self.include_xml_declaration,
            pretty_print=self.pretty_print,
            encoding=self.encoding,
        )
        values.update(overrides)
        return TabularXmlConfig(**values)

    def jdbc_config(self, **overrides) -> TabularXmlConfig:
        values = dict(
            root_element_name=self.jdbc_root_element,
            row_element_name=self.jdbc_row_element,
            include_xml_declaration=self.include_xml_declaration,
            pretty_print=self.pretty_print,
            encoding=self.encoding,
        )
        values.update(overrides)
        return TabularXmlConfig(**values)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FLOWSHAPE_",
        env_nested_delimiter="__",
        extra="ignore",
    )
    logging: LoggingConfig = LoggingConfig()
    conversion: ConversionDefaults = ConversionDefaults()
    # named conversion configs, validated through the discriminated union
    profiles: Dict[str, AdapterConfig] = {}

    @staticmethod
    def _deep_update(d: dict, u: dict) -> dict:
        # Recursively update dict d with values from u
        for k, v in u.items():
            if isinstance(v, dict) and isinstance(d.get(k), dict):
                d[k] = Settings._deep_update(d[k], v)
            else:
                d[k] = v
        return d

    @staticmethod
    def load(path: str) -> "Settings":
        """Load settings from ``path`` layered over ``base.yaml`` in the same
        directory. A missing base file is treated as empty."""
        base_path = os.path.join(os.path.dirname(path), "base.yaml")
        base: dict = {}
        if os.path.exists(base_path) and os.path.abspath(base_path) != os.path.abspath(path):
            with open(base_path, "r", encoding="utf-8") as f:
                base = yaml.safe_load(f) or {}
        with open(path, "r", encoding="utf-8") as f:
            override = yaml.safe_load(f)
        merged = Settings._deep_update(base, override or {})
        return Settings(**merged)

    def get_profile(self, name: str) -> AdapterConfig:
        try:
            return self.profiles[name]
        except KeyError:
            known = ", ".join(sorted(self.profiles)) or "none"
            raise KeyError(f"Unknown profile '{name}' (configured: {known})") from None


def load_settings(env: Optional[str] = None) -> Settings:
    """Load ``configs/<env>.yaml`` from the configured config directory.

    ``env`` defaults to the FLOWSHAPE_ENV environment variable, then 'dev'.
    """
    env = env or os.environ.get("FLOWSHAPE_ENV", "dev")
    return Settings.load(str(Paths.config_file(env)))


def get_conversion_defaults(env: Optional[str] = None) -> ConversionDefaults:
    """Return the conversion defaults for the given env (FLOWSHAPE_ENV, then
    'dev'), falling back to the built-in defaults when no config file exists.
    """
    return conversion_defaults_for(env or os.environ.get("FLOWSHAPE_ENV", "dev"))


@lru_cache(maxsize=8)
def conversion_defaults_for(env: str) -> ConversionDefaults:
    """Cached per env name."""
    if not Paths.config_file(env).exists():
        return ConversionDefaults()
    return load_settings(env).conversion
