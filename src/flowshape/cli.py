import sys
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from flowshape.constants import FILE_ENCODING
from flowshape.engine import api
from flowshape.engine.dispatch import convert_inbound
from flowshape.errors import ConversionError
from flowshape.logging_setup import configure_logging, get_logger
from flowshape.paths import Paths
from flowshape.schemas import JsonXmlConfig, TabularXmlConfig
from flowshape.settings import Settings

console = Console()

app = typer.Typer(help="Convert payloads between XML, JSON, CSV, fixed-length and SQL")


@app.callback()
def main(ctx: typer.Context):
    load_dotenv(override=False)
    ctx.ensure_object(dict)


def _load(env: str) -> Settings:
    """Settings for ``env`` (built-in defaults when the YAML file is absent),
    with logging configured from them."""
    cfg_path = Paths.config_file(env)
    s = Settings.load(str(cfg_path)) if cfg_path.exists() else Settings()
    configure_logging(
        level=s.logging.level,
        format_type=s.logging.format,
        structured=s.logging.structured,
    )
    return s


def _fail(message: str) -> None:
    console.print(f"[red]error:[/] {escape(message)}")
    raise typer.Exit(code=2)


def _read(path: Path) -> str:
    if not path.exists():
        _fail(f"Input file not found: {path}")
    with open(path, "r", encoding=FILE_ENCODING) as fh:
        return fh.read()


def _emit(text: str, output: Optional[Path], log) -> None:
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8", newline="") as fh:
        fh.write(text)
    log.info("Output written", path=str(output), chars=len(text))
    print(str(output))


@app.command()
def health():
    console.print({"ok": True})


@app.command()
def profiles(env: str = typer.Option("dev", help="Config environment")):
    """List the conversion profiles configured for an environment."""
    s = _load(env)
    if not s.profiles:
        console.print("[yellow]No profiles configured[/]")
        return
    for name, cfg in s.profiles.items():
        print(f"{name}\t{cfg.format}")


@app.command("to-xml")
def to_xml(
    input: Path = typer.Argument(..., help="Payload file (JSON, CSV or XML)"),
    profile: Optional[str] = typer.Option(None, help="Conversion profile name"),
    adapter: Optional[str] = typer.Option(
        None, help="Adapter type, e.g. REST, JDBC, FILE (default: sniff the payload)"
    ),
    output: Optional[Path] = typer.Option(None, help="Write XML here instead of stdout"),
    env: str = typer.Option("dev", help="Config environment"),
):
    """Normalise a payload file to canonical XML."""
    s = _load(env)
    log = get_logger("cli.to_xml")
    payload = _read(input)

    try:
        cfg = s.get_profile(profile) if profile else None
        if cfg is not None and not isinstance(cfg, (JsonXmlConfig, TabularXmlConfig)):
            raise ConversionError(f"Profile '{profile}' does not produce XML ({cfg.format})")
        xml = convert_inbound(payload, adapter, cfg, defaults=s.conversion)
    except KeyError as e:
        _fail(e.args[0])
    except ConversionError as e:
        _fail(str(e))

    _emit(xml, output, log)


@app.command("from-xml")
def from_xml(
    input: Path = typer.Argument(..., help="XML file"),
    profile: Optional[str] = typer.Option(None, help="Conversion profile name"),
    to: Optional[str] = typer.Option(None, help="Target format when no profile is given: json"),
    output: Optional[Path] = typer.Option(None, help="Write the result here instead of stdout"),
    env: str = typer.Option("dev", help="Config environment"),
):
    """Render an XML file as JSON, CSV, fixed-length records or SQL."""
    s = _load(env)
    log = get_logger("cli.from_xml")
    xml = _read(input)

    if not profile and (to or "").lower() != "json":
        raise typer.BadParameter("Pass --profile NAME or --to json")

    try:
        if profile:
            result = api.from_xml(xml, s.get_profile(profile))
        else:
            result = api.from_xml_to_json(xml, remove_root_wrapper=s.conversion.remove_root_element)
    except KeyError as e:
        _fail(e.args[0])
    except ConversionError as e:
        _fail(str(e))

    if isinstance(result, list):
        result = "\n".join(f"{stmt};" for stmt in result)
    _emit(result, output, log)


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)
