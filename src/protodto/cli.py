import json
import logging
from pathlib import Path
from typing import Any

import rich_click as click
from pydantic import ValidationError
from rich.traceback import install

from protodto import __version__, log
from protodto.config import resolve_config
from protodto.exceptions import ConfigError, SchemaError
from protodto.naming import COMMON_INITIALISMS
from protodto.registry import EnumEntry, TypeRegistry
from protodto.schema.loader import load_request
from protodto.schema.models import SchemaRequest
from protodto.transform import transform

request_option = click.option(
    "--request",
    "-r",
    "request_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Compiled schema request (.json, .yaml or .yml) in the JSON shape of a CodeGeneratorRequest",
)


config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file containing engine configuration",
)


optional_output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    required=False,
    help="Output file",
)


def read_request(request_path: Path) -> SchemaRequest:
    try:
        return load_request(request_path)
    except (OSError, ValueError, ValidationError) as e:
        raise click.ClickException(f"Failed to load schema request {request_path}: {e}") from e


@click.group(context_settings={"auto_envvar_prefix": "protodto"})
@click.option(
    "-l",
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Log level",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Log file",
)
@click.version_option(__version__)
def cli(log_level: str, log_file: Path | None) -> None:
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w")
        file_handler.setFormatter(logging.Formatter("%(asctime)s:%(levelname)s:%(message)s"))
        log.addHandler(file_handler)

    log.setLevel(log_level.upper())
    if log_level.upper() == "DEBUG":
        _ = install(show_locals=True)


@click.command()
@request_option
@optional_output_option
@config_option
@click.option(
    "--all-public",
    is_flag=True,
    default=False,
    help="Treat every field as public regardless of annotations (same as setting ALL_PUBLIC)",
)
def generate(request_path: Path, output: Path | None, config_path: Path | None, all_public: bool) -> None:
    """Build the flattened model of the requested schema units as JSON."""
    try:
        config = resolve_config(config_path, all_public)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    request = read_request(request_path)

    try:
        outputs = transform(request, config)
    except SchemaError as e:
        raise click.ClickException(f"Transformation failed: {e}") from e

    result: dict[str, Any] = {name: unit.model_dump(mode="json") for name, unit in outputs.items()}

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        _ = output.write_text(json.dumps(result, indent=2) + "\n", encoding="utf-8")
        log.table(
            "Output units",
            ((name, f"{len(unit.messages)} messages, {len(unit.enums)} enums") for name, unit in outputs.items()),
            headers=("Output", "Declarations"),
        )
        log.success(f"Wrote {len(outputs)} output units to {output}")
    else:
        click.echo(json.dumps(result, indent=2))

    if not outputs:
        log.hint("No requested unit declares a message or enum; nothing was generated")


@click.command()
@request_option
def types(request_path: Path) -> None:
    """List every message and enum of a schema request by fully-qualified name."""
    request = read_request(request_path)

    try:
        registry = TypeRegistry.from_units(request.proto_file, COMMON_INITIALISMS)
    except SchemaError as e:
        raise click.ClickException(str(e)) from e

    log.rule("Registered types")
    for entry in registry.entries():
        if isinstance(entry, EnumEntry):
            kind = "enum"
        elif entry.decl.is_map_entry:
            kind = "map entry"
        else:
            kind = "message"
        log.key_value(entry.type_ref, f"{kind} ({entry.origin.unit})")

    enum_count = sum(1 for entry in registry.entries() if isinstance(entry, EnumEntry))
    log.table("Type counts", [("enums", enum_count), ("messages", len(registry) - enum_count)], headers=("Kind", "Count"))


cli.add_command(generate)
cli.add_command(types)

if __name__ == "__main__":
    cli()
