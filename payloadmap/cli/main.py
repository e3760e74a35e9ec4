"""payloadmap command line - Validate and normalize payload input files."""
import importlib
import logging
from typing import IO, Type

import click
from colorama import Fore, Style, init

from payloadmap import __version__
from payloadmap.base import BasePayload
from payloadmap.config import app_config
from payloadmap.exceptions import InvalidDataError, JsonEncodingError
from payloadmap.payload_map import PayloadMap


def print_header(title: str):
    """Print a section header."""
    click.echo(f"{Fore.CYAN}{'━' * 45}")
    click.echo(f"{Fore.CYAN}{title}")
    click.echo(f"{Fore.CYAN}{'━' * 45}{Style.RESET_ALL}")


def load_payload_class(schema: str) -> Type[BasePayload]:
    """Resolve a ``module:Class`` reference to a payload class."""
    module_name, _, class_name = schema.partition(":")

    if not module_name or not class_name:
        raise click.BadParameter("expected module:Class", param_hint="SCHEMA")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}", param_hint="SCHEMA")

    payload_cls = getattr(module, class_name, None)

    if not isinstance(payload_cls, type) or not issubclass(payload_cls, BasePayload):
        raise click.BadParameter(f"{schema} is not a payload class", param_hint="SCHEMA")

    return payload_cls


def import_payload(payload_cls: Type[BasePayload], input_file: IO, strict: bool) -> BasePayload:
    """Instantiate ``payload_cls`` and import the input file into it."""
    payload = payload_cls()

    if issubclass(payload_cls, PayloadMap):
        return payload.import_data(input_file.read(), ignore_invalid=not strict)

    if strict:
        raise click.UsageError("--strict only applies to PayloadMap schemas")

    return payload.import_data(input_file.read())


def fail(message: str, key: str = None):
    """Print an error and exit with status 1."""
    click.echo(f"{Fore.RED}✗ {message}{Style.RESET_ALL}")
    if key:
        click.echo(f"{Fore.RED}   Key: {key}{Style.RESET_ALL}")
    raise SystemExit(1)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    default=app_config.log_level,
    show_default=True,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level",
)
def cli(log_level):
    """payloadmap - Validate and normalize structured payloads."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.argument("schema")
@click.argument("input_file", type=click.File("r"))
@click.option("--strict", is_flag=True, help="Fail on unknown or rejected keys")
def validate(schema, input_file, strict):
    """Import INPUT_FILE into SCHEMA (module:Class) and validate it."""
    payload_cls = load_payload_class(schema)

    try:
        payload = import_payload(payload_cls, input_file, strict)
        payload.validate()
    except InvalidDataError as e:
        fail(str(e), e.key)

    click.echo(f"{Fore.GREEN}✓ {payload_cls.__name__} is valid{Style.RESET_ALL}")


@cli.command()
@click.argument("schema")
@click.argument("input_file", type=click.File("r"))
@click.option("--strict", is_flag=True, help="Fail on unknown or rejected keys")
@click.option("--indent", type=int, default=None, help="Indent JSON output")
@click.option("--max-depth", type=int, default=None, help="Maximum JSON nesting depth")
def export(schema, input_file, strict, indent, max_depth):
    """Import INPUT_FILE into SCHEMA and print the normalized JSON."""
    payload_cls = load_payload_class(schema)

    try:
        payload = import_payload(payload_cls, input_file, strict)
        click.echo(payload.to_json(max_depth=max_depth, indent=indent))
    except InvalidDataError as e:
        fail(str(e), e.key)
    except JsonEncodingError as e:
        fail(str(e))


@cli.command()
@click.argument("schema")
def fields(schema):
    """List the fields declared by a PayloadMap SCHEMA."""
    payload_cls = load_payload_class(schema)

    if not issubclass(payload_cls, PayloadMap):
        raise click.BadParameter(f"{schema} does not declare fields", param_hint="SCHEMA")

    print_header(f"{payload_cls.__name__} fields")

    for field in payload_cls().fields():
        flags = []
        if field.is_required():
            flags.append("required")
        if field.is_allowing_null():
            flags.append("nullable")
        if not field.is_accessible():
            flags.append("hidden")

        alias = f" → {field.key_to_export}" if field.key_to_export != field.key else ""
        label = f" ({field.get_label()})" if field.get_label() else ""
        click.echo(f"• {field.key}{alias}{label} [{', '.join(flags) or 'optional'}]")


def main():
    """Console script entry point."""
    init()
    cli()


if __name__ == "__main__":
    main()
