"""Typer CLI for gcomm-conf.

Commands:
  resolve      Resolve one parameter from descriptor options
  list-params  List known parameter keys
  explain      Explain a single parameter key
"""

from __future__ import annotations

import json
import logging
import os
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gcomm_conf.compat import env_var_for, env_vars_to_options
from gcomm_conf.converters import convert, format_value
from gcomm_conf.errors import ConversionError
from gcomm_conf.explain import ParameterExplanation
from gcomm_conf.registry import Subsystem, default_registry
from gcomm_conf.resolver import resolve as resolve_request
from gcomm_conf.source import Descriptor
from gcomm_conf.types import ParameterRequest, ParameterValue, ValueKind

app = typer.Typer(
    name="gcomm-conf",
    help="Typed parameter resolution for gcomm transport descriptors",
    no_args_is_help=True,
)
console = Console()
logger = logging.getLogger("gcomm_conf.cli")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_options(options: list[str]) -> list[tuple[str, str]]:
    """Parse key=value option strings, keeping order so the last duplicate wins."""
    pairs: list[tuple[str, str]] = []
    for item in options:
        if "=" not in item:
            console.print(f"[red]Invalid option format: '{escape(item)}'. Use key=value[/red]")
            raise typer.Exit(1)
        key, raw = item.split("=", 1)
        pairs.append((key.strip(), raw))
    return pairs


def _convert_arg(name: str, raw: str | None, kind: ValueKind) -> ParameterValue | None:
    if raw is None:
        return None
    try:
        return convert(raw, kind)
    except ConversionError as e:
        console.print(f"[red]Invalid --{name}: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None


@app.command()
def resolve(
    key: Annotated[str, typer.Argument(help="Parameter key, e.g. evs.suspect_timeout")],
    option: Annotated[
        list[str] | None, typer.Option("--option", "-o", help="Descriptor option (key=value)")
    ] = None,
    kind: Annotated[
        ValueKind | None,
        typer.Option("--type", "-t", help="Value type (defaults to the registry's type)"),
    ] = None,
    default: Annotated[str | None, typer.Option("--default", help="Default value")] = None,
    min_value: Annotated[str | None, typer.Option("--min", help="Inclusive minimum")] = None,
    max_value: Annotated[str | None, typer.Option("--max", help="Inclusive maximum")] = None,
    documented: Annotated[
        bool,
        typer.Option(
            "--documented", "-d", help="Fill default/min/max from the registry when not given"
        ),
    ] = False,
    from_env: Annotated[
        bool, typer.Option("--env", help="Read options from GCOMM_* environment variables")
    ] = False,
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: text or json")
    ] = "text",
) -> None:
    """Resolve one parameter from descriptor options."""
    entry = default_registry().get(key)
    if kind is None:
        if entry is None:
            console.print(f"[red]Unknown parameter key '{escape(key)}'; pass --type[/red]")
            raise typer.Exit(1)
        kind = entry.kind

    if documented and entry is not None:
        default = default if default is not None else entry.default_value
        min_value = min_value if min_value is not None else entry.min_value
        max_value = max_value if max_value is not None else entry.max_value

    pairs: list[tuple[str, str]] = []
    if from_env:
        pairs.extend(env_vars_to_options(os.environ).items())
    pairs.extend(_parse_options(option or []))
    descriptor = Descriptor.from_pairs(pairs)
    logger.debug("Resolving %s from %s", key, descriptor)

    request = ParameterRequest(
        key,
        kind,
        default=_convert_arg("default", default, kind),
        min_value=_convert_arg("min", min_value, kind),
        max_value=_convert_arg("max", max_value, kind),
    )
    result = resolve_request(descriptor, request)

    if result.failure is not None:
        if format == "json":
            console.print(result.failure.model_dump_json(indent=2), markup=False, soft_wrap=True)
        else:
            message = escape(result.failure.message)
            console.print(f"[red]✗[/red] {result.failure.reason}: {message}")
        raise typer.Exit(1)

    text = format_value(result.value, kind)
    source = "default" if result.used_default else "descriptor"
    if format == "json":
        payload = {"key": key, "type": kind.value, "value": text, "source": source}
        console.print(json.dumps(payload, indent=2), markup=False, soft_wrap=True)
    else:
        console.print(f"{escape(key)} = {escape(text)} [dim]({source})[/dim]")


@app.command("list-params")
def list_params(
    subsystem: Annotated[
        Subsystem | None, typer.Option("--subsystem", "-s", help="Only list one subsystem")
    ] = None,
) -> None:
    """List known parameter keys with their type and documented default."""
    registry = default_registry()
    entries = registry.by_subsystem(subsystem) if subsystem else registry.all_entries()

    table = Table(title="Known Parameters")
    table.add_column("Key", style="cyan")
    table.add_column("Type")
    table.add_column("Default", style="green")
    table.add_column("Env var", style="dim")

    for e in entries:
        table.add_row(e.key, e.kind.value, e.default_value or "-", env_var_for(e.key))

    console.print(table)


@app.command()
def explain(
    key: Annotated[str, typer.Argument(help="Parameter key")],
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: text or json")
    ] = "text",
) -> None:
    """Explain a single parameter from registry metadata."""
    try:
        entry = default_registry().require(key)
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from None

    explanation = ParameterExplanation.from_entry(entry)
    if format == "json":
        console.print(explanation.to_json(), markup=False, soft_wrap=True)
    else:
        console.print(explanation.to_text(), markup=False)
