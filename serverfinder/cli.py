"""Click CLI with Rich output."""

from __future__ import annotations

import json as json_lib
import logging
from collections import Counter

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import LOOKUP_FILE_ENVVAR
from .errors import FinderError
from .inventory import InventoryIndex, load_index
from .models import MatchOutcome, MatchStatus, Record
from .search import lookup_addresses

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "-l",
    "--lookup-file",
    type=click.Path(dir_okay=False),
    envvar=LOOKUP_FILE_ENVVAR,
    help="Path to the lookup data JSON file.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, lookup_file: str | None, verbose: bool):
    """server-finder — Find servers by IP, hostname or URL."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    ctx.obj = {"lookup_file": lookup_file}


def _load(ctx: click.Context) -> InventoryIndex:
    try:
        return load_index(ctx.obj["lookup_file"])
    except FinderError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        ctx.exit(1)


def _record_dict(record: Record) -> dict:
    return {
        "name": record.name,
        "type": record.type,
        "infrastructure": record.infrastructure,
        "addresses": list(record.addresses),
    }


def _outcome_dict(outcome: MatchOutcome) -> dict:
    return {
        "query": outcome.query,
        "ips": outcome.resolution.ips,
        "canonical": outcome.resolution.canonical,
        "status": outcome.status.value,
        "matches": [
            {
                **_record_dict(m.record),
                "matched_address": m.address,
                "related": [
                    {"index": r.index, **_record_dict(r.record)} for r in m.related
                ],
            }
            for m in outcome.matches
        ],
    }


def _record_table(records: list[Record], numbered: bool = False) -> Table:
    table = Table(show_header=True, header_style="bold")
    if numbered:
        table.add_column("#")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Infrastructure")
    table.add_column("Addresses")

    for i, record in enumerate(records, start=1):
        row = [
            record.name,
            record.type,
            record.infrastructure or "—",
            ", ".join(record.addresses),
        ]
        table.add_row(*([str(i)] + row if numbered else row))
    return table


def _print_outcome(outcome: MatchOutcome) -> None:
    console.print(f"Looking up [bold]{escape(outcome.query)}[/bold]...")

    if outcome.status is MatchStatus.NO_ADDRESS_FOUND:
        console.print(
            f"[yellow]Couldn't determine IPs[/yellow] for "
            f"[bold]{escape(outcome.query)}[/bold]\n"
        )
        return

    for ip in outcome.resolution.ips:
        if ip != outcome.query:
            console.print(f"[dim]Got IP:[/dim] {ip}")

    if outcome.status is MatchStatus.NO_MATCH:
        console.print(
            f"[yellow]No matches found[/yellow] for "
            f"[bold]{', '.join(outcome.resolution.ips)}[/bold]\n"
        )
        return

    for m in outcome.matches:
        console.print(
            f"[green bold]MATCH[/green bold] via [bold]{m.address}[/bold]:"
        )
        console.print(_record_table([m.record]))
        if m.related:
            console.print("Related:")
            console.print(_record_table([r.record for r in m.related], numbered=True))
        console.print()


@cli.command()
@click.argument("addresses", nargs=-1, required=True)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def find(ctx: click.Context, addresses: tuple[str, ...], as_json: bool):
    """Look up one or more IPs, hostnames or URLs (defanged input is accepted)."""
    index = _load(ctx)
    outcomes = lookup_addresses(addresses, index)

    if as_json:
        click.echo(json_lib.dumps([_outcome_dict(o) for o in outcomes], indent=2))
        return

    for outcome in outcomes:
        _print_outcome(outcome)


@cli.command()
@click.pass_context
def stats(ctx: click.Context):
    """Show lookup data statistics."""
    index = _load(ctx)
    records = index.records

    if not records:
        console.print("[yellow]Lookup file contains no records.[/yellow]")
        return

    by_type = Counter(r.type for r in records)
    by_infra = Counter(r.infrastructure or "(none)" for r in records)

    table = Table(title="Lookup Data Statistics", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value")

    table.add_row("Records", str(len(records)))
    table.add_row("Addresses", str(sum(len(r.addresses) for r in records)))

    table.add_section()
    for record_type, count in sorted(by_type.items()):
        table.add_row(f"  {record_type}", str(count))

    table.add_section()
    for infra, count in sorted(by_infra.items()):
        table.add_row(f"  Infrastructure: {infra}", str(count))

    console.print(table)


@cli.command("list-records")
@click.option("--type", "record_type", help="Only list records of this type.")
@click.pass_context
def list_records_cmd(ctx: click.Context, record_type: str | None):
    """List records in the lookup data."""
    index = _load(ctx)
    records = [
        r for r in index.records if record_type is None or r.type == record_type
    ]

    if not records:
        console.print("[yellow]No records found.[/yellow]")
        return

    records.sort(key=lambda r: (r.type, r.name))
    table = _record_table(records)
    table.title = "Records"
    console.print(table)
