# src/proctor_groups/cli.py
"""
proctor-groups Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`. It
reads a snapshot JSON file (the camelCase shape produced by the allocation
service), applies optional hold-out / forced-group overrides and prints the
resolved groups.

Features
--------
- **show**: print one serialization (long, logging, groups, js, json).
- **inspect**: table of raw vs. effective values with descriptions and payloads.

Usage
-----
    $ proctor-groups show snapshot.json --format logging
    $ proctor-groups show snapshot.json --holdout holdout_tst --holdout-value 2
    $ proctor-groups inspect snapshot.json --force abtst=0
"""

from __future__ import annotations

import io
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from proctor_groups.core.contracts import ProctorResult
from proctor_groups.core.settings import load_settings
from proctor_groups.groups import Groups
from proctor_groups.overrides import build_override, parse_forced_groups

load_dotenv()
load_settings.cache_clear()

app = typer.Typer(
    help="proctor-groups: resolve and render experiment group assignments.",
    rich_markup_mode="markdown",
)
console = Console()


class OutputFormat(str, Enum):
    """Serializations available from `show`."""

    long = "long"
    logging = "logging"
    groups = "groups"
    js = "js"
    json = "json"


# --------------------------------------------------------------------------- #
# Shared options
# --------------------------------------------------------------------------- #

SnapshotArg = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a snapshot JSON file (matrixVersion, buckets, allocations, testDefinitions).",
    ),
]
HoldoutOpt = Annotated[
    str | None,
    typer.Option("--holdout", help="Hold-out test; when active, other tests use their lowest bucket."),
]
HoldoutValueOpt = Annotated[
    int,
    typer.Option("--holdout-value", help="Bucket value of the hold-out test that activates it."),
]
ForceOpt = Annotated[
    list[str] | None,
    typer.Option("--force", "-f", help="Pin a test to a bucket, as TEST=VALUE. Repeatable."),
]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _load_groups(
    snapshot: Path, holdout: str | None, holdout_value: int, force: list[str] | None
) -> Groups:
    """
    Helper: Validate the snapshot file and bind it to a `Groups` facade.

    Bad `--force` values raise `typer.BadParameter` (usage error, exit 2);
    unreadable or invalid snapshots print an error and exit 1.
    """
    try:
        forced = parse_forced_groups(force or [])
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--force") from e

    try:
        result = ProctorResult.model_validate_json(snapshot.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        console.print(f"[bold red]❌ Invalid snapshot {snapshot.name}:[/bold red] {e}")
        raise typer.Exit(code=1) from e

    return Groups(result, override=build_override(holdout, holdout_value, forced))


def _render(groups: Groups, fmt: OutputFormat) -> str:
    """Helper: Produce the requested serialization as plain text."""
    if fmt is OutputFormat.long:
        return groups.to_long_string()
    if fmt is OutputFormat.logging:
        return groups.to_logging_string()
    if fmt is OutputFormat.groups:
        buffer = io.StringIO()
        groups.append_test_groups(buffer, load_settings().logging_separator)
        return buffer.getvalue()
    if fmt is OutputFormat.js:
        return groups.to_json_config()
    return groups.get_as_proctor_result().model_dump_json(by_alias=True, exclude_none=True)


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def show(
    snapshot: SnapshotArg,
    fmt: Annotated[
        OutputFormat,
        typer.Option("--format", "-F", help="Which serialization to print."),
    ] = OutputFormat.logging,
    holdout: HoldoutOpt = None,
    holdout_value: HoldoutValueOpt = 1,
    force: ForceOpt = None,
) -> None:
    """
    Print one serialization of the resolved groups.

    Output goes to stdout unstyled so it can be piped.
    """
    groups = _load_groups(snapshot, holdout, holdout_value, force)
    typer.echo(_render(groups, fmt))


@app.command("inspect")  # type: ignore[misc]
def inspect_snapshot(
    snapshot: SnapshotArg,
    holdout: HoldoutOpt = None,
    holdout_value: HoldoutValueOpt = 1,
    force: ForceOpt = None,
) -> None:
    """
    Show every test with its raw and effective bucket.

    Rows whose value was changed by an override are highlighted.
    """
    groups = _load_groups(snapshot, holdout, holdout_value, force)
    result = groups.get_proctor_result()

    console.print(
        Panel.fit(
            f"[bold cyan]proctor-groups[/bold cyan]\nMatrix version: [u]{result.matrix_version or '-'}[/u]",
            border_style="cyan",
        )
    )
    if groups.is_empty():
        console.print("[dim]Snapshot has no buckets.[/dim]")
        return

    table = Table(show_lines=False)
    for column in ("Test", "Raw", "Effective", "Allocation", "Description", "Payload"):
        table.add_column(column)

    for test_name in sorted(result.buckets):
        raw = result.buckets[test_name].value
        effective = groups.get_value(test_name, raw)
        allocation = result.allocations.get(test_name)
        payload_value = groups.get_payload(test_name).fetch_a_value()
        style = "magenta" if effective != raw else None
        table.add_row(
            test_name,
            str(raw),
            str(effective),
            allocation.id if allocation is not None else "",
            groups.get_description(test_name),
            "" if payload_value is None else str(payload_value),
            style=style,
        )
    console.print(table)
    console.print(f"[dim]Logging: {groups.to_logging_string()}[/dim]")


if __name__ == "__main__":
    app()
