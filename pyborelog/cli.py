"""Command-line front end.

Usage::

    pyborelog render sp10.json -o palitos.dxf
    pyborelog inspect sp10.json --hole SP-03
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from pyborelog.dxf.sheet import generate_dxf
from pyborelog.dxf.style import SheetStyle
from pyborelog.layout.batch import allocate_batch
from pyborelog.stratigraphy.borehole import BoreholeLogSet

app = typer.Typer(no_args_is_help=True)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(input_path: Path) -> BoreholeLogSet:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)
    try:
        return BoreholeLogSet.from_json(input_path)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Could not read boreholes:[/] {exc}")
        raise typer.Exit(code=1) from exc


@app.command("render")
def render(
    input_path: Path = typer.Argument(..., help="JSON file with a list of borehole records."),
    output: Path = typer.Option(Path("palitos.dxf"), "--output", "-o", help="DXF file to write."),
    gap: float = typer.Option(15.0, help="Horizontal distance between boreholes."),
    workers: int = typer.Option(1, help="Threads used to lay out the boreholes."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log layout details."),
) -> None:
    _configure_logging(verbose)
    logs = _load(input_path)
    if not logs:
        console.print(f"[yellow]No boreholes found in {input_path}[/]")
        raise typer.Exit(code=0)

    style = replace(SheetStyle(), gap=gap)
    _, report = generate_dxf(logs, output, style=style, max_workers=workers)

    console.print(
        f"[green]Wrote[/] {output} "
        f"({report.succeeded} of {report.total} boreholes)"
    )
    for hole_id in report.failed:
        console.print(f"[red]Failed:[/] {hole_id or '<unnamed>'}")


@app.command("inspect")
def inspect(
    input_path: Path = typer.Argument(..., help="JSON file with a list of borehole records."),
    hole: str | None = typer.Option(None, help="Only show this borehole."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log layout details."),
) -> None:
    _configure_logging(verbose)
    logs = _load(input_path)
    selected = [log for log in logs if hole is None or log.hole_id == hole]
    if not selected:
        console.print(f"[yellow]No borehole matching {hole!r}[/]")
        raise typer.Exit(code=1)

    batch = allocate_batch(selected)
    for allocation in batch:
        table = Table(title=allocation.log.hole_id)
        for column in ("Layers", "Span (m)", "Needed", "Available", "Extra",
                       "Final heights", "Floor excess"):
            table.add_column(column)
        for cluster in allocation.clusters:
            first, last = cluster.layer_sizes[0], cluster.layer_sizes[-1]
            table.add_row(
                f"{cluster.start_index}-{cluster.end_index}",
                f"{first.top:.2f}-{last.bottom:.2f}",
                f"{cluster.total_needed:.2f}",
                f"{cluster.total_available:.2f}",
                f"{cluster.needs_extra_space:.2f}",
                ", ".join(f"{ls.final_height:.2f}" for ls in cluster.layer_sizes),
                "-" if cluster.unchanged else f"{cluster.floor_excess:.2f}",
            )
        console.print(table)

    for hole_id in batch.failed:
        console.print(f"[red]Failed:[/] {hole_id or '<unnamed>'}")


if __name__ == "__main__":
    app()
