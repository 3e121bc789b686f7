"""Main CLI entry point for platenest."""

import json
from typing import List, Tuple

import click
from rich.console import Console
from rich.table import Table

from platenest import __version__
from platenest.config import get_settings
from platenest.geometry import GeometryError
from platenest.nesting import NestAlgorithm, NestSettings, Part, Plate, nest_parts
from platenest.utils import format_duration, format_percent, setup_logging

console = Console()


def _parse_size(value: str) -> Tuple[float, float]:
    try:
        width, height = value.lower().split("x")
        return float(width), float(height)
    except ValueError:
        raise click.BadParameter(f"expected WIDTHxHEIGHT, got '{value}'")


def _parse_rotations(value: str) -> List[float]:
    try:
        return [float(r) for r in value.split(",") if r.strip()]
    except ValueError:
        raise click.BadParameter(f"expected comma-separated degrees, got '{value}'")


def _parse_rect(value: str, rotation_step: float) -> Part:
    """NAME:WxH[:QTY]"""
    fields = value.split(":")
    if len(fields) not in (2, 3):
        raise click.BadParameter(f"expected NAME:WxH[:QTY], got '{value}'")
    width, height = _parse_size(fields[1])
    quantity = int(fields[2]) if len(fields) == 3 else 1
    return Part.rectangle(fields[0], width, height, quantity, rotation_step)


def _parse_circle(value: str, segments: int) -> Part:
    """NAME:RADIUS[:QTY]"""
    fields = value.split(":")
    if len(fields) not in (2, 3):
        raise click.BadParameter(f"expected NAME:RADIUS[:QTY], got '{value}'")
    quantity = int(fields[2]) if len(fields) == 3 else 1
    return Part.circle(fields[0], float(fields[1]), quantity, segments)


@click.group()
@click.version_option(version=__version__, prog_name="platenest")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """platenest - pack flat parts onto a rectangular plate."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging("DEBUG" if verbose else get_settings().log_level)


@cli.command()
@click.option("--plate", "-p", required=True, help="Plate size as WIDTHxHEIGHT")
@click.option("--rect", "-r", "rects", multiple=True, help="Rectangle part NAME:WxH[:QTY]")
@click.option("--circle", "-c", "circles", multiple=True, help="Circular part NAME:RADIUS[:QTY]")
@click.option("--grid-step", type=float, help="Grid step (default from settings)")
@click.option("--clearance", type=float, help="Clearance between parts")
@click.option("--kerf", type=float, help="Kerf width")
@click.option("--rotation-step", type=float, default=90.0, help="Rotation step in degrees (0 = none)")
@click.option("--rotations", help="Explicit rotations in degrees, e.g. 0,90 (overrides --rotation-step)")
@click.option(
    "--algorithm", "-a",
    type=click.Choice([a.value for a in NestAlgorithm]),
    help="Nesting algorithm",
)
@click.option("--mirror", is_flag=True, help="Mirror every other copy")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def nest(plate, rects, circles, grid_step, clearance, kerf, rotation_step, rotations,
         algorithm, mirror, as_json):
    """Nest rectangular and circular parts on a plate."""
    settings = get_settings()

    try:
        plate_obj = Plate(*_parse_size(plate))
        parts: List[Part] = [_parse_rect(r, rotation_step) for r in rects]
        parts += [_parse_circle(c, settings.circle_segments) for c in circles]
        nest_settings = NestSettings(
            grid_step=grid_step if grid_step is not None else settings.grid_step,
            clearance=clearance if clearance is not None else settings.clearance,
            kerf=kerf if kerf is not None else settings.kerf,
            allowed_rotations=(
                _parse_rotations(rotations) if rotations else settings.allowed_rotations
            ),
            allow_mirror=mirror or settings.allow_mirror,
            algorithm=algorithm or settings.algorithm,
        )
    except (GeometryError, ValueError) as e:
        raise click.UsageError(str(e))

    if not parts:
        raise click.UsageError("Provide at least one --rect or --circle part")

    result = nest_parts(parts, plate_obj, nest_settings)

    if as_json:
        data = result.to_dict()
        data["utilization"] = result.utilization(plate_obj)
        click.echo(json.dumps(data, indent=2))
        return

    table = Table(title=f"Nesting - plate {plate_obj.width:g}x{plate_obj.height:g}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Part", style="cyan")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    table.add_column("Rotation", justify="right")
    table.add_column("Mirrored")

    for i, p in enumerate(result.placements, 1):
        table.add_row(
            str(i),
            p.part.name,
            f"{p.bounds.min_x:.2f}",
            f"{p.bounds.min_y:.2f}",
            f"{p.rotation_deg:g}°",
            "yes" if p.mirrored else "",
        )

    console.print(table)
    console.print(
        f"Placed [green]{result.placed_count}[/green], "
        f"utilization {format_percent(result.utilization(plate_obj))}, "
        f"time {format_duration(result.processing_time)}"
    )
    if result.unplaced:
        names = ", ".join(p.name for p in result.unplaced)
        console.print(f"[yellow]Unplaced ({result.unplaced_count}): {names}[/yellow]")


@cli.command()
def status() -> None:
    """Show effective configuration."""
    settings = get_settings()

    console.print("[bold]platenest status[/bold]")
    console.print(f"Version: {__version__}")
    console.print()
    console.print("[bold]Nesting:[/bold]")
    console.print(f"  Algorithm: {settings.algorithm}")
    console.print(f"  Grid step: {settings.grid_step:g}")
    console.print(f"  Clearance: {settings.clearance:g}")
    console.print(f"  Kerf: {settings.kerf:g}")
    console.print(f"  Mirror: {settings.allow_mirror}")
    console.print(f"  Rotations: {settings.allowed_rotations or 'per part step'}")
    console.print()
    console.print("[bold]Reconstruction:[/bold]")
    console.print(f"  Arc resolution: {settings.arc_resolution}")
    console.print(f"  Circle segments: {settings.circle_segments}")
    console.print(f"  Join tolerance: {settings.join_tolerance:g}")


if __name__ == "__main__":
    cli()
