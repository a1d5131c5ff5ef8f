"""
CLI for inspecting existing archives (using typer)
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

CONSOLE = Console()

APP = typer.Typer()


def _open(db: Path):
    from osm2mbtiles.archive import Archive, ArchiveNotFoundError

    try:
        return Archive.open(db)
    except ArchiveNotFoundError as e:
        CONSOLE.print(str(e), markup=False)
        raise typer.Exit(code=1)


@APP.command()
def stats(db: Path):
    """
    Print tile count, zoom range and file size of an archive.
    """
    from osm2mbtiles.stats import collect_statistics, report_statistics

    with _open(db) as archive:
        report_statistics(collect_statistics(archive), CONSOLE)


@APP.command()
def metadata(db: Path):
    """
    Print the metadata table of an archive.
    """
    with _open(db) as archive:
        entries = archive.metadata()

    table = Table("name", "value")
    for name, value in entries.items():
        table.add_row(name, value)

    CONSOLE.print(table)


@APP.command()
def tile(
    db: Path,
    zoom: int,
    column: int,
    row: int,
    output: Path = Path("./tile.png"),
    tms: bool = False,
):
    """
    Extract a single tile. The row is in OpenStreetMap (XYZ) numbering unless
    --tms is given.
    """
    from pydantic import ValidationError

    from osm2mbtiles.tiles import TileCoordinate

    try:
        coordinate = TileCoordinate(zoom=zoom, column=column, row=row)
    except ValidationError as e:
        CONSOLE.print(f"Invalid tile coordinate: {e.errors()[0]['msg']}", markup=False)
        raise typer.Exit(code=1)

    if not tms:
        coordinate = coordinate.flipped()

    with _open(db) as archive:
        data = archive.get_tile(coordinate)

    if data is None:
        CONSOLE.print(f"Tile {coordinate.key} (TMS) not found.")
        raise typer.Exit(code=1)

    try:
        with output.open("wb") as handle:
            handle.write(data)
    except OSError as e:
        CONSOLE.print(f"Could not write {output}: {e.strerror or e}", markup=False)
        raise typer.Exit(code=1)

    CONSOLE.print(f"Tile written to {output} ({len(data)} bytes).", markup=False)


def main():
    global APP

    APP()
