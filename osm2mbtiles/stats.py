"""
Summary statistics of a populated archive.
"""

from pathlib import Path

from pydantic import BaseModel
from rich.console import Console

from osm2mbtiles.archive import Archive


class ArchiveStatistics(BaseModel):
    path: Path
    file_size: int
    tile_directory: Path | None = None
    tile_count: int
    min_zoom: int | None = None
    max_zoom: int | None = None

    @property
    def zoom_range(self) -> str:
        if self.min_zoom is None or self.max_zoom is None:
            return "n/a"

        return f"{self.min_zoom} - {self.max_zoom}"


def collect_statistics(
    archive: Archive, tile_directory: Path | None = None
) -> ArchiveStatistics:
    """
    Query tile count and zoom range, and read the archive's size on disk.
    Pending changes should be committed first so the size is current.
    """
    tiles = archive.statistics()

    return ArchiveStatistics(
        path=archive.path,
        file_size=archive.file_size,
        tile_directory=tile_directory,
        tile_count=tiles.count,
        min_zoom=tiles.min_zoom,
        max_zoom=tiles.max_zoom,
    )


def report_statistics(statistics: ArchiveStatistics, console: Console):
    lines = [
        "",
        "Map statistics",
        "--------------",
        f"map db:            {statistics.path}",
        f"file size:         {statistics.file_size} bytes",
    ]
    if statistics.tile_directory is not None:
        lines.append(f"tile directory:    {statistics.tile_directory}")
    lines += [
        f"number of tiles:   {statistics.tile_count}",
        f"zoom levels:       {statistics.zoom_range}",
    ]

    # Paths may contain square brackets, which rich would read as markup.
    for line in lines:
        console.print(line, markup=False, highlight=False)
