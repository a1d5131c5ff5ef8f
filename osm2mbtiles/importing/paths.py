"""
Parsing of tile paths in the OpenStreetMap directory layout:

    <zoom>/<column>/<row>.<ext>
"""

import re
from pathlib import PurePath

from pydantic import ValidationError

from osm2mbtiles.tiles import TileCoordinate

DECIMAL = re.compile(r"[0-9]+")


class MalformedTilePathError(ValueError):
    pass


def matches_extension(path: PurePath, extensions: list[str]) -> bool:
    """
    Case-insensitive extension check; ``extensions`` are given without the
    leading dot.
    """
    suffix = path.suffix.lower().lstrip(".")
    return suffix in {x.lower().lstrip(".") for x in extensions}


def _parse_segment(segment: str, label: str, path: PurePath) -> int:
    if DECIMAL.fullmatch(segment) is None:
        raise MalformedTilePathError(
            f"{path}: {label} segment '{segment}' is not a decimal integer"
        )

    return int(segment)


def parse_tile_path(relative: PurePath) -> TileCoordinate:
    """
    Parse a path relative to the tile root into its XYZ coordinate.

    Raises
    ------
    MalformedTilePathError
        If the path does not have exactly three segments, any segment is not
        a decimal integer, or the coordinate lies outside the tile grid.
    """
    parts = relative.parts

    if len(parts) != 3:
        raise MalformedTilePathError(
            f"{relative}: expected <zoom>/<column>/<row>.<ext>, got {len(parts)} segments"
        )

    zoom = _parse_segment(parts[0], "zoom", relative)
    column = _parse_segment(parts[1], "column", relative)
    row = _parse_segment(PurePath(parts[2]).stem, "row", relative)

    try:
        return TileCoordinate(zoom=zoom, column=column, row=row)
    except ValidationError as e:
        raise MalformedTilePathError(
            f"{relative}: {e.errors()[0]['msg']}"
        ) from e
