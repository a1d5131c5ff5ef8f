"""
Coverage metadata derived from the tiles actually present in an archive.
"""

import math

import structlog

from osm2mbtiles.archive import Archive, ZoomExtent
from osm2mbtiles.tiles import flip_row


def tile_corner(zoom: int, column: int, xyz_row: int) -> tuple[float, float]:
    """
    Longitude and latitude of the top left corner of a spherical mercator
    tile in XYZ numbering.
    """
    n = 1 << zoom
    longitude = column / n * 360.0 - 180.0
    latitude = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * xyz_row / n))))

    return longitude, latitude


def tile_bounds(zoom: int, column: int, tms_row: int) -> tuple[float, float, float, float]:
    """
    The (west, south, east, north) bounds of a tile as stored in the archive.
    """
    xyz_row = flip_row(zoom, tms_row)
    west, north = tile_corner(zoom, column, xyz_row)
    east, south = tile_corner(zoom, column + 1, xyz_row + 1)

    return west, south, east, north


def extent_bounds(extent: ZoomExtent) -> tuple[float, float, float, float]:
    # The highest TMS row is the northernmost one.
    west, _, _, north = tile_bounds(extent.zoom, extent.min_column, extent.max_row)
    _, south, east, _ = tile_bounds(extent.zoom, extent.max_column, extent.min_row)

    return west, south, east, north


def derive_metadata(archive: Archive) -> dict[str, str]:
    """
    Compute minzoom, maxzoom and bounds entries from the archive's tiles.
    Returns an empty dictionary when the archive holds no tiles.
    """
    extents = archive.zoom_extents()

    if not extents:
        return {}

    boxes = [extent_bounds(x) for x in extents]
    west = min(x[0] for x in boxes)
    south = min(x[1] for x in boxes)
    east = max(x[2] for x in boxes)
    north = max(x[3] for x in boxes)

    return {
        "minzoom": str(extents[0].zoom),
        "maxzoom": str(extents[-1].zoom),
        "bounds": f"{west:.6f},{south:.6f},{east:.6f},{north:.6f}",
    }


def add_derived_metadata(archive: Archive) -> dict[str, str]:
    """
    Write the derived entries that are not already present in the archive.
    Returns the entries that were written.
    """
    log = structlog.get_logger().bind(archive=str(archive.path))

    existing = archive.metadata()
    derived = {
        name: value
        for name, value in derive_metadata(archive).items()
        if name not in existing
    }

    archive.write_metadata(derived, overwrite=False)

    log.info("metadata.derived", **derived)

    return derived
