"""
Reading OpenStreetMap tile directories into an archive.
"""

from .importer import ImportFailure, ImportResult, import_tiles
from .paths import MalformedTilePathError, matches_extension, parse_tile_path

__all__ = (
    "ImportFailure",
    "ImportResult",
    "import_tiles",
    "MalformedTilePathError",
    "matches_extension",
    "parse_tile_path",
)
