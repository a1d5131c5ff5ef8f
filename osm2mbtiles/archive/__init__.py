"""
The MBTiles archive: schema and typed access.
"""

from .core import (
    Archive,
    ArchiveCreationError,
    ArchiveError,
    ArchiveNotFoundError,
    ArchiveWriteError,
    TileStatistics,
    ZoomExtent,
)

__all__ = (
    "Archive",
    "ArchiveError",
    "ArchiveCreationError",
    "ArchiveNotFoundError",
    "ArchiveWriteError",
    "TileStatistics",
    "ZoomExtent",
)
