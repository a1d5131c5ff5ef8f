"""
Import of an OpenStreetMap tile directory into an archive.

The import is a single fold over the sorted file listing: every file either
becomes a tile, is ignored (wrong extension), or is recorded as a failure.
Archive write errors are not caught here; a partially written archive is
not a usable result.
"""

import os
from pathlib import Path

import structlog
from pydantic import BaseModel

from osm2mbtiles.archive import Archive
from osm2mbtiles.settings import settings

from .paths import MalformedTilePathError, matches_extension, parse_tile_path


class ImportFailure(BaseModel):
    path: Path
    reason: str


class ImportResult(BaseModel):
    imported: int = 0
    replaced: int = 0
    ignored: int = 0
    min_zoom: int | None = None
    max_zoom: int | None = None
    failures: list[ImportFailure] = []

    @property
    def tiles(self) -> int:
        "Number of distinct tiles written."
        return self.imported - self.replaced

    def record_zoom(self, zoom: int):
        self.min_zoom = zoom if self.min_zoom is None else min(self.min_zoom, zoom)
        self.max_zoom = zoom if self.max_zoom is None else max(self.max_zoom, zoom)


def walk_files(root: Path) -> tuple[list[Path], list[OSError]]:
    """
    All files below ``root`` in sorted order, along with the errors raised
    while listing directories (unreadable directories are not descended).
    """
    files = []
    errors = []

    for directory, dirnames, filenames in os.walk(root, onerror=errors.append):
        dirnames.sort()
        files.extend(Path(directory) / x for x in filenames)

    return sorted(files), errors


def import_tiles(
    archive: Archive,
    root: Path,
    extensions: list[str] | None = None,
    commit_interval: int | None = None,
    conversion_log_limit: int | None = None,
) -> ImportResult:
    """
    Import every tile file below ``root`` into ``archive``.
    Options left as None are taken from the settings.

    Parameters
    ----------
    archive : Archive
        The (freshly created) archive to write to.
    root : Path
        Directory laid out as ``<zoom>/<column>/<row>.<ext>``, XYZ numbering.
    extensions : list[str], optional
        File extensions treated as tiles; everything else is ignored.
    commit_interval : int, optional
        Tiles written between commits.
    conversion_log_limit : int, optional
        Number of row conversions logged at debug level.

    Returns
    -------
    ImportResult
        Counts, the zoom range of the imported tiles and the skipped files.

    Raises
    ------
    ArchiveWriteError
        If a tile cannot be written.
    """
    extensions = extensions if extensions is not None else settings.extensions
    if commit_interval is None:
        commit_interval = settings.commit_interval
    if commit_interval < 1:
        raise ValueError(f"commit_interval must be positive, got {commit_interval}")
    if conversion_log_limit is None:
        conversion_log_limit = settings.conversion_log_limit

    root = Path(root)
    log = structlog.get_logger().bind(tile_directory=str(root))
    log.info("import.started")

    result = ImportResult()
    written: set[tuple[int, int, int]] = set()

    files, errors = walk_files(root)

    for error in errors:
        relative = Path(os.path.relpath(error.filename, root))
        reason = f"Could not list {relative}: {error.strerror or error}"
        log.warning("directory.skipped", path=str(relative), reason=reason)
        result.failures.append(ImportFailure(path=relative, reason=reason))

    for path in files:
        relative = path.relative_to(root)
        file_log = log.bind(path=str(relative))

        if not matches_extension(relative, extensions):
            result.ignored += 1
            continue

        try:
            source = parse_tile_path(relative)
        except MalformedTilePathError as e:
            file_log.warning("tile.skipped", reason=str(e))
            result.failures.append(ImportFailure(path=relative, reason=str(e)))
            continue

        target = source.flipped()

        if result.imported < conversion_log_limit:
            file_log.debug(
                "tile.converted",
                zoom=source.zoom,
                grid_size=1 << source.zoom,
                source_row=source.row,
                target_row=target.row,
            )

        try:
            data = path.read_bytes()
        except OSError as e:
            reason = f"Could not read {relative}: {e.strerror or e}"
            file_log.warning("tile.skipped", reason=reason)
            result.failures.append(ImportFailure(path=relative, reason=reason))
            continue

        archive.insert_tile(target, data)

        if target.key in written:
            file_log.warning("tile.replaced", key=target.key)
            result.replaced += 1
        written.add(target.key)

        result.imported += 1
        result.record_zoom(target.zoom)

        if result.imported % commit_interval == 0:
            archive.commit()
            log.info("import.progress", imported=result.imported)

    archive.commit()

    log.info(
        "import.complete",
        imported=result.imported,
        replaced=result.replaced,
        ignored=result.ignored,
        failed=len(result.failures),
        min_zoom=result.min_zoom,
        max_zoom=result.max_zoom,
    )

    return result
