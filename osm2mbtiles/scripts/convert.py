"""
Command-line script converting an OpenStreetMap tile directory into an
MBTiles 1.1 archive.

    osm2mbtiles -db <db file> [-mapdir <map directory>] [-metadata <json file>]
"""

import argparse as ap
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError
from rich.console import Console

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_SKIPPED_FILES = 2


class ConvertArgumentParser(ap.ArgumentParser):
    """
    Usage errors exit with EXIT_FATAL; argparse's own status 2 is taken by
    EXIT_SKIPPED_FILES.
    """

    def error(self, message: str):
        self.print_usage(sys.stdout)
        print(f"{self.prog}: error: {message}")
        sys.exit(EXIT_FATAL)


parser = ConvertArgumentParser(
    prog="osm2mbtiles",
    description="Import an OpenStreetMap tile directory (<zoom>/<col>/<row>.png) into an MBTiles 1.1 archive.",
    allow_abbrev=False,
)

parser.add_argument(
    "-db",
    type=Path,
    default=None,
    help="The archive to create. Any existing file at this path is deleted.",
)
parser.add_argument(
    "-mapdir",
    type=Path,
    default=None,
    help="The tile directory to import. Without it only the metadata is written.",
)
parser.add_argument(
    "-metadata",
    type=Path,
    default=None,
    help="JSON file with the tileset metadata (name, type, version, description, ...).",
)


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    import osm2mbtiles
    from osm2mbtiles.archive import Archive, ArchiveCreationError, ArchiveWriteError
    from osm2mbtiles.importing import import_tiles
    from osm2mbtiles.log import configure_logging
    from osm2mbtiles.metadata.core import parse_metadata
    from osm2mbtiles.metadata.coverage import add_derived_metadata
    from osm2mbtiles.settings import settings
    from osm2mbtiles.stats import collect_statistics, report_statistics

    console = console or Console()

    args = parser.parse_args(argv)

    configure_logging(settings.log_level)
    log = structlog.get_logger()
    log.info(
        "osm2mbtiles.started",
        version=osm2mbtiles.__version__,
        mbtiles_version=osm2mbtiles.MBTILES_VERSION,
    )

    if args.db is None:
        log.error("db.missing")
        parser.print_usage()
        return EXIT_FATAL

    log = log.bind(archive=str(args.db))

    if args.mapdir is not None and not args.mapdir.is_dir():
        log.error("mapdir.not_found", tile_directory=str(args.mapdir))
        return EXIT_FATAL

    metadata = None
    if args.metadata is not None:
        try:
            metadata = parse_metadata(args.metadata).to_entries()
        except (OSError, ValidationError) as e:
            log.error("metadata.invalid", metadata_path=str(args.metadata), error=str(e))
            return EXIT_FATAL

    try:
        archive = Archive.create(args.db, metadata=metadata)
    except ArchiveCreationError as e:
        log.error("archive.creation_failed", error=str(e))
        return EXIT_FATAL

    log.info("archive.created")

    with archive:
        if args.mapdir is None:
            return EXIT_OK

        try:
            result = import_tiles(
                archive,
                args.mapdir,
                extensions=settings.extensions,
                commit_interval=settings.commit_interval,
                conversion_log_limit=settings.conversion_log_limit,
            )

            if settings.derive_metadata:
                add_derived_metadata(archive)
        except ArchiveWriteError as e:
            log.error("archive.write_failed", error=str(e))
            return EXIT_FATAL

        report_statistics(collect_statistics(archive, args.mapdir), console)

    if result.failures:
        log.warning(
            "import.files_skipped",
            count=len(result.failures),
            paths=[str(x.path) for x in result.failures],
        )
        return EXIT_SKIPPED_FILES

    return EXIT_OK
