"""
Access to a single MBTiles archive file.

An ``Archive`` owns one SQLAlchemy engine and one session for its whole
lifetime. Failures are raised as ``ArchiveError`` subclasses; logging is
left to the callers.
"""

from pathlib import Path

from pydantic import BaseModel
from sqlalchemy import create_engine, func, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from osm2mbtiles.tiles import TileCoordinate

from .orm import Base, MetadataORM, TileORM


class ArchiveError(Exception):
    pass


class ArchiveCreationError(ArchiveError):
    pass


class ArchiveNotFoundError(ArchiveError):
    pass


class ArchiveWriteError(ArchiveError):
    pass


class TileStatistics(BaseModel):
    count: int
    min_zoom: int | None = None
    max_zoom: int | None = None


class ZoomExtent(BaseModel):
    zoom: int
    min_column: int
    max_column: int
    min_row: int
    max_row: int


class Archive:
    """
    An MBTiles 1.1 archive backed by SQLite.

    Use ``Archive.create`` to start a new archive, or ``Archive.open`` to
    inspect an existing one. Tile rows passed to and returned from this class
    are in TMS numbering, exactly as stored.
    """

    path: Path

    def __init__(self, path: Path):
        self.path = Path(path)
        self.engine = create_engine(f"sqlite:///{self.path}")
        self.session = sessionmaker(bind=self.engine)()

    @classmethod
    def create(
        cls, path: Path, metadata: dict[str, str] | None = None
    ) -> "Archive":
        """
        Create a fresh archive at ``path``, removing any file already there.

        Parameters
        ----------
        path : Path
            Location of the new archive.
        metadata : dict[str, str], optional
            Entries for the metadata table.

        Raises
        ------
        ArchiveCreationError
            If the old file cannot be removed or the database cannot be
            created.
        """
        path = Path(path)

        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise ArchiveCreationError(f"Could not remove {path}: {e}") from e

        archive = cls(path)

        try:
            Base.metadata.create_all(archive.engine)
            if metadata:
                archive.write_metadata(metadata)
        except (SQLAlchemyError, ArchiveWriteError) as e:
            archive.close()
            raise ArchiveCreationError(f"Could not create {path}: {e}") from e

        return archive

    @classmethod
    def open(cls, path: Path) -> "Archive":
        path = Path(path)

        if not path.is_file():
            raise ArchiveNotFoundError(f"Archive {path} does not exist")

        return cls(path)

    def __enter__(self) -> "Archive":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        self.session.close()
        self.engine.dispose()

    def commit(self):
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ArchiveWriteError(f"Commit to {self.path} failed: {e}") from e

    def insert_tile(self, coordinate: TileCoordinate, data: bytes) -> None:
        """
        Insert a tile at a TMS coordinate. An existing tile with the same key
        is replaced.
        """
        stmt = insert(TileORM).values(
            zoom_level=coordinate.zoom,
            tile_column=coordinate.column,
            tile_row=coordinate.row,
            tile_data=data,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[TileORM.zoom_level, TileORM.tile_column, TileORM.tile_row],
            set_={"tile_data": stmt.excluded.tile_data},
        )

        try:
            self.session.execute(stmt)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ArchiveWriteError(
                f"Could not write tile {coordinate.key} to {self.path}: {e}"
            ) from e

    def write_metadata(self, entries: dict[str, str], overwrite: bool = True) -> None:
        """
        Write metadata entries and commit. With ``overwrite=False`` entries
        whose name already exists are left untouched.
        """
        if not entries:
            return

        stmt = insert(MetadataORM).values(
            [{"name": name, "value": value} for name, value in entries.items()]
        )

        if overwrite:
            stmt = stmt.on_conflict_do_update(
                index_elements=[MetadataORM.name],
                set_={"value": stmt.excluded.value},
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=[MetadataORM.name])

        try:
            self.session.execute(stmt)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ArchiveWriteError(
                f"Could not write metadata to {self.path}: {e}"
            ) from e

        self.commit()

    def metadata(self) -> dict[str, str]:
        rows = self.session.execute(
            select(MetadataORM.name, MetadataORM.value).order_by(MetadataORM.name)
        ).all()
        return {name: value for name, value in rows}

    def get_tile(self, coordinate: TileCoordinate) -> bytes | None:
        return self.session.execute(
            select(TileORM.tile_data).where(
                TileORM.zoom_level == coordinate.zoom,
                TileORM.tile_column == coordinate.column,
                TileORM.tile_row == coordinate.row,
            )
        ).scalar_one_or_none()

    def statistics(self) -> TileStatistics:
        count, min_zoom, max_zoom = self.session.execute(
            select(
                func.count(),
                func.min(TileORM.zoom_level),
                func.max(TileORM.zoom_level),
            ).select_from(TileORM)
        ).one()

        return TileStatistics(count=count, min_zoom=min_zoom, max_zoom=max_zoom)

    def zoom_extents(self) -> list[ZoomExtent]:
        rows = self.session.execute(
            select(
                TileORM.zoom_level,
                func.min(TileORM.tile_column),
                func.max(TileORM.tile_column),
                func.min(TileORM.tile_row),
                func.max(TileORM.tile_row),
            )
            .group_by(TileORM.zoom_level)
            .order_by(TileORM.zoom_level)
        ).all()

        return [
            ZoomExtent(
                zoom=zoom,
                min_column=min_column,
                max_column=max_column,
                min_row=min_row,
                max_row=max_row,
            )
            for zoom, min_column, max_column, min_row, max_row in rows
        ]

    @property
    def file_size(self) -> int:
        return self.path.stat().st_size
