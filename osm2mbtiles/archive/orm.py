"""
SQLAlchemy ORM models for the MBTiles 1.1 archive.

The key columns are declared nullable so that the emitted DDL matches the
MBTiles schema exactly (SQLAlchemy would otherwise add NOT NULL).
"""

from sqlalchemy import Column, Integer, LargeBinary, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class MetadataORM(Base):
    __tablename__ = "metadata"

    name = Column(Text, primary_key=True, nullable=True)
    value = Column(Text)


class TileORM(Base):
    __tablename__ = "tiles"

    zoom_level = Column(Integer, primary_key=True, nullable=True, autoincrement=False)
    tile_column = Column(
        Integer, primary_key=True, nullable=True, autoincrement=False
    )
    tile_row = Column(Integer, primary_key=True, nullable=True, autoincrement=False)
    tile_data = Column(LargeBinary)
