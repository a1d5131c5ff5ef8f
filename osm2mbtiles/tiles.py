"""
Tile coordinates and the XYZ <-> TMS row flip.

OpenStreetMap (XYZ) numbers rows from the top of the grid, MBTiles 1.1 stores
them in TMS order, numbered from the bottom:

    tms_row = 2^zoom - xyz_row - 1

The flip is its own inverse, so the same function converts in both
directions.
"""

from pydantic import BaseModel, Field, model_validator

MAX_ZOOM_LEVEL = 30


def flip_row(zoom: int, row: int) -> int:
    return (1 << zoom) - row - 1


class TileCoordinate(BaseModel):
    zoom: int = Field(ge=0, le=MAX_ZOOM_LEVEL)
    column: int = Field(ge=0)
    row: int = Field(ge=0)

    @model_validator(mode="after")
    def check_within_grid(self):
        size = 1 << self.zoom

        if self.column >= size or self.row >= size:
            raise ValueError(
                f"Tile ({self.column}, {self.row}) lies outside the "
                f"{size}x{size} grid at zoom {self.zoom}"
            )

        return self

    def flipped(self) -> "TileCoordinate":
        """
        The same tile, numbered in the other row scheme.
        """
        return TileCoordinate(
            zoom=self.zoom, column=self.column, row=flip_row(self.zoom, self.row)
        )

    @property
    def key(self) -> tuple[int, int, int]:
        return (self.zoom, self.column, self.row)
