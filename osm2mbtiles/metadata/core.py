"""
Tileset metadata, read from a JSON file and written to the archive's
metadata table.

Example:

```json
{
  "name": "OpenStreetMap Berlin",
  "type": "baselayer",
  "version": "1.0",
  "description": "Berlin city centre, zoom 10-16",
  "format": "png",
  "bounding_box": {
    "top_left_latitude": 52.6,
    "top_left_longitude": 13.2,
    "bottom_right_latitude": 52.4,
    "bottom_right_longitude": 13.6
  },
  "center": {"latitude": 52.52, "longitude": 13.4, "zoom": 12},
  "attribution": "(c) OpenStreetMap contributors"
}
```
"""

from pathlib import Path
from typing import Literal

import structlog
from pydantic import BaseModel, Field, model_validator


class BoundingBox(BaseModel):
    top_left_latitude: float = Field(ge=-90.0, le=90.0)
    top_left_longitude: float = Field(ge=-180.0, le=180.0)
    bottom_right_latitude: float = Field(ge=-90.0, le=90.0)
    bottom_right_longitude: float = Field(ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def check_corners(self):
        if self.top_left_latitude < self.bottom_right_latitude:
            raise ValueError("Top left corner must not lie south of the bottom right")

        return self

    @property
    def bounds(self) -> str:
        "MBTiles bounds string: west,south,east,north."
        return (
            f"{self.top_left_longitude},{self.bottom_right_latitude},"
            f"{self.bottom_right_longitude},{self.top_left_latitude}"
        )


class Center(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    zoom: int = Field(ge=0)

    @property
    def center(self) -> str:
        return f"{self.longitude},{self.latitude},{self.zoom}"


class TilesetMetadata(BaseModel):
    name: str
    type: Literal["overlay", "baselayer"] = "baselayer"
    version: str = "1.0"
    description: str = ""

    format: Literal["png", "jpg"] | None = None

    bounding_box: BoundingBox | None = None
    center: Center | None = None

    short_name: str | None = None
    long_description: str | None = None
    attribution: str | None = None
    long_attribution: str | None = None

    def to_entries(self) -> dict[str, str]:
        """
        The rows of the metadata table, by name.
        """
        entries = {
            "name": self.name,
            "type": self.type,
            "version": self.version,
            "description": self.description,
        }

        if self.format is not None:
            entries["format"] = self.format
        if self.bounding_box is not None:
            entries["bounds"] = self.bounding_box.bounds
        if self.center is not None:
            entries["center"] = self.center.center

        for key in ("short_name", "long_description", "attribution", "long_attribution"):
            if (value := getattr(self, key)) is not None:
                entries[key] = value

        return entries


def parse_metadata(path: Path) -> TilesetMetadata:
    log = structlog.get_logger()
    log = log.bind(metadata_path=str(path))

    with open(path, "r") as handle:
        metadata = TilesetMetadata.model_validate_json(handle.read())

    log = log.bind(name=metadata.name, type=metadata.type, version=metadata.version)
    log.info("metadata.parsed")

    return metadata
