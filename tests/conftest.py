"""
Shared fixtures: tile directory trees and fresh archives.
"""

from pathlib import Path

import pytest
import structlog

from osm2mbtiles.archive import Archive

FIVE_TILES = ["0/0/0.png", "1/0/0.png", "1/0/1.png", "1/1/0.png", "1/1/1.png"]


def write_tree(root: Path, files: dict[str, bytes]) -> Path:
    root.mkdir(parents=True, exist_ok=True)

    for relative, data in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    return root


def tile_bytes(relative: str) -> bytes:
    # Unique content per source file, so tests can tell tiles apart.
    return b"\x89PNG" + relative.encode()


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def tree(tmp_path):
    def make(files: list[str] | dict[str, bytes], name: str = "tiles") -> Path:
        if not isinstance(files, dict):
            files = {x: tile_bytes(x) for x in files}
        return write_tree(tmp_path / name, files)

    return make


@pytest.fixture
def five_tile_tree(tree):
    return tree(FIVE_TILES)


@pytest.fixture
def archive(tmp_path):
    with Archive.create(tmp_path / "test.mbtiles") as archive:
        yield archive
