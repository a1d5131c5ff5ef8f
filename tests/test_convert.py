"""
Tests for the osm2mbtiles command-line script
"""

import io
import json
import os
from pathlib import Path

import pytest
from rich.console import Console

from osm2mbtiles.archive import Archive, ArchiveWriteError
from osm2mbtiles.scripts.convert import (
    EXIT_FATAL,
    EXIT_OK,
    EXIT_SKIPPED_FILES,
    main,
)
from osm2mbtiles.settings import settings


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)


def run(console, *args) -> int:
    return main([str(x) for x in args], console=console)


def test_missing_db(console, capsys):
    assert run(console) == EXIT_FATAL
    assert "usage: osm2mbtiles" in capsys.readouterr().out


def test_missing_mapdir(tmp_path, console):
    db = tmp_path / "out.mbtiles"
    db.write_bytes(b"previous")

    assert run(console, "-db", db, "-mapdir", tmp_path / "nothing") == EXIT_FATAL
    # The previous output is left alone when the input is missing.
    assert db.read_bytes() == b"previous"


def test_mapdir_is_file(tmp_path, console):
    (tmp_path / "file").write_text("x")

    assert (
        run(console, "-db", tmp_path / "out.mbtiles", "-mapdir", tmp_path / "file")
        == EXIT_FATAL
    )


def test_archive_creation_failure(tmp_path, console, five_tile_tree):
    db = tmp_path / "missing" / "out.mbtiles"

    assert run(console, "-db", db, "-mapdir", five_tile_tree) == EXIT_FATAL


def test_without_mapdir(tmp_path, console):
    db = tmp_path / "out.mbtiles"
    metadata = tmp_path / "metadata.json"
    metadata.write_text(json.dumps({"name": "Empty", "type": "overlay"}))

    assert run(console, "-db", db, "-metadata", metadata) == EXIT_OK

    with Archive.open(db) as archive:
        assert archive.statistics().count == 0
        assert archive.metadata()["name"] == "Empty"
        assert archive.metadata()["type"] == "overlay"

    assert console.file.getvalue() == ""


def test_invalid_metadata(tmp_path, console):
    metadata = tmp_path / "metadata.json"
    metadata.write_text(json.dumps({"type": "underlay"}))

    assert (
        run(console, "-db", tmp_path / "out.mbtiles", "-metadata", metadata)
        == EXIT_FATAL
    )
    assert not (tmp_path / "out.mbtiles").exists()


def test_missing_metadata_file(tmp_path, console):
    assert (
        run(
            console,
            "-db",
            tmp_path / "out.mbtiles",
            "-metadata",
            tmp_path / "missing.json",
        )
        == EXIT_FATAL
    )


def test_convert(tmp_path, console, five_tile_tree):
    db = tmp_path / "out.mbtiles"

    assert run(console, "-db", db, "-mapdir", five_tile_tree) == EXIT_OK

    with Archive.open(db) as archive:
        statistics = archive.statistics()
        assert (statistics.count, statistics.min_zoom, statistics.max_zoom) == (5, 0, 1)
        assert archive.metadata()["minzoom"] == "0"
        assert archive.metadata()["maxzoom"] == "1"

    output = console.file.getvalue()
    assert "number of tiles:   5" in output
    assert "zoom levels:       0 - 1" in output


def test_convert_twice_is_fresh(tmp_path, console, tree):
    db = tmp_path / "out.mbtiles"

    run(console, "-db", db, "-mapdir", tree(["0/0/0.png", "1/0/0.png"], name="a"))
    run(console, "-db", db, "-mapdir", tree(["3/1/1.png"], name="b"))

    with Archive.open(db) as archive:
        statistics = archive.statistics()
        assert (statistics.count, statistics.min_zoom, statistics.max_zoom) == (1, 3, 3)


def test_convert_empty_directory(tmp_path, console):
    (tmp_path / "empty").mkdir()

    assert run(console, "-db", tmp_path / "out.mbtiles", "-mapdir", tmp_path / "empty") == EXIT_OK

    output = console.file.getvalue()
    assert "number of tiles:   0" in output
    assert "zoom levels:       n/a" in output


def test_derive_metadata_disabled(tmp_path, console, five_tile_tree, monkeypatch):
    monkeypatch.setattr(settings, "derive_metadata", False)
    db = tmp_path / "out.mbtiles"

    assert run(console, "-db", db, "-mapdir", five_tile_tree) == EXIT_OK

    with Archive.open(db) as archive:
        assert archive.metadata() == {}


def test_skipped_files(tmp_path, console, five_tile_tree, monkeypatch):
    read_bytes = Path.read_bytes

    def unreadable(self):
        if self.as_posix().endswith("1/1/1.png"):
            raise PermissionError(13, "Permission denied", str(self))
        return read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", unreadable)
    db = tmp_path / "out.mbtiles"

    assert run(console, "-db", db, "-mapdir", five_tile_tree) == EXIT_SKIPPED_FILES

    with Archive.open(db) as archive:
        assert archive.statistics().count == 4

    assert "number of tiles:   4" in console.file.getvalue()


def test_write_failure_is_fatal(tmp_path, console, five_tile_tree, monkeypatch):
    def broken(self, coordinate, data):
        raise ArchiveWriteError("disk full")

    monkeypatch.setattr(Archive, "insert_tile", broken)

    assert (
        run(console, "-db", tmp_path / "out.mbtiles", "-mapdir", five_tile_tree)
        == EXIT_FATAL
    )
    assert console.file.getvalue() == ""


@pytest.mark.parametrize(
    "args",
    [["-db"], ["-db", "out.mbtiles", "-mapdir"], ["-db", "out.mbtiles", "-unknown"]],
)
def test_usage_errors_are_fatal(console, capsys, args):
    with pytest.raises(SystemExit) as exc_info:
        run(console, *args)

    assert exc_info.value.code == EXIT_FATAL
    assert "usage: osm2mbtiles" in capsys.readouterr().out


def test_unreadable_directory(tmp_path, console, five_tile_tree, monkeypatch):
    scandir = os.scandir

    def unlistable(path="."):
        if Path(path).as_posix().endswith("tiles/1/0"):
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return scandir(path)

    monkeypatch.setattr(os, "scandir", unlistable)
    db = tmp_path / "out.mbtiles"

    assert run(console, "-db", db, "-mapdir", five_tile_tree) == EXIT_SKIPPED_FILES

    with Archive.open(db) as archive:
        assert archive.statistics().count == 3
