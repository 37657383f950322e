from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from serverless_wrapper import fs
from serverless_wrapper.errors import FilesystemError


def test_move_overwrites_when_asked(tmp_path: Path) -> None:
    src = tmp_path / "a.py"
    dst = tmp_path / "b.py"
    src.write_text("new", encoding="utf-8")
    dst.write_text("old", encoding="utf-8")

    asyncio.run(fs.move(src, dst, overwrite=True))

    assert not src.exists()
    assert dst.read_text(encoding="utf-8") == "new"


def test_move_refuses_existing_destination(tmp_path: Path) -> None:
    src = tmp_path / "a.py"
    dst = tmp_path / "b.py"
    src.write_text("new", encoding="utf-8")
    dst.write_text("old", encoding="utf-8")

    with pytest.raises(FilesystemError):
        asyncio.run(fs.move(src, dst))
    assert dst.read_text(encoding="utf-8") == "old"


def test_move_missing_source(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError) as ei:
        asyncio.run(fs.move(tmp_path / "missing.py", tmp_path / "b.py"))
    assert isinstance(ei.value.__cause__, FileNotFoundError)


def test_output_file_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "dist" / "lib" / "handler.py"
    asyncio.run(fs.output_file(target, "x = 1\n"))
    assert target.read_text(encoding="utf-8") == "x = 1\n"


def test_remove_missing_file_is_ok(tmp_path: Path) -> None:
    asyncio.run(fs.remove(tmp_path / "gone.py"))


def test_read_json_absent_and_corrupt(tmp_path: Path) -> None:
    assert asyncio.run(fs.read_json(tmp_path / "none.json")) is None

    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(FilesystemError):
        asyncio.run(fs.read_json(bad))


def test_json_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "marker.json"
    asyncio.run(fs.write_json(path, {"runtime": "python"}))
    assert asyncio.run(fs.read_json(path)) == {"runtime": "python"}
    assert asyncio.run(fs.path_exists(path)) is True
