"""Async filesystem primitives used by the lifecycle.

Blocking calls run in a worker thread so a slow disk only suspends the action
that issued them. Every `OSError` surfaces as `FilesystemError`.
"""

from __future__ import annotations

import asyncio
import errno
import json
import os
import shutil
from pathlib import Path
from typing import Any

from serverless_wrapper.errors import FilesystemError


async def path_exists(path: Path) -> bool:
    return await asyncio.to_thread(os.path.exists, path)


def _move(src: Path, dst: Path, overwrite: bool) -> None:
    if not overwrite and dst.exists():
        raise FileExistsError(f"Destination exists: {dst}")
    dst.parent.mkdir(parents=True, exist_ok=True)
    # os.replace is atomic on one filesystem; shutil.move covers cross-device.
    try:
        os.replace(src, dst)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise
        shutil.move(str(src), str(dst))


async def move(src: Path, dst: Path, *, overwrite: bool = False) -> None:
    try:
        await asyncio.to_thread(_move, Path(src), Path(dst), overwrite)
    except OSError as exc:
        raise FilesystemError(f"Failed to move {src} -> {dst}: {exc}") from exc


async def remove(path: Path) -> None:
    """Delete a file; a missing file is not an error."""

    try:
        await asyncio.to_thread(Path(path).unlink, missing_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Failed to delete file: {exc}", path=str(path)) from exc


def _output_file(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


async def output_file(path: Path, text: str) -> None:
    """Write `text` to `path`, creating parent directories."""

    try:
        await asyncio.to_thread(_output_file, Path(path), text)
    except OSError as exc:
        raise FilesystemError(f"Failed to write file: {exc}", path=str(path)) from exc


async def read_json(path: Path) -> dict[str, Any] | None:
    """Return the JSON object stored at `path`, or None if the file is absent."""

    def _read() -> str | None:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    try:
        text = await asyncio.to_thread(_read)
    except OSError as exc:
        raise FilesystemError(f"Failed to read file: {exc}", path=str(path)) from exc
    if text is None:
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FilesystemError(f"Corrupt JSON ({exc})", path=str(path)) from exc
    if not isinstance(data, dict):
        raise FilesystemError("Expected a JSON object", path=str(path))
    return data


async def write_json(path: Path, data: dict[str, Any]) -> None:
    await output_file(path, json.dumps(data, ensure_ascii=False, indent=2) + "\n")
