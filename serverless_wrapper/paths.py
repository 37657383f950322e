"""Handler artifact paths.

Everything here is pure: no filesystem access, and the caller decides which
base directory applies (the function's source directory for local runs, the
distribution directory for packaged runs).
"""

from __future__ import annotations

import os
from pathlib import Path

from serverless_wrapper.errors import ConfigError

SAVED_HANDLER_SUFFIX = "__orig__"
MARKER_EXTENSION = ".json"


def _split_handler(handler: str) -> tuple[str, str]:
    module, sep, symbol = handler.rpartition(".")
    if not sep or not module or not symbol:
        raise ConfigError(f"Handler must look like 'module.function', got {handler!r}", path="handler")
    return module, symbol


def handler_module(handler: str) -> str:
    """`services/handler.run` -> `services/handler`"""

    return _split_handler(handler)[0]


def handler_name(handler: str) -> str:
    """`services/handler.run` -> `run`"""

    return _split_handler(handler)[1]


def live_handler_path(handler: str, base_dir: Path, ext: str) -> Path:
    return Path(base_dir) / f"{handler_module(handler)}{ext}"


def saved_handler_filename(handler: str, ext: str) -> str:
    stem = Path(handler_module(handler)).name
    return f"{stem}{SAVED_HANDLER_SUFFIX}{ext}"


def saved_handler_path(handler: str, base_dir: Path, ext: str) -> Path:
    # Lives next to the live handler so the stub can import it as ./<name>.
    return live_handler_path(handler, base_dir, ext).with_name(saved_handler_filename(handler, ext))


def marker_path(handler: str, base_dir: Path) -> Path:
    stem = Path(handler_module(handler)).name
    return live_handler_path(handler, base_dir, MARKER_EXTENSION).with_name(
        f"{stem}{SAVED_HANDLER_SUFFIX}{MARKER_EXTENSION}"
    )


def relative_wrapper_path(source_dir: Path, project_root: Path, wrapper_path: str) -> str:
    """Relative path from `source_dir` to the wrapper module, always with `/`."""

    target = os.path.join(str(project_root), wrapper_path)
    rel = os.path.relpath(os.path.normpath(target), os.path.normpath(str(source_dir)))
    return rel.replace("\\", "/")
