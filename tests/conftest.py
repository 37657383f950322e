from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Any

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


HANDLER_SOURCE = "def run(event, context):\n    return {'ok': True}\n"


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """A project root with one python function under services/foo."""

    (tmp_path / "services" / "foo").mkdir(parents=True)
    (tmp_path / "services" / "foo" / "handler.py").write_text(HANDLER_SOURCE, encoding="utf-8")
    (tmp_path / "wrappers").mkdir()
    (tmp_path / "wrappers" / "logging.py").write_text(
        "def wrapper(fn):\n    return fn\n", encoding="utf-8"
    )
    return tmp_path


@pytest.fixture()
def make_host(project_dir: Path):
    from serverless_wrapper.host import HookRegistry
    from serverless_wrapper.plugin import ServerlessWrapperPlugin
    from serverless_wrapper.project import Project

    def _make(
        *,
        function_custom: dict[str, Any] | None = None,
        project_custom: dict[str, Any] | None = None,
        runtime: str = "python3.12",
        version: str = "0.5.6",
        renderer=None,
    ) -> HookRegistry:
        raw = {
            "name": "demo",
            "custom": project_custom or {},
            "functions": {
                "foo": {
                    "path": "services/foo",
                    "handler": "handler.run",
                    "runtime": runtime,
                    "custom": function_custom or {},
                }
            },
        }
        host = HookRegistry(Project.from_config(raw, root=project_dir), version=version, stream=io.StringIO())
        ServerlessWrapperPlugin(host, renderer=renderer).register_hooks()
        return host

    return _make
