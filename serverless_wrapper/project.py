from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from serverless_wrapper.config.loader import load_config
from serverless_wrapper.errors import ConfigError


@dataclass(frozen=True)
class Function:
    name: str
    handler: str
    source_dir: Path
    runtime: str | None = None
    custom: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Project:
    root_path: Path
    name: str = ""
    custom: Mapping[str, Any] = field(default_factory=dict)
    functions: Mapping[str, Function] = field(default_factory=dict)

    def get_function(self, name: str) -> Function:
        try:
            return self.functions[name]
        except KeyError:
            raise ConfigError(f"Unknown function {name!r}", path="functions") from None

    @classmethod
    def from_config(cls, raw: Mapping[str, Any], *, root: Path) -> "Project":
        root = Path(root)

        custom = raw.get("custom") or {}
        if not isinstance(custom, Mapping):
            raise ConfigError("Must be a mapping", path="custom")

        default_runtime = raw.get("runtime")
        functions_raw = raw.get("functions") or {}
        if not isinstance(functions_raw, Mapping):
            raise ConfigError("Must be a mapping of name -> function", path="functions")

        functions: dict[str, Function] = {}
        for name, fraw in functions_raw.items():
            where = f"functions.{name}"
            if not isinstance(fraw, Mapping):
                raise ConfigError("Must be a mapping", path=where)

            handler = fraw.get("handler")
            if not isinstance(handler, str) or not handler.strip():
                raise ConfigError("Must be a non-empty string", path=f"{where}.handler")

            fcustom = fraw.get("custom") or {}
            if not isinstance(fcustom, Mapping):
                raise ConfigError("Must be a mapping", path=f"{where}.custom")

            runtime = fraw.get("runtime", default_runtime)
            functions[str(name)] = Function(
                name=str(name),
                handler=handler.strip(),
                source_dir=root / str(fraw.get("path", ".")),
                runtime=str(runtime) if runtime is not None else None,
                custom=dict(fcustom),
            )

        return cls(
            root_path=root,
            name=str(raw.get("name", root.name)),
            custom=dict(custom),
            functions=functions,
        )

    @classmethod
    def load(cls, config_path: str | Path) -> "Project":
        """Load a project file; relative function paths resolve against its directory."""

        path = Path(config_path).expanduser().resolve()
        return cls.from_config(load_config(path), root=path.parent)
