from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from serverless_wrapper.errors import ConfigError

DEFAULT_PROJECT_FILE = "serverless-wrapper.yml"

_ENV_PLACEHOLDER_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True, slots=True)
class _UnresolvedEnvRef:
    """Tracks an unresolved ${ENV_VAR} reference for better error messages."""

    var_name: str
    key_path: str
    reason: str  # "missing" | "empty"


def _load_yaml(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    return yaml.safe_load(text)


def _expand_env_in_obj(obj: Any, *, key_path: str, unresolved: list[_UnresolvedEnvRef]) -> Any:
    if isinstance(obj, str):
        def repl(match: re.Match[str]) -> str:
            name = match.group(1)
            value = os.getenv(name)
            if value is None or value == "":
                unresolved.append(
                    _UnresolvedEnvRef(
                        var_name=name,
                        key_path=key_path,
                        reason="missing" if value is None else "empty",
                    )
                )
                return match.group(0)
            return value

        return _ENV_PLACEHOLDER_RE.sub(repl, obj)

    if isinstance(obj, Mapping):
        out: dict[str, Any] = {}
        for k, v in obj.items():
            child_path = f"{key_path}.{k}" if key_path else str(k)
            out[str(k)] = _expand_env_in_obj(v, key_path=child_path, unresolved=unresolved)
        return out

    if isinstance(obj, list):
        return [
            _expand_env_in_obj(v, key_path=f"{key_path}[{i}]" if key_path else f"[{i}]", unresolved=unresolved)
            for i, v in enumerate(obj)
        ]

    return obj


def load_config(config_path: str | Path, *, load_dotenv_file: bool = True) -> dict[str, Any]:
    """Load a YAML project file and expand `${ENV_VAR}` placeholders.

    Args:
        config_path: Path to the project file.
        load_dotenv_file: Whether to load `.env` next to the project file first.
            Variables already set in the environment are never overridden.

    Raises:
        ConfigError: If the file is missing, invalid, or references missing env vars.
    """

    path = Path(config_path).expanduser().resolve()
    if not path.exists():
        raise ConfigError("Config file not found", path=str(path))

    if load_dotenv_file:
        env_path = path.parent / ".env"
        if env_path.exists():
            load_dotenv(env_path, override=False)

    try:
        raw = _load_yaml(path)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to parse YAML config: {exc}", path=str(path)) from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigError("Top-level YAML must be a mapping/dict", path=str(path))

    unresolved: list[_UnresolvedEnvRef] = []
    expanded = _expand_env_in_obj(raw, key_path="", unresolved=unresolved)

    if unresolved:
        lines: list[str] = ["Unresolved environment variables in config:"]
        for ref in unresolved:
            lines.append(f"- {ref.var_name} ({ref.reason}) at {ref.key_path or '<root>'}")
        raise ConfigError("\n".join(lines), path=str(path))

    return expanded
