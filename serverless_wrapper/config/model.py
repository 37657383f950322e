"""Wrapper configuration and precedence.

`custom.wrapper` may appear on a function and on the project:

    wrapper: false                      # disable wrapping
    wrapper: {path: wrappers/log.py}    # wrap with this module
    wrapper: {enabled: false, ...}      # same as false

The function-level block wins over the project default, and an explicit
disable on the function wins over everything.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from serverless_wrapper.errors import ConfigError


class WrapperState(str, Enum):
    DISABLED = "disabled"
    ENABLED = "enabled"
    UNSET = "unset"


@dataclass(frozen=True, slots=True)
class WrapperConfig:
    state: WrapperState
    path: str | None = None

    @classmethod
    def disabled(cls) -> "WrapperConfig":
        return cls(WrapperState.DISABLED)

    @classmethod
    def enabled(cls, path: str) -> "WrapperConfig":
        return cls(WrapperState.ENABLED, path)

    @classmethod
    def unset(cls) -> "WrapperConfig":
        return cls(WrapperState.UNSET)

    @classmethod
    def parse(cls, custom: Mapping[str, Any] | None, *, where: str = "custom") -> "WrapperConfig":
        """Parse the `wrapper` entry of a `custom` block."""

        if custom is None:
            return cls.unset()
        if not isinstance(custom, Mapping):
            raise ConfigError("Must be a mapping", path=where)

        key_path = f"{where}.wrapper"
        value = custom.get("wrapper")

        if value is None:
            return cls.unset()
        if value is False:
            return cls.disabled()
        if not isinstance(value, Mapping):
            raise ConfigError("Must be false or a mapping with a 'path'", path=key_path)

        enabled = value.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ConfigError("Must be a boolean", path=f"{key_path}.enabled")
        if not enabled:
            return cls.disabled()

        path = value.get("path")
        if path is None or path == "":
            return cls.unset()
        if not isinstance(path, str):
            raise ConfigError("Must be a string", path=f"{key_path}.path")
        return cls.enabled(path)


class DecisionKind(str, Enum):
    WRAP = "wrap"
    DISABLED = "disabled"
    NO_CONFIG = "no_config"


@dataclass(frozen=True, slots=True)
class WrapDecision:
    kind: DecisionKind
    wrapper_path: str | None = None
    origin: str | None = None  # "function" | "project"

    @property
    def should_wrap(self) -> bool:
        return self.kind is DecisionKind.WRAP


def resolve_wrapper(
    function_custom: Mapping[str, Any] | None,
    project_custom: Mapping[str, Any] | None,
    *,
    function_name: str = "function",
) -> WrapDecision:
    func_cfg = WrapperConfig.parse(function_custom, where=f"functions.{function_name}.custom")
    if func_cfg.state is WrapperState.DISABLED:
        return WrapDecision(DecisionKind.DISABLED, origin="function")
    if func_cfg.state is WrapperState.ENABLED:
        return WrapDecision(DecisionKind.WRAP, wrapper_path=func_cfg.path, origin="function")

    proj_cfg = WrapperConfig.parse(project_custom, where="custom")
    if proj_cfg.state is WrapperState.ENABLED:
        return WrapDecision(DecisionKind.WRAP, wrapper_path=proj_cfg.path, origin="project")
    if proj_cfg.state is WrapperState.DISABLED:
        return WrapDecision(DecisionKind.DISABLED, origin="project")

    return WrapDecision(DecisionKind.NO_CONFIG)
