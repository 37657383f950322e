"""Configuration loading and wrapper precedence.

- YAML project file (`serverless-wrapper.yml` by default)
- Strict ${ENV_VAR} expansion (missing/empty env vars are errors)
"""

from __future__ import annotations

from serverless_wrapper.config.loader import DEFAULT_PROJECT_FILE, load_config
from serverless_wrapper.config.model import (
    DecisionKind,
    WrapDecision,
    WrapperConfig,
    WrapperState,
    resolve_wrapper,
)
from serverless_wrapper.errors import ConfigError

__all__ = [
    "ConfigError",
    "DEFAULT_PROJECT_FILE",
    "DecisionKind",
    "WrapDecision",
    "WrapperConfig",
    "WrapperState",
    "load_config",
    "resolve_wrapper",
]
