from __future__ import annotations

import pytest

from serverless_wrapper.config.model import (
    DecisionKind,
    WrapperConfig,
    WrapperState,
    resolve_wrapper,
)
from serverless_wrapper.errors import ConfigError


def test_parse_false_is_disabled() -> None:
    assert WrapperConfig.parse({"wrapper": False}).state is WrapperState.DISABLED


def test_parse_enabled_flag_false_is_disabled() -> None:
    cfg = WrapperConfig.parse({"wrapper": {"enabled": False, "path": "w.py"}})
    assert cfg.state is WrapperState.DISABLED


def test_parse_path_is_enabled() -> None:
    cfg = WrapperConfig.parse({"wrapper": {"path": "wrappers/logging.py"}})
    assert cfg == WrapperConfig.enabled("wrappers/logging.py")


@pytest.mark.parametrize("custom", [None, {}, {"wrapper": None}, {"wrapper": {}}, {"wrapper": {"path": ""}}])
def test_parse_unset(custom) -> None:
    assert WrapperConfig.parse(custom).state is WrapperState.UNSET


@pytest.mark.parametrize(
    "custom",
    [
        {"wrapper": True},
        {"wrapper": "wrappers/logging.py"},
        {"wrapper": {"path": 3}},
        {"wrapper": {"enabled": "no", "path": "w.py"}},
    ],
)
def test_parse_invalid_shapes(custom) -> None:
    with pytest.raises(ConfigError) as ei:
        WrapperConfig.parse(custom, where="functions.foo.custom")
    assert "functions.foo.custom.wrapper" in str(ei.value)


def test_function_path_wins_over_project_path() -> None:
    d = resolve_wrapper({"wrapper": {"path": "fn.py"}}, {"wrapper": {"path": "proj.py"}})
    assert d.kind is DecisionKind.WRAP
    assert d.wrapper_path == "fn.py"
    assert d.origin == "function"


def test_function_disable_wins_over_project_path() -> None:
    d = resolve_wrapper({"wrapper": False}, {"wrapper": {"path": "proj.py"}})
    assert d.kind is DecisionKind.DISABLED
    assert d.should_wrap is False


def test_project_default_applies_when_function_unset() -> None:
    d = resolve_wrapper({}, {"wrapper": {"path": "proj.py"}})
    assert d.kind is DecisionKind.WRAP
    assert d.wrapper_path == "proj.py"
    assert d.origin == "project"


def test_project_disable_without_function_override() -> None:
    assert resolve_wrapper(None, {"wrapper": False}).kind is DecisionKind.DISABLED
    assert resolve_wrapper({"wrapper": {"path": "fn.py"}}, {"wrapper": False}).wrapper_path == "fn.py"


def test_no_config_anywhere() -> None:
    assert resolve_wrapper(None, None).kind is DecisionKind.NO_CONFIG
