from __future__ import annotations

import pytest

from serverless_wrapper.render import JinjaRenderer, RenderError
from serverless_wrapper.runtimes import NODEJS, PYTHON, family_for

VARS = {
    "orig_handler_path": "./handler__orig__.py",
    "wrapper_path": "../../wrappers/logging.py",
    "handler_name": "run",
}


def test_python_stub_loads_original_and_wrapper() -> None:
    code = JinjaRenderer()(VARS, family=PYTHON)

    assert '_load("_original_handler", "./handler__orig__.py")' in code
    assert '_load("_handler_wrapper", "../../wrappers/logging.py")' in code
    assert code.rstrip().endswith("run = _wrapper.wrapper(_original.run)")
    compile(code, "handler.py", "exec")


def test_node_stub_requires_original_and_wrapper() -> None:
    code = JinjaRenderer()(
        {"orig_handler_path": "./handler__orig__.js", "wrapper_path": "logging.js", "handler_name": "run"},
        family=NODEJS,
    )

    assert "require('./logging.js')" in code
    assert "require('./handler__orig__.js')" in code
    assert "module.exports.run = wrapper(original.run);" in code


def test_missing_variable_is_render_error() -> None:
    with pytest.raises(RenderError):
        JinjaRenderer()({"orig_handler_path": "./h.py", "wrapper_path": "w.py"}, family=PYTHON)


@pytest.mark.parametrize(
    ("runtime", "family"),
    [("python3.12", PYTHON), ("Python3.9", PYTHON), ("nodejs20.x", NODEJS), ("java21", None), (None, None)],
)
def test_family_for_runtime(runtime, family) -> None:
    assert family_for(runtime) is family
