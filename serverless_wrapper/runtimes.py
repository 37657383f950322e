from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RuntimeFamily:
    """How handlers of one runtime family are laid out and wrapped."""

    name: str
    extension: str
    template: str


PYTHON = RuntimeFamily(name="python", extension=".py", template="wrapped_handler.py.j2")
NODEJS = RuntimeFamily(name="nodejs", extension=".js", template="wrapped_handler.js.j2")

_FAMILIES: dict[str, RuntimeFamily] = {f.name: f for f in (PYTHON, NODEJS)}


def family_for(runtime: str | None) -> RuntimeFamily | None:
    """Map a runtime identifier (`python3.12`, `nodejs20.x`) to its family.

    Returns None for runtimes whose handlers cannot be wrapped.
    """

    if not runtime:
        return None
    ident = runtime.strip().lower()
    for prefix, family in _FAMILIES.items():
        if ident.startswith(prefix):
            return family
    return None


def family_by_name(name: str) -> RuntimeFamily | None:
    return _FAMILIES.get(name)
