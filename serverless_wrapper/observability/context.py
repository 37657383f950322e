from __future__ import annotations

from contextvars import ContextVar


_action: ContextVar[str | None] = ContextVar("action", default=None)
_event: ContextVar[str | None] = ContextVar("event", default=None)
_function: ContextVar[str | None] = ContextVar("function", default=None)


def bind_context(*, action: str, event: str, function: str | None = None) -> None:
    _action.set(action)
    _event.set(event)
    _function.set(function)


def clear_context() -> None:
    _action.set(None)
    _event.set(None)
    _function.set(None)


def snapshot() -> dict[str, object]:
    """Return the current hook context for logging."""

    out: dict[str, object] = {}
    if (v := _action.get()) is not None:
        out["action"] = v
    if (v := _event.get()) is not None:
        out["event"] = v
    if (v := _function.get()) is not None:
        out["function"] = v
    return out
