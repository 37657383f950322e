"""Host framework boundary.

`Host` is everything the plugin consumes from the deployment framework.
`HookRegistry` is an in-process implementation used by the CLI and tests:
it keeps pre/post hooks per action and runs them around an action body.
"""

from __future__ import annotations

import sys
from typing import Any, Awaitable, Callable, Protocol, TextIO

from serverless_wrapper.observability import bind_context, clear_context, get_logger
from serverless_wrapper.project import Project

Event = dict[str, Any]
HookCallback = Callable[[Event], Awaitable[Event]]
ActionBody = Callable[[Event], Awaitable[Event]]

HOOK_EVENTS = ("pre", "post")

logger = get_logger(__name__)


class Host(Protocol):
    version: str

    def add_hook(self, callback: HookCallback, *, action: str, event: str) -> None: ...

    def get_project(self) -> Project: ...

    def log(self, message: str) -> None: ...


class HookRegistry:
    def __init__(
        self,
        project: Project,
        *,
        version: str = "0.5.0",
        stream: TextIO | None = None,
    ) -> None:
        self.version = version
        self._project = project
        self._stream = stream
        self._hooks: dict[tuple[str, str], list[HookCallback]] = {}

    def add_hook(self, callback: HookCallback, *, action: str, event: str) -> None:
        if event not in HOOK_EVENTS:
            raise ValueError(f"event must be one of {HOOK_EVENTS}, got {event!r}")
        self._hooks.setdefault((action, event), []).append(callback)

    def hooks(self, action: str, event: str) -> list[HookCallback]:
        return list(self._hooks.get((action, event), []))

    def get_project(self) -> Project:
        return self._project

    def log(self, message: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(f"Serverless: {message}\n")
        stream.flush()

    async def run_hooks(self, action: str, event: str, evt: Event) -> Event:
        """Run one side of an action. Each hook receives the previous hook's result."""

        function = (evt.get("options") or {}).get("name")
        bind_context(action=action, event=event, function=function)
        try:
            for callback in self.hooks(action, event):
                evt = await callback(evt)
            return evt
        finally:
            clear_context()

    async def run_action(self, action: str, evt: Event, body: ActionBody | None = None) -> Event:
        """pre hooks -> body -> post hooks. A failure stops the sequence."""

        evt = await self.run_hooks(action, "pre", evt)
        if body is not None:
            evt = await body(evt)
        logger.debug("action_body_done", extra={"action": action})
        return await self.run_hooks(action, "post", evt)
