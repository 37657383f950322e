"""Handler substitution lifecycle.

Per function and deploy action:

    Unwrapped --pre--> WrapInProgress --(deploy)--> Wrapped --post--> CleanedUp

Pre-deploy moves the live handler aside to `<stem>__orig__<ext>`, renders a
stub that imports it together with the user's wrapper, and writes the stub at
the live-handler path. For local runs a small JSON marker next to the saved
handler records what was decided, so post-deploy cleans up exactly what
pre-deploy did even if the configuration changed in between. Packaged runs
keep that record on the controller instead; the dist directory ships as-is.

Failures are never rolled back. A saved handler or marker left behind by a
crashed run blocks the next local wrap until it is cleared by hand.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from serverless_wrapper import fs, paths
from serverless_wrapper.config.model import WrapDecision, resolve_wrapper
from serverless_wrapper.errors import ConfigError, FilesystemError, StaleStateError, VersionMismatchWarning
from serverless_wrapper.host import Event, Host
from serverless_wrapper.observability import get_logger
from serverless_wrapper.project import Function, Project
from serverless_wrapper.render import JinjaRenderer, Renderer
from serverless_wrapper.runtimes import RuntimeFamily, family_by_name, family_for

MIN_HOST_VERSION = (0, 5)

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RunContext:
    function_name: str
    dist_dir: Path | None = None

    @property
    def is_local(self) -> bool:
        return self.dist_dir is None

    @classmethod
    def from_event(cls, evt: Mapping[str, Any]) -> "RunContext":
        options = evt.get("options") or {}
        name = options.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("Event is missing options.name")
        dist = options.get("pathDist")
        return cls(function_name=name, dist_dir=Path(dist) if dist else None)


@dataclass(frozen=True, slots=True)
class HandlerArtifacts:
    live: Path
    saved: Path
    saved_filename: str
    marker: Path


def resolve_artifacts(func: Function, ctx: RunContext, family: RuntimeFamily) -> HandlerArtifacts:
    base_dir = func.source_dir if ctx.is_local else ctx.dist_dir
    assert base_dir is not None
    return HandlerArtifacts(
        live=paths.live_handler_path(func.handler, base_dir, family.extension),
        saved=paths.saved_handler_path(func.handler, base_dir, family.extension),
        saved_filename=paths.saved_handler_filename(func.handler, family.extension),
        marker=paths.marker_path(func.handler, base_dir),
    )


def parse_version(version: str) -> tuple[int, ...]:
    parts: list[int] = []
    for piece in version.split("."):
        digits = "".join(ch for ch in piece if ch.isdigit())
        if not digits:
            break
        parts.append(int(digits))
    return tuple(parts)


def check_host_version(version: str | None) -> VersionMismatchWarning | None:
    if not version:
        return None
    if parse_version(version)[:2] < MIN_HOST_VERSION:
        return VersionMismatchWarning(
            f"This version of the wrapper plugin requires host framework >= "
            f"{'.'.join(map(str, MIN_HOST_VERSION))}.x, found {version}"
        )
    return None


class LifecycleController:
    def __init__(self, host: Host, *, renderer: Renderer | None = None) -> None:
        self._host = host
        self._renderer: Renderer = renderer or JinjaRenderer()
        # Packaged runs keep their decision here; pathDist is shipped as-is.
        self._packaged: dict[tuple[str, str], RuntimeFamily] = {}

    async def pre_action(self, evt: Event) -> Event:
        """Wrap the function's handler before the action runs."""

        warning = check_host_version(getattr(self._host, "version", None))
        if warning is not None:
            self._host.log(f"WARNING: {warning}")
            logger.warning("host_version_mismatch", extra={"version": self._host.version})

        ctx = RunContext.from_event(evt)
        project = self._host.get_project()
        func = project.get_function(ctx.function_name)

        decision = resolve_wrapper(func.custom, project.custom, function_name=func.name)
        if not decision.should_wrap:
            logger.debug("wrap_skipped", extra={"reason": decision.kind.value})
            return evt

        family = family_for(func.runtime)
        if family is None:
            logger.info("wrap_skipped", extra={"reason": "unsupported_runtime", "runtime": func.runtime})
            return evt

        await self._wrap_handler(project, func, ctx, family, decision)
        return evt

    async def post_action(self, evt: Event) -> Event:
        """Undo whatever `pre_action` did for this function."""

        ctx = RunContext.from_event(evt)
        func = self._host.get_project().get_function(ctx.function_name)

        if ctx.is_local:
            await self._restore_local(func, ctx)
        else:
            await self._cleanup_packaged(func, ctx)
        return evt

    async def _restore_local(self, func: Function, ctx: RunContext) -> None:
        try:
            marker_file = paths.marker_path(func.handler, func.source_dir)
        except ConfigError:
            # pre_action never wraps handlers it cannot parse (go, provided.*).
            logger.debug("cleanup_skipped", extra={"reason": "unparsed_handler"})
            return

        marker = await fs.read_json(marker_file)
        if marker is None:
            logger.debug("cleanup_skipped", extra={"reason": "not_wrapped"})
            return

        family = family_by_name(str(marker.get("runtime")))
        if family is None:
            raise FilesystemError(f"Unknown runtime {marker.get('runtime')!r} in wrap marker", path=str(marker_file))

        artifacts = resolve_artifacts(func, ctx, family)
        if not await fs.path_exists(artifacts.saved):
            # The handler was restored by hand after a crash; only the marker is left.
            self._host.log(f"WARNING: removing stale wrap marker {artifacts.marker} (no saved handler found)")
            logger.warning("stale_marker_removed", extra={"marker": str(artifacts.marker)})
            await fs.remove(artifacts.marker)
            return

        await fs.move(artifacts.saved, artifacts.live, overwrite=True)
        await fs.remove(artifacts.marker)
        logger.info("handler_restored", extra={"path": str(artifacts.live)})

    async def _cleanup_packaged(self, func: Function, ctx: RunContext) -> None:
        family = self._packaged.pop((func.name, str(ctx.dist_dir)), None)
        if family is None:
            logger.debug("cleanup_skipped", extra={"reason": "not_wrapped"})
            return

        artifacts = resolve_artifacts(func, ctx, family)
        await fs.remove(artifacts.saved)
        logger.info("saved_handler_removed", extra={"path": str(artifacts.saved)})

    async def _wrap_handler(
        self,
        project: Project,
        func: Function,
        ctx: RunContext,
        family: RuntimeFamily,
        decision: WrapDecision,
    ) -> None:
        assert decision.wrapper_path is not None
        artifacts = resolve_artifacts(func, ctx, family)

        if ctx.is_local:
            stale = [p for p in (artifacts.saved, artifacts.marker) if await fs.path_exists(p)]
            if stale:
                name = artifacts.saved_filename
                raise StaleStateError(
                    "Cannot wrap handler: leftover files from an earlier run found: "
                    f"{', '.join(str(p) for p in stale)}\n"
                    "A previous run probably crashed and left the handler swapped out.\n"
                    f"If {name} exists, replace the handler file with its contents and delete it. "
                    f"Then delete {artifacts.marker.name}.",
                    saved_path=str(stale[0]),
                )

        await fs.move(artifacts.live, artifacts.saved, overwrite=True)

        # Relative to the handler's directory in the source tree; dist mirrors it.
        handler_dir = paths.live_handler_path(func.handler, func.source_dir, family.extension).parent
        variables = {
            "orig_handler_path": f"./{artifacts.saved_filename}",
            "wrapper_path": paths.relative_wrapper_path(handler_dir, project.root_path, decision.wrapper_path),
            "handler_name": paths.handler_name(func.handler),
        }
        code = self._renderer(variables, family=family)
        if inspect.isawaitable(code):
            code = await code

        await fs.output_file(artifacts.live, code)
        if ctx.is_local:
            await fs.write_json(
                artifacts.marker,
                {
                    "function": func.name,
                    "wrapper_path": decision.wrapper_path,
                    "origin": decision.origin,
                    "runtime": family.name,
                },
            )
        else:
            self._packaged[(func.name, str(ctx.dist_dir))] = family

        self._host.log(f"Wrapping {func.name} with {decision.wrapper_path}")
        logger.info(
            "handler_wrapped",
            extra={"handler": str(artifacts.live), "wrapper": variables["wrapper_path"]},
        )
