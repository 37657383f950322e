from __future__ import annotations

from serverless_wrapper.host import Host
from serverless_wrapper.lifecycle import LifecycleController
from serverless_wrapper.render import Renderer

# Host actions whose artifacts are built from the handler file.
WRAPPED_ACTIONS = ("codeDeployLambda", "functionRun")


class ServerlessWrapperPlugin:
    """Registers the wrap/cleanup transitions on the host's action hooks."""

    def __init__(self, host: Host, *, renderer: Renderer | None = None) -> None:
        self.host = host
        self.controller = LifecycleController(host, renderer=renderer)

    @staticmethod
    def get_name() -> str:
        return "com.serverless.ServerlessWrapper"

    def register_hooks(self) -> None:
        for action in WRAPPED_ACTIONS:
            self.host.add_hook(self.controller.pre_action, action=action, event="pre")
            self.host.add_hook(self.controller.post_action, action=action, event="post")
