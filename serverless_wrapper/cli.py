from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from serverless_wrapper.config.loader import DEFAULT_PROJECT_FILE, load_config
from serverless_wrapper.errors import ConfigError, StaleStateError
from serverless_wrapper.host import HookRegistry
from serverless_wrapper.observability import configure_logging
from serverless_wrapper.plugin import ServerlessWrapperPlugin
from serverless_wrapper.project import Project

logger = logging.getLogger(__name__)

DEPLOY_ACTION = "codeDeployLambda"


def _redact_secrets(obj):  # noqa: ANN001
    """Best-effort redaction for human-facing config dumps."""

    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if isinstance(k, str) and any(p in k.lower() for p in ("api_key", "token", "secret", "password")):
                out[k] = "<redacted>"
            else:
                out[k] = _redact_secrets(v)
        return out
    if isinstance(obj, list):
        return [_redact_secrets(x) for x in obj]
    return obj


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serverless-wrapper",
        description="Wrap function handlers with a user-supplied wrapper around a deploy",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_PROJECT_FILE),
        help="Path to the project YAML file",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    wrap_p = sub.add_parser("wrap", help="Swap the handler for a wrapped stub (pre-deploy)")
    restore_p = sub.add_parser("restore", help="Put the original handler back (post-deploy)")
    for p in (wrap_p, restore_p):
        p.add_argument("function", help="Function name as declared in the project file")
        p.add_argument("--dist", type=Path, default=None, help="Distribution directory for packaged runs")

    sub.add_parser("print-config", help="Load and print the expanded project config")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Console entrypoint referenced by pyproject.toml."""

    parser = _build_parser()
    try:
        ns = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as e:
        code = e.code
        return int(code) if isinstance(code, int) else 1

    configure_logging(level=ns.log_level)

    try:
        if ns.command == "print-config":
            cfg = load_config(ns.config)
            sys.stdout.write(json.dumps(_redact_secrets(cfg), ensure_ascii=False, indent=2))
            sys.stdout.write("\n")
            return 0

        host = HookRegistry(Project.load(ns.config))
        ServerlessWrapperPlugin(host).register_hooks()

        options: dict[str, object] = {"name": ns.function}
        if ns.dist is not None:
            options["pathDist"] = str(ns.dist.resolve())

        event = "pre" if ns.command == "wrap" else "post"
        asyncio.run(host.run_hooks(DEPLOY_ACTION, event, {"options": options}))
        return 0

    except ConfigError as e:
        logger.error("config_error", extra={"error": str(e)})
        sys.stderr.write(f"ConfigError: {e}\n")
        return 2
    except StaleStateError as e:
        logger.error("stale_state", extra={"saved_path": e.saved_path})
        sys.stderr.write(f"{e}\n")
        return 3
    except Exception as e:  # noqa: BLE001
        logger.exception("fatal_error")
        sys.stderr.write(f"Fatal error: {e}\n")
        return 1
