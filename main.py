from __future__ import annotations

from serverless_wrapper.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
