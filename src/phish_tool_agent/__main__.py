"""Module entrypoint: ``python -m phish_tool_agent``."""

from __future__ import annotations

from phish_tool_agent.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
