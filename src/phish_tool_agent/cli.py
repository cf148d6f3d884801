"""CLI entrypoint for phish_tool_agent."""

from __future__ import annotations

import argparse
import logging
import sys

from phish_tool_agent.app.run import run_batch, run_once, run_stream
from phish_tool_agent.config.settings import load_config
from phish_tool_agent.core.errors import PhishAgentError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="phish-tool-agent")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--email", help="Analyze one email (.json or .eml).")
    source.add_argument("--batch", help="Analyze a JSON list of emails concurrently.")
    parser.add_argument("--model", help="Override model for this run, e.g. ollama/qwen2.5:7b.")
    parser.add_argument("--profile", help="Config profile from defaults.yaml (openai, ollama).")
    parser.add_argument("--stream", action="store_true", help="Print trace events as JSON lines.")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg, _ = load_config(profile_override=args.profile)
        configure_logging(cfg.log_level)
        if args.batch:
            print(run_batch(args.batch, model=args.model, profile=args.profile, progress=args.stream))
        elif args.stream:
            for line in run_stream(args.email, model=args.model, profile=args.profile):
                print(line)
        else:
            print(run_once(args.email, model=args.model, profile=args.profile))
    except PhishAgentError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0
