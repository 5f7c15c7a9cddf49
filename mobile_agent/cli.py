from __future__ import annotations

import argparse
import datetime as dt
import logging
import os
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from command_kit.errors import ExecutionError


def _env_default(key: str) -> Optional[str]:
    value = os.getenv(key)
    return value if value else None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mobile-agent",
        description="Execute natural-language commands on an Android phone through its UI tree.",
    )
    parser.add_argument("--serial", default=None, help="Android device serial (adb/uiautomator2).")
    parser.add_argument(
        "-i",
        "--instruction",
        default=None,
        help="Command to execute (if omitted, enter interactive mode).",
    )
    parser.add_argument("--dry-run", type=int, default=1, help="1=print actions only, 0=execute on device.")
    parser.add_argument("--max-round-trips", type=int, default=3, help="Max model round trips per command.")
    parser.add_argument("--poll-interval-ms", type=int, default=50, help="Delay between UI tree polls.")
    parser.add_argument(
        "--stability-threshold-ms",
        type=int,
        default=250,
        help="How long the UI tree must stay unchanged to count as stable.",
    )
    parser.add_argument(
        "--stability-timeout-ms",
        type=int,
        default=10_000,
        help="Abort if the UI tree has not stabilised after this long.",
    )
    parser.add_argument("--settle-ms", type=int, default=120, help="Pause after each tap/type on the device.")
    parser.add_argument(
        "--model",
        default=_env_default("MOBILE_AGENT_MODEL") or "openai/gpt-4o-mini",
        help="Planner model name.",
    )
    parser.add_argument(
        "--base-url",
        default=_env_default("OPENROUTER_BASE_URL") or "https://openrouter.ai/api/v1",
        help="OpenAI-compatible base URL.",
    )
    parser.add_argument("--api-key", default=_env_default("OPENROUTER_API_KEY"), help="OpenRouter API key.")
    parser.add_argument("--site-url", default=_env_default("OPENROUTER_SITE_URL"), help="Optional: HTTP-Referer.")
    parser.add_argument("--site-name", default=_env_default("OPENROUTER_SITE_NAME"), help="Optional: X-Title.")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout (seconds).")
    parser.add_argument("--temperature", type=float, default=0.3, help="Model temperature.")
    parser.add_argument("--max-tokens", type=int, default=None, help="Model max_tokens.")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Logging verbosity.",
    )
    parser.add_argument(
        "--save-runs",
        action="store_true",
        help="Save prompts, model outputs and screenshots to runs/<timestamp>/.",
    )
    return parser


def _run_command(agent, command: str, logger: logging.Logger) -> int:
    try:
        summary = agent.run(command)
    except ExecutionError as exc:
        logger.error(f"[FAILED] {type(exc).__name__}: {exc}")
        return 2
    logger.info("[SUMMARY]\n" + summary)
    return 0


def _interactive_loop(agent, *, logger: logging.Logger) -> int:
    print("Interactive mode. Type your command and press Enter. Type 'exit' to quit.")
    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if not line:
            continue
        if line.lower() in {"exit", "quit", ":q"}:
            return 0
        _run_command(agent, line, logger)


def _build_logger(level: str) -> Tuple[logging.Logger, Callable[[str], None]]:
    level_map = {
        "debug": logging.DEBUG,
        "info": logging.INFO,
        "warning": logging.WARNING,
        "error": logging.ERROR,
    }
    logger = logging.getLogger("mobile_agent")
    logger.setLevel(level_map.get(level.lower(), logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.propagate = False

    def _log_fn(msg: str) -> None:
        logger.info(msg)

    return logger, _log_fn


def _create_run_dir(base_dir: str = "runs") -> Path:
    ts = dt.datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    run_dir = Path(base_dir) / ts
    run_dir.mkdir(parents=True, exist_ok=False)
    return run_dir


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger, log_fn = _build_logger(args.log_level)

    if not args.api_key:
        logger.error("Missing OPENROUTER_API_KEY (or pass --api-key).")
        return 2

    from .agent import build_mobile_agent

    run_dir = None
    if args.save_runs:
        try:
            run_dir = _create_run_dir()
            log_fn(f"[RUNS] Saving artifacts to {run_dir}")
        except Exception as exc:
            logger.error(f"Failed to create runs directory: {exc}")
            return 2

    try:
        agent = build_mobile_agent(
            serial=args.serial,
            dry_run=bool(args.dry_run),
            model=args.model,
            api_key=args.api_key,
            base_url=args.base_url,
            site_url=args.site_url,
            site_name=args.site_name,
            timeout=args.timeout,
            temperature=args.temperature,
            max_tokens=args.max_tokens,
            max_round_trips=args.max_round_trips,
            poll_interval_ms=args.poll_interval_ms,
            stability_threshold_ms=args.stability_threshold_ms,
            stability_timeout_ms=args.stability_timeout_ms,
            settle_ms=args.settle_ms,
            run_dir=run_dir,
            log_fn=log_fn,
        )
    except Exception as exc:
        logger.error(str(exc))
        return 2

    if not args.instruction:
        return _interactive_loop(agent, logger=logger)

    return _run_command(agent, args.instruction, logger)
