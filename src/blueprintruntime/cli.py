from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from .core.config import DEFAULT_MAX_LOOP_ITERATIONS, DEFAULT_MAX_STEPS, EngineConfig
from .engine.interpreter import ENTRY_NOT_FOUND, run_graph
from .graph.models import GraphError, load_graph_json
from .logging import configure_logging, get_logger

logger = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blueprintruntime", add_help=True)
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a blueprint JSON document and print its trace.")
    run.add_argument("path", help="Path to the blueprint JSON file ('-' reads stdin).")
    run.add_argument("--seed", type=int, default=None, help="Seed for RandomInteger/RandomFloat nodes.")
    run.add_argument(
        "--max-steps",
        type=int,
        default=DEFAULT_MAX_STEPS,
        help="Maximum exec steps per run (infinite-loop guard).",
    )
    run.add_argument(
        "--max-loop-iterations",
        type=int,
        default=DEFAULT_MAX_LOOP_ITERATIONS,
        help="Maximum iterations per ForLoop/WhileLoop instance.",
    )
    run.add_argument("--log-level", default="WARNING", help="Diagnostics log level (stderr).")
    run.add_argument("--json-logs", action="store_true", help="Emit diagnostics as JSON lines.")
    return parser


def _read_document(path: str, stdin: TextIO) -> object:
    if path == "-":
        return json.loads(stdin.read())
    return json.loads(Path(path).read_text(encoding="utf-8"))


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    stdout: Optional[TextIO] = None,
    stdin: Optional[TextIO] = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    out = stdout or sys.stdout

    configure_logging(json_output=bool(args.json_logs), log_level=str(args.log_level))

    try:
        config = EngineConfig(
            max_steps=args.max_steps,
            max_loop_iterations=args.max_loop_iterations,
            seed=args.seed,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        graph = load_graph_json(_read_document(args.path, stdin or sys.stdin))
    except (OSError, json.JSONDecodeError, GraphError) as e:
        logger.error("failed to load blueprint", path=args.path, error=str(e))
        print(f"Error: could not load blueprint '{args.path}': {e}", file=sys.stderr)
        return 1

    lines = run_graph(graph, config=config)
    for line in lines:
        print(line, file=out)
    if lines == [ENTRY_NOT_FOUND]:
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
