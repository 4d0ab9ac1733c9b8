"""Command line front end: enumerate steady states and summarise run logs.

Exit codes of ``run``:

* 0 - success
* 1 - invalid command-line options
* 2 - the model file could not be read or failed validation
* 3 - an error occurred while computing the steady states
* 4 - infeasible model: a bound empties a species' domain or tries to widen it
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, NoReturn, Tuple

from constraints import TRACE_LEVELS, InfeasibleModelError, SteadySpaceError
from network import ModelError, ModelValidationError
from network.loader import PROFILE_NAMES
from orchestrator import log as event_log
from orchestrator import resolve_settings, run_steady_states
from tools.reports import run_report

EXIT_OK = 0
EXIT_OPTIONS = 1
EXIT_MODEL = 2
EXIT_COMPUTATION = 3
EXIT_INFEASIBLE = 4

_LOGGER = logging.getLogger("regnet.steady")


class _Parser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with ``EXIT_OPTIONS``."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_OPTIONS, f"{self.prog}: error: {message}\n")


def _parse_bound(text: str) -> Tuple[str, int]:
    name, sep, raw = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"bound must look like NAME=CEILING, got {text!r}")
    try:
        ceiling = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"bound ceiling must be an integer, got {raw!r}") from None
    return name, ceiling


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def cmd_run(args: argparse.Namespace) -> int:
    bounds: Dict[str, int] = {}
    for name, ceiling in args.bound or []:
        if name in bounds:
            _LOGGER.error("An exception occurred while parsing input options: bound for %s given twice", name)
            return EXIT_OPTIONS
        bounds[name] = ceiling

    cli = {
        "output_dir": args.output_dir,
        "trace_level": args.trace_level,
        "profile": args.profile,
        "events_enabled": True if args.log_dir else None,
        "events_dir": args.log_dir,
    }
    try:
        settings = resolve_settings(cli=cli)
    except (RuntimeError, ValueError) as exc:
        # Missing REGNET_CONFIG file or malformed TOML.
        _LOGGER.error("An exception occurred while loading the configuration: %s", exc)
        return EXIT_OPTIONS

    try:
        result = run_steady_states(args.model, bounds=bounds, steady=args.steady, settings=settings)
    except ModelValidationError as exc:
        _LOGGER.error('The model file "%s" failed validation: %s', args.model, exc)
        for issue in exc.report.errors + exc.report.warnings:
            _LOGGER.error("  %s", issue.describe())
        return EXIT_MODEL
    except ModelError as exc:
        _LOGGER.error('An exception occurred while reading the model file "%s": %s', args.model, exc)
        return EXIT_MODEL
    except InfeasibleModelError as exc:
        _LOGGER.error("The model is infeasible under the given bounds: %s", exc)
        return EXIT_INFEASIBLE
    except (SteadySpaceError, OSError) as exc:
        _LOGGER.error("An exception occurred while computing the steady states: %s", exc)
        return EXIT_COMPUTATION

    print(json.dumps(result, indent=2, sort_keys=True))
    return EXIT_OK


def cmd_report(args: argparse.Namespace) -> int:
    base_dir = Path(args.path)
    files = event_log.find_logs(base_dir)
    if not files:
        _LOGGER.error("No JSONL logs found under %s", base_dir)
        return EXIT_OPTIONS
    summary = run_report.aggregate(files, top=args.top)
    print(json.dumps(summary, indent=2, sort_keys=True))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="regnet-steady", description="Steady states of qualitative regulatory networks")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    sub = parser.add_subparsers(dest="command", required=True, parser_class=_Parser)

    run = sub.add_parser("run", help="Load a model and optionally enumerate its steady states")
    run.add_argument("model", help="Path to the JSON model file")
    run.add_argument(
        "--steady",
        action="store_true",
        help="Enumerate steady states into <model>_stable.csv (otherwise only validate the model)",
    )
    run.add_argument(
        "--bound",
        action="append",
        type=_parse_bound,
        metavar="NAME=CEILING",
        help="Tighten a species to values <= CEILING; may be repeated",
    )
    run.add_argument("--output-dir", default=None, help="Directory for the CSV file (default: next to the model)")
    run.add_argument("--profile", choices=PROFILE_NAMES, default=None, help="Validation profile")
    run.add_argument("--trace-level", choices=TRACE_LEVELS, default=None, help="Search trace detail in the summary")
    run.add_argument("--log-dir", default=None, help="Append a JSONL run event under this directory")
    run.set_defaults(func=cmd_run)

    report = sub.add_parser("report", help="Aggregate JSONL run events")
    report.add_argument("path", help="Directory containing JSONL logs")
    report.add_argument("--top", type=int, default=5)
    report.set_defaults(func=cmd_report)

    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
