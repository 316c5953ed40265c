#!/usr/bin/env python3
"""
wasmcert CLI -- Certify a QEMU WebAssembly build output tree.

Usage:
  wasmcert check [--root PATH] [--config FILE] [--json] [--no-bench]
  wasmcert bench [--root PATH] [--config FILE] [--json]

``check`` exits 0 iff every check case passed, 1 otherwise. ``bench`` only
prints metrics and exits 0 unless the build root itself is unreadable.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from domain.errors import BuildRootError, ConfigError
from kernel.console import configure, console

if TYPE_CHECKING:
    from kernel.config import Settings

logger = logging.getLogger("wasmcert")

EXIT_OK = 0
EXIT_FAILED = 1

# ---------------------------------------------------------------------------
# CLI commands
# ---------------------------------------------------------------------------


def cmd_check(args: argparse.Namespace) -> int:
    """Run the full suite, then the benchmarks, and return the exit status."""
    import wiring
    from modules.reporter.core import (
        benchmarks_to_dict,
        report_benchmarks,
        report_suite,
        suite_to_dict,
    )

    settings = _settings(args)
    if not args.json:
        console.info(f"Starting WebAssembly build checks in {settings.build_root}")

    targets, result = wiring.run_suite(settings)
    report = None if args.no_bench else wiring.benchmark(settings, targets)

    if args.json:
        payload: dict[str, Any] = {"suite": suite_to_dict(result)}
        if report is not None:
            payload["benchmarks"] = benchmarks_to_dict(report)
        _emit_json(payload)
    else:
        if report is not None:
            report_benchmarks(report)
        report_suite(result)

    return EXIT_OK if result.passed else EXIT_FAILED


def cmd_bench(args: argparse.Namespace) -> int:
    """Run only the benchmarker; metrics never affect the exit status."""
    import wiring
    from modules.reporter.core import benchmarks_to_dict, report_benchmarks

    settings = _settings(args)
    report = wiring.benchmark(settings)
    if args.json:
        _emit_json({"benchmarks": benchmarks_to_dict(report)})
    else:
        report_benchmarks(report)
    return EXIT_OK


def _settings(args: argparse.Namespace) -> Settings:
    """Load the settings file and apply command-line overrides."""
    import dataclasses

    from kernel.config import load_settings

    settings = load_settings(args.config)
    if args.root is not None:
        settings = dataclasses.replace(settings, build_root=args.root)
    return settings


def _emit_json(payload: dict[str, Any]) -> None:
    console.raw(json.dumps(payload, indent=2) + "\n")


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wasmcert",
        description="wasmcert -- QEMU WebAssembly build output certification",
    )
    sub = parser.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Build output root (default: qemu/output)",
    )
    common.add_argument("--config", type=Path, default=None, help="Settings file (YAML)")
    common.add_argument("--json", action="store_true", help="Emit results as JSON on stdout")
    common.add_argument("--plain", action="store_true", help="Disable Rich formatting")
    common.add_argument("--verbose", action="store_true", help="Enable debug logging")
    common.add_argument("--quiet", action="store_true", help="Only log errors")
    common.add_argument("--log-file", type=Path, default=None, help="Write the log to a file")

    # wasmcert check
    check_p = sub.add_parser("check", parents=[common], help="Run every check against the build")
    check_p.add_argument("--no-bench", action="store_true", help="Skip the benchmarks")

    # wasmcert bench
    sub.add_parser("bench", parents=[common], help="Print size and load metrics only")

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    fmt = "%(asctime)s %(name)s %(levelname)s %(message)s"
    if args.log_file is not None:
        args.log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(filename=str(args.log_file), format=fmt, level=level, force=True)
    else:
        logging.basicConfig(stream=sys.stderr, format=fmt, level=level, force=True)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_FAILED

    # -- Console configuration (terminal output) ----------------------------
    configure(backend="plain" if args.plain or args.json else "auto")

    # -- Logging configuration ------------------------------------------------
    _configure_logging(args)

    try:
        if args.command == "check":
            return cmd_check(args)
        return cmd_bench(args)
    except (BuildRootError, ConfigError) as exc:
        logger.error("%s", exc)
        if args.json:
            _emit_json({"error": str(exc)})
        else:
            console.error(str(exc))
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
