"""Reporter module -- render suite and benchmark results.

Results arrive as explicit values from the aggregator and the benchmarker;
the reporter only formats them. Output goes through ``kernel.console`` for
humans, or through the ``*_to_dict`` helpers for ``--json``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from kernel.config import MIB
from kernel.console import console

if TYPE_CHECKING:
    from domain.models import BenchmarkReport, BenchmarkSample, SuiteResult


def _status(passed: bool) -> str:
    return "PASS" if passed else "FAIL"


def format_duration(duration_ms: float) -> str:
    """Render a duration as whole milliseconds, e.g. ``12ms``."""
    return f"{duration_ms:.0f}ms"


def report_suite(result: SuiteResult) -> None:
    """Print the results table, advisories, totals and the final verdict."""
    rows = [
        [case.name, _status(case.passed), format_duration(case.duration_ms), case.error or ""]
        for case in result.cases
    ]
    console.rule("Test Results Summary")
    console.table(["Check", "Status", "Duration", "Error"], rows)

    if result.warnings:
        console.rule("Warnings")
        for case_name, message in result.warnings:
            console.warning(f"{case_name}: {message}")

    console.rule()
    console.kv(
        {
            "Total": f"{len(result.cases)} checks",
            "Passed": str(result.pass_count),
            "Failed": str(result.fail_count),
            "Success Rate": f"{result.success_rate:.1f}%",
        }
    )

    if result.passed:
        console.success("All checks passed! The WebAssembly build output is ready.")
    else:
        console.error("Some checks failed. Please review the build configuration.")


def report_benchmarks(report: BenchmarkReport) -> None:
    """Print per-target metrics, then threshold warnings and collection errors."""
    targets = list(dict.fromkeys(s.target for s in report.samples))
    rows: list[list[str]] = []
    for target in targets:
        metrics = report.for_target(target)
        rows.append(
            [
                target,
                _megabytes(metrics.get("total_size")),
                _megabytes(metrics.get("binary_size")),
                _megabytes(metrics.get("script_size")),
                _milliseconds(metrics.get("load_time")),
                _kilobytes(metrics.get("heap_delta")),
            ]
        )
    console.table(
        ["Target", "Total", "WASM", "JS", "Load", "Heap delta"],
        rows,
        title="Performance Metrics",
    )

    for warning in report.warnings:
        console.warning(warning)
    for error in report.errors:
        console.error(f"Sample collection error: {error}")


def _megabytes(sample: BenchmarkSample | None) -> str:
    return "-" if sample is None else f"{sample.value / MIB:.2f} MB"


def _kilobytes(sample: BenchmarkSample | None) -> str:
    return "-" if sample is None else f"{sample.value / 1024:+.1f} KB"


def _milliseconds(sample: BenchmarkSample | None) -> str:
    return "-" if sample is None else f"{sample.value:.1f} ms"


# ---------------------------------------------------------------------------
# JSON rendering
# ---------------------------------------------------------------------------


def suite_to_dict(result: SuiteResult) -> dict[str, Any]:
    """Convert a SuiteResult to a JSON-serializable dict."""
    return {
        "passed": result.passed,
        "total": len(result.cases),
        "pass_count": result.pass_count,
        "fail_count": result.fail_count,
        "success_rate": round(result.success_rate, 1),
        "cases": [
            {
                "name": case.name,
                "passed": case.passed,
                "error": case.error,
                "duration_ms": round(case.duration_ms, 3),
                "warnings": list(case.warnings),
            }
            for case in result.cases
        ],
    }


def benchmarks_to_dict(report: BenchmarkReport) -> dict[str, Any]:
    """Convert a BenchmarkReport to a JSON-serializable dict."""
    return {
        "samples": [
            {
                "target": s.target,
                "metric": s.metric,
                "value": s.value,
                "unit": s.unit.value,
            }
            for s in report.samples
        ],
        "warnings": list(report.warnings),
        "errors": list(report.errors),
    }
