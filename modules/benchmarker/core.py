"""Benchmarker module -- Measure artifact sizes and wrapper load cost.

Benchmarking is diagnostic, not a gate: threshold breaches become warnings
and a failed measurement becomes a collection error on the report. Nothing
here raises for a single target.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from domain.models import (
    ArtifactKind,
    BenchmarkReport,
    BenchmarkSample,
    LoadMeasurement,
    Unit,
)
from kernel.config import MIB

if TYPE_CHECKING:
    from pathlib import Path

    from domain.models import Target
    from domain.ports import HeapProbePort, ScriptParserPort
    from kernel.config import Settings

logger = logging.getLogger("wasmcert.benchmarker")

Clock = Callable[[], float]


def load_fresh(path: Path, parser: ScriptParserPort) -> None:
    """Read *path* and run it through *parser* from scratch.

    No cache is consulted or populated; every call re-reads and re-parses.

    Raises:
        OSError: The file cannot be read.
        ValueError: The text is not UTF-8 or does not parse.
    """
    source = path.read_text(encoding="utf-8")
    parser.load(source)


def measure_load(
    path: Path,
    parser: ScriptParserPort,
    probe: HeapProbePort,
    clock: Clock = time.perf_counter,
) -> LoadMeasurement:
    """Time one ``load_fresh`` call and the heap delta around it."""
    heap_before = probe.heap_bytes()
    started = clock()
    load_fresh(path, parser)
    elapsed_ms = (clock() - started) * 1000
    heap_after = probe.heap_bytes()
    return LoadMeasurement(
        elapsed_ms=elapsed_ms,
        heap_delta_bytes=heap_after - heap_before,
    )


def measure_sizes(target: Target) -> tuple[BenchmarkSample, ...]:
    """Return total, binary and script byte-size samples for *target*."""
    total = sum(a.size_bytes for a in target.artifacts)
    binary = sum(a.size_bytes for a in target.of_kind(ArtifactKind.BINARY_MODULE))
    script = sum(a.size_bytes for a in target.of_kind(ArtifactKind.GLUE_SCRIPT))
    return (
        BenchmarkSample(target.name, "total_size", total, Unit.BYTES),
        BenchmarkSample(target.name, "binary_size", binary, Unit.BYTES),
        BenchmarkSample(target.name, "script_size", script, Unit.BYTES),
    )


def size_warnings(samples: tuple[BenchmarkSample, ...], settings: Settings) -> list[str]:
    """Return a warning for every size sample above its threshold."""
    limits = {
        "total_size": ("total", settings.max_total_bytes),
        "binary_size": ("WASM", settings.max_binary_bytes),
        "script_size": ("JS", settings.max_script_bytes),
    }
    warnings: list[str] = []
    for sample in samples:
        if sample.metric not in limits:
            continue
        label, limit = limits[sample.metric]
        if sample.value > limit:
            warnings.append(
                f"Large {label} size for {sample.target}: {sample.value / MIB:.2f} MB"
            )
    return warnings


def benchmark_target(
    target: Target,
    settings: Settings,
    parser: ScriptParserPort,
    probe: HeapProbePort,
    clock: Clock = time.perf_counter,
) -> BenchmarkReport:
    """Collect every sample for one target.

    Args:
        target: The target to measure.
        settings: Supplies the wrapper name and size thresholds.
        parser: Parser used for the controlled wrapper load.
        probe: Heap accounting used around the load.
        clock: Monotonic clock in seconds.

    Returns:
        A report with size samples, load samples (when the load succeeded),
        threshold warnings and collection errors.
    """
    samples = list(measure_sizes(target))
    warnings = size_warnings(tuple(samples), settings)
    errors: list[str] = []

    wrapper = target.find(settings.wrapper_file)
    if wrapper is None:
        errors.append(f"{target.name}: no {settings.wrapper_file} to load")
    else:
        try:
            measurement = measure_load(wrapper.path, parser, probe, clock)
        except (OSError, ValueError) as exc:
            errors.append(f"{target.name}: load of {wrapper.name} failed: {exc}")
        else:
            samples.append(
                BenchmarkSample(target.name, "load_time", measurement.elapsed_ms, Unit.MILLISECONDS)
            )
            samples.append(
                BenchmarkSample(target.name, "heap_delta", measurement.heap_delta_bytes, Unit.BYTES)
            )

    for warning in warnings:
        logger.warning("%s", warning)
    for error in errors:
        logger.error("Sample collection error: %s", error)

    return BenchmarkReport(
        samples=tuple(samples),
        warnings=tuple(warnings),
        errors=tuple(errors),
    )


def run_benchmarks(
    targets: tuple[Target, ...],
    settings: Settings,
    parser: ScriptParserPort,
    probe: HeapProbePort,
    clock: Clock = time.perf_counter,
) -> BenchmarkReport:
    """Benchmark every target in order and merge the reports."""
    samples: list[BenchmarkSample] = []
    warnings: list[str] = []
    errors: list[str] = []
    for target in targets:
        report = benchmark_target(target, settings, parser, probe, clock)
        samples.extend(report.samples)
        warnings.extend(report.warnings)
        errors.extend(report.errors)
    logger.info("Collected %d sample(s) for %d target(s)", len(samples), len(targets))
    return BenchmarkReport(
        samples=tuple(samples),
        warnings=tuple(warnings),
        errors=tuple(errors),
    )
