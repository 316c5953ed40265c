"""Tests for modules/benchmarker/core.py -- sizes, thresholds and load cost."""

from __future__ import annotations

import itertools
from dataclasses import replace
from typing import TYPE_CHECKING

import pytest

from domain.models import BenchmarkSample, Unit
from kernel.config import MIB
from modules.benchmarker.core import (
    benchmark_target,
    load_fresh,
    measure_load,
    measure_sizes,
    run_benchmarks,
    size_warnings,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from domain.models import Target
    from kernel.config import Settings


def _clock(*readings: float) -> Callable[[], float]:
    it = iter(readings)
    return lambda: next(it)


def _ticking_clock(step: float = 0.005) -> Callable[[], float]:
    counter = itertools.count()
    return lambda: next(counter) * step


class TestLoad:
    def test_load_fresh_rereads_every_call(self, tmp_path: Path, fake_parser) -> None:
        path = tmp_path / "qemu-wrapper.js"
        path.write_text("var a = 1;")
        load_fresh(path, fake_parser)
        path.write_text("var a = 2;")
        load_fresh(path, fake_parser)
        assert fake_parser.sources == ["var a = 1;", "var a = 2;"]

    def test_load_fresh_surfaces_parse_failure(
        self, tmp_path: Path, parser_factory: Callable[..., object]
    ) -> None:
        path = tmp_path / "qemu-wrapper.js"
        path.write_text("var = ;")
        with pytest.raises(ValueError, match="Line 1"):
            load_fresh(path, parser_factory(diagnostic="Line 1: Unexpected token ="))

    def test_measure_load_elapsed_and_heap_delta(
        self,
        tmp_path: Path,
        fake_parser,
        heap_probe_factory: Callable[[list[int]], object],
    ) -> None:
        path = tmp_path / "qemu-wrapper.js"
        path.write_text("var a;")
        probe = heap_probe_factory([1000, 5096])
        measurement = measure_load(path, fake_parser, probe, _clock(10.0, 10.025))
        assert measurement.elapsed_ms == pytest.approx(25.0)
        assert measurement.heap_delta_bytes == 4096
        assert probe.calls == 2

    def test_heap_delta_may_be_negative(
        self,
        tmp_path: Path,
        fake_parser,
        heap_probe_factory: Callable[[list[int]], object],
    ) -> None:
        path = tmp_path / "qemu-wrapper.js"
        path.write_text("var a;")
        measurement = measure_load(
            path, fake_parser, heap_probe_factory([8192, 4096]), _clock(0.0, 0.001)
        )
        assert measurement.heap_delta_bytes == -4096


class TestSizes:
    def test_samples_per_class(
        self,
        target_factory: Callable[..., Path],
        scan: Callable[[str], Target],
        valid_wrapper: str,
    ) -> None:
        target_factory(scripts={"qemu-system-i386.js": "x" * 1000})
        target = scan("i386-softmmu")
        samples = {s.metric: s for s in measure_sizes(target)}

        wrapper_size = len(valid_wrapper.encode())
        descriptor_size = target.find("package.json").size_bytes
        assert samples["binary_size"].value == 2 * MIB
        assert samples["script_size"].value == 1000 + wrapper_size
        assert samples["total_size"].value == 2 * MIB + 1000 + wrapper_size + descriptor_size
        assert all(s.unit is Unit.BYTES for s in samples.values())

    def test_thresholds_are_exclusive(self, settings: Settings) -> None:
        samples = (
            BenchmarkSample("t", "total_size", 200 * MIB, Unit.BYTES),
            BenchmarkSample("t", "binary_size", 100 * MIB + 1, Unit.BYTES),
            BenchmarkSample("t", "script_size", 50 * MIB, Unit.BYTES),
        )
        assert size_warnings(samples, settings) == ["Large WASM size for t: 100.00 MB"]

    def test_every_threshold(self, settings: Settings) -> None:
        samples = (
            BenchmarkSample("t", "total_size", 250 * MIB, Unit.BYTES),
            BenchmarkSample("t", "binary_size", 150 * MIB, Unit.BYTES),
            BenchmarkSample("t", "script_size", 60 * MIB, Unit.BYTES),
            BenchmarkSample("t", "load_time", 10_000.0, Unit.MILLISECONDS),
        )
        assert size_warnings(samples, settings) == [
            "Large total size for t: 250.00 MB",
            "Large WASM size for t: 150.00 MB",
            "Large JS size for t: 60.00 MB",
        ]


class TestBenchmarkTarget:
    def test_full_report(
        self,
        target_factory: Callable[..., Path],
        scan: Callable[[str], Target],
        settings: Settings,
        fake_parser,
        heap_probe_factory: Callable[[list[int]], object],
    ) -> None:
        target_factory()
        report = benchmark_target(
            scan("i386-softmmu"),
            settings,
            fake_parser,
            heap_probe_factory([0, 2048]),
            _clock(1.0, 1.012),
        )
        metrics = report.for_target("i386-softmmu")
        assert set(metrics) == {
            "total_size",
            "binary_size",
            "script_size",
            "load_time",
            "heap_delta",
        }
        assert metrics["load_time"].unit is Unit.MILLISECONDS
        assert metrics["load_time"].value == pytest.approx(12.0)
        assert metrics["heap_delta"].value == 2048
        assert report.warnings == ()
        assert report.errors == ()

    def test_unparseable_wrapper_is_a_collection_error(
        self,
        target_factory: Callable[..., Path],
        scan: Callable[[str], Target],
        settings: Settings,
        parser_factory: Callable[..., object],
        heap_probe_factory: Callable[[list[int]], object],
    ) -> None:
        target_factory()
        report = benchmark_target(
            scan("i386-softmmu"),
            settings,
            parser_factory(diagnostic="Line 3: Unexpected token"),
            heap_probe_factory([0, 0]),
            _ticking_clock(),
        )
        assert report.errors == (
            "i386-softmmu: load of qemu-wrapper.js failed: Line 3: Unexpected token",
        )
        assert "load_time" not in report.for_target("i386-softmmu")
        assert "total_size" in report.for_target("i386-softmmu")

    def test_probe_failure_is_a_collection_error(
        self,
        target_factory: Callable[..., Path],
        scan: Callable[[str], Target],
        settings: Settings,
        fake_parser,
        heap_probe_factory: Callable[[list[int]], object],
    ) -> None:
        target_factory()
        report = benchmark_target(
            scan("i386-softmmu"),
            settings,
            fake_parser,
            heap_probe_factory([]),
            _ticking_clock(),
        )
        assert len(report.errors) == 1
        assert "no more readings" in report.errors[0]

    def test_missing_wrapper_is_a_collection_error(
        self,
        target_factory: Callable[..., Path],
        scan: Callable[[str], Target],
        settings: Settings,
        fake_parser,
        heap_probe_factory: Callable[[list[int]], object],
    ) -> None:
        target_factory(wrapper=None)
        report = benchmark_target(
            scan("i386-softmmu"), settings, fake_parser, heap_probe_factory([]), _ticking_clock()
        )
        assert report.errors == ("i386-softmmu: no qemu-wrapper.js to load",)

    def test_threshold_breach_is_a_warning(
        self,
        target_factory: Callable[..., Path],
        scan: Callable[[str], Target],
        settings: Settings,
        fake_parser,
        heap_probe_factory: Callable[[list[int]], object],
    ) -> None:
        target_factory()
        tight = replace(settings, max_binary_bytes=MIB)
        report = benchmark_target(
            scan("i386-softmmu"), tight, fake_parser, heap_probe_factory([0, 0]), _ticking_clock()
        )
        assert report.warnings == ("Large WASM size for i386-softmmu: 2.00 MB",)
        assert report.errors == ()


def test_run_benchmarks_merges_in_target_order(
    target_factory: Callable[..., Path],
    scan: Callable[[str], Target],
    settings: Settings,
    fake_parser,
    heap_probe_factory: Callable[[list[int]], object],
) -> None:
    target_factory("arm-softmmu", wrapper=None)
    target_factory("i386-softmmu")
    targets = (scan("arm-softmmu"), scan("i386-softmmu"))
    report = run_benchmarks(
        targets, settings, fake_parser, heap_probe_factory([0, 10]), _ticking_clock()
    )
    assert [s.target for s in report.samples[:3]] == ["arm-softmmu"] * 3
    assert report.for_target("i386-softmmu")["heap_delta"].value == 10
    assert report.errors == ("arm-softmmu: no qemu-wrapper.js to load",)
