"""Core data types for wasmcert.

Frozen dataclasses describe what was found on disk and what was measured.
``CheckCase`` is the one mutable type: it is registered, executed exactly
once by the aggregator, then read by the reporter.

This module has ZERO imports from outside the Python standard library.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


class ArtifactKind(Enum):
    """Classification of a file inside a target directory."""

    BINARY_MODULE = "binary-module"
    GLUE_SCRIPT = "glue-script"
    METADATA = "metadata-descriptor"
    OTHER = "other"


class Unit(Enum):
    """Unit tag attached to a benchmark sample."""

    BYTES = "bytes"
    MILLISECONDS = "milliseconds"


# ---------------------------------------------------------------------------
# Build output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Artifact:
    """A single file within a target directory."""

    path: Path
    kind: ArtifactKind
    size_bytes: int

    @property
    def name(self) -> str:
        """File name of the artifact."""
        return self.path.name


@dataclass(frozen=True)
class Target:
    """One build configuration's output directory and the files in it."""

    name: str
    path: Path
    artifacts: tuple[Artifact, ...]

    def of_kind(self, kind: ArtifactKind) -> tuple[Artifact, ...]:
        """Return the artifacts of the given kind, in file-name order."""
        return tuple(a for a in self.artifacts if a.kind is kind)

    def find(self, filename: str) -> Artifact | None:
        """Return the artifact with the given file name, if present."""
        for artifact in self.artifacts:
            if artifact.name == filename:
                return artifact
        return None


# ---------------------------------------------------------------------------
# Check execution
# ---------------------------------------------------------------------------


@dataclass
class CheckCase:
    """A named check and the outcome recorded when it ran."""

    name: str
    check: Callable[[], list[str]]
    passed: bool = False
    error: str | None = None
    duration_ms: float = 0.0
    warnings: tuple[str, ...] = ()
    executed: bool = False


@dataclass(frozen=True)
class SuiteResult:
    """Outcome of running every registered case, in registration order."""

    cases: tuple[CheckCase, ...]

    @property
    def passed(self) -> bool:
        """True iff every case passed."""
        return all(case.passed for case in self.cases)

    @property
    def pass_count(self) -> int:
        return sum(1 for case in self.cases if case.passed)

    @property
    def fail_count(self) -> int:
        return len(self.cases) - self.pass_count

    @property
    def success_rate(self) -> float:
        """Percentage of passing cases; 0.0 for an empty suite."""
        if not self.cases:
            return 0.0
        return self.pass_count / len(self.cases) * 100

    @property
    def warnings(self) -> tuple[tuple[str, str], ...]:
        """All advisories as ``(case name, message)`` pairs."""
        return tuple((case.name, w) for case in self.cases for w in case.warnings)


# ---------------------------------------------------------------------------
# Benchmarking
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchmarkSample:
    """A single measured value for one target."""

    target: str
    metric: str
    value: float
    unit: Unit


@dataclass(frozen=True)
class BenchmarkReport:
    """Samples plus the diagnostics produced while collecting them."""

    samples: tuple[BenchmarkSample, ...] = ()
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    def for_target(self, target: str) -> dict[str, BenchmarkSample]:
        """Return the samples of one target keyed by metric name."""
        return {s.metric: s for s in self.samples if s.target == target}


@dataclass(frozen=True)
class LoadMeasurement:
    """Elapsed time and heap delta around one fresh module load."""

    elapsed_ms: float
    heap_delta_bytes: int
