"""
wiring.py -- Compose the check suite from the validator modules.

Maps every discovered target to its check cases, in a fixed order, and
binds each check to the target, artifact and adapters it needs. The
aggregator only ever sees zero-argument callables.

Registration order per target:
  structure, binary format (one case per module), syntax (one case per
  script), metadata, one case per API capability, export, memory
  configuration.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

from adapters.esprima_parser import EsprimaParser
from adapters.process_heap import PsutilHeapProbe
from domain.errors import MissingArtifact
from domain.models import ArtifactKind, CheckCase
from modules.aggregator.core import run_cases
from modules.api_contract.core import CAPABILITIES, check_capability, check_export, read_wrapper
from modules.benchmarker.core import run_benchmarks
from modules.binary_format.core import check_binary
from modules.enumerator.core import discover
from modules.metadata.core import check_metadata
from modules.resources.core import check_memory_config
from modules.structure.core import check_structure
from modules.syntax.core import check_syntax

if TYPE_CHECKING:
    from pathlib import Path

    from domain.models import BenchmarkReport, SuiteResult, Target
    from domain.ports import HeapProbePort, ScriptParserPort
    from kernel.config import Settings

logger = logging.getLogger("wasmcert.wiring")


# ---------------------------------------------------------------------------
# Check bindings
# ---------------------------------------------------------------------------


def _capability_check(target: Target, settings: Settings, index: int) -> list[str]:
    return check_capability(read_wrapper(target, settings), CAPABILITIES[index])


def _export_check(target: Target, settings: Settings) -> list[str]:
    return check_export(read_wrapper(target, settings))


def _memory_check(target: Target, settings: Settings) -> list[str]:
    # Advisory only; the structure case already fails a missing wrapper.
    if target.find(settings.wrapper_file) is None:
        return [f"No {settings.wrapper_file} in {target.name} to scan for memory configuration"]
    text = read_wrapper(target, settings)
    return check_memory_config(target.name, text, settings.memory_markers)


def _no_targets(root: Path) -> list[str]:
    raise MissingArtifact(str(root), "target directory")


def cases_for_target(
    target: Target,
    settings: Settings,
    parser: ScriptParserPort,
) -> list[CheckCase]:
    """Register every check case for one target, in suite order."""
    p = functools.partial
    cases = [CheckCase(f"{target.name}: structure", p(check_structure, target, settings))]

    for artifact in target.of_kind(ArtifactKind.BINARY_MODULE):
        cases.append(
            CheckCase(
                f"{target.name}: binary format {artifact.name}",
                p(check_binary, artifact, settings),
            )
        )
    for artifact in target.of_kind(ArtifactKind.GLUE_SCRIPT):
        cases.append(
            CheckCase(
                f"{target.name}: syntax {artifact.name}",
                p(check_syntax, artifact, parser),
            )
        )

    cases.append(CheckCase(f"{target.name}: metadata", p(check_metadata, target, settings)))

    for index, capability in enumerate(CAPABILITIES):
        cases.append(
            CheckCase(
                f"{target.name}: capability {capability.name}",
                p(_capability_check, target, settings, index),
            )
        )

    cases.append(CheckCase(f"{target.name}: export", p(_export_check, target, settings)))
    cases.append(
        CheckCase(f"{target.name}: memory configuration", p(_memory_check, target, settings))
    )
    return cases


def build_suite(
    targets: tuple[Target, ...],
    settings: Settings,
    parser: ScriptParserPort,
) -> list[CheckCase]:
    """Register the cases for every target, targets in enumeration order.

    An empty build root yields a single failing ``build output`` case.
    """
    if not targets:
        logger.error("No targets found under %s", settings.build_root)
        return [CheckCase("build output", functools.partial(_no_targets, settings.build_root))]

    cases: list[CheckCase] = []
    for target in targets:
        cases.extend(cases_for_target(target, settings, parser))
    logger.info("Registered %d case(s) for %d target(s)", len(cases), len(targets))
    return cases


# ---------------------------------------------------------------------------
# Entry points used by the CLI
# ---------------------------------------------------------------------------


def run_suite(
    settings: Settings,
    parser: ScriptParserPort | None = None,
) -> tuple[tuple[Target, ...], SuiteResult]:
    """Discover targets under ``settings.build_root`` and run every check.

    Raises:
        BuildRootError: The build root is missing or unreadable.
    """
    parser = parser or EsprimaParser()
    targets = discover(settings.build_root, settings)
    result = run_cases(build_suite(targets, settings, parser))
    return targets, result


def benchmark(
    settings: Settings,
    targets: tuple[Target, ...] | None = None,
    parser: ScriptParserPort | None = None,
    probe: HeapProbePort | None = None,
) -> BenchmarkReport:
    """Benchmark *targets*, discovering them first when None.

    Raises:
        BuildRootError: Discovery was needed and the build root is unreadable.
    """
    if targets is None:
        targets = discover(settings.build_root, settings)
    return run_benchmarks(
        targets,
        settings,
        parser or EsprimaParser(),
        probe or PsutilHeapProbe(),
    )
