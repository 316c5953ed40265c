"""Aggregator module -- Run registered check cases in order.

``run_cases`` is the only place a check is executed. It returns the results
explicitly; no state survives past a single call.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from domain.models import SuiteResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from domain.models import CheckCase

logger = logging.getLogger("wasmcert.aggregator")


def execute(case: CheckCase, clock: Callable[[], float] = time.perf_counter) -> CheckCase:
    """Run one case and record its outcome on it.

    Any exception raised by the check fails the case; its message is stored
    verbatim. The case is mutated exactly once.

    Raises:
        RuntimeError: The case has already been executed.
    """
    if case.executed:
        msg = f"Check case already executed: {case.name}"
        raise RuntimeError(msg)

    logger.info("Running: %s", case.name)
    started = clock()
    try:
        warnings = case.check()
    except Exception as exc:
        case.passed = False
        case.error = str(exc) or type(exc).__name__
        logger.warning("Failed: %s - %s", case.name, case.error)
    else:
        case.passed = True
        case.warnings = tuple(warnings)
        logger.info("Passed: %s", case.name)
    case.duration_ms = (clock() - started) * 1000
    case.executed = True
    return case


def run_cases(
    cases: Iterable[CheckCase],
    clock: Callable[[], float] = time.perf_counter,
) -> SuiteResult:
    """Execute *cases* strictly in registration order.

    A failing case never stops later cases from running.

    Returns:
        A SuiteResult holding every case in the order given.
    """
    executed = tuple(execute(case, clock) for case in cases)
    result = SuiteResult(cases=executed)
    logger.info(
        "Suite finished: %d passed, %d failed",
        result.pass_count,
        result.fail_count,
    )
    return result
