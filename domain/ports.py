"""Port interfaces for wasmcert.

All ports are defined as typing.Protocol -- structural subtyping means any class
with matching method signatures satisfies the Protocol without inheritance.

This module has ZERO external imports -- only stdlib and typing.
"""

from __future__ import annotations

from typing import Protocol


class ScriptParserPort(Protocol):
    """Abstraction over a JavaScript parser front end.

    Implementations must never execute the text they are given.
    """

    def diagnose(self, source: str) -> str | None:
        """Check *source* and return a diagnostic, or None if it parses."""
        ...

    def load(self, source: str) -> None:
        """Parse *source* from scratch, bypassing any cache, and discard the result.

        Raises ValueError carrying the diagnostic when the text does not parse.
        """
        ...


class HeapProbePort(Protocol):
    """Abstraction over process heap accounting."""

    def heap_bytes(self) -> int:
        """Return the current memory footprint of this process in bytes."""
        ...
