"""kernel.console._protocol -- ConsoleProtocol definition.

Pure standard-library typing.Protocol for the wasmcert terminal output system.
No external dependencies allowed in this file.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleProtocol(Protocol):
    """wasmcert terminal output protocol.

    Two layers of methods:

    **General messages** -- usable from any module::

        console.info("Found 3 targets")
        console.success("All checks passed")
        console.warning("qemu.wasm is smaller than expected")
        console.error("Build output root does not exist")

    **Structured output** -- tables and key-value displays::

        console.table(["Check", "Status"], [["structure", "PASS"]], title="Results")
        console.kv({"Passed": "12", "Failed": "0"})
    """

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        """Informational message."""
        ...

    def success(self, message: str) -> None:
        """Success / positive-outcome message."""
        ...

    def warning(self, message: str) -> None:
        """Warning message."""
        ...

    def error(self, message: str) -> None:
        """Error message."""
        ...

    # -- Structured output ---------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        """Display a table with *headers* and *rows*."""
        ...

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        """Display key-value pairs."""
        ...

    def rule(self, title: str = "") -> None:
        """Display a horizontal separator, optionally titled."""
        ...

    def raw(self, text: str) -> None:
        """Write *text* unmodified (no markup, no indentation)."""
        ...
