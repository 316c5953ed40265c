"""Adapter: PsutilHeapProbe implements HeapProbePort.

Reads the resident set size of the current process through psutil.
"""

from __future__ import annotations

import gc

import psutil


class PsutilHeapProbe:
    """Concrete implementation of HeapProbePort using psutil."""

    def __init__(self, *, collect: bool = True) -> None:
        """Initialise the probe.

        Args:
            collect: Run the garbage collector before each reading so the
                delta reflects live objects rather than pending garbage.
        """
        self._process = psutil.Process()
        self._collect = collect

    def heap_bytes(self) -> int:
        """Return the resident set size of this process in bytes.

        Raises:
            OSError: psutil could not read the process memory counters.
        """
        if self._collect:
            gc.collect()
        try:
            return int(self._process.memory_info().rss)
        except psutil.Error as exc:
            raise OSError(f"Cannot read process memory: {exc}") from exc
