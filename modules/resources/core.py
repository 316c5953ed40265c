"""Resources module -- Look for memory configuration in the glue wrapper.

Purely advisory: the configuration may legitimately live elsewhere (for
example in the binary's linker flags), so absence never fails the case.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("wasmcert.resources")


def find_memory_markers(text: str, markers: tuple[str, ...]) -> tuple[str, ...]:
    """Return the markers that occur anywhere in *text*.

    Plain substring search, so compact linker flags such as
    ``-sALLOW_MEMORY_GROWTH=1`` count.
    """
    return tuple(m for m in markers if m in text)


def check_memory_config(target_name: str, text: str, markers: tuple[str, ...]) -> list[str]:
    """Return an advisory when none of *markers* appears in the wrapper."""
    found = find_memory_markers(text, markers)
    if found:
        logger.debug("%s: memory configuration %s", target_name, ", ".join(found))
        return []

    message = f"No memory configuration found in {target_name} wrapper"
    logger.warning("%s", message)
    return [message]
