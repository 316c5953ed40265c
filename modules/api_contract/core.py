"""API contract module -- Confirm the glue wrapper exposes the QEMUJS API.

Capabilities are a declared table of ``(name, predicate)`` pairs over the
wrapper text. Each one becomes its own check case so that every missing
capability is reported on its own.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from domain.errors import MissingArtifact, MissingCapability, MissingExport

if TYPE_CHECKING:
    from domain.models import Target
    from kernel.config import Settings

logger = logging.getLogger("wasmcert.api_contract")

Predicate = Callable[[str], bool]


def _matches(*patterns: str) -> Predicate:
    """Build a predicate that is true when any of *patterns* matches."""
    compiled = tuple(re.compile(p) for p in patterns)

    def predicate(text: str) -> bool:
        return any(p.search(text) for p in compiled)

    return predicate


def _sync_method(name: str) -> Predicate:
    """Build a predicate for a no-argument method definition not marked ``async``."""
    definition = re.compile(rf"(?<![\w.]){re.escape(name)}\s*\(\s*\)\s*\{{")
    async_prefix = re.compile(r"\basync\s+\Z")

    def predicate(text: str) -> bool:
        return any(
            not async_prefix.search(text, 0, m.start()) for m in definition.finditer(text)
        )

    return predicate


@dataclass(frozen=True)
class Capability:
    """A named capability and how to detect it in wrapper text."""

    name: str
    description: str
    detect: Predicate


CAPABILITIES: tuple[Capability, ...] = (
    Capability("QEMUJS", "constructible class", _matches(r"\bclass\s+QEMUJS\b")),
    Capability("constructor", "no-argument constructor", _matches(r"\bconstructor\s*\(\s*\)")),
    Capability(
        "initialize",
        "asynchronous initialisation",
        _matches(
            r"\basync\s+initialize\s*\(\s*\)",
            r"\binitialize\s*\(\s*\)\s*\{\s*return\s+new\s+Promise\b",
        ),
    ),
    Capability("start", "asynchronous start with parameters", _matches(r"\basync\s+start\s*\(")),
    Capability("stop", "synchronous stop", _sync_method("stop")),
    Capability("getStatus", "status query", _matches(r"\bgetStatus\s*\(\s*\)")),
    Capability("buildArgs", "argument builder", _matches(r"\bbuildArgs\s*\(\s*\)")),
)

# Module-style exports or attachment to a global namespace.
EXPORT_MECHANISMS: tuple[tuple[str, Predicate], ...] = (
    ("module.exports", _matches(r"\bmodule\.exports\b", r"\bexports\.QEMUJS\b")),
    (
        "es-module export",
        _matches(
            r"(?m)^\s*export\s+"
            r"(?:default\s+(?:class\s+)?QEMUJS\b|class\s+QEMUJS\b|\{[^}]*\bQEMUJS\b)"
        ),
    ),
    ("global attachment", _matches(r"\b(window|global|globalThis|self)\.QEMUJS\s*=")),
)


def read_wrapper(target: Target, settings: Settings) -> str:
    """Return the wrapper text of *target*.

    Raises:
        MissingArtifact: The wrapper file is absent.
    """
    artifact = target.find(settings.wrapper_file)
    if artifact is None:
        raise MissingArtifact(target.name, settings.wrapper_file)
    return artifact.path.read_text(encoding="utf-8", errors="replace")


def check_capability(text: str, capability: Capability) -> list[str]:
    """Fail with ``MissingCapability`` unless *capability* is detected."""
    if not capability.detect(text):
        logger.error("Wrapper lacks %s (%s)", capability.name, capability.description)
        raise MissingCapability(capability.name)
    return []


def find_exports(text: str) -> tuple[str, ...]:
    """Return the names of every export mechanism present in *text*."""
    return tuple(name for name, detect in EXPORT_MECHANISMS if detect(text))


def check_export(text: str) -> list[str]:
    """Fail with ``MissingExport`` unless an export mechanism is present."""
    if not find_exports(text):
        raise MissingExport()
    return []
