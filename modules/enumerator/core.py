"""Enumerator module -- Discover build targets under the build-output root.

``list_targets`` names the targets; ``scan_target`` lists one target's
directory and classifies every file into an ``Artifact``. Neither recurses
below the target directory.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domain.errors import BuildRootError
from domain.models import Artifact, ArtifactKind, Target

if TYPE_CHECKING:
    from pathlib import Path

    from kernel.config import Settings

logger = logging.getLogger("wasmcert.enumerator")


def list_targets(root: Path) -> tuple[str, ...]:
    """Return the names of the immediate subdirectories of *root*, sorted.

    Args:
        root: The build-output root.

    Returns:
        Target identifiers; non-directory entries are excluded.

    Raises:
        BuildRootError: The root is missing, not a directory, or unreadable.
    """
    if not root.exists():
        raise BuildRootError(f"Build output root does not exist: {root}")
    if not root.is_dir():
        raise BuildRootError(f"Build output root is not a directory: {root}")

    try:
        names = sorted(entry.name for entry in root.iterdir() if entry.is_dir())
    except OSError as exc:
        raise BuildRootError(f"Cannot list build output root {root}: {exc}") from exc

    logger.info("Found %d target(s) under %s", len(names), root)
    return tuple(names)


def classify(filename: str, settings: Settings) -> ArtifactKind:
    """Classify a file name into an artifact kind."""
    if filename == settings.metadata_file:
        return ArtifactKind.METADATA
    lowered = filename.lower()
    if lowered.endswith(settings.binary_extensions):
        return ArtifactKind.BINARY_MODULE
    if lowered.endswith(settings.script_extensions):
        return ArtifactKind.GLUE_SCRIPT
    return ArtifactKind.OTHER


def scan_target(root: Path, name: str, settings: Settings) -> Target:
    """Build a ``Target`` from the files directly inside ``root / name``.

    Raises:
        BuildRootError: The target directory cannot be listed.
    """
    path = root / name
    artifacts: list[Artifact] = []
    try:
        entries = sorted(path.iterdir(), key=lambda p: p.name)
        for entry in entries:
            if not entry.is_file():
                continue
            artifacts.append(
                Artifact(
                    path=entry,
                    kind=classify(entry.name, settings),
                    size_bytes=entry.stat().st_size,
                )
            )
    except OSError as exc:
        raise BuildRootError(f"Cannot list target directory {path}: {exc}") from exc

    logger.debug("Target %s: %d artifact(s)", name, len(artifacts))
    return Target(name=name, path=path, artifacts=tuple(artifacts))


def discover(root: Path, settings: Settings) -> tuple[Target, ...]:
    """List and scan every target under *root*."""
    return tuple(scan_target(root, name, settings) for name in list_targets(root))
