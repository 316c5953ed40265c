"""Structure module -- Confirm a target holds every required artifact.

Read-only: inspects the ``Target`` produced by the enumerator.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domain.errors import MissingArtifact
from domain.models import ArtifactKind

if TYPE_CHECKING:
    from domain.models import Target
    from kernel.config import Settings

logger = logging.getLogger("wasmcert.structure")


def check_structure(target: Target, settings: Settings) -> list[str]:
    """Require the wrapper, the descriptor, a binary module and a glue script.

    A target with no binary module or no glue script is always a failure;
    absent build output is never valid.

    Args:
        target: The target to inspect.
        settings: Supplies the required file names and extensions.

    Returns:
        An empty list; this check produces no advisories.

    Raises:
        MissingArtifact: Naming the first missing file or artifact class.
    """
    for filename in (settings.wrapper_file, settings.metadata_file):
        if target.find(filename) is None:
            logger.error("%s: missing %s", target.name, filename)
            raise MissingArtifact(target.name, filename)

    required_kinds = (
        (ArtifactKind.BINARY_MODULE, settings.binary_extensions),
        (ArtifactKind.GLUE_SCRIPT, settings.script_extensions),
    )
    for kind, extensions in required_kinds:
        if not target.of_kind(kind):
            pattern = " or ".join(f"*{ext}" for ext in extensions)
            logger.error("%s: no %s artifact", target.name, kind.value)
            raise MissingArtifact(target.name, pattern)

    return []
