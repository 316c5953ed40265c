"""Binary format module -- Validate the WebAssembly module preamble.

Only the first four bytes are read; instructions are never decoded.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domain.errors import EmptyArtifact, InvalidMagicNumber

if TYPE_CHECKING:
    from domain.models import Artifact
    from kernel.config import Settings

logger = logging.getLogger("wasmcert.binary_format")

# "\0asm", the canonical WebAssembly module signature.
WASM_MAGIC = b"\x00asm"


def read_magic(artifact: Artifact) -> bytes:
    """Return up to the first four bytes of *artifact*."""
    with artifact.path.open("rb") as fh:
        return fh.read(len(WASM_MAGIC))


def check_binary(artifact: Artifact, settings: Settings) -> list[str]:
    """Validate one binary module.

    Args:
        artifact: A binary-module artifact.
        settings: Supplies the expected size band.

    Returns:
        Size advisories; these never fail the check.

    Raises:
        EmptyArtifact: The file is zero bytes long.
        InvalidMagicNumber: The file does not start with ``00 61 73 6D``.
    """
    if artifact.size_bytes == 0:
        raise EmptyArtifact(artifact)

    magic = read_magic(artifact)
    if magic != WASM_MAGIC:
        raise InvalidMagicNumber(artifact, magic)

    warnings: list[str] = []
    if artifact.size_bytes < settings.min_binary_size:
        warnings.append(
            f"{artifact.name} is smaller than expected ({artifact.size_bytes} bytes)"
        )
    if artifact.size_bytes > settings.max_binary_size:
        warnings.append(
            f"{artifact.name} is larger than expected ({artifact.size_bytes} bytes)"
        )
    for warning in warnings:
        logger.warning("%s", warning)
    return warnings
