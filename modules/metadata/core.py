"""Metadata module -- Validate a target's package descriptor.

The descriptor must be a JSON object carrying every required field, a name
that identifies the product and platform, and an entry point that resolves
to a file inside the same target directory.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from domain.errors import (
    DanglingReference,
    MalformedMetadata,
    MissingArtifact,
    MissingField,
    NamingViolation,
)

if TYPE_CHECKING:
    from domain.models import Target
    from kernel.config import Settings

logger = logging.getLogger("wasmcert.metadata")


def load_descriptor(target: Target, settings: Settings) -> dict[str, Any]:
    """Read and parse the descriptor of *target*.

    Raises:
        MissingArtifact: The descriptor file is absent.
        MalformedMetadata: The text is not JSON or not a JSON object.
    """
    artifact = target.find(settings.metadata_file)
    if artifact is None:
        raise MissingArtifact(target.name, settings.metadata_file)

    try:
        data = json.loads(artifact.path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedMetadata(target.name, str(exc)) from exc

    if not isinstance(data, dict):
        raise MalformedMetadata(target.name, f"expected an object, got {type(data).__name__}")
    return data


def _is_present(value: object) -> bool:
    # Empty strings and nulls count as missing.
    return value is not None and value != ""


def check_metadata(target: Target, settings: Settings) -> list[str]:
    """Validate the descriptor of *target*.

    Args:
        target: The target whose descriptor is checked.
        settings: Supplies the file name, required fields and name markers.

    Returns:
        An empty list; this check produces no advisories.

    Raises:
        MalformedMetadata: The descriptor does not parse as a JSON object.
        MissingField: A required field is absent or empty.
        NamingViolation: The name lacks a required marker.
        DanglingReference: The entry point does not resolve to a file.
    """
    data = load_descriptor(target, settings)

    for field in settings.required_fields:
        if not _is_present(data.get(field)):
            logger.error("%s: descriptor missing '%s'", target.name, field)
            raise MissingField(field)

    name = data.get("name")
    if not isinstance(name, str) or not all(
        marker.lower() in name.lower() for marker in settings.name_markers
    ):
        raise NamingViolation(name)

    _check_entry_point(target, data, settings.entry_point_field)
    return []


def _check_entry_point(target: Target, data: dict[str, Any], field: str) -> None:
    """Require *field* to name an existing file inside the target directory."""
    entry = data.get(field)
    if not isinstance(entry, str):
        raise DanglingReference(field, repr(entry))

    base = target.path.resolve()
    resolved = (base / Path(entry)).resolve()
    if not resolved.is_relative_to(base) or not resolved.is_file():
        logger.error("%s: %s points at missing file %s", target.name, field, entry)
        raise DanglingReference(field, entry)
