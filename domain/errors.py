"""Error taxonomy for wasmcert.

``CheckError`` subclasses fail only the case that raised them. The aggregator
records ``str(exc)`` verbatim, so every message names the offending target,
artifact, field or capability.

``BuildRootError`` and ``ConfigError`` are fatal to the whole run and are
turned into an exit status by the CLI.

This module has ZERO imports from outside the Python standard library.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.models import Artifact


class BuildRootError(OSError):
    """The build-output root is missing or cannot be listed."""


class ConfigError(ValueError):
    """A settings file is unreadable or holds invalid values."""


class CheckError(Exception):
    """Base class for failures that belong to a single check case."""


# -- Structural non-conformance ----------------------------------------------


class MissingArtifact(CheckError):
    def __init__(self, target: str, filename: str) -> None:
        self.target = target
        self.filename = filename
        super().__init__(f"Missing {filename} in {target}")


class MissingField(CheckError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field '{field}' in metadata descriptor")


class MissingCapability(CheckError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Wrapper does not expose required capability '{name}'")


class MissingExport(CheckError):
    def __init__(self) -> None:
        super().__init__("Missing export statement in wrapper")


# -- Binary corruption ---------------------------------------------------------


class InvalidMagicNumber(CheckError):
    def __init__(self, artifact: Artifact, found: bytes) -> None:
        self.artifact = artifact
        self.found = found
        super().__init__(
            f"Invalid WASM magic number in {artifact.name}: {found.hex(' ') or '<none>'}"
        )


class EmptyArtifact(CheckError):
    def __init__(self, artifact: Artifact) -> None:
        self.artifact = artifact
        super().__init__(f"WASM file {artifact.name} is empty")


# -- Unparseable script ----------------------------------------------------------


class ScriptSyntaxError(CheckError):
    """A glue script failed to parse; ``message`` is the parser diagnostic."""

    def __init__(self, artifact: Artifact, message: str) -> None:
        self.artifact = artifact
        self.message = message
        super().__init__(f"Syntax error in {artifact.name}: {message}")


# -- Metadata contract -------------------------------------------------------------


class MalformedMetadata(CheckError):
    def __init__(self, target: str, message: str) -> None:
        self.target = target
        self.message = message
        super().__init__(f"Invalid JSON in metadata descriptor of {target}: {message}")


class NamingViolation(CheckError):
    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Package name should include 'qemu' and 'wasm': {name}")


class DanglingReference(CheckError):
    def __init__(self, field: str, path: str) -> None:
        self.field = field
        self.path = path
        super().__init__(f"'{field}' file not found: {path}")
