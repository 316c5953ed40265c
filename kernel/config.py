"""
kernel/config.py -- Build-output contract and configuration constants.

Module-level constants describe the default contract. ``Settings`` gathers
them into one value that a ``wasmcert.yaml`` file may override.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from domain.errors import ConfigError

logger = logging.getLogger("wasmcert.config")

MIB = 1024 * 1024

# ---------------------------------------------------------------------------
# Build-output contract
# ---------------------------------------------------------------------------

DEFAULT_BUILD_ROOT = Path("qemu") / "output"
CONFIG_FILE = "wasmcert.yaml"

WRAPPER_FILE = "qemu-wrapper.js"
METADATA_FILE = "package.json"
BINARY_EXTENSIONS = (".wasm",)
SCRIPT_EXTENSIONS = (".js",)

REQUIRED_FIELDS = ("name", "version", "description", "main", "license")
ENTRY_POINT_FIELD = "main"
NAME_MARKERS = ("qemu", "wasm")

MEMORY_MARKERS = ("INITIAL_MEMORY", "MAXIMUM_MEMORY", "ALLOW_MEMORY_GROWTH")

# ---------------------------------------------------------------------------
# Size envelopes (bytes)
# ---------------------------------------------------------------------------

# Binary modules outside this band produce an advisory.
MIN_BINARY_SIZE = 1 * MIB
MAX_BINARY_SIZE = 100 * MIB

# Benchmark thresholds; a breach is logged, never failed.
MAX_TOTAL_BYTES = 200 * MIB
MAX_BINARY_BYTES = 100 * MIB
MAX_SCRIPT_BYTES = 50 * MIB


@dataclass(frozen=True)
class Settings:
    """Effective configuration for one run."""

    build_root: Path = DEFAULT_BUILD_ROOT
    wrapper_file: str = WRAPPER_FILE
    metadata_file: str = METADATA_FILE
    binary_extensions: tuple[str, ...] = BINARY_EXTENSIONS
    script_extensions: tuple[str, ...] = SCRIPT_EXTENSIONS
    required_fields: tuple[str, ...] = REQUIRED_FIELDS
    entry_point_field: str = ENTRY_POINT_FIELD
    name_markers: tuple[str, ...] = NAME_MARKERS
    memory_markers: tuple[str, ...] = MEMORY_MARKERS
    min_binary_size: int = MIN_BINARY_SIZE
    max_binary_size: int = MAX_BINARY_SIZE
    max_total_bytes: int = MAX_TOTAL_BYTES
    max_binary_bytes: int = MAX_BINARY_BYTES
    max_script_bytes: int = MAX_SCRIPT_BYTES


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Convert a YAML value to the type of the field's default."""
    if isinstance(default, Path):
        if not isinstance(value, str):
            raise ConfigError(f"'{name}' must be a path string, got {value!r}")
        return Path(value)
    if isinstance(default, tuple):
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"'{name}' must be a list of strings, got {value!r}")
        return tuple(value)
    if isinstance(value, bool) or not isinstance(value, type(default)):
        raise ConfigError(f"'{name}' must be {type(default).__name__}, got {value!r}")
    return value


def settings_from_mapping(data: dict[str, Any], base: Settings | None = None) -> Settings:
    """Overlay *data* onto *base* (defaults when None).

    Raises:
        ConfigError: An unknown key or a value of the wrong type.
    """
    base = base or Settings()
    known = {f.name for f in dataclasses.fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown setting(s): {', '.join(unknown)}")

    overrides = {
        key: _coerce(key, value, getattr(base, key)) for key, value in data.items()
    }
    return dataclasses.replace(base, **overrides)


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a YAML file.

    With *path* None, ``wasmcert.yaml`` in the working directory is used if
    it exists; otherwise the defaults are returned. An explicit *path* must
    exist.

    Raises:
        ConfigError: The file is unreadable, not a mapping, or invalid.
    """
    if path is None:
        path = Path(CONFIG_FILE)
        if not path.is_file():
            return Settings()

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read settings file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    logger.info("Loaded settings from %s", path)
    return settings_from_mapping(data)
