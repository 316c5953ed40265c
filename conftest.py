"""Shared pytest fixtures and test factories for wasmcert.

Provides:
- Fake port implementations (ScriptParser, HeapProbe)
- Text fixtures for a valid glue wrapper and metadata descriptor
- A factory that writes a complete target directory under ``tmp_path``
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from kernel.config import MIB, Settings
from modules.enumerator.core import scan_target

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from domain.models import Target


WASM_HEADER = b"\x00asm\x01\x00\x00\x00"

VALID_WRAPPER = """\
/**
 * QEMU WebAssembly wrapper
 */
const MEMORY_CONFIG = { INITIAL_MEMORY: 268435456, ALLOW_MEMORY_GROWTH: 1 };

class QEMUJS {
    constructor() {
        this.module = null;
        this.running = false;
        this.args = [];
    }

    async initialize() {
        this.module = await Promise.resolve({ memory: MEMORY_CONFIG });
        return this;
    }

    async start(options) {
        this.args = this.buildArgs();
        this.options = options;
        this.running = true;
    }

    stop() {
        this.running = false;
    }

    getStatus() {
        return { running: this.running, args: this.args };
    }

    buildArgs() {
        return ["-m", "256", "-nographic"];
    }
}

if (typeof module !== "undefined" && module.exports) {
    module.exports = QEMUJS;
} else if (typeof window !== "undefined") {
    window.QEMUJS = QEMUJS;
}
"""

GLUE_SCRIPT = """\
var Module = typeof Module !== "undefined" ? Module : {};
Module.print = function (text) { console.log(text); };
"""


def valid_descriptor(**overrides: Any) -> dict[str, Any]:
    """Return a descriptor dict that satisfies every metadata rule."""
    data: dict[str, Any] = {
        "name": "qemu-i386-wasm",
        "version": "1.0.0",
        "description": "QEMU i386 system emulator compiled to WebAssembly",
        "main": "qemu-wrapper.js",
        "license": "GPL-2.0",
    }
    data.update(overrides)
    return data


# ── Fake Port Implementations ─────────────────────────────────────────────


class FakeParser:
    """ScriptParserPort stub with a fixed verdict.

    ``diagnostic`` None means every text parses. Records every source seen.
    """

    def __init__(self, diagnostic: str | None = None) -> None:
        self.diagnostic = diagnostic
        self.sources: list[str] = []

    def diagnose(self, source: str) -> str | None:
        self.sources.append(source)
        return self.diagnostic

    def load(self, source: str) -> None:
        self.sources.append(source)
        if self.diagnostic is not None:
            raise ValueError(self.diagnostic)


class ScriptedHeapProbe:
    """HeapProbePort returning a scripted sequence of readings."""

    def __init__(self, readings: list[int]) -> None:
        self._readings = list(readings)
        self.calls = 0

    def heap_bytes(self) -> int:
        self.calls += 1
        if not self._readings:
            raise OSError("no more readings")
        return self._readings.pop(0)


# ── Build tree factory ─────────────────────────────────────────────────────


def write_sized(path: Path, header: bytes, size: int) -> None:
    """Write *header* then extend the file to *size* bytes (sparse when possible)."""
    with path.open("wb") as fh:
        fh.write(header[:size])
        fh.truncate(size)


def make_target(
    root: Path,
    name: str = "i386-softmmu",
    *,
    wrapper: str | None = VALID_WRAPPER,
    descriptor: dict[str, Any] | str | None = None,
    omit_descriptor: bool = False,
    wasm: dict[str, tuple[bytes, int]] | None = None,
    scripts: dict[str, str] | None = None,
) -> Path:
    """Write one target directory under *root* and return its path.

    Args:
        root: Build-output root (created if needed).
        name: Target directory name.
        wrapper: Wrapper text, or None to omit ``qemu-wrapper.js``.
        descriptor: Descriptor dict or raw text; defaults to a valid one.
        omit_descriptor: Leave ``package.json`` out entirely.
        wasm: ``{filename: (header, size)}``; defaults to one 2 MiB module.
        scripts: Extra glue scripts ``{filename: text}``.
    """
    target = root / name
    target.mkdir(parents=True, exist_ok=True)

    if wrapper is not None:
        (target / "qemu-wrapper.js").write_text(wrapper, encoding="utf-8")

    if not omit_descriptor:
        if descriptor is None:
            descriptor = valid_descriptor()
        if isinstance(descriptor, dict):
            descriptor = json.dumps(descriptor, indent=2)
        (target / "package.json").write_text(descriptor, encoding="utf-8")

    if wasm is None:
        wasm = {"qemu-system-i386.wasm": (WASM_HEADER, 2 * MIB)}
    for filename, (header, size) in wasm.items():
        write_sized(target / filename, header, size)

    for filename, text in (scripts or {}).items():
        (target / filename).write_text(text, encoding="utf-8")

    return target


# ── Fixtures ───────────────────────────────────────────────────────────────


@pytest.fixture
def build_root(tmp_path: Path) -> Path:
    """An empty build-output root."""
    root = tmp_path / "qemu" / "output"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def settings(build_root: Path) -> Settings:
    """Default settings pointed at the ``build_root`` fixture."""
    return Settings(build_root=build_root)


@pytest.fixture
def target_factory(build_root: Path) -> Callable[..., Path]:
    """``make_target`` bound to the ``build_root`` fixture."""

    def factory(name: str = "i386-softmmu", **kwargs: Any) -> Path:
        return make_target(build_root, name, **kwargs)

    return factory


@pytest.fixture
def fake_parser() -> FakeParser:
    return FakeParser()


@pytest.fixture
def valid_wrapper() -> str:
    return VALID_WRAPPER


@pytest.fixture
def wasm_header() -> bytes:
    return WASM_HEADER


@pytest.fixture
def descriptor_factory() -> Callable[..., dict[str, Any]]:
    """``valid_descriptor`` as a fixture; keyword overrides replace fields."""
    return valid_descriptor


@pytest.fixture
def heap_probe_factory() -> Callable[[list[int]], ScriptedHeapProbe]:
    return ScriptedHeapProbe


@pytest.fixture
def parser_factory() -> Callable[..., FakeParser]:
    return FakeParser


@pytest.fixture
def glue_script() -> str:
    return GLUE_SCRIPT


@pytest.fixture
def scan(build_root: Path, settings: Settings) -> Callable[[str], Target]:
    """Scan a target written by ``target_factory`` into a ``Target``."""

    def _scan(name: str = "i386-softmmu") -> Target:
        return scan_target(build_root, name, settings)

    return _scan
