"""Adapter: EsprimaParser implements ScriptParserPort.

Parses JavaScript with esprima's ECMAScript front end. Nothing in the text is
ever executed. A source is tried as a classic script first and as an
ECMAScript module second; when both fail, the diagnostic of whichever parse
got further is reported.
"""

from __future__ import annotations

import logging

import esprima
from esprima.error_handler import Error as EsprimaError

logger = logging.getLogger("wasmcert.adapters")


class EsprimaParser:
    """Concrete implementation of ScriptParserPort using esprima."""

    def diagnose(self, source: str) -> str | None:
        """Return esprima's ``Line N: ...`` diagnostic for *source*, or None if it parses."""
        try:
            self._parse(source)
        except EsprimaError as exc:
            return _describe(exc)
        return None

    def load(self, source: str) -> None:
        """Parse *source* into a fresh syntax tree and discard it.

        Raises:
            ValueError: The text does not parse.
        """
        try:
            self._parse(source)
        except EsprimaError as exc:
            raise ValueError(_describe(exc)) from exc

    def _parse(self, source: str) -> None:
        try:
            esprima.parseScript(source)
            return
        except EsprimaError as script_error:
            try:
                esprima.parseModule(source)
            except EsprimaError as module_error:
                if _offset(module_error) > _offset(script_error):
                    raise module_error from None
                raise script_error from None
            logger.debug("Parsed as an ECMAScript module")


def _offset(exc: EsprimaError) -> int:
    return getattr(exc, "index", None) or 0


def _describe(exc: EsprimaError) -> str:
    return exc.message
