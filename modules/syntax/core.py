"""Syntax module -- Confirm glue scripts parse as JavaScript.

The text is handed to a ``ScriptParserPort``; it is parsed, never run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from domain.errors import ScriptSyntaxError

if TYPE_CHECKING:
    from domain.models import Artifact
    from domain.ports import ScriptParserPort

logger = logging.getLogger("wasmcert.syntax")


def check_syntax(artifact: Artifact, parser: ScriptParserPort) -> list[str]:
    """Parse one glue script and discard the result.

    Raises:
        ScriptSyntaxError: The text is not UTF-8 or the parser reported a
            diagnostic, which becomes the error message.
    """
    try:
        source = artifact.path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ScriptSyntaxError(artifact, f"not valid UTF-8 ({exc.reason})") from exc

    diagnostic = parser.diagnose(source)
    if diagnostic is not None:
        logger.error("Syntax error in %s: %s", artifact.name, diagnostic)
        raise ScriptSyntaxError(artifact, diagnostic)
    return []
