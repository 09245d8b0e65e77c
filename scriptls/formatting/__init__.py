"""
Formatting engines for script documents.

The language server talks to an engine through a single coroutine,
``format(contents, settings, region)``, which returns a
:class:`FormattingResult`. Two engines ship with the package:

* ``builtin`` – a token based reference engine that normalises
  indentation and spacing without external tools.
* ``analyzer`` – delegates to PSScriptAnalyzer's ``Invoke-Formatter`` in a
  ``pwsh`` subprocess.
"""

from __future__ import annotations

from typing import Dict, Type

from .analyzer import AnalyzerFormattingEngine
from .core import BuiltinFormattingEngine, FormattingEngine, FormattingResult, RegionSelector
from .rules import FormatterSettings, build_formatter_settings

ENGINES: Dict[str, Type] = {
    BuiltinFormattingEngine.name: BuiltinFormattingEngine,
    AnalyzerFormattingEngine.name: AnalyzerFormattingEngine,
}


def create_engine(name: str) -> FormattingEngine:
    try:
        engine_cls = ENGINES[name]
    except KeyError:
        choices = ", ".join(sorted(ENGINES))
        raise ValueError(f"Unknown formatting engine '{name}' (choose from {choices})") from None
    return engine_cls()


__all__ = [
    "AnalyzerFormattingEngine",
    "BuiltinFormattingEngine",
    "ENGINES",
    "FormatterSettings",
    "FormattingEngine",
    "FormattingResult",
    "RegionSelector",
    "build_formatter_settings",
    "create_engine",
]
