"""Formatting engine backed by an external ``Invoke-Formatter`` process."""

from __future__ import annotations

import asyncio
import json
import shutil
from typing import List, Optional, Sequence

from scriptls.errors import EngineError
from scriptls.observability.logging import get_logger

from .core import FormattingResult, RegionSelector
from .rules import FormatterSettings

logger = get_logger("scriptls.formatting.analyzer")

# Reads one JSON request from stdin and writes the formatted script to stdout.
_FORMATTER_SCRIPT = r"""
$ErrorActionPreference = 'Stop'
Import-Module PSScriptAnalyzer
$request = [Console]::In.ReadToEnd() | ConvertFrom-Json -AsHashtable
$arguments = @{ ScriptDefinition = $request.contents; Settings = $request.settings }
if ($null -ne $request.range) { $arguments.Range = [int[]]$request.range }
[Console]::Out.Write((Invoke-Formatter @arguments))
"""

DEFAULT_COMMAND: Sequence[str] = ("pwsh", "-NoLogo", "-NoProfile", "-NonInteractive", "-Command")


class AnalyzerFormattingEngine:
    """Runs ``Invoke-Formatter`` from PSScriptAnalyzer in a ``pwsh`` subprocess.

    A formatter run that exits with an error yields no result, mirroring
    how the analyzer reports scripts it cannot format. Failing to start
    the process at all raises :class:`EngineError`.
    """

    name = "analyzer"

    def __init__(self, command: Optional[Sequence[str]] = None) -> None:
        self.command: List[str] = list(command or DEFAULT_COMMAND)

    def is_available(self) -> bool:
        return shutil.which(self.command[0]) is not None

    def build_request(
        self,
        contents: str,
        settings: FormatterSettings,
        region: Optional[RegionSelector] = None,
    ) -> bytes:
        payload = {
            "contents": contents,
            "settings": settings.to_hashtable(),
            "range": region.as_list() if region is not None else None,
        }
        return json.dumps(payload).encode("utf-8")

    async def format(
        self,
        contents: str,
        settings: FormatterSettings,
        region: Optional[RegionSelector] = None,
    ) -> FormattingResult:
        request = self.build_request(contents, settings, region)
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                _FORMATTER_SCRIPT,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise EngineError(
                f"Formatter executable '{self.command[0]}' not found",
                hint="Install PowerShell 7 and the PSScriptAnalyzer module, or use the builtin engine.",
            ) from exc
        except OSError as exc:
            raise EngineError(f"Failed to start formatter: {exc}") from exc

        try:
            stdout, stderr = await process.communicate(request)
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        if process.returncode != 0:
            logger.warning(
                "Formatter exited with status %s: %s",
                process.returncode,
                stderr.decode("utf-8", errors="replace").strip(),
            )
            return FormattingResult.no_result()
        return FormattingResult.formatted(stdout.decode("utf-8"))


__all__ = ["AnalyzerFormattingEngine", "DEFAULT_COMMAND"]
