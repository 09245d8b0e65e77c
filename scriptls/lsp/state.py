"""Document level state tracking for the scriptls language server."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from lsprotocol.types import Position

from scriptls.errors import ScriptParseError
from scriptls.observability.logging import get_logger
from scriptls.parser import ScriptAst, parse_script, split_lines

logger = get_logger("scriptls.lsp.state")


@dataclass
class ScriptDocument:
    """An open script: its text, version and parsed syntax tree root."""

    uri: str
    text: str
    version: int
    language_id: Optional[str] = None
    lines: List[str] = field(init=False)
    script_ast: Optional[ScriptAst] = field(init=False, default=None)
    parse_failure: Optional[ScriptParseError] = field(init=False, default=None)
    _line_offsets: List[int] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self._set_text(self.text)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def update(self, text: str, version: int) -> None:
        self._set_text(text)
        self.version = version

    @property
    def contents(self) -> str:
        return self.text

    def offset_at(self, position: Position) -> int:
        line_index = min(max(position.line, 0), len(self.lines) - 1)
        start_offset = self._line_offsets[line_index]
        column = min(max(position.character, 0), len(self.lines[line_index]))
        return start_offset + column

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _set_text(self, text: str) -> None:
        self.text = text
        self.lines = split_lines(text)
        self._recompute_line_offsets()
        self._parse()

    def _parse(self) -> None:
        self.parse_failure = None
        try:
            self.script_ast = parse_script(self.text, uri=self.uri)
        except ScriptParseError as exc:
            logger.debug("Could not parse %s: %s", self.uri, exc.message)
            self.script_ast = None
            self.parse_failure = exc

    def _recompute_line_offsets(self) -> None:
        offsets: List[int] = [0]
        text = self.text
        idx = 0
        length = len(text)
        while idx < length:
            char = text[idx]
            if char == "\r":
                next_idx = idx + 1
                if next_idx < length and text[next_idx] == "\n":
                    offsets.append(next_idx + 1)
                    idx = next_idx + 1
                else:
                    offsets.append(idx + 1)
                    idx += 1
            elif char == "\n":
                offsets.append(idx + 1)
                idx += 1
            else:
                idx += 1
        self._line_offsets = offsets


__all__ = ["ScriptDocument"]
