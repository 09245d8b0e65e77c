"""Formatting engine boundary and the built-in reference engine."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Protocol

from scriptls.observability.logging import get_logger
from scriptls.parser import Token, TokenKind, parse_script

from .rules import CONSISTENT_INDENTATION, CONSISTENT_WHITESPACE, FormatterSettings

logger = get_logger("scriptls.formatting")


class RegionSelector(NamedTuple):
    """1-based line/column region an engine should restrict itself to."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def as_list(self) -> List[int]:
        return [self.start_line, self.start_column, self.end_line, self.end_column]

    @property
    def last_line(self) -> int:
        # The end is exclusive: ending at column 1 selects nothing on that line.
        if self.end_column == 1 and self.end_line > self.start_line:
            return self.end_line - 1
        return self.end_line

    def covers_line(self, line: int) -> bool:
        return self.start_line <= line <= self.last_line


@dataclass(frozen=True)
class FormattingResult:
    """Outcome of one engine call: formatted text, or no result at all.

    "No result" is a normal outcome (the engine had nothing to offer),
    not a failure; failures are raised.
    """

    text: Optional[str] = None

    @classmethod
    def formatted(cls, text: str) -> "FormattingResult":
        return cls(text=text)

    @classmethod
    def no_result(cls) -> "FormattingResult":
        return cls(text=None)

    @property
    def has_text(self) -> bool:
        return self.text is not None


class FormattingEngine(Protocol):
    """Anything that can format script contents asynchronously.

    Implementations must let :class:`asyncio.CancelledError` propagate
    and stop their work when the awaiting task is cancelled.
    """

    name: str

    async def format(
        self,
        contents: str,
        settings: FormatterSettings,
        region: Optional[RegionSelector] = None,
    ) -> FormattingResult:
        ...


class _Emitter:
    """Re-emits a token stream with normalised indentation and spacing."""

    _PIPELINE_STYLES_WITH_INDENT = {
        "IncreaseIndentationForFirstPipeline",
        "IncreaseIndentationAfterEveryPipeline",
    }

    def __init__(self, settings: FormatterSettings, region: Optional[RegionSelector]) -> None:
        self.region = region
        self.reindent = settings.rule_enabled(CONSISTENT_INDENTATION)
        self.collapse_spaces = settings.rule_enabled(CONSISTENT_WHITESPACE)
        indentation = settings.rule(CONSISTENT_INDENTATION)
        self.indent_unit = settings.indent_unit
        self.continuation_indent = indentation.get("PipelineIndentation") in self._PIPELINE_STYLES_WITH_INDENT
        self.output: List[str] = []
        self.depth = 0
        self.at_line_start = True
        self.pending_space: Optional[str] = None
        self.continued = False
        self.last_code: Optional[Token] = None

    def in_scope(self, line: int) -> bool:
        return self.region is None or self.region.covers_line(line)

    def feed(self, token: Token, following: Optional[Token]) -> None:
        if token.kind is TokenKind.NEWLINE:
            self._flush_pending()
            self.output.append(token.text)
            self.at_line_start = True
            self.continued = self._ends_with_continuation()
            return
        if token.kind is TokenKind.WHITESPACE:
            self._whitespace(token, following)
            return
        if self.at_line_start:
            self._indent(token)
        elif self.pending_space is not None:
            self.output.append(self.pending_space)
        self.pending_space = None
        self.output.append(token.text)
        self.at_line_start = False
        self.last_code = token
        if token.kind is TokenKind.GROUP_OPEN:
            self.depth += 1
        elif token.kind is TokenKind.GROUP_CLOSE:
            self.depth = max(self.depth - 1, 0)

    def _whitespace(self, token: Token, following: Optional[Token]) -> None:
        formattable = self.in_scope(token.line)
        trailing = following is None or following.kind is TokenKind.NEWLINE
        if self.at_line_start:
            if formattable and (self.reindent or trailing):
                return
            self.output.append(token.text)
            return
        if trailing and formattable:
            return
        if formattable and self.collapse_spaces:
            self.pending_space = " "
        else:
            self.pending_space = token.text

    def _indent(self, token: Token) -> None:
        if not self.in_scope(token.line) or not self.reindent:
            return
        level = self.depth
        if token.kind is TokenKind.GROUP_CLOSE:
            level -= 1
        if self.continued and self.continuation_indent:
            level += 1
        self.output.append(self.indent_unit * max(level, 0))

    def _ends_with_continuation(self) -> bool:
        if self.last_code is None:
            return False
        text = self.last_code.text
        return text == "|" or (text.endswith("`") and self.last_code.kind is TokenKind.WORD)

    def _flush_pending(self) -> None:
        if self.pending_space is not None:
            self.output.append(self.pending_space)
            self.pending_space = None

    def text(self) -> str:
        self._flush_pending()
        return "".join(self.output)


class BuiltinFormattingEngine:
    """Reference engine: re-indents blocks, collapses runs of spaces, trims line ends.

    String literals, here-strings and block comments are emitted verbatim.
    Scripts with parse errors yield no result, as does a region that
    selects no line of the document.
    """

    name = "builtin"

    async def format(
        self,
        contents: str,
        settings: FormatterSettings,
        region: Optional[RegionSelector] = None,
    ) -> FormattingResult:
        cancelled = threading.Event()
        loop = asyncio.get_running_loop()
        try:
            text = await loop.run_in_executor(
                None,
                lambda: self.format_text(contents, settings, region, cancelled.is_set),
            )
        except asyncio.CancelledError:
            cancelled.set()
            raise
        if text is None:
            return FormattingResult.no_result()
        return FormattingResult.formatted(text)

    def format_text(
        self,
        contents: str,
        settings: FormatterSettings,
        region: Optional[RegionSelector] = None,
        is_cancelled: Callable[[], bool] = lambda: False,
    ) -> Optional[str]:
        ast = parse_script(contents)
        if ast.has_errors:
            logger.debug("Skipping formatting, script has %d parse error(s)", len(ast.errors))
            return None
        if region is not None and region.start_line > ast.extent.end_line:
            return None
        emitter = _Emitter(settings, region)
        tokens = ast.tokens
        for index, token in enumerate(tokens):
            if token.kind is TokenKind.NEWLINE and is_cancelled():
                return None
            following = tokens[index + 1] if index + 1 < len(tokens) else None
            emitter.feed(token, following)
        return emitter.text()


__all__ = [
    "BuiltinFormattingEngine",
    "FormattingEngine",
    "FormattingResult",
    "RegionSelector",
]
