"""Tokenizer and syntax tree root for script documents.

The parser is deliberately shallow: the language server only needs the
root extent of a document, a token stream the built-in formatting engine
can re-emit, and the errors that make a script unsafe to reformat.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from scriptls.errors import ScriptParseError

_NEWLINE = re.compile(r"\r\n|\n|\r")
_INLINE_SPACE = " \t\f\v\u00a0"
_OPENERS = {"{": "}", "(": ")", "[": "]"}
_CLOSERS = {"}", ")", "]"}
_WORD_STOP = set(_INLINE_SPACE) | {"\r", "\n", "{", "}", "(", ")", "[", "]", '"', "'"}


class TokenKind(Enum):
    WORD = auto()
    STRING = auto()
    COMMENT = auto()
    GROUP_OPEN = auto()
    GROUP_CLOSE = auto()
    WHITESPACE = auto()
    NEWLINE = auto()


@dataclass(frozen=True)
class ScriptExtent:
    """1-based region of script text; the end column points past the last character."""

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.start_line, self.start_column, self.end_line, self.end_column)

    def is_ordered(self) -> bool:
        return (self.start_line, self.start_column) <= (self.end_line, self.end_column)


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int
    column: int

    @property
    def is_code(self) -> bool:
        return self.kind not in (TokenKind.WHITESPACE, TokenKind.NEWLINE)

    @property
    def spans_lines(self) -> bool:
        return _NEWLINE.search(self.text) is not None and self.kind is not TokenKind.NEWLINE


@dataclass
class ScriptAst:
    """Root of a parsed script: its extent, tokens and recoverable errors."""

    extent: ScriptExtent
    tokens: List[Token] = field(default_factory=list)
    errors: List[ScriptParseError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def split_lines(text: str) -> List[str]:
    """Split *text* the way the protocol counts lines (``\\r\\n``, ``\\n``, ``\\r``)."""

    return _NEWLINE.split(text)


def root_extent(text: str) -> ScriptExtent:
    lines = split_lines(text)
    return ScriptExtent(
        start_line=1,
        start_column=1,
        end_line=len(lines),
        end_column=len(lines[-1]) + 1,
    )


class _Scanner:
    def __init__(self, text: str, uri: Optional[str]) -> None:
        self.text = text
        self.uri = uri
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[ScriptParseError] = []
        self._groups: List[Tuple[str, int, int]] = []

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------
    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        if index < len(self.text):
            return self.text[index]
        return ""

    def emit(self, kind: TokenKind, end: int) -> None:
        chunk = self.text[self.pos : end]
        self.tokens.append(Token(kind=kind, text=chunk, line=self.line, column=self.column))
        pieces = _NEWLINE.split(chunk)
        if len(pieces) > 1:
            self.line += len(pieces) - 1
            self.column = len(pieces[-1]) + 1
        else:
            self.column += len(chunk)
        self.pos = end

    def error(self, message: str, line: int, column: int) -> None:
        self.errors.append(ScriptParseError(message, uri=self.uri, line=line, column=column))

    # ------------------------------------------------------------------
    # Token rules
    # ------------------------------------------------------------------
    def scan(self) -> None:
        while self.pos < len(self.text):
            char = self.peek()
            nxt = self.peek(1)
            if char in "\r\n":
                width = 2 if char == "\r" and nxt == "\n" else 1
                self.emit(TokenKind.NEWLINE, self.pos + width)
            elif char in _INLINE_SPACE:
                end = self.pos
                while end < len(self.text) and self.text[end] in _INLINE_SPACE:
                    end += 1
                self.emit(TokenKind.WHITESPACE, end)
            elif char == "<" and nxt == "#":
                self._block_comment()
            elif char == "#":
                match = _NEWLINE.search(self.text, self.pos)
                self.emit(TokenKind.COMMENT, match.start() if match else len(self.text))
            elif char == "@" and nxt and nxt in "\"'" and self._at_here_string_header():
                self._here_string(nxt)
            elif char in "\"'":
                self._quoted_string(char)
            elif char in "@$" and nxt and nxt in "({":
                self._open_group(2, _OPENERS[nxt])
            elif char in _OPENERS:
                self._open_group(1, _OPENERS[char])
            elif char in _CLOSERS:
                self._close_group(char)
            else:
                self._word()
        for _closer, line, column in reversed(self._groups):
            self.error(f"Missing closing '{_closer}'", line, column)

    def _block_comment(self) -> None:
        end = self.text.find("#>", self.pos + 2)
        if end == -1:
            self.error("Unterminated block comment", self.line, self.column)
            self.emit(TokenKind.COMMENT, len(self.text))
            return
        self.emit(TokenKind.COMMENT, end + 2)

    def _at_here_string_header(self) -> bool:
        index = self.pos + 2
        while index < len(self.text) and self.text[index] in _INLINE_SPACE:
            index += 1
        return index < len(self.text) and self.text[index] in "\r\n"

    def _here_string(self, quote: str) -> None:
        terminator = re.compile(r"(?:\r\n|\n|\r)" + re.escape(quote) + "@")
        match = terminator.search(self.text, self.pos + 2)
        if match is None:
            self.error("Unterminated here-string", self.line, self.column)
            self.emit(TokenKind.STRING, len(self.text))
            return
        self.emit(TokenKind.STRING, match.end())

    def _quoted_string(self, quote: str) -> None:
        index = self.pos + 1
        while index < len(self.text):
            char = self.text[index]
            if quote == '"' and char == "`":
                index += 2
                continue
            if char == quote:
                if index + 1 < len(self.text) and self.text[index + 1] == quote:
                    index += 2
                    continue
                self.emit(TokenKind.STRING, index + 1)
                return
            index += 1
        self.error("Unterminated string literal", self.line, self.column)
        self.emit(TokenKind.STRING, len(self.text))

    def _open_group(self, width: int, closer: str) -> None:
        self._groups.append((closer, self.line, self.column))
        self.emit(TokenKind.GROUP_OPEN, self.pos + width)

    def _close_group(self, char: str) -> None:
        if not self._groups:
            self.error(f"Unexpected '{char}'", self.line, self.column)
        elif self._groups[-1][0] != char:
            expected = self._groups[-1][0]
            self.error(f"Expected '{expected}' but found '{char}'", self.line, self.column)
        else:
            self._groups.pop()
        self.emit(TokenKind.GROUP_CLOSE, self.pos + 1)

    def _word(self) -> None:
        index = self.pos
        while index < len(self.text):
            char = self.text[index]
            if char == "`":
                following = self.text[index + 1 : index + 2]
                if following in ("", "\r", "\n"):
                    index += 1
                    break
                index += 2
                continue
            if index > self.pos and (char in _WORD_STOP or self.text.startswith("<#", index)):
                break
            if index == self.pos and char in _WORD_STOP:
                index += 1
                break
            index += 1
        self.emit(TokenKind.WORD, min(index, len(self.text)))


def parse_script(text: str, *, uri: Optional[str] = None) -> ScriptAst:
    """Tokenize *text* and return its syntax tree root.

    Raises :class:`ScriptParseError` when the text cannot be treated as a
    script at all (binary content); recoverable problems such as unbalanced
    braces are recorded on :attr:`ScriptAst.errors` instead.
    """

    if "\x00" in text:
        raise ScriptParseError("Document contains binary content", uri=uri)
    scanner = _Scanner(text, uri)
    scanner.scan()
    return ScriptAst(extent=root_extent(text), tokens=scanner.tokens, errors=scanner.errors)


__all__ = [
    "ScriptAst",
    "ScriptExtent",
    "Token",
    "TokenKind",
    "parse_script",
    "root_extent",
    "split_lines",
]
