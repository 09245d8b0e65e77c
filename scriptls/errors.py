"""Unified error model for the scriptls language server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorLocation:
    uri: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def describe(self) -> str:
        if self.uri and self.line is not None and self.column is not None:
            return f"{self.uri}:{self.line}:{self.column}"
        if self.uri and self.line is not None:
            return f"{self.uri}:{self.line}"
        if self.uri:
            return self.uri
        return "unknown location"


class ScriptLSError(Exception):
    """Base class for all errors surfaced by the language server."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        uri: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = ErrorLocation(uri=uri, line=line, column=column)
        self.uri = uri
        self.line = line
        self.column = column
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def format(self) -> str:
        components = [self.message]
        meta_parts = []
        location_desc = self.location.describe()
        if location_desc != "unknown location":
            meta_parts.append(location_desc)
        if self.code:
            meta_parts.append(self.code)
        if meta_parts:
            components[-1] = f"{components[-1]} ({'; '.join(meta_parts)})"
        if self.hint:
            components.append(f"Hint: {self.hint}")
        return " ".join(part for part in components if part)


class ScriptParseError(ScriptLSError):
    """Recorded by the tokenizer when script text is malformed."""

    code = "SLS001"


class InvalidExtentError(ScriptLSError):
    """Raised when a document has no usable syntax tree extent."""

    code = "SLS100"


class InvalidOptionsError(ScriptLSError):
    """Raised when a client sends malformed formatting options."""

    code = "SLS101"


class EngineError(ScriptLSError):
    """Raised when the formatting engine fails."""

    code = "SLS102"


__all__ = [
    "ScriptLSError",
    "ScriptParseError",
    "InvalidExtentError",
    "InvalidOptionsError",
    "EngineError",
    "ErrorLocation",
]
