"""Shared protocol helpers for the scriptls language server."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional, Tuple
from urllib.parse import unquote, urlparse

from lsprotocol.types import ClientCapabilities

SCRIPT_LANGUAGE_IDS: Tuple[str, ...] = ("powershell", "scriptls")
SCRIPT_FILE_SUFFIXES: Tuple[str, ...] = (".ps1", ".psm1", ".psd1")


@dataclass(frozen=True)
class ScriptDocumentSelector:
    """Decides which documents the formatting features apply to."""

    language_ids: Tuple[str, ...] = SCRIPT_LANGUAGE_IDS
    suffixes: Tuple[str, ...] = SCRIPT_FILE_SUFFIXES

    def matches(self, uri: str, language_id: Optional[str] = None) -> bool:
        if language_id and language_id.lower() in self.language_ids:
            return True
        path = unquote(urlparse(uri).path or uri)
        return PurePosixPath(path).suffix.lower() in self.suffixes


@dataclass(frozen=True)
class FormattingCapabilities:
    """What the client said about formatting during ``initialize``."""

    document_formatting: bool = True
    range_formatting: bool = True
    selector: ScriptDocumentSelector = ScriptDocumentSelector()

    @classmethod
    def from_client(
        cls,
        capabilities: Optional[ClientCapabilities],
        selector: Optional[ScriptDocumentSelector] = None,
    ) -> "FormattingCapabilities":
        selector = selector or ScriptDocumentSelector()
        text_document = capabilities.text_document if capabilities is not None else None
        if text_document is None:
            return cls(selector=selector)
        formatting = text_document.formatting
        range_formatting = text_document.range_formatting
        return cls(
            document_formatting=formatting is not None,
            range_formatting=range_formatting is not None,
            selector=selector,
        )


__all__ = [
    "FormattingCapabilities",
    "ScriptDocumentSelector",
    "SCRIPT_LANGUAGE_IDS",
    "SCRIPT_FILE_SUFFIXES",
]
