"""Workspace level document store for the scriptls language server."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Sequence

from lsprotocol.types import TextDocumentContentChangeEvent, TextDocumentItem
from pygls.uris import to_fs_path

from scriptls.config import LanguageServerSettings, load_workspace_settings
from scriptls.observability.logging import get_logger

from .state import ScriptDocument


class WorkspaceService:
    """Tracks open script documents and the current configuration snapshot.

    Settings are replaced wholesale, never mutated, so a request that read
    :attr:`settings` keeps a consistent view while it runs.
    """

    def __init__(self, root_uri: Optional[str] = None, settings: Optional[LanguageServerSettings] = None) -> None:
        self.logger = get_logger("scriptls.lsp.workspace")
        self.root_uri = root_uri
        self.root_path = self._resolve_root(root_uri)
        self._documents: Dict[str, ScriptDocument] = {}
        self._settings = settings or LanguageServerSettings()

    def set_root(self, root_uri: Optional[str]) -> None:
        self.root_uri = root_uri
        self.root_path = self._resolve_root(root_uri)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def settings(self) -> LanguageServerSettings:
        return self._settings

    def update_settings(self, settings: LanguageServerSettings) -> None:
        self._settings = settings
        self.logger.info("Configuration updated (engine=%s)", settings.engine)

    def load_settings(self) -> LanguageServerSettings:
        """Read ``scriptls.toml``/``.scriptlsrc`` from the workspace root, if any."""

        settings = load_workspace_settings(self.root_path)
        if settings.source is not None:
            self.logger.info("Loaded workspace settings from %s", settings.source)
        self._settings = settings
        return settings

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------
    def did_open(self, item: TextDocumentItem) -> ScriptDocument:
        document = ScriptDocument(
            uri=item.uri,
            text=item.text,
            version=item.version,
            language_id=item.language_id,
        )
        self._documents[item.uri] = document
        return document

    def did_change(
        self,
        uri: str,
        version: int,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> ScriptDocument:
        document = self._documents.get(uri)
        if document is None:
            initial_text = self._read_document_from_fs(uri)
            document = ScriptDocument(uri=uri, text=initial_text, version=version)
            self._documents[uri] = document
        next_text = self._apply_content_changes(document, changes)
        document.update(next_text, version)
        return document

    def did_close(self, uri: str) -> None:
        self._documents.pop(uri, None)

    def get_file(self, uri: str) -> Optional[ScriptDocument]:
        return self._documents.get(uri)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _apply_content_changes(
        self,
        document: ScriptDocument,
        changes: Sequence[TextDocumentContentChangeEvent],
    ) -> str:
        text = document.text
        for change in changes:
            change_range = getattr(change, "range", None)
            if change_range is None:
                text = change.text
                document.update(text, document.version)
                continue
            start = document.offset_at(change_range.start)
            end = document.offset_at(change_range.end)
            text = text[:start] + change.text + text[end:]
            document.update(text, document.version)
        return text

    def _read_document_from_fs(self, uri: str) -> str:
        try:
            path = Path(to_fs_path(uri))
        except (TypeError, ValueError):
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except OSError:
            return ""

    def _resolve_root(self, root_uri: Optional[str]) -> Path:
        if root_uri:
            try:
                return Path(to_fs_path(root_uri))
            except (TypeError, ValueError):
                return Path(root_uri)
        return Path.cwd()


__all__ = ["WorkspaceService"]
