"""Document and range formatting for the scriptls language server.

Both request kinds answer with one edit replacing the whole document.
They differ in what happens when the engine has no result:

* whole document: the absence is passed through unchanged;
* range: the original document text is returned, so the edit is a no-op.

The asymmetry is observable by clients and is kept on purpose.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from lsprotocol.types import (
    DocumentFormattingParams,
    DocumentRangeFormattingParams,
    FormattingOptions,
    Range,
    TextEdit,
)

from scriptls.config import CodeFormattingSettings
from scriptls.errors import EngineError
from scriptls.formatting import FormatterSettings, FormattingEngine, FormattingResult, build_formatter_settings
from scriptls.formatting.core import RegionSelector
from scriptls.observability.logging import get_logger
from scriptls.observability.metrics import FORMATTING_NO_RESULT, measure_formatting, record_metric

from .coordinates import document_range, to_region_selector
from .protocol import FormattingCapabilities
from .state import ScriptDocument
from .workspace import WorkspaceService

logger = get_logger("scriptls.lsp.formatting")

DOCUMENT_KIND = "document"
RANGE_KIND = "range"


@dataclass(frozen=True)
class FormattingEdit:
    """Single whole-document replacement produced for one request."""

    range: Range
    new_text: Optional[str]

    def to_text_edits(self) -> List[TextEdit]:
        # A TextEdit always carries text; an absent result becomes no edit.
        if self.new_text is None:
            return []
        return [TextEdit(range=self.range, new_text=self.new_text)]


# ----------------------------------------------------------------------
# Result reconciliation
# ----------------------------------------------------------------------
def reconcile_document_result(result: FormattingResult, edit_range: Range) -> FormattingEdit:
    return FormattingEdit(range=edit_range, new_text=result.text)


def reconcile_range_result(result: FormattingResult, edit_range: Range, original: str) -> FormattingEdit:
    if not result.has_text:
        return FormattingEdit(range=edit_range, new_text=original)
    return FormattingEdit(range=edit_range, new_text=result.text)


# ----------------------------------------------------------------------
# Dispatch
# ----------------------------------------------------------------------
class DocumentFormatter:
    """Runs one formatting request against an engine.

    Holds no per-request state, so concurrent requests need no locking.
    """

    def __init__(self, engine: FormattingEngine, capabilities: Optional[FormattingCapabilities] = None) -> None:
        self.engine = engine
        self.capabilities = capabilities or FormattingCapabilities()

    async def format_document(self, document: ScriptDocument, settings: FormatterSettings) -> FormattingEdit:
        edit_range = document_range(document)
        result = await self._invoke(document, settings, None, kind=DOCUMENT_KIND)
        return reconcile_document_result(result, edit_range)

    async def format_range(
        self,
        document: ScriptDocument,
        settings: FormatterSettings,
        range_: Optional[Range],
    ) -> FormattingEdit:
        edit_range = document_range(document)
        region = to_region_selector(range_)
        result = await self._invoke(document, settings, region, kind=RANGE_KIND)
        if not result.has_text:
            logger.warning("Formatting returned no result, keeping original contents of %s", document.uri)
        return reconcile_range_result(result, edit_range, document.contents)

    async def _invoke(
        self,
        document: ScriptDocument,
        settings: FormatterSettings,
        region: Optional[RegionSelector],
        *,
        kind: str,
    ) -> FormattingResult:
        engine_name = getattr(self.engine, "name", "unknown")
        try:
            with measure_formatting(kind, engine_name) as labels:
                result = await self.engine.format(document.contents, settings, region)
        except EngineError as exc:
            if exc.uri is not None:
                raise
            raise EngineError(exc.message, uri=document.uri, hint=exc.hint) from (exc.__cause__ or exc)
        except Exception as exc:
            raise EngineError(f"Formatting engine failed: {exc}", uri=document.uri) from exc
        if not result.has_text:
            record_metric(FORMATTING_NO_RESULT, 1.0, labels)
        return result


# ----------------------------------------------------------------------
# Protocol facing service
# ----------------------------------------------------------------------
class FormattingService:
    """Turns formatting requests into document edits.

    Returns ``None`` for documents the workspace does not know or that are
    not scripts; raises :class:`~scriptls.errors.ScriptLSError` subclasses
    for requests that cannot be served.
    """

    def __init__(self, workspace: WorkspaceService, formatter: DocumentFormatter) -> None:
        self.workspace = workspace
        self.formatter = formatter

    async def handle_document_formatting(self, params: DocumentFormattingParams) -> Optional[List[TextEdit]]:
        document = self._script_document(params.text_document.uri)
        if document is None:
            return None
        settings = self._settings(params.options)
        edit = await self.formatter.format_document(document, settings)
        return edit.to_text_edits()

    async def handle_range_formatting(self, params: DocumentRangeFormattingParams) -> Optional[List[TextEdit]]:
        document = self._script_document(params.text_document.uri)
        if document is None:
            return None
        if not self.formatter.capabilities.range_formatting:
            logger.debug("Client did not announce range formatting support, serving %s anyway", document.uri)
        settings = self._settings(params.options)
        edit = await self.formatter.format_range(document, settings, params.range)
        return edit.to_text_edits()

    def _script_document(self, uri: str) -> Optional[ScriptDocument]:
        document = self.workspace.get_file(uri)
        if document is None:
            logger.debug("Formatting requested for unknown document %s", uri)
            return None
        if not self.formatter.capabilities.selector.matches(uri, document.language_id):
            logger.debug("Formatting requested for non-script document %s", uri)
            return None
        return document

    def _settings(self, options: FormattingOptions) -> FormatterSettings:
        code_formatting: CodeFormattingSettings = self.workspace.settings.code_formatting
        return build_formatter_settings(
            getattr(options, "tab_size", None),
            getattr(options, "insert_spaces", None),
            code_formatting,
        )


__all__ = [
    "DocumentFormatter",
    "FormattingEdit",
    "FormattingService",
    "reconcile_document_result",
    "reconcile_range_result",
]
