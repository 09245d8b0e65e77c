"""Formatting handlers."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_FORMATTING,
    TEXT_DOCUMENT_RANGE_FORMATTING,
    DocumentFormattingOptions,
    DocumentFormattingParams,
    DocumentRangeFormattingOptions,
    DocumentRangeFormattingParams,
)
from pygls.exceptions import JsonRpcException, JsonRpcInternalError, JsonRpcInvalidParams

from scriptls.errors import InvalidOptionsError, ScriptLSError
from scriptls.observability.logging import log_formatting_failure

from ..formatting import DOCUMENT_KIND, RANGE_KIND


def _to_rpc_error(error: ScriptLSError) -> JsonRpcException:
    if isinstance(error, InvalidOptionsError):
        return JsonRpcInvalidParams(message=error.format())
    return JsonRpcInternalError(message=error.format())


def register(server) -> None:
    @server.feature(TEXT_DOCUMENT_FORMATTING, DocumentFormattingOptions())
    async def _format_document(ls, params: DocumentFormattingParams):
        try:
            return await ls.formatting_service.handle_document_formatting(params)
        except ScriptLSError as exc:
            log_formatting_failure(uri=params.text_document.uri, kind=DOCUMENT_KIND, error=exc)
            raise _to_rpc_error(exc) from exc

    @server.feature(TEXT_DOCUMENT_RANGE_FORMATTING, DocumentRangeFormattingOptions())
    async def _format_range(ls, params: DocumentRangeFormattingParams):
        try:
            return await ls.formatting_service.handle_range_formatting(params)
        except ScriptLSError as exc:
            log_formatting_failure(uri=params.text_document.uri, kind=RANGE_KIND, error=exc)
            raise _to_rpc_error(exc) from exc
