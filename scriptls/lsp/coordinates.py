"""Conversion between parser extents and protocol ranges.

Parser extents are 1-based; protocol positions are 0-based. Both
directions shift every component by exactly one, so
``to_region_selector(to_protocol_range(extent))`` reproduces the extent.
"""

from __future__ import annotations

from typing import Optional

from lsprotocol.types import Position, Range

from scriptls.errors import InvalidExtentError
from scriptls.formatting.core import RegionSelector
from scriptls.parser import ScriptExtent

from .state import ScriptDocument


def to_protocol_range(extent: Optional[ScriptExtent], *, uri: Optional[str] = None) -> Range:
    if extent is None:
        raise InvalidExtentError("Document has no syntax tree extent", uri=uri)
    if not extent.is_ordered():
        raise InvalidExtentError(
            f"Extent start {extent.start_line}:{extent.start_column} is after its end "
            f"{extent.end_line}:{extent.end_column}",
            uri=uri,
        )
    return Range(
        start=Position(line=extent.start_line - 1, character=extent.start_column - 1),
        end=Position(line=extent.end_line - 1, character=extent.end_column - 1),
    )


def to_region_selector(range_: Optional[Range]) -> Optional[RegionSelector]:
    if range_ is None:
        return None
    return RegionSelector(
        start_line=range_.start.line + 1,
        start_column=range_.start.character + 1,
        end_line=range_.end.line + 1,
        end_column=range_.end.character + 1,
    )


def document_range(document: ScriptDocument) -> Range:
    """Protocol range spanning the whole document, from its syntax tree root."""

    ast = document.script_ast
    if ast is None and document.parse_failure is not None:
        raise InvalidExtentError(
            f"Document has no syntax tree extent: {document.parse_failure.message}",
            uri=document.uri,
        ) from document.parse_failure
    extent = ast.extent if ast is not None else None
    return to_protocol_range(extent, uri=document.uri)


__all__ = ["to_protocol_range", "to_region_selector", "document_range"]
