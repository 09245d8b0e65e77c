from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pytest
from lsprotocol.types import TextDocumentItem

from scriptls.formatting import FormatterSettings, FormattingResult, RegionSelector, build_formatter_settings
from scriptls.lsp.formatting import DocumentFormatter, FormattingService
from scriptls.lsp.state import ScriptDocument
from scriptls.lsp.workspace import WorkspaceService

DATA_DIR = Path(__file__).parent / "data"


class RecordingEngine:
    """Formatting engine double that records every call it receives."""

    name = "recording"

    def __init__(
        self,
        result: Optional[str] = None,
        *,
        error: Optional[BaseException] = None,
        delay: float = 0.0,
        transform: Optional[Callable[[str], Optional[str]]] = None,
    ) -> None:
        self.result = result
        self.error = error
        self.delay = delay
        self.transform = transform
        self.calls: List[Tuple[str, FormatterSettings, Optional[RegionSelector]]] = []
        self.started = asyncio.Event()
        self.cancelled = False

    async def format(
        self,
        contents: str,
        settings: FormatterSettings,
        region: Optional[RegionSelector] = None,
    ) -> FormattingResult:
        self.calls.append((contents, settings, region))
        self.started.set()
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        text = self.transform(contents) if self.transform is not None else self.result
        if text is None:
            return FormattingResult.no_result()
        return FormattingResult.formatted(text)


def _make_uri(path: Path) -> str:
    return path.resolve().as_uri()


def script_uri(name: str) -> str:
    return _make_uri(DATA_DIR / name)


def make_document(text: str, name: str = "script.ps1", *, language_id: str = "powershell") -> ScriptDocument:
    return ScriptDocument(uri=script_uri(name), text=text, version=1, language_id=language_id)


@pytest.fixture()
def workspace() -> WorkspaceService:
    root_uri = _make_uri(DATA_DIR)
    ws = WorkspaceService(root_uri)
    ws.set_root(root_uri)
    return ws


@pytest.fixture()
def settings() -> FormatterSettings:
    return build_formatter_settings(4, True)


@pytest.fixture()
def open_document(workspace: WorkspaceService) -> Callable[..., TextDocumentItem]:
    def _open(
        name: str,
        text: Optional[str] = None,
        *,
        version: int = 1,
        language_id: str = "powershell",
    ) -> TextDocumentItem:
        if text is None:
            text = (DATA_DIR / name).read_text(encoding="utf-8")
        item = TextDocumentItem(
            uri=script_uri(name),
            language_id=language_id,
            version=version,
            text=text,
        )
        workspace.did_open(item)
        return item

    return _open


@pytest.fixture()
def make_service(workspace: WorkspaceService) -> Callable[[RecordingEngine], FormattingService]:
    def _make(engine: RecordingEngine) -> FormattingService:
        return FormattingService(workspace, DocumentFormatter(engine))

    return _make
