from __future__ import annotations

from pathlib import Path

from lsprotocol.types import (
    Position,
    Range,
    TextDocumentContentChangeEvent_Type1,
    TextDocumentContentChangeEvent_Type2,
    TextDocumentItem,
)

from scriptls.config import CodeFormattingPreset
from scriptls.lsp.workspace import WorkspaceService

from tests.lsp.conftest import script_uri


def _item(text: str, name: str = "edit.ps1") -> TextDocumentItem:
    return TextDocumentItem(uri=script_uri(name), language_id="powershell", version=1, text=text)


def test_open_tracks_document_and_language(workspace: WorkspaceService) -> None:
    document = workspace.did_open(_item("Get-Item ."))

    assert workspace.get_file(document.uri) is document
    assert document.language_id == "powershell"
    assert document.script_ast is not None


def test_incremental_changes_are_applied_in_order(workspace: WorkspaceService) -> None:
    item = _item("Get-Item .\nGet-Date\n")
    workspace.did_open(item)
    changes = [
        TextDocumentContentChangeEvent_Type1(
            range=Range(start=Position(line=1, character=4), end=Position(line=1, character=8)),
            text="Process",
        ),
        TextDocumentContentChangeEvent_Type1(
            range=Range(start=Position(line=0, character=0), end=Position(line=0, character=3)),
            text="Set",
        ),
    ]

    document = workspace.did_change(item.uri, 2, changes)

    assert document.text == "Set-Item .\nGet-Process\n"
    assert document.version == 2
    assert document.script_ast.extent.as_tuple() == (1, 1, 3, 1)


def test_full_change_replaces_text(workspace: WorkspaceService) -> None:
    item = _item("old")
    workspace.did_open(item)

    document = workspace.did_change(item.uri, 3, [TextDocumentContentChangeEvent_Type2(text="new\r\ntext")])

    assert document.text == "new\r\ntext"
    assert document.lines == ["new", "text"]


def test_close_forgets_document(workspace: WorkspaceService) -> None:
    item = _item("Get-Item .")
    workspace.did_open(item)

    workspace.did_close(item.uri)

    assert workspace.get_file(item.uri) is None


def test_change_for_unopened_document_reads_from_disk(workspace: WorkspaceService) -> None:
    uri = script_uri("unformatted.ps1")
    first_line = Range(start=Position(line=0, character=0), end=Position(line=0, character=0))

    document = workspace.did_change(uri, 5, [TextDocumentContentChangeEvent_Type1(range=first_line, text="# x\n")])

    assert document.text.startswith("# x\nfunction Get-Greeting")


def test_load_settings_reads_workspace_file(tmp_path: Path) -> None:
    (tmp_path / "scriptls.toml").write_text(
        "[scriptls]\n"
        'engine = "analyzer"\n'
        "[scriptls.codeFormatting]\n"
        'preset = "Allman"\n'
        "tabSize = 2\n"
        "autoCorrectAliases = true\n",
        encoding="utf-8",
    )
    workspace = WorkspaceService(tmp_path.as_uri())

    settings = workspace.load_settings()

    assert settings.source == tmp_path / "scriptls.toml"
    assert settings.engine == "analyzer"
    assert settings.code_formatting.preset is CodeFormattingPreset.ALLMAN
    assert settings.code_formatting.tab_size == 2
    assert settings.code_formatting.auto_correct_aliases is True
    assert workspace.settings is settings


def test_load_settings_without_file_uses_defaults(tmp_path: Path) -> None:
    workspace = WorkspaceService(tmp_path.as_uri())

    settings = workspace.load_settings()

    assert settings.source is None
    assert settings.engine == "builtin"
