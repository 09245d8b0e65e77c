"""Fixtures shared by formatting engine tests."""

from pathlib import Path

import pytest

from scriptls.formatting import BuiltinFormattingEngine, build_formatter_settings

DATA_DIR = Path(__file__).resolve().parent.parent / "lsp" / "data"


@pytest.fixture()
def engine():
    return BuiltinFormattingEngine()


@pytest.fixture()
def spaces():
    return build_formatter_settings(4, True)


@pytest.fixture()
def tabs():
    return build_formatter_settings(4, False)


@pytest.fixture()
def unformatted_script():
    return (DATA_DIR / "unformatted.ps1").read_text(encoding="utf-8")


@pytest.fixture()
def formatted_script():
    return (DATA_DIR / "formatted.ps1").read_text(encoding="utf-8")
