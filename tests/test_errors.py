from scriptls.errors import EngineError, InvalidExtentError, ScriptLSError, ScriptParseError


def test_error_format_includes_metadata() -> None:
    err = EngineError(
        "Formatter exited early",
        uri="file:///demo.ps1",
        line=4,
        column=2,
        hint="Check that PSScriptAnalyzer is installed.",
    )
    formatted = err.format()
    assert "Formatter exited early" in formatted
    assert "file:///demo.ps1:4:2" in formatted
    assert "SLS102" in formatted
    assert "PSScriptAnalyzer" in formatted


def test_error_format_handles_missing_location() -> None:
    err = ScriptLSError("No extent")
    formatted = err.format()
    assert formatted == "No extent"
    assert "(" not in formatted


def test_subclasses_carry_stable_codes() -> None:
    assert ScriptParseError("x").code == "SLS001"
    assert InvalidExtentError("x", uri="file:///a.ps1").format() == "x (file:///a.ps1; SLS100)"
    assert ScriptLSError("x", code="CUSTOM").code == "CUSTOM"
