"""Tests for formatter rule settings."""

import pytest

from scriptls.config import CodeFormattingPreset, CodeFormattingSettings
from scriptls.errors import InvalidOptionsError
from scriptls.formatting.rules import (
    AVOID_ALIASES,
    CONSISTENT_INDENTATION,
    CONSISTENT_WHITESPACE,
    CORRECT_CASING,
    PLACE_CLOSE_BRACE,
    PLACE_OPEN_BRACE,
    build_formatter_settings,
)


def test_default_settings_enable_layout_rules():
    settings = build_formatter_settings(4, True)

    assert settings.indent_unit == "    "
    assert settings.rule_enabled(PLACE_OPEN_BRACE)
    assert settings.rule_enabled(CONSISTENT_INDENTATION)
    assert settings.rule_enabled(CONSISTENT_WHITESPACE)
    assert not settings.rule_enabled(CORRECT_CASING)
    assert AVOID_ALIASES not in settings.include_rules
    assert not settings.rule_enabled("PSUnknownRule")


def test_indentation_rule_mirrors_request_options():
    settings = build_formatter_settings(2, False)

    indentation = settings.rule(CONSISTENT_INDENTATION)
    assert indentation["IndentationSize"] == 2
    assert indentation["Kind"] == "tab"
    assert indentation["PipelineIndentation"] == "IncreaseIndentationForFirstPipeline"
    assert settings.indent_unit == "\t"


@pytest.mark.parametrize(
    "preset, same_line, newline_after_close",
    [
        (CodeFormattingPreset.ALLMAN, False, True),
        (CodeFormattingPreset.OTBS, True, False),
        (CodeFormattingPreset.STROUSTRUP, True, True),
    ],
)
def test_presets_override_brace_placement(preset, same_line, newline_after_close):
    workspace = CodeFormattingSettings(
        preset=preset,
        open_brace_on_same_line=not same_line,
        new_line_after_close_brace=not newline_after_close,
    )

    settings = build_formatter_settings(4, True, workspace)

    assert settings.rule(PLACE_OPEN_BRACE)["OnSameLine"] is same_line
    assert settings.rule(PLACE_CLOSE_BRACE)["NewLineAfter"] is newline_after_close


def test_custom_preset_keeps_individual_flags():
    workspace = CodeFormattingSettings(open_brace_on_same_line=False, new_line_after_close_brace=False)

    settings = build_formatter_settings(4, True, workspace)

    assert settings.rule(PLACE_OPEN_BRACE)["OnSameLine"] is False
    assert settings.rule(PLACE_CLOSE_BRACE)["NewLineAfter"] is False


def test_request_options_take_precedence_over_workspace():
    workspace = CodeFormattingSettings(tab_size=8, insert_spaces=False)

    assert build_formatter_settings(2, True, workspace).tab_size == 2
    assert build_formatter_settings(2, True, workspace).insert_spaces is True


def test_workspace_fills_missing_request_options():
    workspace = CodeFormattingSettings(tab_size=8, insert_spaces=False)

    settings = build_formatter_settings(None, None, workspace)

    assert settings.tab_size == 8
    assert settings.insert_spaces is False


def test_alias_rule_is_included_only_on_request():
    settings = build_formatter_settings(4, True, CodeFormattingSettings(auto_correct_aliases=True))

    assert AVOID_ALIASES in settings.include_rules
    assert settings.rule_enabled(AVOID_ALIASES)


def test_hashtable_form_is_plain_data():
    hashtable = build_formatter_settings(4, True).to_hashtable()

    assert isinstance(hashtable["IncludeRules"], list)
    assert hashtable["IncludeRules"][0] == PLACE_OPEN_BRACE
    assert type(hashtable["Rules"][CONSISTENT_WHITESPACE]) is dict
    assert hashtable["Rules"][CONSISTENT_INDENTATION]["IndentationSize"] == 4


def test_settings_are_read_only():
    settings = build_formatter_settings(4, True)

    with pytest.raises(TypeError):
        settings.rules[PLACE_OPEN_BRACE]["OnSameLine"] = False


@pytest.mark.parametrize(
    "tab_size, insert_spaces",
    [(0, True), (-1, True), (True, True), ("4", True), (4.0, True), (4, "yes"), (4, 1)],
)
def test_malformed_options_are_rejected(tab_size, insert_spaces):
    with pytest.raises(InvalidOptionsError) as excinfo:
        build_formatter_settings(tab_size, insert_spaces)
    assert excinfo.value.code == "SLS101"
