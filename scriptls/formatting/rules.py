"""Formatter rule settings built from editor options and workspace configuration."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from scriptls.config import CodeFormattingSettings
from scriptls.errors import InvalidOptionsError

PLACE_OPEN_BRACE = "PSPlaceOpenBrace"
PLACE_CLOSE_BRACE = "PSPlaceCloseBrace"
CONSISTENT_INDENTATION = "PSUseConsistentIndentation"
CONSISTENT_WHITESPACE = "PSUseConsistentWhitespace"
ALIGN_ASSIGNMENT = "PSAlignAssignmentStatement"
CORRECT_CASING = "PSUseCorrectCasing"
AVOID_ALIASES = "PSAvoidUsingCmdletAliases"
AVOID_SEMICOLONS = "PSAvoidSemicolonsAsLineTerminators"
CONSTANT_STRINGS = "PSAvoidUsingDoubleQuotesForConstantString"

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class FormatterSettings:
    """Immutable settings handed to a formatting engine for one request."""

    tab_size: int
    insert_spaces: bool
    include_rules: Tuple[str, ...]
    rules: Mapping[str, Mapping[str, Any]]

    @property
    def indent_unit(self) -> str:
        return " " * self.tab_size if self.insert_spaces else "\t"

    def rule(self, name: str) -> Mapping[str, Any]:
        return self.rules.get(name, _EMPTY)

    def rule_enabled(self, name: str) -> bool:
        if name not in self.include_rules:
            return False
        return bool(self.rule(name).get("Enable", True))

    def to_hashtable(self) -> Dict[str, Any]:
        """Plain ``{"IncludeRules": [...], "Rules": {...}}`` form for external engines."""

        return {
            "IncludeRules": list(self.include_rules),
            "Rules": {name: dict(values) for name, values in self.rules.items()},
        }


def _validate_options(tab_size: Any, insert_spaces: Any) -> None:
    if isinstance(tab_size, bool) or not isinstance(tab_size, int):
        raise InvalidOptionsError(
            f"tabSize must be a positive integer, got {tab_size!r}",
            hint="Check the editor's formatting options.",
        )
    if tab_size <= 0:
        raise InvalidOptionsError(f"tabSize must be a positive integer, got {tab_size}")
    if not isinstance(insert_spaces, bool):
        raise InvalidOptionsError(f"insertSpaces must be a boolean, got {insert_spaces!r}")


def build_formatter_settings(
    tab_size: Any,
    insert_spaces: Any,
    code_formatting: Optional[CodeFormattingSettings] = None,
) -> FormatterSettings:
    """Merge workspace formatting preferences with per-request editor options.

    The request's ``tab_size``/``insert_spaces`` always win over the
    workspace defaults, which only fill in values the request left out.
    Malformed values are rejected with :class:`InvalidOptionsError`.
    """

    style = (code_formatting or CodeFormattingSettings()).with_preset_applied()
    if tab_size is None:
        tab_size = style.tab_size
    if insert_spaces is None:
        insert_spaces = style.insert_spaces
    _validate_options(tab_size, insert_spaces)

    rules: Dict[str, Dict[str, Any]] = {
        PLACE_OPEN_BRACE: {
            "Enable": True,
            "OnSameLine": style.open_brace_on_same_line,
            "NewLineAfter": style.new_line_after_open_brace,
            "IgnoreOneLineBlock": style.ignore_one_line_block,
        },
        PLACE_CLOSE_BRACE: {
            "Enable": True,
            "NewLineAfter": style.new_line_after_close_brace,
            "IgnoreOneLineBlock": style.ignore_one_line_block,
        },
        CONSISTENT_INDENTATION: {
            "Enable": True,
            "IndentationSize": tab_size,
            "PipelineIndentation": style.pipeline_indentation_style.value,
            "Kind": "space" if insert_spaces else "tab",
        },
        CONSISTENT_WHITESPACE: {
            "Enable": True,
            "CheckOpenBrace": style.whitespace_before_open_brace,
            "CheckOpenParen": style.whitespace_before_open_paren,
            "CheckOperator": style.whitespace_around_operator,
            "CheckSeparator": style.whitespace_after_separator,
            "CheckInnerBrace": style.whitespace_inside_brace,
            "CheckParameter": style.whitespace_between_parameters,
            "CheckPipe": style.add_whitespace_around_pipe,
            "CheckPipeForRedundantWhitespace": style.trim_whitespace_around_pipe,
        },
        ALIGN_ASSIGNMENT: {
            "Enable": True,
            "CheckHashtable": style.align_property_value_pairs,
        },
        CORRECT_CASING: {"Enable": style.use_correct_casing},
        AVOID_SEMICOLONS: {"Enable": style.avoid_semicolons_as_line_terminators},
        CONSTANT_STRINGS: {"Enable": style.use_constant_strings},
    }
    if style.auto_correct_aliases:
        rules[AVOID_ALIASES] = {}

    frozen_rules = MappingProxyType({name: MappingProxyType(values) for name, values in rules.items()})
    return FormatterSettings(
        tab_size=tab_size,
        insert_spaces=insert_spaces,
        include_rules=tuple(rules),
        rules=frozen_rules,
    )


__all__ = [
    "FormatterSettings",
    "build_formatter_settings",
    "PLACE_OPEN_BRACE",
    "PLACE_CLOSE_BRACE",
    "CONSISTENT_INDENTATION",
    "CONSISTENT_WHITESPACE",
    "ALIGN_ASSIGNMENT",
    "CORRECT_CASING",
    "AVOID_ALIASES",
    "AVOID_SEMICOLONS",
    "CONSTANT_STRINGS",
]
