"""Workspace configuration support for the scriptls language server."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import tomllib

from scriptls.observability.logging import get_logger

logger = get_logger("scriptls.config")

CONFIG_SECTION = "scriptls"
CONFIG_FILE_CANDIDATES = ("scriptls.toml", ".scriptlsrc")


class CodeFormattingPreset(Enum):
    """Brace placement presets understood by the formatter."""

    CUSTOM = "custom"
    ALLMAN = "allman"
    OTBS = "otbs"
    STROUSTRUP = "stroustrup"

    @classmethod
    def parse(cls, value: Any) -> "CodeFormattingPreset":
        if isinstance(value, cls):
            return value
        lowered = str(value or "custom").strip().lower()
        for preset in cls:
            if preset.value == lowered:
                return preset
        return cls.CUSTOM


class PipelineIndentationStyle(Enum):
    INCREASE_FOR_FIRST_PIPELINE = "IncreaseIndentationForFirstPipeline"
    INCREASE_AFTER_EVERY_PIPELINE = "IncreaseIndentationAfterEveryPipeline"
    NO_INDENTATION = "NoIndentation"
    NONE = "None"

    @classmethod
    def parse(cls, value: Any) -> "PipelineIndentationStyle":
        if isinstance(value, cls):
            return value
        lowered = str(value or "").strip().lower()
        for style in cls:
            if style.value.lower() == lowered:
                return style
        return cls.INCREASE_FOR_FIRST_PIPELINE


@dataclass(frozen=True)
class CodeFormattingSettings:
    """Workspace-wide code formatting preferences."""

    preset: CodeFormattingPreset = CodeFormattingPreset.CUSTOM
    open_brace_on_same_line: bool = True
    new_line_after_open_brace: bool = True
    new_line_after_close_brace: bool = True
    pipeline_indentation_style: PipelineIndentationStyle = PipelineIndentationStyle.INCREASE_FOR_FIRST_PIPELINE
    whitespace_before_open_brace: bool = True
    whitespace_before_open_paren: bool = True
    whitespace_around_operator: bool = True
    whitespace_after_separator: bool = True
    whitespace_between_parameters: bool = False
    whitespace_inside_brace: bool = True
    add_whitespace_around_pipe: bool = True
    trim_whitespace_around_pipe: bool = False
    ignore_one_line_block: bool = True
    align_property_value_pairs: bool = True
    use_constant_strings: bool = False
    use_correct_casing: bool = False
    auto_correct_aliases: bool = False
    avoid_semicolons_as_line_terminators: bool = False
    # Fallbacks only; every formatting request carries its own values.
    tab_size: int = 4
    insert_spaces: bool = True

    def with_preset_applied(self) -> "CodeFormattingSettings":
        """Return a copy whose brace flags reflect :attr:`preset`."""

        if self.preset is CodeFormattingPreset.ALLMAN:
            return replace(
                self,
                open_brace_on_same_line=False,
                new_line_after_open_brace=True,
                new_line_after_close_brace=True,
            )
        if self.preset is CodeFormattingPreset.OTBS:
            return replace(
                self,
                open_brace_on_same_line=True,
                new_line_after_open_brace=True,
                new_line_after_close_brace=False,
            )
        if self.preset is CodeFormattingPreset.STROUSTRUP:
            return replace(
                self,
                open_brace_on_same_line=True,
                new_line_after_open_brace=True,
                new_line_after_close_brace=True,
            )
        return self


@dataclass(frozen=True)
class LanguageServerSettings:
    """Configuration snapshot consumed by request handlers."""

    code_formatting: CodeFormattingSettings = field(default_factory=CodeFormattingSettings)
    engine: str = "builtin"
    source: Optional[Path] = None


def _camel_to_snake(name: str) -> str:
    chars = []
    for char in name:
        if char.isupper():
            chars.append("_")
            chars.append(char.lower())
        else:
            chars.append(char)
    return "".join(chars).lstrip("_")


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"expected true or false, got {value!r}")


def _coerce_tab_size(value: Any) -> int:
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"expected an integer, got {value!r}")
    size = int(value)
    if size <= 0:
        raise ValueError(f"expected a positive integer, got {size}")
    return size


def _parse_code_formatting(section: Mapping[str, Any]) -> CodeFormattingSettings:
    known = {item.name: item for item in fields(CodeFormattingSettings)}
    values: Dict[str, Any] = {}
    for raw_key, raw_value in section.items():
        key = _camel_to_snake(str(raw_key))
        if key not in known or raw_value is None:
            continue
        try:
            if key == "preset":
                values[key] = CodeFormattingPreset.parse(raw_value)
            elif key == "pipeline_indentation_style":
                values[key] = PipelineIndentationStyle.parse(raw_value)
            elif key == "tab_size":
                values[key] = _coerce_tab_size(raw_value)
            else:
                values[key] = _coerce_bool(raw_value)
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring codeFormatting.%s: %s", raw_key, exc)
    return CodeFormattingSettings(**values)


def parse_settings(data: Mapping[str, Any], *, source: Optional[Path] = None) -> LanguageServerSettings:
    """Build settings from a mapping shaped like the ``scriptls`` section."""

    formatting_section = data.get("codeFormatting") or data.get("code_formatting") or {}
    if not isinstance(formatting_section, Mapping):
        logger.warning("Ignoring codeFormatting section that is not a table: %r", formatting_section)
        formatting_section = {}
    engine = str(data.get("engine") or LanguageServerSettings.engine)
    return LanguageServerSettings(
        code_formatting=_parse_code_formatting(formatting_section),
        engine=engine,
        source=source,
    )


def settings_from_client(payload: Any) -> LanguageServerSettings:
    """Parse the settings object sent with ``workspace/didChangeConfiguration``."""

    if not isinstance(payload, Mapping):
        return LanguageServerSettings()
    section = payload.get(CONFIG_SECTION, payload)
    if not isinstance(section, Mapping):
        return LanguageServerSettings()
    return parse_settings(section)


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    return json.loads(content)


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_FILE_CANDIDATES:
        path = root / candidate
        if path.exists():
            return path
    return None


def load_workspace_settings(root: Path, explicit: Optional[Path] = None) -> LanguageServerSettings:
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        return LanguageServerSettings()

    try:
        if config_path.suffix == ".toml":
            data = _read_toml_config(config_path)
        else:
            data = _read_json_config(config_path)
    except (OSError, ValueError) as exc:
        # TOMLDecodeError, JSONDecodeError and UnicodeDecodeError are ValueErrors.
        logger.warning("Could not read %s, using default settings: %s", config_path, exc)
        return LanguageServerSettings()

    if not isinstance(data, Mapping):
        logger.warning("Ignoring %s: top level is not an object", config_path)
        return LanguageServerSettings()
    section = data.get(CONFIG_SECTION, data)
    if not isinstance(section, Mapping):
        logger.warning("Ignoring %s: '%s' is not a table", config_path, CONFIG_SECTION)
        section = {}
    return parse_settings(section, source=config_path)


__all__ = [
    "CONFIG_SECTION",
    "CodeFormattingPreset",
    "PipelineIndentationStyle",
    "CodeFormattingSettings",
    "LanguageServerSettings",
    "parse_settings",
    "settings_from_client",
    "locate_config_file",
    "load_workspace_settings",
]
