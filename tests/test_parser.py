"""Tests for the script tokenizer and syntax tree root."""

import pytest

from scriptls.errors import ScriptParseError
from scriptls.parser import ScriptExtent, TokenKind, parse_script, root_extent, split_lines


class TestExtent:
    def test_single_line(self):
        assert root_extent("foo  -bar") == ScriptExtent(1, 1, 1, 10)

    def test_empty_document(self):
        assert root_extent("") == ScriptExtent(1, 1, 1, 1)

    @pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
    def test_every_newline_style_starts_a_line(self, newline):
        text = f"a{newline}bc{newline}def"
        assert split_lines(text) == ["a", "bc", "def"]
        assert root_extent(text) == ScriptExtent(1, 1, 3, 4)

    def test_trailing_newline_adds_empty_last_line(self):
        assert root_extent("Get-Item\n").as_tuple() == (1, 1, 2, 1)

    def test_extent_ordering(self):
        assert ScriptExtent(1, 1, 1, 1).is_ordered()
        assert not ScriptExtent(2, 1, 1, 5).is_ordered()


class TestTokens:
    def test_tokens_cover_the_whole_text(self):
        source = 'function Get-X {\n  param([string]$Name) # note\n  "hi $Name" | Out-Host\n}\n'
        ast = parse_script(source)
        assert "".join(token.text for token in ast.tokens) == source
        assert not ast.has_errors

    def test_token_positions_are_one_based(self):
        ast = parse_script("a\r\n  b")
        word = [token for token in ast.tokens if token.kind is TokenKind.WORD][-1]
        assert (word.text, word.line, word.column) == ("b", 2, 3)

    def test_group_openers(self):
        kinds = [(token.kind, token.text) for token in parse_script("@(1) @{a=1} $(2)").tokens if token.is_code]
        assert (TokenKind.GROUP_OPEN, "@(") in kinds
        assert (TokenKind.GROUP_OPEN, "@{") in kinds
        assert (TokenKind.GROUP_OPEN, "$(") in kinds

    def test_strings_keep_escapes_and_doubled_quotes(self):
        tokens = parse_script("\"a `\" b\" 'it''s'").tokens
        strings = [token.text for token in tokens if token.kind is TokenKind.STRING]
        assert strings == ['"a `" b"', "'it''s'"]

    def test_here_string_spans_lines(self):
        source = "@'\nline one\n  line two\n'@"
        (token,) = parse_script(source).tokens
        assert token.kind is TokenKind.STRING
        assert token.spans_lines

    def test_block_comment(self):
        tokens = parse_script("<# one\n two #>Get-Item").tokens
        assert tokens[0].kind is TokenKind.COMMENT
        assert tokens[0].text == "<# one\n two #>"
        assert tokens[1].line == 2

    def test_backtick_line_continuation_ends_word(self):
        tokens = parse_script("Get-Item `\n  -Path .").tokens
        assert tokens[2].text == "`"
        assert tokens[3].kind is TokenKind.NEWLINE


class TestErrors:
    @pytest.mark.parametrize(
        "source, message",
        [
            ("if ($a) {", "Missing closing '}'"),
            ("Get-Item )", "Unexpected ')'"),
            ("(]", "Expected ')' but found ']'"),
            ("'open", "Unterminated string literal"),
            ("<# open", "Unterminated block comment"),
            ("@\"\nbody", "Unterminated here-string"),
        ],
    )
    def test_recoverable_errors_are_recorded(self, source, message):
        ast = parse_script(source, uri="file:///x.ps1")
        assert ast.has_errors
        assert message in [error.message for error in ast.errors]
        assert ast.errors[0].uri == "file:///x.ps1"

    def test_error_position(self):
        (error,) = parse_script("a\n  )").errors
        assert (error.line, error.column) == (2, 3)

    def test_binary_content_is_not_a_script(self):
        with pytest.raises(ScriptParseError):
            parse_script("abc\x00def")
