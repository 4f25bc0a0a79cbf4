"""Tests for string literal decoding and storage escaping."""

import pytest

from i18nkit.literals import decode_literal, escape_for_storage, format_literal, join_literals


class TestDecodeLiteral:
    """Test decoding of quoted literals."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('"a\\nb"', "a\nb"),
            ('"tab\\there"', "tab\there"),
            ('"\\x41\\101"', "AA"),
            ('"say \\"hi\\""', 'say "hi"'),
            ('"back\\\\slash"', "back\\slash"),
            ('"\\q"', "q"),
        ],
    )
    def test_double_quoted(self, raw, expected):
        assert decode_literal(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("'it\\'s'", "it's"),
            ("'a\\\\b'", "a\\b"),
            ("'a\\nb'", "a\\nb"),
            ("'\"quoted\"'", '"quoted"'),
        ],
    )
    def test_single_quoted(self, raw, expected):
        assert decode_literal(raw) == expected

    def test_crlf_is_folded(self):
        assert decode_literal("'a\r\nb'") == "a\nb"
        assert decode_literal('"a\\r\\nb"') == "a\nb"


class TestStorageEscaping:
    """Test escaping applied before storing messages."""

    def test_quote_and_newline(self):
        escaped = escape_for_storage('He said "hi"\nbye')
        assert escaped == 'He said \\"hi\\"\\nbye'
        assert "\n" not in escaped

    def test_control_characters_use_octal(self):
        assert escape_for_storage("\x01\x1b") == "\\001\\033"

    def test_backslash(self):
        assert escape_for_storage("C:\\dir") == "C:\\\\dir"

    def test_printable_text_untouched(self):
        assert escape_for_storage("Héllo wörld") == "Héllo wörld"

    def test_format_literal(self):
        assert format_literal('"line\\none"') == "line\\none"
        assert format_literal("'plain'") == "plain"


class TestJoinLiterals:
    """Test concatenated literals."""

    def test_foobar(self):
        assert join_literals(['"foo"', '"bar"']) == "foobar"

    def test_mixed_quotes_are_decoded_individually(self):
        assert join_literals(["'it\\'s '", '"a\\ttab"']) == "it's a\\ttab"
