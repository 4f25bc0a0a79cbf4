"""Tests for the marker scanner."""

import pytest

from i18nkit.lexer import significant_tokens
from i18nkit.scanner import MARKER_SIGNATURES, MarkerScanner, marker_call_pattern
from i18nkit.structures import ArgumentRole, MarkerCall, MarkerSignature


@pytest.fixture
def scanner():
    return MarkerScanner()


def scan(scanner, source, name, file="app.php"):
    tokens = significant_tokens("<?php " + source)
    return scanner.scan(tokens, scanner.signature(name), file)


def texts(match):
    return tuple(value.text for value in match.arguments)


class TestSignatures:
    """Test the built-in marker signatures."""

    def test_eight_signatures(self):
        assert [sig.name for sig in MARKER_SIGNATURES] == [
            "__", "__n", "__d", "__dn", "__x", "__xn", "__dx", "__dxn",
        ]

    def test_bind_assigns_roles_by_position(self, scanner):
        result = scan(scanner, "__dxn('shop', 'menu', 'Item', 'Items', $n);", "__dxn")
        call = scanner.signature("__dxn").bind(result.matches[0].arguments)
        assert call == MarkerCall(singular="Item", domain="shop", plural="Items", context="menu")

    def test_bind_defaults(self, scanner):
        result = scan(scanner, "__('Hello');", "__")
        call = scanner.signature("__").bind(result.matches[0].arguments)
        assert call == MarkerCall(singular="Hello", domain="default")

    def test_bind_rejects_wrong_arity(self):
        with pytest.raises(ValueError):
            MarkerSignature("__n", (ArgumentRole.SINGULAR, ArgumentRole.PLURAL)).bind([])


class TestMatches:
    """Test call sites that satisfy their signature."""

    def test_two_arguments(self, scanner):
        result = scan(scanner, '__n("a", "b", $count);', "__n")
        assert len(result.matches) == 1
        assert texts(result.matches[0]) == ("a", "b")
        assert result.diagnostics == []

    def test_concatenated_literals(self, scanner):
        result = scan(scanner, '__("foo" . "bar");', "__")
        assert texts(result.matches[0]) == ("foobar",)

    def test_nested_call_after_literals(self, scanner):
        result = scan(scanner, "__d('admin', 'Save', foo(1, 2));", "__d")
        assert texts(result.matches[0]) == ("admin", "Save")

    def test_extra_arguments_are_ignored(self, scanner):
        result = scan(scanner, "__('Hello {0}', sprintf('%s', 'b'));", "__")
        assert texts(result.matches[0]) == ("Hello {0}",)

    def test_number_argument(self, scanner):
        result = scan(scanner, "__n('one', 2);", "__n")
        plural = result.matches[0].arguments[1]
        assert plural.text == "2"
        assert plural.is_number

    def test_method_call_is_matched(self, scanner):
        result = scan(scanner, "$this->__('x');", "__")
        assert texts(result.matches[0]) == ("x",)

    def test_other_markers_do_not_match(self, scanner):
        result = scan(scanner, "__n('a', 'b', 1); __d('d', 'x');", "__")
        assert result.matches == []
        assert result.diagnostics == []

    def test_line_of_marker(self, scanner):
        result = scan(scanner, "\n\n__('third line');", "__")
        assert result.matches[0].line == 3

    def test_scan_all(self, scanner):
        source = (
            "__('a'); __d('dom', 'b'); __x('ctx', 'c');\n"
            "__dxn('d', 'ctx', 's', 'p', $n);"
        )
        result = scanner.scan_all(significant_tokens("<?php " + source), "app.php")
        assert [(m.marker, texts(m)) for m in result.matches] == [
            ("__", ("a",)),
            ("__d", ("dom", "b")),
            ("__x", ("ctx", "c")),
            ("__dxn", ("d", "ctx", "s", "p")),
        ]


class TestDiagnostics:
    """Test call sites that do not satisfy their signature."""

    def test_arity_mismatch(self, scanner):
        result = scan(scanner, '__n("only one arg expected two");', "__n")
        assert result.matches == []
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.marker == "__n"
        assert diagnostic.source == '"only one arg expected two")'

    def test_variable_argument(self, scanner):
        result = scan(scanner, "__($var);", "__", file="src/page.php")
        diagnostic = result.diagnostics[0]
        assert diagnostic.format() == "Invalid marker content in src/page.php:1\n* __($var)"

    def test_concatenation_with_variable(self, scanner):
        result = scan(scanner, "__('Hello ' . $name);", "__")
        assert result.matches == []
        assert len(result.diagnostics) == 1

    def test_nested_source_is_rendered(self, scanner):
        result = scan(scanner, "__(foo('a', bar()));", "__")
        assert result.diagnostics[0].source == "foo('a',bar()))"

    def test_scan_continues_after_error(self, scanner):
        result = scan(scanner, "__($x); __('ok');", "__")
        assert len(result.diagnostics) == 1
        assert texts(result.matches[0]) == ("ok",)


class TestMarkerPattern:
    """Test the quick pre-check for marker calls."""

    def test_finds_calls(self):
        pattern = marker_call_pattern(MARKER_SIGNATURES)
        assert pattern.search("echo __dn ('d', 'a', 'b', $n);")
        assert pattern.search("<?= __('x') ?>")

    def test_ignores_other_names(self):
        pattern = marker_call_pattern(MARKER_SIGNATURES)
        assert not pattern.search("foo__('x'); $__('y'); __construct()")
